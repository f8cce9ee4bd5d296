"""
Central configuration for pm.

Every setting is resolved once per invocation, in order:
    1. Command line option (--backend, --color)
    2. Environment variable (PM_BACKEND, PM_COLOR, PM_SUDO, PM_CACHE_DIR)
    3. Config file (PM_CONFIG, default ~/.config/pm/config.yaml)
    4. Built-in default (probe the system)

Config file format (all keys optional):
    backend: paru
    color: auto          # auto, always or never
    sudo: doas           # empty string to never escalate
    cache_dir: ~/.cache/pm
"""

import os
import shlex
import shutil
import sys
from pathlib import Path
from typing import Callable, Mapping, Optional, Tuple

from .errors import UsageError

ENV_BACKEND = 'PM_BACKEND'
ENV_COLOR = 'PM_COLOR'
ENV_SUDO = 'PM_SUDO'
ENV_CACHE_DIR = 'PM_CACHE_DIR'
ENV_CONFIG = 'PM_CONFIG'

COLOR_MODES = ('auto', 'always', 'never')
SUDO_CANDIDATES = ('sudo', 'doas')
CONFIG_KEYS = ('backend', 'color', 'sudo', 'cache_dir')


def _xdg_dir(environ: Mapping[str, str], variable: str, fallback: str) -> Path:
    value = environ.get(variable)
    if value:
        return Path(value)
    return Path.home() / fallback


def get_config_path(environ: Mapping[str, str] = os.environ) -> Path:
    """Path of the optional YAML config file."""
    if environ.get(ENV_CONFIG):
        return Path(environ[ENV_CONFIG]).expanduser()
    return _xdg_dir(environ, 'XDG_CONFIG_HOME', '.config') / 'pm' / 'config.yaml'


def load_config_file(path: Path) -> dict:
    """Load settings from a YAML config file.

    A missing file gives no settings. A file that cannot be parsed, or
    that is not a mapping, is ignored with a warning.

    Returns:
        Dict restricted to CONFIG_KEYS, values as strings
    """
    import yaml

    if not path.exists():
        return {}

    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        print(f"pm: warning: failed to load config {path}: {e}", file=sys.stderr)
        return {}

    if data is None:
        return {}
    if not isinstance(data, dict):
        print(f"pm: warning: config {path} is not a mapping, ignored", file=sys.stderr)
        return {}

    settings = {}
    for key in CONFIG_KEYS:
        if key in data and data[key] is not None:
            settings[key] = str(data[key])
    return settings


def pick(*values: Optional[str]) -> Optional[str]:
    """First value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def resolve_color(mode: Optional[str], isatty: bool) -> bool:
    """Decide whether output is colored.

    Args:
        mode: 'always', 'never', 'auto' or None (same as 'auto')
        isatty: Whether standard output is a terminal

    Raises:
        UsageError: if mode is not a known color mode
    """
    mode = (mode or 'auto').strip().lower()
    if mode not in COLOR_MODES:
        raise UsageError(f"invalid color mode '{mode}' (expected: {', '.join(COLOR_MODES)})")
    if mode == 'auto':
        return isatty
    return mode == 'always'


def resolve_sudo(override: Optional[str],
                 environ: Mapping[str, str] = os.environ,
                 which: Callable[[str], Optional[str]] = shutil.which,
                 euid: Optional[int] = None) -> Tuple[str, ...]:
    """Privilege escalation command for root-only backend operations.

    An override (even empty) wins. Otherwise nothing is needed when
    running as root or under Termux, where there is no root; else the
    first of sudo/doas found on the search path.
    """
    if override is not None:
        return tuple(shlex.split(override))

    if euid is None:
        euid = os.geteuid() if hasattr(os, 'geteuid') else -1
    if euid == 0 or environ.get('TERMUX_VERSION'):
        return ()

    for candidate in SUDO_CANDIDATES:
        if which(candidate):
            return (candidate,)
    return ()


def get_cache_root(configured: Optional[str] = None,
                   environ: Mapping[str, str] = os.environ) -> Path:
    """Root of the per-backend cache directories."""
    if configured:
        return Path(configured).expanduser()
    return _xdg_dir(environ, 'XDG_CACHE_HOME', '.cache') / 'pm'
