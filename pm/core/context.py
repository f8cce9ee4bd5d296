"""Invocation context.

Everything resolved once at startup (backend, color mode, sudo command,
cache location) plus the process collaborators, carried as one frozen
value through every command.
"""

import os
import shutil
import sys
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Mapping, Optional, TextIO, Tuple

from . import config, detect
from .backends import Backend, BackendKind, get_backend_class
from .cache import RefreshCache
from .selector import FzfSelector
from .shell import CommandRunner


@dataclass(frozen=True)
class Context:
    """Immutable per-invocation settings."""
    backend: BackendKind
    color: bool
    sudo: Tuple[str, ...]
    cache: RefreshCache
    backend_forced: bool = False
    runner: CommandRunner = field(default_factory=CommandRunner)
    selector: FzfSelector = field(default_factory=FzfSelector)
    stdin: TextIO = field(default_factory=lambda: sys.stdin)

    def get_backend(self) -> Backend:
        """Instantiate the active backend."""
        return get_backend_class(self.backend)(self.runner, self.sudo, self.cache)

    def with_backend(self, kind: BackendKind) -> 'Context':
        return replace(self, backend=kind)

    def redetect(self, which: Callable[[str], Optional[str]] = shutil.which) -> 'Context':
        """Context for the backend that detection finds now.

        Used after installing a new package manager; a forced backend
        stays forced.
        """
        if self.backend_forced:
            return self
        return self.with_backend(detect.resolve(which=which))

    @property
    def interactive(self) -> bool:
        """Whether standard input is a terminal."""
        isatty = getattr(self.stdin, 'isatty', None)
        return bool(isatty and isatty())

    def child_env(self) -> Dict[str, str]:
        """Environment that makes a child pm use the same settings."""
        env = dict(os.environ)
        env[config.ENV_BACKEND] = self.backend.value
        env[config.ENV_COLOR] = 'always' if self.color else 'never'
        env[config.ENV_SUDO] = ' '.join(self.sudo)
        env[config.ENV_CACHE_DIR] = str(self.cache.root)
        return env


def build_context(backend: Optional[str] = None,
                  color: Optional[str] = None,
                  environ: Mapping[str, str] = os.environ,
                  stdout: Optional[TextIO] = None,
                  which: Callable[[str], Optional[str]] = shutil.which,
                  **collaborators) -> Context:
    """Resolve all settings into a Context.

    Args:
        backend: --backend option
        color: --color option
        environ: Environment variables
        stdout: Stream whose terminal status decides 'auto' color
        which: Search path lookup
        **collaborators: runner, selector, stdin overrides

    Raises:
        UsageError: on an unknown backend or color mode
        BackendNotFound: if no backend is forced nor installed
    """
    file_settings = config.load_config_file(config.get_config_path(environ))

    forced = config.pick(backend, environ.get(config.ENV_BACKEND) or None,
                         file_settings.get('backend'))
    kind = detect.resolve(forced, which=which)

    stdout = stdout if stdout is not None else sys.stdout
    isatty = getattr(stdout, 'isatty', None)
    use_color = config.resolve_color(
        config.pick(color, environ.get(config.ENV_COLOR) or None, file_settings.get('color')),
        bool(isatty and isatty()),
    )

    sudo = config.resolve_sudo(
        config.pick(environ.get(config.ENV_SUDO), file_settings.get('sudo')),
        environ=environ,
        which=which,
    )

    cache_root = config.get_cache_root(
        config.pick(environ.get(config.ENV_CACHE_DIR) or None, file_settings.get('cache_dir')),
        environ=environ,
    )

    return Context(
        backend=kind,
        color=use_color,
        sudo=sudo,
        cache=RefreshCache(cache_root),
        backend_forced=bool(forced and forced.strip()),
        **collaborators,
    )
