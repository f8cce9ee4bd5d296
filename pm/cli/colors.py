"""Color output support for pm CLI.

Color palette:
  - Red: errors
  - Orange: warnings
  - Bold: package names
  - Blue: repositories / groups
  - Green: versions
  - Cyan: install status
"""

from typing import Optional

# ANSI color codes
_COLORS = {
    'reset': '\033[0m',
    'bold': '\033[1m',
    'red': '\033[91m',
    'orange': '\033[93m',
    'green': '\033[92m',
    'blue': '\033[94m',
    'dim': '\033[2m',
    'cyan': '\033[96m',
}

# Global state, for messages; listings pass `enabled` explicitly
_colors_enabled = False


def init(enabled: bool):
    """Initialize color support from the resolved color mode."""
    global _colors_enabled
    _colors_enabled = enabled


def _wrap(text: str, color: str, enabled: Optional[bool] = None) -> str:
    """Wrap text with color codes if colors are enabled."""
    if enabled is None:
        enabled = _colors_enabled
    if not enabled or not text:
        return text
    return f"{_COLORS[color]}{text}{_COLORS['reset']}"


def error(text: str) -> str:
    """Format text as error (red)."""
    return _wrap(text, 'red')


def warning(text: str) -> str:
    """Format text as warning (orange/yellow)."""
    return _wrap(text, 'orange')


def dim(text: str) -> str:
    """Format text as dim/muted."""
    return _wrap(text, 'dim')


# Package listing fields
def pkg_name(text: str, enabled: Optional[bool] = None) -> str:
    return _wrap(text, 'bold', enabled)


def pkg_group(text: str, enabled: Optional[bool] = None) -> str:
    return _wrap(text, 'blue', enabled)


def pkg_version(text: str, enabled: Optional[bool] = None) -> str:
    return _wrap(text, 'green', enabled)


def pkg_status(text: str, enabled: Optional[bool] = None) -> str:
    return _wrap(text, 'cyan', enabled)
