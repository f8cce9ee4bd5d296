"""Backend detection.

An explicit override wins without looking at the system; otherwise the
first backend of the probe order found on the search path is used.
"""

import logging
import shutil
from typing import Callable, Iterable, Optional

from .backends import PROBE_ORDER, BackendKind, backend_names
from .errors import BackendNotFound, UsageError

logger = logging.getLogger(__name__)


def parse_backend(name: str) -> BackendKind:
    """Convert a backend identifier into a BackendKind.

    Raises:
        UsageError: if the identifier is unknown
    """
    try:
        return BackendKind(name.strip().lower())
    except ValueError:
        raise UsageError(
            f"unknown package manager '{name}' "
            f"(supported: {', '.join(backend_names())})"
        ) from None


def resolve(override: Optional[str] = None,
            probe_order: Iterable[BackendKind] = PROBE_ORDER,
            which: Callable[[str], Optional[str]] = shutil.which) -> BackendKind:
    """Pick the active backend.

    Args:
        override: Backend identifier forced by the user (not validated
            against installed binaries)
        probe_order: Backends to look for, in priority order
        which: Search path lookup (shutil.which)

    Returns:
        The selected BackendKind

    Raises:
        BackendNotFound: if no override is given and nothing is installed
    """
    if override and override.strip():
        kind = parse_backend(override)
        logger.debug("backend forced to %s", kind.value)
        return kind

    probe_order = tuple(probe_order)
    for kind in probe_order:
        path = which(kind.value)
        if path:
            logger.debug("found %s at %s", kind.value, path)
            return kind
        logger.debug("%s not found", kind.value)

    raise BackendNotFound(backend_names(probe_order))
