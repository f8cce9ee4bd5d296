"""Child process execution.

All backend commands go through a CommandRunner so that tests can swap
in a recording fake instead of spawning real package managers.
"""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .errors import BackendOperationFailure

logger = logging.getLogger(__name__)


def _resolve(argv: Sequence[str]) -> List[str]:
    """Resolve argv[0] through the search path.

    Needed on Windows where scoop is a .cmd shim that CreateProcess
    cannot start by bare name.
    """
    args = list(argv)
    if args:
        path = shutil.which(args[0])
        if path:
            args[0] = path
    return args


class CommandRunner:
    """Runs backend commands, blocking until they exit."""

    def run(self, argv: Sequence[str], cwd: Optional[Path] = None,
            env: Optional[Dict[str, str]] = None):
        """Run a command attached to the terminal.

        Raises:
            BackendOperationFailure: if the command exits non-zero
        """
        logger.debug("run: %s (cwd=%s)", ' '.join(argv), cwd or '.')
        try:
            result = subprocess.run(_resolve(argv), cwd=cwd, env=env, check=False)
        except FileNotFoundError:
            raise BackendOperationFailure(argv, 127)
        if result.returncode != 0:
            raise BackendOperationFailure(argv, result.returncode)

    def capture(self, argv: Sequence[str], quiet: bool = False,
                env: Optional[Dict[str, str]] = None) -> str:
        """Run a command and return its standard output.

        Args:
            argv: Command and arguments
            quiet: Discard standard error instead of passing it through
            env: Environment for the child (inherited if None)

        Raises:
            BackendOperationFailure: if the command exits non-zero
        """
        logger.debug("capture: %s", ' '.join(argv))
        try:
            result = subprocess.run(
                _resolve(argv),
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL if quiet else None,
                text=True,
                env=env,
                check=False,
            )
        except FileNotFoundError:
            raise BackendOperationFailure(argv, 127)
        if result.returncode != 0:
            raise BackendOperationFailure(argv, result.returncode)
        return result.stdout
