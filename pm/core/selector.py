"""Interactive multi-select through fzf."""

import logging
import shutil
import subprocess
from typing import Dict, List, Optional, Sequence

from .errors import BackendOperationFailure, DependencyMissing
from .filters import strip_ansi

logger = logging.getLogger(__name__)

FZF = 'fzf'
FZF_OPTIONS = ('--multi', '--no-sort', '--exact', '--cycle', '--ansi')

# fzf: 1 = no match, 130 = aborted with ESC/CTRL-C
_EMPTY_SELECTION = (1, 130)


class FzfSelector:
    """Let the user pick lines in fzf."""

    def __init__(self, binary: str = FZF):
        self.binary = binary

    def command(self, preview_command: Optional[str] = None) -> List[str]:
        cmd = [self.binary, *FZF_OPTIONS]
        if preview_command:
            cmd += ['--preview', preview_command]
        return cmd

    def select(self, lines: Sequence[str], preview_command: Optional[str] = None,
               env: Optional[Dict[str, str]] = None) -> List[str]:
        """Show lines in fzf and return the chosen ones, without colors.

        Args:
            lines: Candidate lines
            preview_command: Shell command run on the highlighted line
                ({1} is its first field)
            env: Environment for fzf and the preview command

        Raises:
            DependencyMissing: if fzf is not installed
            BackendOperationFailure: if fzf fails
        """
        path = shutil.which(self.binary)
        if path is None:
            raise DependencyMissing(self.binary)

        cmd = self.command(preview_command)
        cmd[0] = path
        logger.debug("select: %d lines with %s", len(lines), ' '.join(cmd))
        result = subprocess.run(
            cmd,
            input=''.join(f"{line}\n" for line in lines),
            stdout=subprocess.PIPE,
            text=True,
            env=env,
            check=False,
        )
        if result.returncode in _EMPTY_SELECTION:
            return []
        if result.returncode != 0:
            raise BackendOperationFailure(cmd, result.returncode)
        return [strip_ansi(line) for line in result.stdout.splitlines() if line.strip()]
