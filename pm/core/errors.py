"""Errors reported by pm.

Every error carries the process exit code it maps to. The CLI catches
PmError, prints the message prefixed with the program name and exits
with that code.
"""

from typing import Sequence


class PmError(Exception):
    """Base class for all pm errors."""

    exit_code = 1


class UsageError(PmError):
    """Missing or invalid command, source or argument."""

    hint = "Run 'pm help' for usage."


class DependencyMissing(PmError):
    """A required external tool is not installed."""

    def __init__(self, tool: str):
        self.tool = tool
        super().__init__(f"{tool} not found, install it using 'pm install {tool}'")


class BackendNotFound(PmError):
    """No supported package manager was found on the search path."""

    def __init__(self, probe_order: Sequence[str]):
        self.probe_order = list(probe_order)
        super().__init__(
            "no supported package manager found "
            f"(looked for: {', '.join(self.probe_order)})"
        )


class BackendOperationFailure(PmError):
    """A backend child process exited with a non-zero status."""

    def __init__(self, command: Sequence[str], returncode: int):
        self.command = list(command)
        self.returncode = returncode
        # Signals give negative codes; keep the exit code in the valid range
        self.exit_code = returncode if returncode > 0 else 1
        super().__init__(
            f"'{' '.join(self.command)}' failed with exit status {returncode}"
        )


class EmptyFilter(PmError):
    """The stdin filter contained no usable pattern."""

    def __init__(self):
        super().__init__("no package pattern found on standard input")
