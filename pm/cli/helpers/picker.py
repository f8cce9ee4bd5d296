"""Interactive package picking shared by install, remove and search."""

import logging
import shlex
import sys
from typing import TYPE_CHECKING, List

from ...core.filters import compile_filters

if TYPE_CHECKING:
    from ...core.context import Context

logger = logging.getLogger(__name__)


def preview_command() -> str:
    """fzf preview: 'pm info' on the first field of the highlighted line."""
    return f"{shlex.quote(sys.executable)} -m pm info {{1}}"


def choose_lines(ctx: 'Context', lines: List[str]) -> List[str]:
    """Let the user choose among listing lines.

    When standard input is not a terminal, it holds package patterns
    which narrow the lines down before fzf is shown.

    Returns:
        Chosen lines without color codes (empty if nothing was chosen)
    """
    from .. import colors

    if not ctx.interactive:
        filters = compile_filters(ctx.stdin)
        lines = filters.apply(lines)
        logger.debug("%d lines left after %d stdin patterns", len(lines), len(filters))
        if not lines:
            print(colors.warning("No package matches the given patterns."), file=sys.stderr)
            return []

    return ctx.selector.select(lines, preview_command(), env=ctx.child_env())
