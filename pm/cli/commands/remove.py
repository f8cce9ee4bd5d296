"""Package removal command."""

import sys
from typing import TYPE_CHECKING

from ..display import ListMode, format_rows, package_names
from ..helpers.picker import choose_lines

if TYPE_CHECKING:
    from ...core.context import Context


def cmd_remove(args, ctx: 'Context') -> int:
    """Handle remove command.

    Without package names, installed packages are offered in fzf and
    the chosen ones are removed.
    """
    from .. import colors

    backend = ctx.get_backend()

    names = list(args.packages)
    if not names:
        lines = format_rows(backend.installed_rows(), ListMode.INSTALLED, ctx.color)
        names = package_names(choose_lines(ctx, lines))
        if not names:
            print(colors.dim("Nothing selected."), file=sys.stderr)
            return 0

    backend.remove(names)
    return 0
