"""Package query commands (list, search, info, which)."""

from typing import TYPE_CHECKING, List

from ..display import ListMode, format_rows, print_lines
from ..helpers.picker import choose_lines

if TYPE_CHECKING:
    from ...core.context import Context


def _listing(ctx: 'Context', source: str) -> List[str]:
    """Formatted lines of all or installed packages."""
    backend = ctx.get_backend()
    mode = ListMode(source)
    rows = backend.all_rows() if mode == ListMode.ALL else backend.installed_rows()
    return format_rows(rows, mode, ctx.color)


def cmd_list(args, ctx: 'Context') -> int:
    """Handle list command."""
    print_lines(_listing(ctx, args.source))
    return 0


def cmd_search(args, ctx: 'Context') -> int:
    """Handle search command - pick in fzf, print the chosen lines."""
    print_lines(choose_lines(ctx, _listing(ctx, args.source)))
    return 0


def cmd_info(args, ctx: 'Context') -> int:
    """Handle info command."""
    ctx.get_backend().info(args.package)
    return 0


def cmd_which(args, ctx: 'Context') -> int:
    """Handle which command - print the active backend."""
    print(ctx.backend.value)
    return 0
