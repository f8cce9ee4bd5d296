"""Metadata refresh and system upgrade commands."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...core.context import Context


def cmd_refresh(args, ctx: 'Context') -> int:
    """Handle refresh (fetch) command."""
    backend = ctx.get_backend()
    backend.refresh()
    ctx.cache.mark_fresh(backend.kind)
    return 0


def cmd_upgrade(args, ctx: 'Context') -> int:
    """Handle upgrade command - always refresh, then upgrade everything."""
    backend = ctx.get_backend()
    backend.refresh()
    ctx.cache.mark_fresh(backend.kind)
    backend.upgrade()
    return 0
