"""Package installation command."""

import shutil
import sys
from typing import TYPE_CHECKING, List

from ..display import ListMode, format_rows, package_names
from ..helpers.picker import choose_lines
from ...core.bootstrap import bootstrap_aur_package, is_aur_helper

if TYPE_CHECKING:
    from ...core.backends import Backend
    from ...core.context import Context


def ensure_fresh(ctx: 'Context', backend: 'Backend'):
    """Refresh metadata unless it was already refreshed today."""
    if ctx.cache.is_stale(backend.kind):
        backend.refresh()
        ctx.cache.mark_fresh(backend.kind)


def install_packages(ctx: 'Context', names: List[str], which=shutil.which) -> int:
    """Install packages through the active backend.

    An AUR helper requested on plain pacman is bootstrapped first; the
    other packages are then installed through whatever backend is
    detected afterwards (normally the new helper).
    """
    backend = ctx.get_backend()

    if backend.bootstraps_helpers:
        helper = next((name for name in names if is_aur_helper(name)), None)
        if helper is not None:
            bootstrap_aur_package(ctx.runner, helper, ctx.sudo)
            remaining = [name for name in names if name != helper]
            if not remaining:
                return 0
            return install_packages(ctx.redetect(which=which), remaining, which=which)

    ensure_fresh(ctx, backend)
    backend.install(names)
    return 0


def cmd_install(args, ctx: 'Context') -> int:
    """Handle install command.

    Without package names, all packages are offered in fzf and the
    chosen ones are installed.
    """
    from .. import colors

    if args.packages:
        return install_packages(ctx, args.packages)

    backend = ctx.get_backend()
    lines = format_rows(backend.all_rows(), ListMode.ALL, ctx.color)
    chosen = choose_lines(ctx, lines)
    if not chosen:
        print(colors.dim("Nothing selected."), file=sys.stderr)
        return 0

    return install_packages(ctx, package_names(chosen))
