"""CLI command handlers, one module per command family."""

from .install import cmd_install
from .query import cmd_info, cmd_list, cmd_search, cmd_which
from .remove import cmd_remove
from .upgrade import cmd_refresh, cmd_upgrade

__all__ = [
    'cmd_install',
    'cmd_remove',
    'cmd_upgrade',
    'cmd_refresh',
    'cmd_info',
    'cmd_list',
    'cmd_search',
    'cmd_which',
]
