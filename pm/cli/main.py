"""
Main CLI entry point for pm

One set of commands for every package manager, with short aliases:
- pm install / pm i      (no package: pick in fzf)
- pm remove / pm rm      (no package: pick in fzf)
- pm upgrade / pm up
- pm refresh / pm fetch
- pm info <package>
- pm list <all|installed>    (pm la, pm li)
- pm search <all|installed>  (pm sa, pm si)
- pm which
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .. import __version__
from ..core.backends import backend_names
from ..core.config import COLOR_MODES
from ..core.context import build_context
from ..core.errors import PmError, UsageError
from .commands import (
    cmd_info,
    cmd_install,
    cmd_list,
    cmd_refresh,
    cmd_remove,
    cmd_search,
    cmd_upgrade,
    cmd_which,
)

PROG = 'pm'
SOURCES = ('all', 'installed')

# Shortcuts expanding to a command and its source
COMMAND_ALIASES = {
    'la': ('list', 'all'),
    'li': ('list', 'installed'),
    'sa': ('search', 'all'),
    'si': ('search', 'installed'),
}

# Global options taking a value, skipped when looking for the command
_VALUE_OPTIONS = ('--color', '--backend', '-b')


class ArgumentParser(argparse.ArgumentParser):
    """Argument parser reporting errors as UsageError (exit 1, not 2)."""

    def error(self, message):
        raise UsageError(message)


class AliasedSubParsersAction(argparse._SubParsersAction):
    """Custom action to support command aliases in argparse."""

    def add_parser(self, name, **kwargs):
        aliases = kwargs.pop('aliases', [])
        if aliases and 'help' in kwargs:
            kwargs['help'] += f" ({', '.join(aliases)})"
        parser = super().add_parser(name, **kwargs)

        # Register aliases
        for alias in aliases:
            self._name_parser_map[alias] = parser

        return parser


def expand_aliases(argv: List[str]) -> List[str]:
    """Replace a shortcut command (la, li, sa, si) by command + source."""
    argv = list(argv)
    i = 0
    while i < len(argv):
        token = argv[i]
        if token in _VALUE_OPTIONS:
            i += 2
            continue
        if token.startswith('-'):
            i += 1
            continue
        if token in COMMAND_ALIASES:
            argv[i:i + 1] = list(COMMAND_ALIASES[token])
        break
    return argv


def create_parser() -> ArgumentParser:
    """Create the main argument parser with all commands and aliases."""

    aliases_help = ', '.join(f"{alias} = {' '.join(expansion)}"
                             for alias, expansion in COMMAND_ALIASES.items())
    parser = ArgumentParser(
        prog=PROG,
        description='One command line for every package manager '
                    f"({', '.join(backend_names())})",
        epilog=f'Shortcuts: {aliases_help}. '
               'Use "pm help <command>" for command-specific help.'
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'{PROG} {__version__}'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Verbose output (log every command run)'
    )

    parser.add_argument(
        '--color',
        choices=COLOR_MODES,
        help='Colored output (default: auto, or $PM_COLOR)'
    )

    parser.add_argument(
        '--backend', '-b',
        metavar='NAME',
        help='Package manager to use (default: detected, or $PM_BACKEND)'
    )

    # Register custom action for aliases
    parser.register('action', 'parsers', AliasedSubParsersAction)

    subparsers = parser.add_subparsers(
        dest='command',
        title='commands',
        metavar='<command>'
    )

    # =========================================================================
    # install / i
    # =========================================================================
    install_parser = subparsers.add_parser(
        'install', aliases=['i'],
        help='Install packages (pick in fzf when none given)'
    )
    install_parser.add_argument(
        'packages', nargs='*',
        help='Package names to install'
    )

    # =========================================================================
    # remove / rm
    # =========================================================================
    remove_parser = subparsers.add_parser(
        'remove', aliases=['rm'],
        help='Remove packages (pick in fzf when none given)'
    )
    remove_parser.add_argument(
        'packages', nargs='*',
        help='Package names to remove'
    )

    # =========================================================================
    # upgrade / up, refresh / fetch
    # =========================================================================
    subparsers.add_parser(
        'upgrade', aliases=['up'],
        help='Refresh metadata and upgrade all packages'
    )

    subparsers.add_parser(
        'refresh', aliases=['fetch'],
        help='Refresh package metadata'
    )

    # =========================================================================
    # info
    # =========================================================================
    info_parser = subparsers.add_parser(
        'info',
        help='Show package details'
    )
    info_parser.add_argument(
        'package',
        help='Package name'
    )

    # =========================================================================
    # list / search
    # =========================================================================
    list_parser = subparsers.add_parser(
        'list',
        help='List packages'
    )
    list_parser.add_argument(
        'source',
        choices=SOURCES,
        help='Which packages to list'
    )

    search_parser = subparsers.add_parser(
        'search',
        help='Search packages in fzf, print the chosen ones'
    )
    search_parser.add_argument(
        'source',
        choices=SOURCES,
        help='Which packages to search'
    )

    # =========================================================================
    # which / help
    # =========================================================================
    subparsers.add_parser(
        'which',
        help='Print the package manager in use'
    )

    help_parser = subparsers.add_parser(
        'help',
        help='Show help'
    )
    help_parser.add_argument(
        'topic', nargs='?',
        help='Command to show help for'
    )

    parser.commands = subparsers.choices
    return parser


def cmd_help(args, parser: ArgumentParser) -> int:
    """Handle help command."""
    if not args.topic:
        parser.print_help()
        return 0
    topic = COMMAND_ALIASES.get(args.topic, (args.topic,))[0]
    if topic not in parser.commands:
        raise UsageError(f"unknown command '{args.topic}'")
    parser.commands[topic].print_help()
    return 0


def dispatch(args, ctx) -> int:
    """Route parsed arguments to their command handler."""
    if args.command in ('install', 'i'):
        return cmd_install(args, ctx)

    elif args.command in ('remove', 'rm'):
        return cmd_remove(args, ctx)

    elif args.command in ('upgrade', 'up'):
        return cmd_upgrade(args, ctx)

    elif args.command in ('refresh', 'fetch'):
        return cmd_refresh(args, ctx)

    elif args.command == 'info':
        return cmd_info(args, ctx)

    elif args.command == 'list':
        return cmd_list(args, ctx)

    elif args.command == 'search':
        return cmd_search(args, ctx)

    elif args.command == 'which':
        return cmd_which(args, ctx)

    raise UsageError(f"unknown command '{args.command}'")


def report_error(error: PmError) -> int:
    """Print an error on stderr; return its exit code."""
    from . import colors

    print(f"{PROG}: {colors.error(str(error))}", file=sys.stderr)
    if isinstance(error, UsageError):
        print(colors.dim(error.hint), file=sys.stderr)
    return error.exit_code


def main(argv: Optional[List[str]] = None, environ=None, **collaborators) -> int:
    """Main CLI entry point.

    Args:
        argv: Arguments without the program name (sys.argv[1:] if None)
        environ: Environment variables (os.environ if None)
        **collaborators: runner, selector, stdin, stdout, which overrides
    """
    from . import colors

    argv = expand_aliases(sys.argv[1:] if argv is None else argv)
    parser = create_parser()

    try:
        args = parser.parse_args(argv)

        # Configure logging based on verbose flag
        if args.verbose:
            logging.basicConfig(
                level=logging.DEBUG,
                format='%(name)s - %(levelname)s - %(message)s',
                stream=sys.stderr
            )

        if args.command is None:
            parser.print_usage(sys.stderr)
            raise UsageError("no command given")

        if args.command == 'help':
            return cmd_help(args, parser)

        ctx = build_context(
            backend=args.backend,
            color=args.color,
            environ=os.environ if environ is None else environ,
            **collaborators
        )

        # Initialize color support for messages
        colors.init(ctx.color)

        return dispatch(args, ctx)

    except PmError as e:
        return report_error(e)

    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130


if __name__ == '__main__':
    sys.exit(main())
