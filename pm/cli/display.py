"""Display utilities for pm CLI.

Turns PackageRow records into the uniform listing format shared by every
backend:
- all:       name group version status
- installed: name version group

Fields are joined by a single space and trailing empty fields are
dropped; an empty inner field prints as an empty column. The package
name is always the first whitespace-separated field.
"""

from enum import Enum
from typing import Iterable, List

from . import colors
from ..core.package import PackageRow


class ListMode(Enum):
    """Which packages a listing shows."""
    ALL = "all"
    INSTALLED = "installed"


def format_row(row: PackageRow, mode: ListMode, color: bool = False) -> str:
    """Format one row.

    Args:
        row: Package record
        mode: Column layout
        color: Wrap each field in its ANSI color
    """
    name = colors.pkg_name(row.name, color)
    group = colors.pkg_group(row.group, color)
    version = colors.pkg_version(row.version, color)

    if mode == ListMode.ALL:
        fields = [name, group, version, colors.pkg_status(row.status, color)]
    else:
        fields = [name, version, group]

    # Trailing empty fields are dropped, inner ones keep their column
    while fields and not fields[-1]:
        fields.pop()
    return ' '.join(fields)


def format_rows(rows: Iterable[PackageRow], mode: ListMode, color: bool = False) -> List[str]:
    """Format rows, keeping their order."""
    return [format_row(row, mode, color) for row in rows]


def package_names(lines: Iterable[str]) -> List[str]:
    """First field of each line, i.e. the package names of a selection."""
    names = []
    for line in lines:
        fields = line.split()
        if fields:
            names.append(fields[0])
    return names


def print_lines(lines: Iterable[str]):
    for line in lines:
        print(line)
