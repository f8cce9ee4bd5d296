"""Normalized package records."""

from dataclasses import dataclass, replace
from typing import Dict, Iterable, List

INSTALLED = '[installed]'


@dataclass(frozen=True)
class PackageRow:
    """One package as printed by list/search.

    group is the repository, bucket or origin depending on the backend.
    status is INSTALLED or empty.
    """
    name: str
    group: str = ''
    version: str = ''
    status: str = ''

    @property
    def installed(self) -> bool:
        return self.status == INSTALLED

    @classmethod
    def from_fields(cls, fields: List[str]) -> 'PackageRow':
        """Build a row from positional name/group/version/status fields.

        Missing trailing fields are left empty.
        """
        padded = list(fields[:4]) + [''] * (4 - len(fields[:4]))
        return cls(*padded)


def merge_rows(rows: Iterable[PackageRow]) -> List[PackageRow]:
    """Collapse duplicate names into one row.

    The first occurrence wins and keeps its position; it is marked
    installed if any duplicate was.
    """
    merged: Dict[str, PackageRow] = {}
    for row in rows:
        seen = merged.get(row.name)
        if seen is None:
            merged[row.name] = row
        elif row.installed and not seen.installed:
            merged[row.name] = replace(seen, status=INSTALLED)
    return list(merged.values())


def mark_installed(rows: Iterable[PackageRow], installed: Iterable[str]) -> List[PackageRow]:
    """Annotate rows whose name is in the installed set.

    Used by backends whose full listing has no installed marker.
    """
    names = set(installed)
    return merge_rows(
        replace(row, status=INSTALLED) if row.name in names else row
        for row in rows
    )
