"""Package filters read from standard input.

When an interactive command is fed through a pipe, each input line is a
package name pattern (extended regular expression):

    # comments and blank lines are ignored
    bat
    python-.*

A pattern must match the whole first field of a listing line, so 'bat'
selects 'bat' but not 'batsignal' nor a package whose repository is 'bat'.
"""

import re
from typing import Iterable, List, Tuple

from .errors import EmptyFilter, UsageError

ANSI_ESCAPE = re.compile(r'\x1b\[[0-9;]*m')


def strip_ansi(text: str) -> str:
    """Remove color escape sequences."""
    return ANSI_ESCAPE.sub('', text)


def clean_patterns(raw_lines: Iterable[str]) -> List[str]:
    """Strip comments and whitespace, drop blank lines."""
    patterns = []
    for line in raw_lines:
        pattern = line.split('#', 1)[0].strip()
        if pattern:
            patterns.append(pattern)
    return patterns


class FilterSet:
    """Ordered set of anchored package name matchers."""

    def __init__(self, patterns: Iterable[str]):
        self.patterns: Tuple[str, ...] = tuple(patterns)
        if not self.patterns:
            raise EmptyFilter()
        self.matchers: List[re.Pattern] = []
        for pattern in self.patterns:
            try:
                self.matchers.append(re.compile(rf'^(?:{pattern})(?:\s|$)'))
            except re.error as e:
                raise UsageError(f"invalid package pattern '{pattern}': {e}") from None

    def __len__(self):
        return len(self.matchers)

    def matches(self, line: str) -> bool:
        plain = strip_ansi(line)
        return any(m.match(plain) for m in self.matchers)

    def apply(self, lines: Iterable[str]) -> List[str]:
        """Keep the lines matched by any pattern, in input order."""
        return [line for line in lines if self.matches(line)]


def compile_filters(raw_lines: Iterable[str]) -> FilterSet:
    """Compile raw stdin lines into a FilterSet.

    Raises:
        EmptyFilter: if no pattern is left after cleaning
    """
    return FilterSet(clean_patterns(raw_lines))
