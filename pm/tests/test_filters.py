"""Tests for stdin package filters"""

import pytest

from pm.core.errors import EmptyFilter, UsageError
from pm.core.filters import clean_patterns, compile_filters, strip_ansi

LISTING = [
    'bat extra 0.24.0-2 [installed]',
    'batsignal extra 1.8.0-1',
    'fzf extra 0.46.0-1',
    'python-fzf extra 0.5-1',
    'neovim bat 0.9.5-1',
]


class TestCompile:

    def test_comments_blank_and_whitespace(self):
        filters = compile_filters(['# comment', ' bat ', '', 'fzf'])
        assert len(filters) == 2
        assert filters.patterns == ('bat', 'fzf')

    def test_trailing_comment(self):
        assert clean_patterns(['bat  # the cat clone']) == ['bat']

    def test_only_comments_fails(self):
        with pytest.raises(EmptyFilter):
            compile_filters(['# nothing', '   ', ''])

    def test_empty_input_fails(self):
        with pytest.raises(EmptyFilter):
            compile_filters([])

    def test_invalid_regex(self):
        with pytest.raises(UsageError):
            compile_filters(['bat('])


class TestApply:

    def test_whole_name_match(self):
        filters = compile_filters(['bat', 'fzf'])
        assert filters.apply(LISTING) == [
            'bat extra 0.24.0-2 [installed]',
            'fzf extra 0.46.0-1',
        ]

    def test_regex_patterns(self):
        filters = compile_filters(['bat.*'])
        assert filters.apply(LISTING) == LISTING[:2]

    def test_alternation_is_grouped(self):
        filters = compile_filters(['bat|fzf'])
        assert filters.apply(LISTING) == [LISTING[0], LISTING[2]]

    def test_name_alone_on_line(self):
        assert compile_filters(['bat']).matches('bat')

    def test_colored_lines(self):
        line = '\x1b[1mbat\x1b[0m \x1b[94mextra\x1b[0m'
        assert compile_filters(['bat']).matches(line)
        assert strip_ansi(line) == 'bat extra'

    def test_reads_file_like(self):
        import io
        filters = compile_filters(io.StringIO("bat\n# skip\nfzf\n"))
        assert filters.patterns == ('bat', 'fzf')
