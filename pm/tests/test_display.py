"""Tests for listing formatting"""

from pm.cli.display import ListMode, format_row, format_rows, package_names
from pm.core.package import INSTALLED, PackageRow, mark_installed, merge_rows


class TestFormatRow:

    def test_all_round_trip(self):
        row = PackageRow.from_fields('bat extra 0.24.0-2 [installed]'.split())
        assert format_row(row, ListMode.ALL) == 'bat extra 0.24.0-2 [installed]'

    def test_all_without_status(self):
        row = PackageRow.from_fields(['bat', 'extra', '0.24.0-2'])
        assert row.status == ''
        assert format_row(row, ListMode.ALL) == 'bat extra 0.24.0-2'

    def test_missing_trailing_fields(self):
        row = PackageRow.from_fields(['bat'])
        assert format_row(row, ListMode.ALL) == 'bat'

    def test_separator_normalized(self):
        row = PackageRow.from_fields('bat   extra\t0.24.0-2'.split())
        assert format_row(row, ListMode.ALL) == 'bat extra 0.24.0-2'

    def test_installed_layout(self):
        row = PackageRow('git', 'main', '2.42.0')
        assert format_row(row, ListMode.INSTALLED) == 'git 2.42.0 main'
        assert format_row(PackageRow('git', version='2.42.0'), ListMode.INSTALLED) == 'git 2.42.0'

    def test_color(self):
        row = PackageRow('bat', 'extra', '0.24.0-2', INSTALLED)
        line = format_row(row, ListMode.ALL, color=True)
        assert line == ('\033[1mbat\033[0m \033[94mextra\033[0m '
                        '\033[92m0.24.0-2\033[0m \033[96m[installed]\033[0m')

    def test_color_skips_empty_fields(self):
        line = format_row(PackageRow('bat'), ListMode.ALL, color=True)
        assert line == '\033[1mbat\033[0m'

    def test_inner_empty_field_keeps_columns(self):
        row = PackageRow('fzf', 'formula', status=INSTALLED)
        assert format_row(row, ListMode.ALL) == 'fzf formula  [installed]'
        assert format_row(PackageRow('bat', '', '0.24.0'), ListMode.ALL) == 'bat  0.24.0'
        assert package_names([format_row(row, ListMode.ALL)]) == ['fzf']

    def test_format_rows_keeps_order(self):
        rows = [PackageRow('b'), PackageRow('a')]
        assert format_rows(rows, ListMode.ALL) == ['b', 'a']


class TestRows:

    def test_merge_keeps_first(self):
        rows = merge_rows([
            PackageRow('bat', 'extra', '1'),
            PackageRow('fzf', 'extra', '2'),
            PackageRow('bat', 'other', '3', INSTALLED),
        ])
        assert rows == [
            PackageRow('bat', 'extra', '1', INSTALLED),
            PackageRow('fzf', 'extra', '2'),
        ]

    def test_mark_installed(self):
        rows = mark_installed([PackageRow('bat'), PackageRow('fzf')], ['fzf'])
        assert [row.installed for row in rows] == [False, True]

    def test_package_names(self):
        assert package_names(['bat extra 1', '', 'fzf']) == ['bat', 'fzf']
