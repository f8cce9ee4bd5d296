"""Tests for CLI"""

import pytest

from pm.cli.main import create_parser, expand_aliases, main
from pm.core.backends import BackendKind
from pm.core.errors import UsageError

from .conftest import FakeRunner, no_binaries


class TestParser:
    """Tests for argument parser."""

    def test_version_flag(self):
        parser = create_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(['--version'])

    def test_install_command(self):
        parser = create_parser()
        args = parser.parse_args(['install', 'firefox', 'vim'])
        assert args.command == 'install'
        assert args.packages == ['firefox', 'vim']

    def test_install_without_packages(self):
        parser = create_parser()
        args = parser.parse_args(['install'])
        assert args.packages == []

    def test_install_alias(self):
        parser = create_parser()
        args = parser.parse_args(['i', 'firefox'])
        assert args.command == 'i'
        assert args.packages == ['firefox']

    def test_remove_alias(self):
        parser = create_parser()
        args = parser.parse_args(['rm', 'vim'])
        assert args.command == 'rm'
        assert args.packages == ['vim']

    def test_fetch_is_refresh(self):
        parser = create_parser()
        args = parser.parse_args(['fetch'])
        assert args.command == 'fetch'

    def test_list_sources(self):
        parser = create_parser()
        assert parser.parse_args(['list', 'all']).source == 'all'
        assert parser.parse_args(['list', 'installed']).source == 'installed'

    def test_list_invalid_source(self):
        parser = create_parser()
        with pytest.raises(UsageError):
            parser.parse_args(['list', 'foo'])

    def test_search_requires_source(self):
        parser = create_parser()
        with pytest.raises(UsageError):
            parser.parse_args(['search'])

    def test_info_takes_one_package(self):
        parser = create_parser()
        assert parser.parse_args(['info', 'vim']).package == 'vim'
        with pytest.raises(UsageError):
            parser.parse_args(['info'])
        with pytest.raises(UsageError):
            parser.parse_args(['info', 'vim', 'emacs'])

    def test_unknown_command(self):
        parser = create_parser()
        with pytest.raises(UsageError):
            parser.parse_args(['frobnicate'])

    def test_global_options(self):
        parser = create_parser()
        args = parser.parse_args(['-v', '--color', 'never', '-b', 'apt', 'which'])
        assert args.verbose is True
        assert args.color == 'never'
        assert args.backend == 'apt'


class TestAliases:
    """Tests for shortcut expansion."""

    @pytest.mark.parametrize('alias,expected', [
        ('li', ['list', 'installed']),
        ('la', ['list', 'all']),
        ('si', ['search', 'installed']),
        ('sa', ['search', 'all']),
    ])
    def test_expansion(self, alias, expected):
        assert expand_aliases([alias]) == expected

    def test_expansion_after_options(self):
        assert expand_aliases(['-v', '--backend', 'li', 'li']) == \
            ['-v', '--backend', 'li', 'list', 'installed']

    def test_only_command_position_expands(self):
        assert expand_aliases(['install', 'li']) == ['install', 'li']


class TestMain:
    """Tests for exit codes and output of main()."""

    def test_no_command_is_usage_error(self, isolated_env, capsys):
        assert main([], environ=isolated_env, which=no_binaries) == 1
        assert "pm: no command given" in capsys.readouterr().err

    def test_invalid_source_exits_1(self, isolated_env, capsys):
        assert main(['list', 'foo'], environ=isolated_env, which=no_binaries) == 1
        err = capsys.readouterr().err
        assert err.startswith('pm: ')
        assert "pm help" in err

    def test_help(self, capsys):
        assert main(['help']) == 0
        assert 'install' in capsys.readouterr().out

    def test_help_for_shortcut(self, capsys):
        assert main(['help', 'li']) == 0
        assert 'installed' in capsys.readouterr().out

    def test_help_unknown_topic(self, capsys):
        assert main(['help', 'nope']) == 1

    def test_backend_not_found(self, isolated_env, capsys):
        assert main(['which'], environ=isolated_env, which=no_binaries) == 1
        err = capsys.readouterr().err
        assert 'no supported package manager found' in err
        assert 'paru, yay, pacman, apt, dnf, zypper, apk, brew, scoop' in err

    def test_unknown_backend_override(self, isolated_env, capsys):
        env = dict(isolated_env, PM_BACKEND='portage')
        assert main(['which'], environ=env, which=no_binaries) == 1
        assert "unknown package manager 'portage'" in capsys.readouterr().err

    @pytest.mark.parametrize('kind', list(BackendKind))
    def test_which_reports_override(self, kind, isolated_env, capsys):
        env = dict(isolated_env, PM_BACKEND=kind.value)
        assert main(['which'], environ=env, which=no_binaries) == 0
        assert capsys.readouterr().out.strip() == kind.value

    def test_backend_option_beats_environment(self, isolated_env, capsys):
        env = dict(isolated_env, PM_BACKEND='apt')
        assert main(['--backend', 'dnf', 'which'], environ=env, which=no_binaries) == 0
        assert capsys.readouterr().out.strip() == 'dnf'

    def test_detected_backend(self, isolated_env, capsys):
        def which(name):
            return '/usr/bin/apk' if name == 'apk' else None

        assert main(['which'], environ=isolated_env, which=which) == 0
        assert capsys.readouterr().out.strip() == 'apk'

    def test_list_installed(self, isolated_env, capsys):
        runner = FakeRunner(outputs={
            ('pacman', '-Q'): "bat 0.24.0-2\nfzf 0.46.0-1\n",
        })
        env = dict(isolated_env, PM_BACKEND='pacman', PM_COLOR='never')
        assert main(['li'], environ=env, which=no_binaries, runner=runner) == 0
        assert capsys.readouterr().out.splitlines() == ['bat 0.24.0-2', 'fzf 0.46.0-1']

    def test_backend_failure_propagates_exit_code(self, isolated_env, capsys):
        class FailingRunner(FakeRunner):
            def run(self, argv, cwd=None, env=None):
                from pm.core.errors import BackendOperationFailure
                raise BackendOperationFailure(argv, 100)

        env = dict(isolated_env, PM_BACKEND='apt')
        assert main(['info', 'vim'], environ=env, which=no_binaries,
                    runner=FailingRunner()) == 100
        assert "'apt show vim' failed with exit status 100" in capsys.readouterr().err
