"""Shared fakes: no test spawns a real package manager or fzf."""

import io

import pytest

from pm.core.backends import BackendKind
from pm.core.cache import RefreshCache
from pm.core.context import Context
from pm.core.errors import BackendOperationFailure


class FakeRunner:
    """CommandRunner recording every command instead of running it."""

    def __init__(self, outputs=None, failures=()):
        self.outputs = {tuple(k): v for k, v in (outputs or {}).items()}
        self.failures = {tuple(f) for f in failures}
        self.calls = []
        self.cwds = []

    def run(self, argv, cwd=None, env=None):
        self.calls.append(list(argv))
        self.cwds.append(cwd)
        if tuple(argv) in self.failures:
            raise BackendOperationFailure(argv, 1)

    def capture(self, argv, quiet=False, env=None):
        self.calls.append(list(argv))
        if tuple(argv) in self.failures:
            raise BackendOperationFailure(argv, 1)
        return self.outputs.get(tuple(argv), '')


class FakeSelector:
    """Selector choosing the lines whose first field is in `picks`."""

    def __init__(self, picks=()):
        self.picks = set(picks)
        self.calls = []

    def select(self, lines, preview_command=None, env=None):
        self.calls.append((list(lines), preview_command))
        return [line for line in lines if line.split()[0] in self.picks]


class TtyStdin(io.StringIO):
    def isatty(self):
        return True


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def make_ctx(tmp_path):
    """Build a Context around fakes."""
    def _make(kind=BackendKind.PACMAN, runner=None, selector=None, stdin=None,
              sudo=(), forced=True, color=False):
        return Context(
            backend=kind,
            color=color,
            sudo=tuple(sudo),
            cache=RefreshCache(tmp_path / 'cache'),
            backend_forced=forced,
            runner=runner if runner is not None else FakeRunner(),
            selector=selector if selector is not None else FakeSelector(),
            stdin=stdin if stdin is not None else TtyStdin(),
        )
    return _make


@pytest.fixture
def isolated_env(tmp_path):
    """Environment without user config, cache or backend settings."""
    return {
        'PM_CONFIG': str(tmp_path / 'missing.yaml'),
        'PM_CACHE_DIR': str(tmp_path / 'cache'),
        'PM_SUDO': '',
    }


def no_binaries(name):
    return None
