"""Backend registry: one class per supported package manager.

Every backend implements the same capability interface:

    install(names), remove(names), upgrade(), fetch(), info(name)
        run the native tool attached to the terminal
    list_all(), list_installed()
        return the native tool's raw listing text
    format_all(text), format_installed(text)
        parse that text into PackageRow records

Class attributes describe what the generic code has to do around them:

    needs_root          prefix mutating commands with the sudo command
    bootstraps_helpers  installing an AUR helper needs the bootstrap procedure
    caches_listing      list_all() reads the on-disk listing cache
    joins_installed     list_all() has no installed marker, merge with
                        list_installed()
"""

import logging
import re
import sys
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Type

from .errors import BackendOperationFailure
from .package import INSTALLED, PackageRow, mark_installed, merge_rows

logger = logging.getLogger(__name__)


class BackendKind(Enum):
    """Supported package managers; the value is the executable name."""
    PARU = 'paru'
    YAY = 'yay'
    PACMAN = 'pacman'
    APT = 'apt'
    DNF = 'dnf'
    ZYPPER = 'zypper'
    APK = 'apk'
    BREW = 'brew'
    SCOOP = 'scoop'


# AUR helpers come before pacman: when one is installed, it should win
# over the pacman it wraps.
PROBE_ORDER: Tuple[BackendKind, ...] = (
    BackendKind.PARU,
    BackendKind.YAY,
    BackendKind.PACMAN,
    BackendKind.APT,
    BackendKind.DNF,
    BackendKind.ZYPPER,
    BackendKind.APK,
    BackendKind.BREW,
    BackendKind.SCOOP,
)

RPM_QUERYFORMAT = '%{NAME} %{VERSION}-%{RELEASE}\\n'
# Status first: dpkg also knows removed packages with leftover config (rc)
DPKG_FORMAT = '-f=${db:Status-Abbrev} ${Package} ${Version}\\n'


class Backend(ABC):
    """Capability interface shared by all package managers."""

    kind: BackendKind
    needs_root = True
    bootstraps_helpers = False
    caches_listing = False
    joins_installed = False

    def __init__(self, runner, sudo: Sequence[str] = (), cache=None):
        """
        Args:
            runner: CommandRunner used for every child process
            sudo: Privilege escalation command (empty to run directly)
            cache: RefreshCache, required by caches_listing backends
        """
        self.runner = runner
        self.sudo = tuple(sudo)
        self.cache = cache

    @property
    def name(self) -> str:
        return self.kind.value

    def __repr__(self):
        return f"<{type(self).__name__} sudo={' '.join(self.sudo) or '-'}>"

    # =========================================================================
    # Process helpers
    # =========================================================================

    def _run(self, *argv: str, privileged: bool = False):
        if privileged and self.needs_root:
            argv = self.sudo + argv
        self.runner.run(list(argv))

    def _capture(self, *argv: str, quiet: bool = False) -> str:
        return self.runner.capture(list(argv), quiet=quiet)

    def _cached_listing(self) -> str:
        """Return the listing cache, building it on first use."""
        text = self.cache.read_listing(self.kind)
        if text is None:
            text = self.query_listing()
            self.cache.write_listing(self.kind, text)
        return text

    def query_listing(self) -> str:
        """Query the full package listing (caches_listing backends only)."""
        raise NotImplementedError(f"{self.name} has no listing cache")

    # =========================================================================
    # Capability interface
    # =========================================================================

    @abstractmethod
    def install(self, names: List[str]):
        """Install packages."""

    @abstractmethod
    def remove(self, names: List[str]):
        """Remove packages."""

    @abstractmethod
    def upgrade(self):
        """Upgrade all packages (metadata is refreshed beforehand)."""

    @abstractmethod
    def fetch(self):
        """Refresh package metadata."""

    @abstractmethod
    def info(self, name: str):
        """Show details about one package."""

    @abstractmethod
    def list_all(self) -> str:
        """Raw listing of all available packages."""

    @abstractmethod
    def list_installed(self) -> str:
        """Raw listing of installed packages."""

    @abstractmethod
    def format_all(self, text: str) -> List[PackageRow]:
        """Parse list_all() output."""

    @abstractmethod
    def format_installed(self, text: str) -> List[PackageRow]:
        """Parse list_installed() output."""

    # =========================================================================
    # Generic operations built on the interface
    # =========================================================================

    def refresh(self):
        """Refresh metadata, and the listing cache where there is one."""
        self.fetch()
        if self.caches_listing:
            self.cache.write_listing(self.kind, self.query_listing())

    def all_rows(self) -> List[PackageRow]:
        rows = self.format_all(self.list_all())
        if self.joins_installed:
            return mark_installed(rows, (row.name for row in self.installed_rows()))
        return merge_rows(rows)

    def installed_rows(self) -> List[PackageRow]:
        return merge_rows(self.format_installed(self.list_installed()))


# =============================================================================
# Shared parsers
# =============================================================================

def parse_name_version(text: str) -> List[PackageRow]:
    """Parse 'name version [version...]' lines (pacman -Q, rpm, brew).

    When several versions are listed, the last one is kept.
    """
    rows = []
    for line in text.splitlines():
        fields = line.split()
        if not fields:
            continue
        version = fields[-1] if len(fields) > 1 else ''
        rows.append(PackageRow(fields[0], version=version))
    return rows


def parse_table(text: str) -> List[List[str]]:
    """Parse PowerShell-style tables (scoop).

    Rows start after a separator line made of dashes; everything before
    the first separator (titles, headers) is skipped.
    """
    rows = []
    in_table = False
    for line in text.splitlines():
        fields = line.split()
        if not fields:
            continue
        if all(set(f) == {'-'} for f in fields):
            in_table = True
            continue
        if in_table:
            rows.append(fields)
    return rows


# =============================================================================
# pacman and AUR helpers
# =============================================================================

class Pacman(Backend):
    kind = BackendKind.PACMAN
    bootstraps_helpers = True

    def install(self, names):
        self._run(self.name, '-S', '--needed', *names, privileged=True)

    def remove(self, names):
        self._run(self.name, '-Rs', *names, privileged=True)

    def upgrade(self):
        self._run(self.name, '-Su', privileged=True)

    def fetch(self):
        self._run(self.name, '-Sy', privileged=True)

    def info(self, name):
        try:
            self._run(self.name, '-Si', name)
        except BackendOperationFailure:
            # Not in a sync repository, may still be a local package
            self._run(self.name, '-Qi', name)

    def list_all(self):
        return self._capture(self.name, '-Sl')

    def list_installed(self):
        return self._capture(self.name, '-Q')

    def format_all(self, text):
        # core acl 2.3.2-1 [installed]
        # extra bat 0.24.0-2 [installed: 0.23.0-1]
        rows = []
        for line in text.splitlines():
            fields = line.split(None, 3)
            if len(fields) < 2:
                continue
            repo, name = fields[0], fields[1]
            version = fields[2] if len(fields) > 2 else ''
            rest = fields[3] if len(fields) > 3 else ''
            status = INSTALLED if rest.startswith('[installed') else ''
            rows.append(PackageRow(name, repo, version, status))
        return rows

    def format_installed(self, text):
        return parse_name_version(text)


class Paru(Pacman):
    """paru runs unprivileged and calls sudo itself."""
    kind = BackendKind.PARU
    needs_root = False
    bootstraps_helpers = False


class Yay(Pacman):
    kind = BackendKind.YAY
    needs_root = False
    bootstraps_helpers = False


# =============================================================================
# Debian family
# =============================================================================

class Apt(Backend):
    kind = BackendKind.APT

    def install(self, names):
        self._run('apt', 'install', *names, privileged=True)

    def remove(self, names):
        self._run('apt', 'remove', *names, privileged=True)

    def upgrade(self):
        self._run('apt', 'upgrade', privileged=True)

    def fetch(self):
        self._run('apt', 'update', privileged=True)

    def info(self, name):
        self._run('apt', 'show', name)

    def list_all(self):
        # apt warns about its unstable CLI when piped
        return self._capture('apt', 'list', quiet=True)

    def list_installed(self):
        return self._capture('dpkg-query', '-W', DPKG_FORMAT)

    def format_all(self, text):
        # bat/jammy-updates,now 0.19.0-1ubuntu0.1 amd64 [installed,automatic]
        rows = []
        for line in text.splitlines():
            fields = line.split(None, 3)
            if not fields or '/' not in fields[0]:
                continue  # "Listing..."
            name, suites = fields[0].split('/', 1)
            version = fields[1] if len(fields) > 1 else ''
            rest = fields[3] if len(fields) > 3 else ''
            installed = rest.startswith('[installed') or rest.startswith('[upgradable from')
            rows.append(PackageRow(name, suites.split(',')[0], version,
                                   INSTALLED if installed else ''))
        return rows

    def format_installed(self, text):
        # "ii  bat 0.19.0-1ubuntu0.1"; the second status letter is the
        # current state, 'i' when unpacked and configured
        rows = []
        for line in text.splitlines():
            fields = line.split()
            if len(fields) < 2 or len(fields[0]) < 2 or fields[0][1] != 'i':
                continue
            version = fields[2] if len(fields) > 2 else ''
            rows.append(PackageRow(fields[1], version=version))
        return rows


# =============================================================================
# RPM family
# =============================================================================

class Dnf(Backend):
    kind = BackendKind.DNF

    def install(self, names):
        self._run('dnf', 'install', *names, privileged=True)

    def remove(self, names):
        self._run('dnf', 'remove', *names, privileged=True)

    def upgrade(self):
        self._run('dnf', 'upgrade', privileged=True)

    def fetch(self):
        self._run('dnf', 'makecache', privileged=True)

    def info(self, name):
        self._run('dnf', 'info', name)

    def list_all(self):
        return self._capture('dnf', '-q', 'list', '--all', quiet=True)

    def list_installed(self):
        return self._capture('rpm', '-qa', '--queryformat', RPM_QUERYFORMAT)

    def format_all(self, text):
        """Parse 'dnf list --all'.

        Installed packages come first, under an "Installed Packages"
        heading; long names make dnf wrap the rest of the row onto the
        next line.
        """
        rows = []
        installed = False
        pending: Optional[str] = None
        for line in text.splitlines():
            fields = line.split()
            if not fields:
                continue
            if line.startswith('Last metadata') or line.rstrip().endswith('.'):
                # metadata expiration banner
                continue
            if len(fields) == 2 and fields[1].lower() == 'packages':
                # Installed Packages, Available Packages, Extra Packages...
                installed = fields[0].lower() == 'installed'
                pending = None
                continue
            if pending is not None:
                fields = [pending] + fields
                pending = None
            elif len(fields) == 1:
                pending = fields[0]
                continue
            name = fields[0].rsplit('.', 1)[0] if '.' in fields[0] else fields[0]
            version = fields[1] if len(fields) > 1 else ''
            repo = fields[2].lstrip('@') if len(fields) > 2 else ''
            is_installed = installed or (len(fields) > 2 and fields[2].startswith('@'))
            rows.append(PackageRow(name, repo, version,
                                   INSTALLED if is_installed else ''))
        return rows

    def format_installed(self, text):
        return parse_name_version(text)


class Zypper(Backend):
    kind = BackendKind.ZYPPER

    def install(self, names):
        self._run('zypper', 'install', *names, privileged=True)

    def remove(self, names):
        self._run('zypper', 'remove', *names, privileged=True)

    def upgrade(self):
        self._run('zypper', 'update', privileged=True)

    def fetch(self):
        self._run('zypper', 'refresh', privileged=True)

    def info(self, name):
        self._run('zypper', 'info', name)

    def list_all(self):
        return self._capture('zypper', '--non-interactive', '--quiet', 'search',
                             '--details', '--type', 'package')

    def list_installed(self):
        return self._capture('rpm', '-qa', '--queryformat', RPM_QUERYFORMAT)

    def format_all(self, text):
        # S  | Name | Type    | Version | Arch   | Repository
        # i+ | bat  | package | 0.24-1  | x86_64 | repo-oss
        rows = []
        for line in text.splitlines():
            cols = [c.strip() for c in line.split('|')]
            if len(cols) < 2 or cols[1] in ('', 'Name'):
                continue
            status, name = cols[0], cols[1]
            version = cols[3] if len(cols) > 3 else ''
            repo = cols[5] if len(cols) > 5 else ''
            rows.append(PackageRow(name, repo, version,
                                   INSTALLED if 'i' in status else ''))
        return rows

    def format_installed(self, text):
        return parse_name_version(text)


# =============================================================================
# Alpine
# =============================================================================

_APK_PACKAGE = re.compile(r'^(?P<name>.+?)-(?P<version>\d[^-]*-r\d+)$')
_APK_ORIGIN = re.compile(r'\{(?P<origin>[^}]*)\}')
_APK_INSTALLED = re.compile(r'\[(installed|upgradable from)')


class Apk(Backend):
    kind = BackendKind.APK

    def install(self, names):
        self._run('apk', 'add', *names, privileged=True)

    def remove(self, names):
        self._run('apk', 'del', *names, privileged=True)

    def upgrade(self):
        self._run('apk', 'upgrade', privileged=True)

    def fetch(self):
        self._run('apk', 'update', privileged=True)

    def info(self, name):
        self._run('apk', 'info', '-a', name)

    def list_all(self):
        return self._capture('apk', 'list')

    def list_installed(self):
        return self._capture('apk', 'list', '--installed')

    def format_all(self, text):
        # bat-0.24.0-r1 x86_64 {bat} (Apache-2.0 OR MIT) [installed]
        rows = []
        for line in text.splitlines():
            fields = line.split()
            if not fields:
                continue
            match = _APK_PACKAGE.match(fields[0])
            if match:
                name, version = match.group('name'), match.group('version')
            else:
                name, version = fields[0], ''
            origin = _APK_ORIGIN.search(line)
            rows.append(PackageRow(
                name,
                origin.group('origin') if origin else '',
                version,
                INSTALLED if _APK_INSTALLED.search(line) else '',
            ))
        return rows

    def format_installed(self, text):
        return [PackageRow(row.name, version=row.version)
                for row in self.format_all(text)]


# =============================================================================
# User-level package managers (no sudo, slow native listing)
# =============================================================================

class Brew(Backend):
    kind = BackendKind.BREW
    needs_root = False
    caches_listing = True
    joins_installed = True

    def install(self, names):
        self._run('brew', 'install', *names)

    def remove(self, names):
        self._run('brew', 'uninstall', *names)

    def upgrade(self):
        self._run('brew', 'upgrade')

    def fetch(self):
        self._run('brew', 'update')

    def info(self, name):
        self._run('brew', 'info', name)

    def query_listing(self):
        lines = [f"{name} formula" for name in self._capture('brew', 'formulae').split()]
        if sys.platform == 'darwin':
            lines += [f"{name} cask" for name in self._capture('brew', 'casks').split()]
        return '\n'.join(lines) + '\n'

    def list_all(self):
        return self._cached_listing()

    def list_installed(self):
        return self._capture('brew', 'list', '--versions')

    def format_all(self, text):
        return [PackageRow.from_fields(line.split())
                for line in text.splitlines() if line.strip()]

    def format_installed(self, text):
        return parse_name_version(text)


class Scoop(Backend):
    kind = BackendKind.SCOOP
    needs_root = False
    caches_listing = True
    joins_installed = True

    def install(self, names):
        self._run('scoop', 'install', *names)

    def remove(self, names):
        self._run('scoop', 'uninstall', *names)

    def upgrade(self):
        self._run('scoop', 'update', '*')

    def fetch(self):
        self._run('scoop', 'update')

    def info(self, name):
        self._run('scoop', 'info', name)

    def query_listing(self):
        return self._capture('scoop', 'search')

    def list_all(self):
        return self._cached_listing()

    def list_installed(self):
        return self._capture('scoop', 'list')

    def format_all(self, text):
        # Name Version Source Binaries
        return [PackageRow(f[0], f[2] if len(f) > 2 else '', f[1] if len(f) > 1 else '')
                for f in parse_table(text)]

    def format_installed(self, text):
        # Name Version Source Updated Info
        return [PackageRow(f[0], f[2] if len(f) > 2 else '', f[1] if len(f) > 1 else '')
                for f in parse_table(text)]


# =============================================================================
# Registry
# =============================================================================

BACKENDS: Dict[BackendKind, Type[Backend]] = {
    cls.kind: cls
    for cls in (Paru, Yay, Pacman, Apt, Dnf, Zypper, Apk, Brew, Scoop)
}


def get_backend_class(kind: BackendKind) -> Type[Backend]:
    """Return the implementation for a backend kind."""
    return BACKENDS[kind]


def backend_names(kinds: Iterable[BackendKind] = PROBE_ORDER) -> List[str]:
    return [kind.value for kind in kinds]
