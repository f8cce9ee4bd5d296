"""
On-disk cache for pm.

Handles:
- The per-backend refresh marker, so installs skip a metadata refresh
  already done today (UTC)
- The package listing of backends whose native listing is slow (brew, scoop)

Structure:
    <root>/<backend>/last-refresh   - ISO date of the last metadata refresh
    <root>/<backend>/packages       - Cached package listing
"""

import logging
import os
import tempfile
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Callable, Optional

logger = logging.getLogger(__name__)

MARKER_FILE = 'last-refresh'
LISTING_FILE = 'packages'


def utc_today() -> date:
    """Current date in UTC."""
    return datetime.now(timezone.utc).date()


class RefreshCache:
    """Per-backend refresh marker and listing cache."""

    def __init__(self, root: Path, clock: Callable[[], date] = utc_today):
        """
        Args:
            root: Cache root directory (created on demand)
            clock: Returns today's UTC date (overridable for tests)
        """
        self.root = Path(root)
        self.clock = clock

    def directory(self, kind) -> Path:
        """Cache directory of a backend."""
        return self.root / kind.value

    # =========================================================================
    # Refresh marker
    # =========================================================================

    def is_stale(self, kind) -> bool:
        """True unless the marker records today's UTC date."""
        marker = self.directory(kind) / MARKER_FILE
        try:
            stored = marker.read_text().strip()
        except OSError:
            logger.debug("no refresh marker for %s", kind.value)
            return True
        today = self.clock().isoformat()
        if stored != today:
            logger.debug("refresh marker for %s is from %s (today %s)",
                         kind.value, stored, today)
            return True
        return False

    def mark_fresh(self, kind):
        """Record today's date as the last refresh (best effort)."""
        directory = self.directory(kind)
        try:
            directory.mkdir(parents=True, exist_ok=True)
            (directory / MARKER_FILE).write_text(self.clock().isoformat() + '\n')
        except OSError as e:
            logger.debug("could not write refresh marker in %s: %s", directory, e)

    # =========================================================================
    # Listing cache
    # =========================================================================

    def read_listing(self, kind) -> Optional[str]:
        """Cached listing, or None if there is none yet."""
        path = self.directory(kind) / LISTING_FILE
        try:
            return path.read_text()
        except OSError:
            return None

    def write_listing(self, kind, text: str):
        """Replace the cached listing atomically (best effort)."""
        directory = self.directory(kind)
        tmp_path = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile('w', dir=directory, prefix='.packages-',
                                             delete=False) as tmp:
                tmp.write(text)
                tmp_path = tmp.name
            os.replace(tmp_path, directory / LISTING_FILE)
            tmp_path = None
        except OSError as e:
            logger.debug("could not write package listing in %s: %s", directory, e)
        finally:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
