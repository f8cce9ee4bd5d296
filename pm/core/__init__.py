"""Core modules for pm"""

from .backends import Backend, BackendKind, PROBE_ORDER
from .context import Context, build_context
from .package import PackageRow

__all__ = ['Backend', 'BackendKind', 'PROBE_ORDER', 'Context', 'build_context', 'PackageRow']
