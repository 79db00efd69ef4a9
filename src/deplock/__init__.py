"""Public package entrypoint for deplock."""

from .artifacts import identify, identify_all, sha1_file
from .config import LockConfig, resolve_config
from .engine import DependencyLock
from .errors import (
    DeplockError,
    ErrorCode,
    IOFailure,
    LockfileError,
    LockfileMismatch,
    PackagingError,
    PathNotRelocatable,
    ResolverError,
    UnjoinableDependency,
    ValidationError,
    VersionConflict,
)
from .hierarchy import DependencyNode, flatten, graph_from_mapping, parse_entry, parse_hierarchy
from .lockfile import LockEntry, lock_sort_key, serialize, verify
from .models import (
    Coordinate,
    Exclusion,
    HierarchyEntry,
    ReconciledDependency,
    ResolvedArtifact,
)
from .observability import StructuredLogger
from .reconcile import reconcile, reconcile_versions

__all__ = [
    "Coordinate",
    "DependencyLock",
    "DependencyNode",
    "DeplockError",
    "ErrorCode",
    "Exclusion",
    "HierarchyEntry",
    "IOFailure",
    "LockConfig",
    "LockEntry",
    "LockfileError",
    "LockfileMismatch",
    "PackagingError",
    "PathNotRelocatable",
    "ReconciledDependency",
    "ResolvedArtifact",
    "ResolverError",
    "StructuredLogger",
    "UnjoinableDependency",
    "ValidationError",
    "VersionConflict",
    "flatten",
    "graph_from_mapping",
    "identify",
    "identify_all",
    "lock_sort_key",
    "parse_entry",
    "parse_hierarchy",
    "reconcile",
    "reconcile_versions",
    "resolve_config",
    "serialize",
    "sha1_file",
    "verify",
]
