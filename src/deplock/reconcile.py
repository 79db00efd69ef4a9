"""Join resolved artifacts with hierarchy entries into canonical records.

Resolved artifacts carry the jar name and content hash; hierarchy entries
carry scope and exclusions. They are joined on ``(group, artifact)`` because
the two sources disagree on version precision: one side may report
``1.2.0-SNAPSHOT`` where the other reports ``1.2.0-20230101.120000-3``.
"""

from __future__ import annotations

from collections.abc import Sequence

from deplock.errors import UnjoinableDependency, VersionConflict
from deplock.models import HierarchyEntry, JoinKey, ReconciledDependency, ResolvedArtifact
from deplock.observability import StructuredLogger

SNAPSHOT_SUFFIX = "-SNAPSHOT"


def reconcile_versions(resolved: str, declared: str) -> str | None:
    """Return the version to keep for one logical version, or ``None``.

    Equal versions are kept as is. When exactly one side is a ``-SNAPSHOT``
    and both agree on the text before their first ``-``, the non-SNAPSHOT
    (timestamped build) version wins.
    """
    if resolved == declared:
        return resolved
    resolved_snapshot = resolved.endswith(SNAPSHOT_SUFFIX)
    declared_snapshot = declared.endswith(SNAPSHOT_SUFFIX)
    if resolved_snapshot == declared_snapshot:
        return None
    if _release_prefix(resolved) != _release_prefix(declared):
        return None
    return declared if resolved_snapshot else resolved


def reconcile(
    resolved: Sequence[ResolvedArtifact],
    hierarchy: Sequence[HierarchyEntry],
    *,
    logger: StructuredLogger | None = None,
) -> list[ReconciledDependency]:
    """Merge both views one record per resolved artifact.

    Raises on any orphan or irreconcilable version; there is no partial result.
    """
    index = index_hierarchy(hierarchy)
    matched: set[JoinKey] = set()
    records: list[ReconciledDependency] = []
    for artifact in resolved:
        coordinate = artifact.coordinate
        entry = index.get(coordinate.key)
        if entry is None:
            raise UnjoinableDependency(
                "Resolved artifact has no matching hierarchy entry.",
                hint="The resolver's artifact list and dependency hierarchy are out of step.",
                context={
                    "side": "artifacts",
                    "orphan": str(coordinate),
                    "jar_name": artifact.jar_name,
                },
            )
        version = reconcile_versions(coordinate.version, entry.coordinate.version)
        if version is None:
            raise _conflict(
                coordinate.key,
                resolved_version=coordinate.version,
                declared_version=entry.coordinate.version,
            )
        if logger is not None and version != entry.coordinate.version:
            logger.log(
                operation="reconcile_version",
                phase="reconcile",
                component="reconciler",
                message="Kept precise build version over SNAPSHOT.",
                level="debug",
                extra={
                    "dependency": f"{coordinate.group}/{coordinate.artifact}",
                    "resolved": coordinate.version,
                    "declared": entry.coordinate.version,
                },
            )
        matched.add(coordinate.key)
        records.append(
            ReconciledDependency(
                coordinate=coordinate.with_version(version),
                jar_name=artifact.jar_name,
                sha1=artifact.sha1,
                scope=entry.scope,
                exclusions=entry.exclusions,
            )
        )

    for key, entry in index.items():
        if key not in matched:
            raise UnjoinableDependency(
                "Hierarchy entry has no matching resolved artifact.",
                hint="The resolver's artifact list and dependency hierarchy are out of step.",
                context={"side": "hierarchy", "orphan": str(entry.coordinate)},
            )

    if logger is not None:
        logger.log(
            operation="reconcile",
            phase="reconcile",
            component="reconciler",
            message="Reconciled dependency views.",
            extra={
                "resolved": len(resolved),
                "hierarchy": len(hierarchy),
                "unique_hierarchy": len(index),
                "records": len(records),
            },
        )
    return records


def index_hierarchy(hierarchy: Sequence[HierarchyEntry]) -> dict[JoinKey, HierarchyEntry]:
    """Collapse repeated hierarchy occurrences by join key, first one wins."""
    index: dict[JoinKey, HierarchyEntry] = {}
    for entry in hierarchy:
        key = entry.coordinate.key
        existing = index.get(key)
        if existing is None:
            index[key] = entry
            continue
        if reconcile_versions(existing.coordinate.version, entry.coordinate.version) is None:
            raise _conflict(
                key,
                resolved_version=existing.coordinate.version,
                declared_version=entry.coordinate.version,
            )
    return index


def _conflict(key: JoinKey, *, resolved_version: str, declared_version: str) -> VersionConflict:
    group, artifact = key
    return VersionConflict(
        "Dependency resolves to two different versions.",
        hint=(
            "Two configuration layers select different versions; pin the dependency "
            "explicitly to one version."
        ),
        context={
            "dependency": f"{group}/{artifact}",
            "resolved": resolved_version,
            "declared": declared_version,
        },
    )


def _release_prefix(version: str) -> str:
    return version.split("-", 1)[0]


__all__ = ["SNAPSHOT_SUFFIX", "index_hierarchy", "reconcile", "reconcile_versions"]
