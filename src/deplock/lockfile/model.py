"""Lockfile typed model and the canonical entry ordering."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from deplock.models import JoinKey, ReconciledDependency

LockSortKey = tuple[str, str, str, str, str]


@dataclass(frozen=True, slots=True)
class LockEntry:
    """One persisted lockfile line: ``[group, artifact, version, jar_name, sha1]``.

    Scope and exclusions are not persisted; the lockfile pins artifacts.
    """

    group: str
    artifact: str
    version: str
    jar_name: str
    sha1: str

    @property
    def key(self) -> JoinKey:
        return (self.group, self.artifact)

    def as_tuple(self) -> LockSortKey:
        return (self.group, self.artifact, self.version, self.jar_name, self.sha1)


def lock_entry(record: ReconciledDependency) -> LockEntry:
    coordinate = record.coordinate
    return LockEntry(
        group=coordinate.group,
        artifact=coordinate.artifact,
        version=coordinate.version,
        jar_name=record.jar_name,
        sha1=record.sha1,
    )


def lock_sort_key(entry: LockEntry) -> LockSortKey:
    """The one ordering used for writing and comparing lockfiles.

    Fields compare in order group, artifact, version, jar_name, sha1 by code
    point, so the result does not depend on locale or platform.
    """
    return entry.as_tuple()


def sort_entries(entries: Iterable[LockEntry]) -> list[LockEntry]:
    return sorted(entries, key=lock_sort_key)


def serialize(records: Iterable[ReconciledDependency]) -> list[LockEntry]:
    """Project reconciled records onto lock entries in canonical order."""
    return sort_entries(lock_entry(record) for record in records)


__all__ = ["LockEntry", "LockSortKey", "lock_entry", "lock_sort_key", "serialize", "sort_entries"]
