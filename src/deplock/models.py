"""Core typed dataclasses for dependency coordinates and reconciled records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

ScopeProfile = Literal["test", "packaged"]
ResolverScope = Literal["test", "runtime"]

JoinKey = tuple[str, str]


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A Maven-style (group, artifact, version) triple."""

    group: str
    artifact: str
    version: str

    @property
    def key(self) -> JoinKey:
        return (self.group, self.artifact)

    def with_version(self, version: str) -> Coordinate:
        return Coordinate(group=self.group, artifact=self.artifact, version=version)

    def __str__(self) -> str:
        return f"{self.group}/{self.artifact} {self.version}"


@dataclass(frozen=True, slots=True, order=True)
class Exclusion:
    group: str
    artifact: str

    def __str__(self) -> str:
        return f"{self.group}/{self.artifact}"


@dataclass(frozen=True, slots=True)
class ResolvedArtifact:
    """An artifact file identified from its location in the local repository."""

    coordinate: Coordinate
    jar_name: str
    sha1: str


@dataclass(frozen=True, slots=True)
class HierarchyEntry:
    """A dependency as reported by the scope-annotated hierarchy."""

    coordinate: Coordinate
    scope: str | None = None
    exclusions: frozenset[Exclusion] = field(default_factory=frozenset)


@dataclass(frozen=True, slots=True)
class ReconciledDependency:
    coordinate: Coordinate
    jar_name: str
    sha1: str
    scope: str | None = None
    exclusions: frozenset[Exclusion] = field(default_factory=frozenset)


__all__ = [
    "Coordinate",
    "Exclusion",
    "HierarchyEntry",
    "JoinKey",
    "ReconciledDependency",
    "ResolvedArtifact",
    "ResolverScope",
    "ScopeProfile",
]
