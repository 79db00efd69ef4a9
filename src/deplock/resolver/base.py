"""Protocol for the external dependency resolver."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from deplock.hierarchy import DependencyNode
from deplock.models import ResolverScope


class DependencyResolver(Protocol):
    name: str

    def resolve_artifacts(self, scope: ResolverScope) -> list[Path]:
        """Return every artifact file included for *scope*."""

    def dependency_hierarchy(self, scope: ResolverScope) -> tuple[DependencyNode, ...]:
        """Return the scope/exclusion annotated transitive graph for *scope*."""
