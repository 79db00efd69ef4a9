"""Resolver that replays a recorded resolution export.

Useful for tests, CI without a build tool, and build tools that can export
their resolution. The export is JSON::

    {
      "scopes": {
        "test": {
          "artifacts": ["org/clojure/clojure/1.8.0/clojure-1.8.0.jar"],
          "hierarchy": [
            {"dependency": ["org.clojure/clojure", "1.8.0"], "dependencies": []}
          ]
        }
      }
    }

Relative artifact paths resolve against the export file's directory.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from deplock.errors import IOFailure, ResolverError
from deplock.hierarchy import DependencyNode
from deplock.models import ResolverScope


@dataclass(slots=True)
class RecordedResolver:
    path: Path
    name: str = "recorded"

    def resolve_artifacts(self, scope: ResolverScope) -> list[Path]:
        artifacts = self._scope(scope).get("artifacts", [])
        if not isinstance(artifacts, list) or not all(isinstance(item, str) for item in artifacts):
            raise ResolverError(
                "Recorded `artifacts` must be a list of paths.",
                context={"resolver": self.name, "path": str(self.path), "scope": scope},
            )
        base = Path(self.path).parent
        return [base / item for item in artifacts]

    def dependency_hierarchy(self, scope: ResolverScope) -> tuple[DependencyNode, ...]:
        nodes = self._scope(scope).get("hierarchy", [])
        return self._nodes(nodes, scope=scope)

    def _scope(self, scope: ResolverScope) -> dict[str, Any]:
        payload = self._load()
        scopes = payload.get("scopes")
        if not isinstance(scopes, dict) or not isinstance(scopes.get(scope), dict):
            raise ResolverError(
                "Recorded resolution has no data for this scope.",
                hint="Record the resolution again with the requested scope profile.",
                context={"resolver": self.name, "path": str(self.path), "scope": scope},
            )
        return scopes[scope]

    def _load(self) -> dict[str, Any]:
        try:
            raw = Path(self.path).read_text(encoding="utf-8")
        except OSError as exc:
            raise IOFailure(
                "Unable to read recorded resolution.",
                path=str(self.path),
                context={"error": str(exc)},
            ) from exc
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ResolverError(
                "Recorded resolution is not valid JSON.",
                hint=str(exc),
                context={"resolver": self.name, "path": str(self.path)},
            ) from exc
        if not isinstance(payload, dict):
            raise ResolverError(
                "Recorded resolution has invalid structure.",
                context={"resolver": self.name, "path": str(self.path)},
            )
        return payload

    def _nodes(self, items: Any, *, scope: ResolverScope) -> tuple[DependencyNode, ...]:
        if items is None:
            return ()
        if not isinstance(items, list):
            raise ResolverError(
                "Recorded hierarchy must be a list of nodes.",
                context={"resolver": self.name, "path": str(self.path), "scope": scope},
            )
        nodes: list[DependencyNode] = []
        for item in items:
            if not isinstance(item, dict) or not isinstance(item.get("dependency"), list):
                raise ResolverError(
                    "Recorded hierarchy node needs a `dependency` list.",
                    context={"resolver": self.name, "node": json.dumps(item)},
                )
            nodes.append(
                DependencyNode(
                    entry=_freeze(item["dependency"]),
                    children=self._nodes(item.get("dependencies"), scope=scope),
                )
            )
        return tuple(nodes)


def _freeze(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(_freeze(item) for item in value)
    return value
