"""Dependency hierarchy tree, flattening, and raw entry parsing.

The resolver reports the transitive graph as nested structure whose keys are
short raw entries of the form ``(descriptor, version, key, value, ...)``. The
descriptor is ``"group/artifact"`` or a bare ``"name"`` (group and artifact
both ``name``). Recognised keyword pairs are ``scope`` and ``exclusions``;
keys may carry a leading ``:``.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from deplock.errors import ValidationError
from deplock.models import Coordinate, Exclusion, HierarchyEntry

RawEntry = tuple[Any, ...]


@dataclass(frozen=True, slots=True)
class DependencyNode:
    entry: RawEntry
    children: tuple[DependencyNode, ...] = ()


def graph_from_mapping(graph: Mapping[RawEntry, Any] | None) -> tuple[DependencyNode, ...]:
    """Convert a nested ``{raw_entry: sub_graph_or_None}`` mapping into nodes."""
    if graph is None:
        return ()
    return tuple(
        DependencyNode(entry=tuple(raw), children=graph_from_mapping(sub_graph))
        for raw, sub_graph in graph.items()
    )


def flatten(nodes: Sequence[DependencyNode]) -> list[RawEntry]:
    """Pre-order walk: every parent precedes its transitive children.

    Entries repeated across branches are kept.
    """
    return [node.entry for node in walk(nodes)]


def walk(nodes: Sequence[DependencyNode]) -> Iterator[DependencyNode]:
    stack = list(reversed(nodes))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def parse_entry(raw: RawEntry) -> HierarchyEntry:
    if len(raw) < 2:
        raise ValidationError(
            "Dependency entry needs at least a descriptor and a version.",
            context={"entry": repr(raw)},
        )
    descriptor, version, *kwargs = raw
    if not isinstance(version, str) or not version:
        raise ValidationError(
            "Dependency entry version must be a non-empty string.",
            context={"entry": repr(raw)},
        )
    if len(kwargs) % 2:
        raise ValidationError(
            "Dependency entry keyword items must come in key/value pairs.",
            context={"entry": repr(raw)},
        )
    options = {_keyword(key): value for key, value in zip(kwargs[::2], kwargs[1::2])}
    group, artifact = split_descriptor(descriptor)
    scope = options.get("scope")
    return HierarchyEntry(
        coordinate=Coordinate(group=group, artifact=artifact, version=version),
        scope=str(scope) if scope is not None else None,
        exclusions=parse_exclusions(options.get("exclusions")),
    )


def parse_hierarchy(nodes: Sequence[DependencyNode]) -> list[HierarchyEntry]:
    return [parse_entry(raw) for raw in flatten(nodes)]


def split_descriptor(descriptor: Any) -> tuple[str, str]:
    """Split ``"group/artifact"``; a bare name is both group and artifact."""
    text = str(descriptor) if descriptor is not None else ""
    namespace, sep, name = text.rpartition("/")
    if not name or (sep and not namespace):
        raise ValidationError(
            "Invalid dependency descriptor.",
            hint="Use `group/artifact` or a single `name`.",
            context={"descriptor": text},
        )
    if not sep:
        return name, name
    return namespace, name


def parse_exclusions(raw: Iterable[Any] | None) -> frozenset[Exclusion]:
    if raw is None:
        return frozenset()
    exclusions: set[Exclusion] = set()
    for item in raw:
        # either a bare descriptor or a raw entry led by one
        descriptor = item[0] if isinstance(item, (list, tuple)) and item else item
        group, artifact = split_descriptor(descriptor)
        exclusions.add(Exclusion(group=group, artifact=artifact))
    return frozenset(exclusions)


def _keyword(key: Any) -> str:
    return str(key).lstrip(":")


__all__ = [
    "DependencyNode",
    "RawEntry",
    "flatten",
    "graph_from_mapping",
    "parse_entry",
    "parse_exclusions",
    "parse_hierarchy",
    "split_descriptor",
    "walk",
]
