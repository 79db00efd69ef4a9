"""Lockfile parser and serializer.

Each line is a compact JSON array of the five entry fields, in the canonical
entry order. Lines are written by :func:`format_entry` and read back by
:func:`parse_line`, which round-trip byte for byte.
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterable
from pathlib import Path

from deplock.errors import IOFailure, LockfileError
from deplock.lockfile.model import LockEntry

ENTRY_FIELDS = 5

NumberedEntry = tuple[int, LockEntry]


def format_entry(entry: LockEntry) -> str:
    return json.dumps(list(entry.as_tuple()), ensure_ascii=False, separators=(",", ":"))


def serialize_lockfile(entries: Iterable[LockEntry]) -> str:
    return "".join(format_entry(entry) + "\n" for entry in entries)


def parse_line(line: str, *, line_number: int = 1) -> LockEntry:
    try:
        payload = json.loads(line)
    except json.JSONDecodeError as exc:
        raise LockfileError(
            "Invalid lockfile line.",
            hint=str(exc),
            context={"line": str(line_number)},
        ) from exc
    if (
        not isinstance(payload, list)
        or len(payload) != ENTRY_FIELDS
        or not all(isinstance(item, str) for item in payload)
    ):
        raise LockfileError(
            "Lockfile line must be an array of five strings.",
            context={"line": str(line_number), "content": line},
        )
    group, artifact, version, jar_name, sha1 = payload
    return LockEntry(
        group=group,
        artifact=artifact,
        version=version,
        jar_name=jar_name,
        sha1=sha1,
    )


def parse_numbered_lockfile(raw: str) -> list[NumberedEntry]:
    """Parse entries paired with their 1-based physical line; blank lines are skipped."""
    return [
        (number, parse_line(line, line_number=number))
        for number, line in enumerate(raw.splitlines(), start=1)
        if line.strip()
    ]


def parse_lockfile(raw: str) -> list[LockEntry]:
    return [entry for _, entry in parse_numbered_lockfile(raw)]


def read_lockfile(path: str | Path) -> list[LockEntry]:
    return [entry for _, entry in read_numbered_lockfile(path)]


def read_numbered_lockfile(path: str | Path) -> list[NumberedEntry]:
    lock_path = Path(path)
    try:
        raw = lock_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise LockfileError(
            "Lockfile does not exist.",
            hint="Run `deplock freshen` and commit the generated lockfile.",
            context={"path": str(lock_path)},
        ) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise IOFailure(
            "Unable to read lockfile.",
            path=str(lock_path),
            context={"error": str(exc)},
        ) from exc
    return parse_numbered_lockfile(raw)


def write_lockfile(entries: Iterable[LockEntry], path: str | Path) -> Path:
    """Write *entries* atomically: a sibling temp file is renamed into place."""
    lock_path = Path(path)
    temp_path = lock_path.with_name(f".{lock_path.name}.tmp")
    try:
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        temp_path.write_text(serialize_lockfile(entries), encoding="utf-8", newline="\n")
        os.replace(temp_path, lock_path)
    except OSError as exc:
        temp_path.unlink(missing_ok=True)
        raise IOFailure(
            "Unable to write lockfile.",
            path=str(lock_path),
            context={"error": str(exc)},
        ) from exc
    return lock_path
