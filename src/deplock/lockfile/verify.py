"""Compare computed entries with a persisted lockfile and export reports."""

from __future__ import annotations

import json
from collections.abc import Collection, Sequence
from dataclasses import dataclass
from itertools import zip_longest
from pathlib import Path

import cbor2

from deplock.errors import IOFailure, LockfileMismatch
from deplock.lockfile.io import read_numbered_lockfile
from deplock.lockfile.model import LockEntry, LockSortKey
from deplock.models import JoinKey


@dataclass(frozen=True, slots=True)
class Mismatch:
    """First divergence; ``None`` marks the side that ran out of entries."""

    line: int
    computed: LockEntry | None
    persisted: LockEntry | None

    @property
    def reason(self) -> str:
        if self.persisted is None:
            return "missing_persisted"
        if self.computed is None:
            return "unexpected_persisted"
        return "entry_mismatch"


@dataclass(frozen=True, slots=True)
class VerificationResult:
    ok: bool
    computed_count: int
    persisted_count: int
    mismatch: Mismatch | None = None

    def raise_for_mismatch(self, *, lockfile: str | Path | None = None) -> None:
        mismatch = self.mismatch
        if mismatch is None:
            return
        raise LockfileMismatch(
            "Resolved dependencies do not match the lockfile.",
            line=mismatch.line,
            computed=_as_tuple(mismatch.computed),
            persisted=_as_tuple(mismatch.persisted),
            hint="Run `deplock freshen` if the change is intended; otherwise investigate.",
            context={"lockfile": str(lockfile) if lockfile is not None else ""},
        )


def diff_entries(
    computed: Sequence[LockEntry],
    persisted: Sequence[LockEntry],
    *,
    line_numbers: Sequence[int] | None = None,
) -> Mismatch | None:
    """Position-by-position comparison; reports the first divergent line (1-based).

    *line_numbers* gives the physical line of each persisted entry. Without it
    the entries are taken to sit on consecutive lines.
    """
    for index, (ours, theirs) in enumerate(zip_longest(computed, persisted)):
        if ours != theirs:
            return Mismatch(
                line=_physical_line(index, line_numbers),
                computed=ours,
                persisted=theirs,
            )
    return None


def verify(
    computed: Sequence[LockEntry],
    lockfile: str | Path,
    *,
    only: Collection[JoinKey] | None = None,
) -> VerificationResult:
    """Compare *computed* with the lockfile.

    With *only*, persisted entries whose (group, artifact) is not in the set
    are left out of the comparison. Mismatches still report the physical
    line of the entry in the file.
    """
    numbered = read_numbered_lockfile(lockfile)
    if only is not None:
        numbered = [(number, entry) for number, entry in numbered if entry.key in only]
    persisted = [entry for _, entry in numbered]
    mismatch = diff_entries(
        computed,
        persisted,
        line_numbers=[number for number, _ in numbered],
    )
    return VerificationResult(
        ok=mismatch is None,
        computed_count=len(computed),
        persisted_count=len(persisted),
        mismatch=mismatch,
    )


@dataclass(frozen=True, slots=True)
class VerificationReport:
    profile: str
    lockfile: str
    result: VerificationResult
    schema_version: int = 1

    def to_json(self, path: str | Path | None = None) -> str:
        encoded = json.dumps(self._payload(), indent=2, sort_keys=True) + "\n"
        if path is not None:
            Path(path).write_text(encoded, encoding="utf-8")
        return encoded

    def to_cbor(self, path: str | Path | None = None) -> bytes:
        encoded = cbor2.dumps(self._payload(), canonical=True)
        if path is not None:
            Path(path).write_bytes(encoded)
        return encoded

    def write(self, path: str | Path) -> Path:
        """Write as CBOR for a ``.cbor`` suffix, JSON otherwise."""
        report_path = Path(path)
        try:
            report_path.parent.mkdir(parents=True, exist_ok=True)
            if report_path.suffix == ".cbor":
                self.to_cbor(report_path)
            else:
                self.to_json(report_path)
        except OSError as exc:
            raise IOFailure(
                "Unable to write verification report.",
                path=str(report_path),
                context={"error": str(exc)},
            ) from exc
        return report_path

    def _payload(self) -> dict[str, object]:
        mismatch = self.result.mismatch
        return {
            "schema_version": self.schema_version,
            "profile": self.profile,
            "lockfile": self.lockfile,
            "ok": self.result.ok,
            "computed_count": self.result.computed_count,
            "persisted_count": self.result.persisted_count,
            "mismatch": None
            if mismatch is None
            else {
                "line": mismatch.line,
                "reason": mismatch.reason,
                "computed": _as_list(mismatch.computed),
                "persisted": _as_list(mismatch.persisted),
            },
        }


def _as_tuple(entry: LockEntry | None) -> LockSortKey | None:
    return entry.as_tuple() if entry is not None else None


def _as_list(entry: LockEntry | None) -> list[str] | None:
    return list(entry.as_tuple()) if entry is not None else None


def _physical_line(index: int, line_numbers: Sequence[int] | None) -> int:
    if not line_numbers:
        return index + 1
    if index < len(line_numbers):
        return line_numbers[index]
    return line_numbers[-1] + index - len(line_numbers) + 1
