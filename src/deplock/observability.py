"""Structured logging and observability helpers."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from deplock.errors import IOFailure


@dataclass(slots=True)
class StructuredLogger:
    profile: str | None = None
    records: list[dict[str, Any]] = field(default_factory=list)

    def log(
        self,
        *,
        operation: str,
        phase: str | None,
        component: str | None,
        message: str,
        level: str = "info",
        profile: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        record: dict[str, Any] = {
            "level": level,
            "operation": operation,
            "profile": profile if profile is not None else self.profile,
            "phase": phase,
            "component": component,
            "message": message,
        }
        if extra is not None:
            record["extra"] = extra
        self.records.append(record)

    def records_for_phase(self, phase: str) -> list[dict[str, Any]]:
        return [record for record in self.records if record.get("phase") == phase]

    def to_json_lines(self, path: str | Path) -> Path:
        output_path = Path(path)
        lines = [json.dumps(record, sort_keys=True) for record in self.records]
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        except OSError as exc:
            raise IOFailure(
                "Unable to write structured log.",
                path=str(output_path),
                context={"error": str(exc)},
            ) from exc
        return output_path
