"""Typed error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum


class ErrorCode(StrEnum):
    """Stable error identifiers used across the CLI and library surfaces."""

    VALIDATION = "E_VALIDATION"
    PATH_NOT_RELOCATABLE = "E_PATH_NOT_RELOCATABLE"
    UNJOINABLE = "E_UNJOINABLE"
    VERSION_CONFLICT = "E_VERSION_CONFLICT"
    LOCKFILE = "E_LOCKFILE"
    LOCKFILE_MISMATCH = "E_LOCKFILE_MISMATCH"
    IO = "E_IO"
    RESOLVER = "E_RESOLVER"
    PACKAGING = "E_PACKAGING"


class DeplockError(Exception):
    """Base error class that carries code, optional hint, and context."""

    code: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        if self.context:
            for k, v in self.context.items():
                if v:
                    parts.append(f"  {k}: {v}")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": str(self),
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class ValidationError(DeplockError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.VALIDATION, hint=hint, context=context)


class PathNotRelocatable(DeplockError):
    """A resolved artifact does not sit in the local repository layout."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.PATH_NOT_RELOCATABLE,
            hint=hint,
            context=context,
        )


class UnjoinableDependency(DeplockError):
    """One side of the join has a dependency the other side lacks."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.UNJOINABLE, hint=hint, context=context)


class VersionConflict(DeplockError):
    """Both sources name the same dependency with irreconcilable versions."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.VERSION_CONFLICT, hint=hint, context=context)


class LockfileError(DeplockError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.LOCKFILE, hint=hint, context=context)


class LockfileMismatch(DeplockError):
    """Computed entries diverge from the persisted lockfile at ``line``."""

    line: int
    computed: tuple[str, ...] | None
    persisted: tuple[str, ...] | None

    def __init__(
        self,
        message: str,
        *,
        line: int,
        computed: tuple[str, ...] | None,
        persisted: tuple[str, ...] | None,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        merged = {
            "line": str(line),
            "computed": _render_tuple(computed),
            "persisted": _render_tuple(persisted),
        }
        merged.update(context or {})
        super().__init__(
            message,
            code=ErrorCode.LOCKFILE_MISMATCH,
            hint=hint,
            context=merged,
        )
        self.line = line
        self.computed = computed
        self.persisted = persisted


class IOFailure(DeplockError):
    """Reading, writing or hashing a file failed."""

    path: str

    def __init__(
        self,
        message: str,
        *,
        path: str,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        merged = {"path": path}
        merged.update(context or {})
        super().__init__(message, code=ErrorCode.IO, hint=hint, context=merged)
        self.path = path


class ResolverError(DeplockError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.RESOLVER, hint=hint, context=context)


class PackagingError(DeplockError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.PACKAGING, hint=hint, context=context)


def _render_tuple(values: tuple[str, ...] | None) -> str:
    if values is None:
        return "<no entry>"
    return "[" + ", ".join(f'"{value}"' for value in values) + "]"


__all__ = [
    "DeplockError",
    "ErrorCode",
    "IOFailure",
    "LockfileError",
    "LockfileMismatch",
    "PackagingError",
    "PathNotRelocatable",
    "ResolverError",
    "UnjoinableDependency",
    "ValidationError",
    "VersionConflict",
]
