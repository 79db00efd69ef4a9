"""One resolve, reconcile, serialize pass and the freshen/echo/verify modes."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path

from deplock.artifacts import identify_all
from deplock.config import LockConfig
from deplock.errors import PackagingError
from deplock.hierarchy import parse_hierarchy
from deplock.lockfile import (
    LockEntry,
    VerificationReport,
    VerificationResult,
    serialize,
    serialize_lockfile,
    verify,
    write_lockfile,
)
from deplock.models import JoinKey
from deplock.observability import StructuredLogger
from deplock.reconcile import reconcile
from deplock.resolver import DependencyResolver

DEFAULT_PACKAGE_COMMAND = ("mvn", "-q", "package")


@dataclass(slots=True)
class DependencyLock:
    config: LockConfig
    resolver: DependencyResolver
    logger: StructuredLogger = field(default_factory=StructuredLogger)

    def __post_init__(self) -> None:
        if self.logger.profile is None:
            self.logger.profile = self.config.profile

    def compute_entries(self) -> list[LockEntry]:
        """Resolve both views, reconcile them, and return canonical entries."""
        scope = self.config.resolver_scope
        files = self.resolver.resolve_artifacts(scope)
        nodes = self.resolver.dependency_hierarchy(scope)
        self._log(
            "resolve",
            "resolve",
            "Resolved dependency views.",
            extra={"resolver": self.resolver.name, "scope": scope, "artifacts": len(files)},
        )

        resolved = identify_all(files, self.config.local_repo)
        self._log(
            "identify",
            "identify",
            "Identified resolved artifacts.",
            extra={"local_repo": str(self.config.local_repo), "artifacts": len(resolved)},
        )
        hierarchy = parse_hierarchy(nodes)
        self._log(
            "hierarchy",
            "hierarchy",
            "Flattened dependency hierarchy.",
            extra={"entries": len(hierarchy)},
        )

        records = reconcile(resolved, hierarchy, logger=self.logger)
        entries = serialize(records)
        self._log(
            "serialize",
            "serialize",
            "Serialized lock entries.",
            extra={"entries": len(entries)},
        )
        return entries

    def freshen(self) -> Path:
        entries = self.compute_entries()
        lock_path = write_lockfile(entries, self.config.lockfile_path)
        self._log("freshen", "write", "Wrote lockfile.", extra={"path": str(lock_path)})
        return lock_path

    def echo(self) -> str:
        return serialize_lockfile(self.compute_entries())

    def verify(self) -> VerificationResult:
        return self._verify(self.compute_entries())

    def verify_packaged(self) -> VerificationResult:
        """Check the packaged graph against its own entries in the lockfile.

        The lockfile normally pins the wider ``test`` graph, so persisted
        entries outside the packaged graph are not compared.
        """
        packaged = (
            self
            if self.config.profile == "packaged"
            else DependencyLock(
                config=replace(self.config, profile="packaged"),
                resolver=self.resolver,
                logger=self.logger,
            )
        )
        entries = packaged.compute_entries()
        return packaged._verify(entries, only={entry.key for entry in entries})

    def _verify(
        self,
        entries: list[LockEntry],
        *,
        only: set[JoinKey] | None = None,
    ) -> VerificationResult:
        result = verify(entries, self.config.lockfile_path, only=only)
        extra: dict[str, object] = {
            "path": str(self.config.lockfile_path),
            "computed": result.computed_count,
            "persisted": result.persisted_count,
            "subset": only is not None,
        }
        if result.mismatch is not None:
            extra["line"] = result.mismatch.line
        self._log(
            "verify",
            "verify",
            "Lockfile matches." if result.ok else "Lockfile mismatch.",
            level="info" if result.ok else "error",
            extra=extra,
        )
        return result

    def report(
        self,
        result: VerificationResult,
        *,
        profile: str | None = None,
    ) -> VerificationReport:
        return VerificationReport(
            profile=profile or self.config.profile,
            lockfile=str(self.config.lockfile_path),
            result=result,
        )

    def package(self, command: Sequence[str] = DEFAULT_PACKAGE_COMMAND) -> VerificationResult:
        """Verify the packaged graph, then run *command* if it matches."""
        result = self.verify_packaged()
        if not result.ok:
            return result

        argv = list(command)
        try:
            completed = subprocess.run(
                argv,
                cwd=str(self.config.project_dir),
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise PackagingError(
                "Unable to start packaging command.",
                context={"command": " ".join(argv), "error": str(exc)},
            ) from exc
        if completed.returncode != 0:
            raise PackagingError(
                "Packaging command failed.",
                hint="Run the packaging command by hand to see the full output.",
                context={
                    "command": " ".join(argv),
                    "returncode": str(completed.returncode),
                    "stderr": (completed.stderr or "")[-2000:],
                },
            )
        self._log(
            "package",
            "package",
            "Packaging command completed.",
            extra={"command": " ".join(argv)},
        )
        return result

    def _log(
        self,
        operation: str,
        phase: str,
        message: str,
        *,
        level: str = "info",
        extra: dict[str, object] | None = None,
    ) -> None:
        self.logger.log(
            operation=operation,
            phase=phase,
            component="engine",
            message=message,
            level=level,
            profile=self.config.profile,
            extra=extra,
        )
