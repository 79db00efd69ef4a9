"""Identify resolved artifact files by their local repository layout."""

from __future__ import annotations

import hashlib
import os
from collections.abc import Iterable
from pathlib import Path

from deplock.errors import IOFailure, PathNotRelocatable
from deplock.models import Coordinate, ResolvedArtifact

CHUNK_SIZE = 64 * 1024

# group segment(s), artifact, version, filename
MIN_RELATIVE_SEGMENTS = 4


def identify(file: str | Path, local_repo: str | Path) -> ResolvedArtifact:
    """Derive coordinate and filename from *file*'s path under *local_repo*.

    The layout is ``group/segments/artifact/version/filename``; the content
    hash is a SHA-1 of the file bytes.
    """
    file_parts = _segments(file)
    root_parts = _segments(local_repo)
    if len(file_parts) <= len(root_parts) or file_parts[: len(root_parts)] != root_parts:
        raise PathNotRelocatable(
            "Resolved artifact does not live under the local repository.",
            hint="Artifacts staged outside the repository layout cannot be locked.",
            context={"path": str(file), "local_repo": str(local_repo)},
        )

    relative = file_parts[len(root_parts) :]
    if len(relative) < MIN_RELATIVE_SEGMENTS:
        raise PathNotRelocatable(
            "Resolved artifact path is too shallow for group/artifact/version/file.",
            hint="Check that the local repository root is configured correctly.",
            context={"path": str(file), "local_repo": str(local_repo)},
        )

    rev = relative[::-1]
    coordinate = Coordinate(
        group=".".join(reversed(rev[3:])),
        artifact=rev[2],
        version=rev[1],
    )
    return ResolvedArtifact(coordinate=coordinate, jar_name=rev[0], sha1=sha1_file(file))


def identify_all(
    files: Iterable[str | Path],
    local_repo: str | Path,
) -> list[ResolvedArtifact]:
    return [identify(file, local_repo) for file in files]


def sha1_file(path: str | Path) -> str:
    """Stream *path* through SHA-1 and return the hex digest."""
    digest = hashlib.sha1(usedforsecurity=False)
    try:
        with open(path, "rb") as handle:
            for chunk in iter(lambda: handle.read(CHUNK_SIZE), b""):
                digest.update(chunk)
    except OSError as exc:
        raise IOFailure(
            "Unable to hash artifact file.",
            path=str(path),
            context={"error": str(exc)},
        ) from exc
    return digest.hexdigest()


def _segments(path: str | Path) -> tuple[str, ...]:
    normalized = Path(os.path.normpath(Path(path).absolute()))
    return normalized.parts
