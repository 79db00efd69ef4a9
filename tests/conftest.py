"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from deplock.config import LockConfig
from deplock.engine import DependencyLock
from deplock.resolver import RecordedResolver

InstallJar = Callable[..., Path]

SNAPSHOT_BUILD = "0.2.0-20230101.120000-3"


@dataclass(slots=True)
class SampleProject:
    project_dir: Path
    local_repo: Path
    recording: Path
    jars: dict[str, Path] = field(default_factory=dict)

    def lock(self, profile: str = "test") -> DependencyLock:
        config = LockConfig(
            project_dir=self.project_dir,
            profile=profile,  # type: ignore[arg-type]
            local_repo=self.local_repo,
        )
        return DependencyLock(config=config, resolver=RecordedResolver(path=self.recording))

    @property
    def lockfile(self) -> Path:
        return self.project_dir / "dependencies.lock"


@pytest.fixture
def local_repo(tmp_path: Path) -> Path:
    repo = tmp_path / "m2" / "repository"
    repo.mkdir(parents=True)
    return repo


@pytest.fixture
def install_jar(local_repo: Path) -> InstallJar:
    """Create ``group/path/artifact/version/jar`` under the local repository."""

    def _install(
        group: str,
        artifact: str,
        version: str,
        *,
        jar_name: str | None = None,
        content: bytes | None = None,
    ) -> Path:
        directory = local_repo.joinpath(*group.split("."), artifact, version)
        directory.mkdir(parents=True, exist_ok=True)
        jar = directory / (jar_name or f"{artifact}-{version}.jar")
        default = f"{group}:{artifact}:{version}".encode()
        jar.write_bytes(content if content is not None else default)
        return jar

    return _install


@pytest.fixture
def sample_project(tmp_path: Path, local_repo: Path, install_jar: InstallJar) -> SampleProject:
    project_dir = tmp_path / "project"
    project_dir.mkdir()
    jars = {
        "clojure": install_jar("org.clojure", "clojure", "1.8.0"),
        "ring-core": install_jar("ring", "ring-core", "1.6.3"),
        "commons-io": install_jar("commons-io", "commons-io", "2.5"),
        "ring-codec": install_jar("ring", "ring-codec", "1.1.0"),
        "commons-codec": install_jar("commons-codec", "commons-codec", "1.10"),
        "snap-lib": install_jar("com.example", "snap-lib", SNAPSHOT_BUILD),
        "midje": install_jar("midje", "midje", "1.9.1"),
    }
    runtime_hierarchy = [
        _node(["org.clojure/clojure", "1.8.0"]),
        _node(
            ["ring/ring-core", "1.6.3"],
            _node(["commons-io/commons-io", "2.5"]),
            _node(
                ["ring/ring-codec", "1.1.0"],
                _node(["commons-codec/commons-codec", "1.10"]),
            ),
        ),
        _node(["com.example/snap-lib", "0.2.0-SNAPSHOT"]),
    ]
    test_hierarchy = [
        *runtime_hierarchy,
        _node(
            ["midje", "1.9.1", ":scope", "test", ":exclusions", [["org.clojure/clojure"]]],
            _node(["commons-io/commons-io", "2.5", ":scope", "test"]),
        ),
    ]
    runtime_names = [
        "clojure",
        "ring-core",
        "commons-io",
        "ring-codec",
        "commons-codec",
        "snap-lib",
    ]
    recording = tmp_path / "resolution.json"
    write_recording(
        recording,
        {
            "runtime": {
                "artifacts": [str(jars[name]) for name in runtime_names],
                "hierarchy": runtime_hierarchy,
            },
            "test": {
                "artifacts": [str(path) for path in jars.values()],
                "hierarchy": test_hierarchy,
            },
        },
    )
    return SampleProject(
        project_dir=project_dir,
        local_repo=local_repo,
        recording=recording,
        jars=jars,
    )


def write_recording(path: Path, scopes: dict[str, Any]) -> Path:
    path.write_text(json.dumps({"scopes": scopes}, indent=2), encoding="utf-8")
    return path


def _node(dependency: list[Any], *children: dict[str, Any]) -> dict[str, Any]:
    return {"dependency": dependency, "dependencies": list(children)}
