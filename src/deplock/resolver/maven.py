"""Resolver backed by the Maven dependency plugin.

Artifacts come from ``dependency:build-classpath`` and the hierarchy from
``dependency:tree``; both goals write to an output file that is parsed here.
The tree uses three columns of indentation per level::

    com.example:app:jar:1.0
    +- org.clojure:clojure:jar:1.11.1:compile
    |  \\- org.clojure:spec.alpha:jar:0.3.218:compile
    \\- junit:junit:jar:4.13.2:test
"""

from __future__ import annotations

import os
import shutil
import subprocess
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from deplock.errors import ResolverError
from deplock.hierarchy import DependencyNode, RawEntry
from deplock.models import ResolverScope

TREE_INDENT = 3
TREE_PREFIX_CHARS = " |+\\-"
DEFAULT_SCOPE = "compile"


@dataclass(slots=True)
class MavenResolver:
    name: str = "maven"
    project_dir: Path = field(default_factory=Path.cwd)
    executable: str = "mvn"
    pom: Path | None = None
    mvn_args: list[str] = field(default_factory=list)

    def resolve_artifacts(self, scope: ResolverScope) -> list[Path]:
        with tempfile.TemporaryDirectory(prefix="deplock-mvn-") as temp_dir:
            output = Path(temp_dir) / "classpath.txt"
            self._run(
                "dependency:build-classpath",
                f"-Dmdep.outputFile={output}",
                f"-Dmdep.includeScope={scope}",
            )
            return parse_classpath(self._read_output(output))

    def dependency_hierarchy(self, scope: ResolverScope) -> tuple[DependencyNode, ...]:
        with tempfile.TemporaryDirectory(prefix="deplock-mvn-") as temp_dir:
            output = Path(temp_dir) / "tree.txt"
            self._run(
                "dependency:tree",
                f"-DoutputFile={output}",
                "-DoutputType=text",
                f"-Dscope={scope}",
            )
            return parse_tree(self._read_output(output))

    def _run(self, goal: str, *properties: str) -> str:
        executable = shutil.which(self.executable) or self.executable
        cmd = [executable, "-q", "-B"]
        if self.pom is not None:
            cmd.extend(["-f", str(self.pom)])
        cmd.extend([*self.mvn_args, goal, *properties])
        try:
            result = subprocess.run(
                cmd,
                cwd=str(self.project_dir),
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise ResolverError(
                "Unable to start Maven.",
                hint="Install Maven or point --mvn at the executable.",
                context={"resolver": self.name, "command": " ".join(cmd), "error": str(exc)},
            ) from exc
        if result.returncode != 0:
            raise ResolverError(
                f"Maven goal {goal} failed.",
                hint="Run the goal by hand to see the full build output.",
                context={
                    "resolver": self.name,
                    "returncode": str(result.returncode),
                    "stderr": (result.stderr or result.stdout or "")[-2000:],
                    "command": " ".join(cmd),
                },
            )
        return result.stdout

    def _read_output(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ResolverError(
                "Maven did not produce the expected output file.",
                context={"resolver": self.name, "path": str(path)},
            ) from exc


def parse_classpath(raw: str) -> list[Path]:
    return [Path(item) for item in raw.strip().split(os.pathsep) if item]


@dataclass(slots=True)
class _PendingNode:
    entry: RawEntry
    children: list[_PendingNode] = field(default_factory=list)

    def freeze(self) -> DependencyNode:
        return DependencyNode(
            entry=self.entry,
            children=tuple(child.freeze() for child in self.children),
        )


def parse_tree(raw: str) -> tuple[DependencyNode, ...]:
    """Parse ``dependency:tree`` text output; the project line is dropped."""
    roots: list[_PendingNode] = []
    parents: list[_PendingNode] = []
    for line in raw.splitlines():
        if not line.strip():
            continue
        stripped = line.lstrip(TREE_PREFIX_CHARS)
        offset = len(line) - len(stripped)
        depth = offset // TREE_INDENT
        if depth == 0:
            # project coordinate
            continue
        if stripped.startswith("("):
            # verbose output: omitted duplicate or conflict loser
            continue
        node = _PendingNode(entry=parse_tree_coordinate(stripped))
        del parents[depth - 1 :]
        if len(parents) != depth - 1:
            raise ResolverError(
                "Malformed dependency tree indentation.",
                context={"line": line},
            )
        if parents:
            parents[-1].children.append(node)
        else:
            roots.append(node)
        parents.append(node)
    return tuple(node.freeze() for node in roots)


def parse_tree_coordinate(text: str) -> RawEntry:
    """``group:artifact:type[:classifier]:version:scope`` to a raw entry."""
    token = text.split(" ", 1)[0]
    parts = token.split(":")
    if len(parts) == 5:
        group, artifact, _packaging, version, scope = parts
        classifier = None
    elif len(parts) == 6:
        group, artifact, _packaging, classifier, version, scope = parts
    else:
        raise ResolverError(
            "Unrecognised dependency coordinate in tree output.",
            context={"coordinate": token},
        )
    entry: RawEntry = (f"{group}/{artifact}", version)
    if scope != DEFAULT_SCOPE:
        entry += ("scope", scope)
    if classifier:
        entry += ("classifier", classifier)
    return entry
