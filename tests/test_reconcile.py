import pytest

from deplock.errors import UnjoinableDependency, VersionConflict
from deplock.models import Coordinate, Exclusion, HierarchyEntry, ResolvedArtifact
from deplock.observability import StructuredLogger
from deplock.reconcile import index_hierarchy, reconcile, reconcile_versions


def test_equal_versions_are_kept() -> None:
    assert reconcile_versions("1.8.0", "1.8.0") == "1.8.0"


def test_snapshot_rule_prefers_timestamped_resolved_version() -> None:
    assert (
        reconcile_versions("1.2.0-20230101.120000-3", "1.2.0-SNAPSHOT")
        == "1.2.0-20230101.120000-3"
    )


def test_snapshot_rule_applies_when_hierarchy_has_the_precise_version() -> None:
    assert (
        reconcile_versions("1.2.0-SNAPSHOT", "1.2.0-20230101.120000-3")
        == "1.2.0-20230101.120000-3"
    )


@pytest.mark.parametrize(
    ("resolved", "declared"),
    [
        ("2.0.0", "3.0.0"),
        ("1.2.0-SNAPSHOT", "1.3.0-SNAPSHOT"),
        ("1.2.0-20230101.120000-3", "1.3.0-SNAPSHOT"),
        ("1.2.0-beta", "1.2.0-rc1"),
        ("1.2.0", "1.2.0-SNAPSHOT-extra"),
    ],
)
def test_irreconcilable_versions_have_no_winner(resolved: str, declared: str) -> None:
    assert reconcile_versions(resolved, declared) is None


def test_reconcile_merges_hash_from_artifacts_and_scope_from_hierarchy() -> None:
    exclusions = frozenset({Exclusion(group="org.clojure", artifact="clojure")})
    resolved = [_artifact("midje", "midje", "1.9.1", sha1="a" * 40)]
    hierarchy = [_entry("midje", "midje", "1.9.1", scope="test", exclusions=exclusions)]

    [record] = reconcile(resolved, hierarchy)

    assert record.coordinate == Coordinate(group="midje", artifact="midje", version="1.9.1")
    assert record.jar_name == "midje-1.9.1.jar"
    assert record.sha1 == "a" * 40
    assert record.scope == "test"
    assert record.exclusions == exclusions


def test_reconcile_outputs_snapshot_build_version() -> None:
    resolved = [_artifact("com.example", "lib", "1.2.0-20230101.120000-3")]
    hierarchy = [_entry("com.example", "lib", "1.2.0-SNAPSHOT")]

    [record] = reconcile(resolved, hierarchy)

    assert record.coordinate.version == "1.2.0-20230101.120000-3"


def test_reconcile_raises_version_conflict_naming_both_versions() -> None:
    resolved = [_artifact("org.example", "lib", "2.0.0")]
    hierarchy = [_entry("org.example", "lib", "3.0.0")]

    with pytest.raises(VersionConflict) as excinfo:
        reconcile(resolved, hierarchy)

    assert excinfo.value.context["resolved"] == "2.0.0"
    assert excinfo.value.context["declared"] == "3.0.0"
    assert "2.0.0" in str(excinfo.value)
    assert "3.0.0" in str(excinfo.value)


def test_reconcile_never_drops_entries() -> None:
    coordinates = [
        ("org.clojure", "clojure", "1.8.0"),
        ("ring", "ring-core", "1.6.3"),
        ("a", "b", "1"),
    ]
    resolved = [_artifact(*coordinate) for coordinate in coordinates]
    hierarchy = [_entry(*coordinate) for coordinate in reversed(coordinates)]

    records = reconcile(resolved, hierarchy)

    assert len(records) == len(resolved)
    assert [record.coordinate.key for record in records] == [
        (group, artifact) for group, artifact, _ in coordinates
    ]


def test_reconcile_names_orphan_artifact() -> None:
    resolved = [
        _artifact("org.clojure", "clojure", "1.8.0"),
        _artifact("org.orphan", "lost", "0.1"),
    ]
    hierarchy = [_entry("org.clojure", "clojure", "1.8.0")]

    with pytest.raises(UnjoinableDependency) as excinfo:
        reconcile(resolved, hierarchy)

    assert excinfo.value.context["orphan"] == "org.orphan/lost 0.1"
    assert excinfo.value.context["side"] == "artifacts"


def test_reconcile_names_orphan_hierarchy_entry() -> None:
    resolved = [_artifact("org.clojure", "clojure", "1.8.0")]
    hierarchy = [_entry("org.clojure", "clojure", "1.8.0"), _entry("org.orphan", "lost", "0.1")]

    with pytest.raises(UnjoinableDependency) as excinfo:
        reconcile(resolved, hierarchy)

    assert excinfo.value.context["orphan"] == "org.orphan/lost 0.1"
    assert excinfo.value.context["side"] == "hierarchy"


def test_repeated_hierarchy_occurrences_join_once_with_first_occurrence() -> None:
    resolved = [_artifact("commons-io", "commons-io", "2.5")]
    hierarchy = [
        _entry("commons-io", "commons-io", "2.5"),
        _entry("commons-io", "commons-io", "2.5", scope="test"),
    ]

    [record] = reconcile(resolved, hierarchy)

    assert record.scope is None


def test_repeated_hierarchy_occurrences_with_different_versions_conflict() -> None:
    hierarchy = [
        _entry("commons-io", "commons-io", "2.5"),
        _entry("commons-io", "commons-io", "2.6"),
    ]

    with pytest.raises(VersionConflict):
        index_hierarchy(hierarchy)


def test_reconcile_does_not_mutate_inputs() -> None:
    resolved = [_artifact("com.example", "lib", "1.2.0-20230101.120000-3")]
    hierarchy = [_entry("com.example", "lib", "1.2.0-SNAPSHOT")]
    resolved_before = list(resolved)
    hierarchy_before = list(hierarchy)

    reconcile(resolved, hierarchy)

    assert resolved == resolved_before
    assert hierarchy == hierarchy_before


def test_reconcile_logs_snapshot_precision_decisions() -> None:
    logger = StructuredLogger(profile="test")
    resolved = [_artifact("com.example", "lib", "1.2.0-20230101.120000-3")]
    hierarchy = [_entry("com.example", "lib", "1.2.0-SNAPSHOT")]

    reconcile(resolved, hierarchy, logger=logger)

    operations = [record["operation"] for record in logger.records_for_phase("reconcile")]
    assert operations == ["reconcile_version", "reconcile"]


def _artifact(group: str, artifact: str, version: str, *, sha1: str = "0" * 40) -> ResolvedArtifact:
    return ResolvedArtifact(
        coordinate=Coordinate(group=group, artifact=artifact, version=version),
        jar_name=f"{artifact}-{version}.jar",
        sha1=sha1,
    )


def _entry(
    group: str,
    artifact: str,
    version: str,
    *,
    scope: str | None = None,
    exclusions: frozenset[Exclusion] = frozenset(),
) -> HierarchyEntry:
    return HierarchyEntry(
        coordinate=Coordinate(group=group, artifact=artifact, version=version),
        scope=scope,
        exclusions=exclusions,
    )
