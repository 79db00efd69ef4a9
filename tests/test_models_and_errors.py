from deplock.errors import (
    ErrorCode,
    IOFailure,
    LockfileError,
    LockfileMismatch,
    PackagingError,
    PathNotRelocatable,
    ResolverError,
    UnjoinableDependency,
    ValidationError,
    VersionConflict,
)
from deplock.models import Coordinate, Exclusion


def test_error_codes_are_stable_and_machine_readable() -> None:
    errors = [
        ValidationError("bad input"),
        PathNotRelocatable("outside repo"),
        UnjoinableDependency("orphan"),
        VersionConflict("two versions"),
        LockfileError("missing"),
        LockfileMismatch("drift", line=1, computed=None, persisted=None),
        IOFailure("unreadable", path="/tmp/x"),
        ResolverError("mvn failed"),
        PackagingError("package failed"),
    ]
    assert [error.code for error in errors] == [
        ErrorCode.VALIDATION.value,
        ErrorCode.PATH_NOT_RELOCATABLE.value,
        ErrorCode.UNJOINABLE.value,
        ErrorCode.VERSION_CONFLICT.value,
        ErrorCode.LOCKFILE.value,
        ErrorCode.LOCKFILE_MISMATCH.value,
        ErrorCode.IO.value,
        ErrorCode.RESOLVER.value,
        ErrorCode.PACKAGING.value,
    ]


def test_error_message_includes_hint_and_context() -> None:
    error = VersionConflict(
        "Dependency resolves to two different versions.",
        hint="Pin it.",
        context={"resolved": "2.0.0", "declared": "3.0.0", "empty": ""},
    )

    rendered = str(error)

    assert rendered.splitlines() == [
        "Dependency resolves to two different versions.",
        "Hint: Pin it.",
        "  resolved: 2.0.0",
        "  declared: 3.0.0",
    ]
    assert error.to_dict()["code"] == "E_VERSION_CONFLICT"
    assert error.to_dict()["hint"] == "Pin it."


def test_lockfile_mismatch_renders_both_tuples() -> None:
    error = LockfileMismatch(
        "drift",
        line=7,
        computed=("org", "a", "1", "a-1.jar", "1" * 40),
        persisted=("org", "a", "1", "a-1.jar", "2" * 40),
    )

    assert error.context["line"] == "7"
    assert error.context["computed"] == f'["org", "a", "1", "a-1.jar", "{"1" * 40}"]'
    assert error.persisted == ("org", "a", "1", "a-1.jar", "2" * 40)


def test_coordinate_join_key_ignores_version() -> None:
    snapshot = Coordinate(group="com.example", artifact="lib", version="1.0-SNAPSHOT")
    release = snapshot.with_version("1.0-20230101.120000-1")

    assert snapshot.key == release.key == ("com.example", "lib")
    assert snapshot != release
    assert str(release) == "com.example/lib 1.0-20230101.120000-1"
    assert str(Exclusion(group="org.clojure", artifact="clojure")) == "org.clojure/clojure"
