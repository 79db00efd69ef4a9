"""Command line entry point.

Usage:
    deplock              verify resolved dependencies against the lockfile
    deplock freshen      rewrite the lockfile from the current resolution
    deplock echo         print the canonical entries without writing
    deplock package      verify the packaged graph, then run the packaging command
"""

from __future__ import annotations

import argparse
import shlex
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import get_args

from deplock.config import DEFAULT_LOCKFILE, LockConfig, resolve_config
from deplock.engine import DEFAULT_PACKAGE_COMMAND, DependencyLock
from deplock.errors import DeplockError, LockfileMismatch, ValidationError
from deplock.lockfile import VerificationResult
from deplock.models import ScopeProfile
from deplock.observability import StructuredLogger
from deplock.resolver import DependencyResolver, MavenResolver, RecordedResolver

EXIT_OK = 0
EXIT_MISMATCH = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deplock",
        description="Check transitive dependencies against a lockfile for repeatable builds.",
    )
    parser.add_argument("--project-dir", type=Path, default=None, help="Project directory")
    parser.add_argument(
        "--lockfile",
        type=Path,
        default=None,
        help=f"Lockfile path, relative to the project directory (default: {DEFAULT_LOCKFILE})",
    )
    parser.add_argument(
        "--profile",
        choices=get_args(ScopeProfile),
        default=None,
        help="Dependency scope profile (default: test)",
    )
    parser.add_argument("--local-repo", type=Path, default=None, help="Local Maven repository root")
    parser.add_argument(
        "--resolver",
        choices=("maven", "recorded"),
        default=None,
        help="Dependency resolver (default: recorded when --recording is given, else maven)",
    )
    parser.add_argument("--recording", type=Path, default=None, help="Recorded resolution JSON")
    parser.add_argument("--mvn", default="mvn", help="Maven executable")
    parser.add_argument("--pom", type=Path, default=None, help="POM file passed to Maven with -f")
    parser.add_argument("--log-file", type=Path, default=None, help="Write structured logs here")
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Write a verification report (.json or .cbor)",
    )

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("verify", help="Compare resolved dependencies with the lockfile")
    sub.add_parser("freshen", help="Recompute and overwrite the lockfile")
    sub.add_parser("echo", help="Print the canonical lock entries")
    package_p = sub.add_parser("package", help="Verify packaged dependencies, then package")
    package_p.add_argument(
        "--command",
        dest="package_command",
        default=shlex.join(DEFAULT_PACKAGE_COMMAND),
        help="Packaging command to run after a successful verify",
    )
    return parser


def build_resolver(args: argparse.Namespace, config: LockConfig) -> DependencyResolver:
    kind = args.resolver or ("recorded" if args.recording is not None else "maven")
    if kind == "recorded":
        if args.recording is None:
            raise ValidationError(
                "The recorded resolver needs a recording file.",
                hint="Pass --recording PATH.",
            )
        return RecordedResolver(path=args.recording)
    return MavenResolver(project_dir=config.project_dir, executable=args.mvn, pom=args.pom)


def cmd_verify(lock: DependencyLock, args: argparse.Namespace) -> int:
    result = lock.verify()
    return _finish_verify(lock, args, result)


def cmd_freshen(lock: DependencyLock, args: argparse.Namespace) -> int:
    path = lock.freshen()
    print(f"Wrote {path}")
    return EXIT_OK


def cmd_echo(lock: DependencyLock, args: argparse.Namespace) -> int:
    sys.stdout.write(lock.echo())
    return EXIT_OK


def cmd_package(lock: DependencyLock, args: argparse.Namespace) -> int:
    result = lock.package(shlex.split(args.package_command))
    return _finish_verify(lock, args, result, profile="packaged")


COMMANDS = {
    "verify": cmd_verify,
    "freshen": cmd_freshen,
    "echo": cmd_echo,
    "package": cmd_package,
}


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    command = args.command or "verify"

    logger = StructuredLogger()
    try:
        config = resolve_config(
            project_dir=args.project_dir,
            lockfile=args.lockfile,
            profile=args.profile,
            local_repo=args.local_repo,
        )
        lock = DependencyLock(config=config, resolver=build_resolver(args, config), logger=logger)
        status = COMMANDS[command](lock, args)
    except DeplockError as exc:
        status = _report_error(exc)

    if args.log_file is not None:
        try:
            logger.to_json_lines(args.log_file)
        except DeplockError as exc:
            status = _report_error(exc)
    return status


def _report_error(exc: DeplockError) -> int:
    print(f"error[{exc.code}]: {exc}", file=sys.stderr)
    return EXIT_ERROR


def _finish_verify(
    lock: DependencyLock,
    args: argparse.Namespace,
    result: VerificationResult,
    *,
    profile: str | None = None,
) -> int:
    if args.report is not None:
        lock.report(result, profile=profile).write(args.report)
    try:
        result.raise_for_mismatch(lockfile=lock.config.lockfile_path)
    except LockfileMismatch as exc:
        print(f"FAIL[{exc.code}]: {exc}", file=sys.stderr)
        return EXIT_MISMATCH
    print(f"OK: {result.computed_count} dependencies match {lock.config.lockfile_path}")
    return EXIT_OK
