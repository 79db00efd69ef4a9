"""Lockfile model, canonical serialization, and verification."""

from deplock.lockfile.io import (
    NumberedEntry,
    format_entry,
    parse_line,
    parse_lockfile,
    parse_numbered_lockfile,
    read_lockfile,
    read_numbered_lockfile,
    serialize_lockfile,
    write_lockfile,
)
from deplock.lockfile.model import LockEntry, lock_entry, lock_sort_key, serialize, sort_entries
from deplock.lockfile.verify import (
    Mismatch,
    VerificationReport,
    VerificationResult,
    diff_entries,
    verify,
)

__all__ = [
    "LockEntry",
    "Mismatch",
    "NumberedEntry",
    "VerificationReport",
    "VerificationResult",
    "diff_entries",
    "format_entry",
    "lock_entry",
    "lock_sort_key",
    "parse_line",
    "parse_lockfile",
    "parse_numbered_lockfile",
    "read_lockfile",
    "read_numbered_lockfile",
    "serialize",
    "serialize_lockfile",
    "sort_entries",
    "verify",
    "write_lockfile",
]
