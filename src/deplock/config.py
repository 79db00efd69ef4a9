"""Lock configuration and scope profile presets."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import get_args

from deplock.errors import ValidationError
from deplock.models import ResolverScope, ScopeProfile

DEFAULT_LOCKFILE = "dependencies.lock"
LOCAL_REPO_ENV = "DEPLOCK_LOCAL_REPO"

# Both resolver queries must use the same selector for the join to line up.
PROFILE_SCOPES: dict[ScopeProfile, ResolverScope] = {
    "test": "test",
    "packaged": "runtime",
}


def default_local_repo() -> Path:
    return Path.home() / ".m2" / "repository"


@dataclass(frozen=True, slots=True)
class LockConfig:
    project_dir: Path = field(default_factory=Path.cwd)
    lockfile: Path = Path(DEFAULT_LOCKFILE)
    profile: ScopeProfile = "test"
    local_repo: Path = field(default_factory=default_local_repo)

    @property
    def lockfile_path(self) -> Path:
        if self.lockfile.is_absolute():
            return self.lockfile
        return self.project_dir / self.lockfile

    @property
    def resolver_scope(self) -> ResolverScope:
        return PROFILE_SCOPES[self.profile]


def resolve_config(
    *,
    project_dir: str | Path | None = None,
    lockfile: str | Path | None = None,
    profile: str | None = None,
    local_repo: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> LockConfig:
    """Build a config from explicit values, then the environment, then defaults."""
    env = os.environ if environ is None else environ
    selected = profile or "test"
    if selected not in get_args(ScopeProfile):
        raise ValidationError(
            f"Unsupported dependency scope profile: {selected}",
            hint=f"Choose one of: {', '.join(get_args(ScopeProfile))}.",
        )
    repo = local_repo or env.get(LOCAL_REPO_ENV)
    return LockConfig(
        project_dir=Path(project_dir) if project_dir is not None else Path.cwd(),
        lockfile=Path(lockfile) if lockfile is not None else Path(DEFAULT_LOCKFILE),
        profile=selected,  # type: ignore[arg-type]
        local_repo=Path(repo).expanduser() if repo else default_local_repo(),
    )
