"""Settings loaded from environment variables, and repository discovery."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from wires_mcp.errors import RepositoryNotFound

ENV_PREFIX = "WIRES"

WIRES_DIR = ".wires"
DB_NAME = "wires.db"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env_path(name: str) -> Path | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return Path(raw).expanduser()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True, slots=True)
class Settings:
    # Explicit repository root; None means discover from the working directory.
    repo_root: Path | None
    log_level: str
    busy_timeout: float


def load_settings() -> Settings:
    return Settings(
        repo_root=_env_path(_k("DIR")),
        log_level=os.getenv(_k("LOG_LEVEL"), "WARNING").strip().upper() or "WARNING",
        busy_timeout=_env_float(_k("BUSY_TIMEOUT"), 30.0),
    )


@dataclass(frozen=True, slots=True)
class Repository:
    """Handle to one wires repository; passed explicitly to the store."""

    root: Path

    @property
    def wires_dir(self) -> Path:
        return self.root / WIRES_DIR

    @property
    def db_path(self) -> Path:
        return self.wires_dir / DB_NAME


def find_repository(start: str | Path) -> Repository:
    """
    Find the wires repository containing `start`.

    Like git, this walks from `start` up through its parents until a
    directory holding .wires/wires.db is found.
    """
    start_path = Path(start).resolve()
    for candidate in (start_path, *start_path.parents):
        repo = Repository(candidate)
        if repo.db_path.exists():
            return repo
    raise RepositoryNotFound(str(start_path))


def resolve_repository(settings: Settings, cwd: str | Path | None = None) -> Repository:
    """Use the configured root when set, otherwise discover from `cwd`."""
    if settings.repo_root is not None:
        repo = Repository(settings.repo_root.resolve())
        if not repo.db_path.exists():
            raise RepositoryNotFound(str(repo.root))
        return repo
    return find_repository(cwd if cwd is not None else Path.cwd())
