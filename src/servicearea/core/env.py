"""
Environment helpers.

Developers keep the geocoder token in a repo-local `.env` file, and the CLI, the
API server and the tests may all be started from different working directories.

This module provides:
- `get_project_root()`: find the repo root (explicit override, then `.env` / `.git` markers)
- `load_dotenv_if_present()`: load `.env` once (never overrides existing env vars)
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv


def _looks_like_project_root(path: Path) -> bool:
    if (path / ".env").is_file():
        return True
    if (path / ".git").exists():
        return True
    return (path / "pyproject.toml").is_file() and (path / "src").is_dir()


@lru_cache
def get_project_root() -> Path:
    """Return the best-guess project root directory (cached)."""
    override = os.getenv("SERVICEAREA_PROJECT_ROOT")
    if override:
        return Path(override).expanduser().resolve()

    env_file = os.getenv("SERVICEAREA_ENV_FILE")
    if env_file:
        return Path(env_file).expanduser().resolve().parent

    cwd = Path.cwd().resolve()
    for candidate in [cwd, *cwd.parents]:
        if _looks_like_project_root(candidate):
            return candidate

    # Running from elsewhere (e.g. an installed package): search from this module.
    here = Path(__file__).resolve().parent
    for candidate in [here, *here.parents]:
        if _looks_like_project_root(candidate):
            return candidate

    return cwd


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load `.env` once if present; returns the loaded env path (or None)."""
    explicit = os.getenv("SERVICEAREA_ENV_FILE")
    env_path = Path(explicit).expanduser().resolve() if explicit else get_project_root() / ".env"
    if not env_path.is_file():
        return None
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path
