"""Environment loading helpers.

Modcat reads its settings from the process environment, which can be
seeded from layered .env files (lowest to highest precedence):
- User environment file (~/.config/modcat/.env)
- Project environment files (.env, then .env.local, in the working directory)
- An explicit file named by MODCAT_ENV_FILE
- OS environment

A .env file never overrides a variable that was already present in the
process environment before loading started (e.g. exported in the shell
or set by the service manager). Later files do override earlier ones.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from dotenv import dotenv_values

ENV_FILE_VAR = "MODCAT_ENV_FILE"


def _read_env(path: Path) -> dict[str, str]:
    if not path.is_file():
        return {}
    return {
        str(key): str(value)
        for key, value in dotenv_values(path).items()
        if key is not None and value is not None
    }


def user_env_path() -> Path:
    """Default user-level .env location (XDG aware)."""
    xdg_home = Path(os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config")))
    return xdg_home / "modcat" / ".env"


def default_env_paths(project_dir: Path) -> list[Path]:
    """Project .env files in precedence order, explicit MODCAT_ENV_FILE last."""
    paths = [project_dir / ".env", project_dir / ".env.local"]
    if explicit := os.environ.get(ENV_FILE_VAR):
        paths.append(Path(explicit))
    return paths


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
    project_env_paths: Iterable[Path] | None = None,
) -> list[Path]:
    """Load environment variables from user + project .env files.

    Args:
        project_dir: base directory for project env paths (defaults to cwd)
        user_env_paths: explicit user env file paths
        project_env_paths: explicit project env file paths

    Returns:
        The files that existed and were read, in load order
    """
    if user_env_paths is None:
        user_env_paths = [user_env_path()]
    if project_env_paths is None:
        project_env_paths = default_env_paths(project_dir or Path.cwd())

    protected = set(os.environ)
    loaded: list[Path] = []
    for path in [*map(Path, user_env_paths), *map(Path, project_env_paths)]:
        values = _read_env(path)
        if not values:
            continue
        loaded.append(path)
        os.environ.update({k: v for k, v in values.items() if k not in protected})
    return loaded
