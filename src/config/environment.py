"""Loading of COURIER_* overrides from dotenv files."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def _project_root() -> Path:
    """Resolve project root from source tree layout."""
    return Path(__file__).resolve().parents[2]


def _resolve_env_file(
    *,
    env_file: str | Path | None,
    start_dir: Path,
) -> Path | None:
    """Resolve dotenv file path from explicit value or defaults."""
    env_path = env_file or os.environ.get("COURIER_ENV_FILE")
    if env_path:
        resolved = Path(env_path).expanduser()
        if not resolved.is_absolute():
            resolved = start_dir / resolved
        return resolved.resolve()

    cwd_env = (start_dir / ".env").resolve()
    if cwd_env.exists():
        return cwd_env

    root_env = (_project_root() / ".env").resolve()
    if root_env.exists():
        return root_env

    return None


def load_environment_file(
    env_file: str | Path | None = None,
    *,
    override: bool = False,
    strict: bool = True,
    start_dir: Path | None = None,
) -> Path | None:
    """Load environment overrides from a dotenv file.

    Args:
        env_file: Optional dotenv path. If omitted, checks `COURIER_ENV_FILE`,
            then `.env` in current working directory, then project root.
        override: Whether dotenv values should override existing environment vars.
        strict: Whether an explicit but missing dotenv path should raise.
        start_dir: Optional base directory for resolving relative paths.

    Returns:
        Loaded dotenv path, or None when no dotenv file is found.
    """
    base_dir = (start_dir or Path.cwd()).resolve()
    resolved = _resolve_env_file(env_file=env_file, start_dir=base_dir)
    if resolved is None:
        return None

    if not resolved.exists():
        if strict:
            raise FileNotFoundError(f"Dotenv file not found: {resolved}")
        return None
    if resolved.is_dir():
        raise ValueError(
            f"Dotenv path is a directory: {resolved}. "
            "Remove or rename that directory and create a .env file."
        )
    if not resolved.is_file():
        raise ValueError(f"Dotenv path is not a regular file: {resolved}")

    load_dotenv(dotenv_path=str(resolved), override=override)
    logger.debug("[BOOT] Loaded environment file %s", resolved)
    return resolved
