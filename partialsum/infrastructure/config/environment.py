"""Environment variable loading from .env files with precedence support."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Variables that override partialsum.toml (system env > .env > TOML)
ENV_PARTIAL_BYTES = "PARTIALSUM_PARTIAL_BYTES"
ENV_INCLUDE_MODTIME = "PARTIALSUM_INCLUDE_MODTIME"
ENV_ALGORITHM = "PARTIALSUM_ALGORITHM"
ENV_WORKERS = "PARTIALSUM_WORKERS"
ENV_CONFIG = "PARTIALSUM_CONFIG"

KNOWN_VARIABLES = {
    ENV_PARTIAL_BYTES: "Bytes read from start, middle and end of each file",
    ENV_INCLUDE_MODTIME: "Hash and record modification times (true/false)",
    ENV_ALGORITHM: "hashlib algorithm name (defaults to sha256)",
    ENV_WORKERS: "Maximum number of files read concurrently",
    ENV_CONFIG: "Custom configuration file path (defaults to partialsum.toml)",
}


def load_environment_variables(dotenv_path: Path | str | None = None) -> None:
    """
    Load environment variables from .env file with automatic detection.

    Environment variables from system environment take precedence over .env
    file values (python-dotenv's override=False).

    Args:
        dotenv_path: Optional path to .env file. If None, searches the current
                     working directory and up to 3 parent directories
    """
    if dotenv_path is None:
        current = Path.cwd()
        search_paths = [
            current / ".env",
            current.parent / ".env",
            current.parent.parent / ".env",
            current.parent.parent.parent / ".env",
        ]

        for path in search_paths:
            if path.exists():
                dotenv_path = path
                logger.debug(f"Loading .env file from: {path}")
                break

        if dotenv_path is None:
            load_dotenv(override=False)
            return

    dotenv_path = Path(dotenv_path)
    if dotenv_path.exists():
        load_dotenv(dotenv_path, override=False)
        logger.debug(f"Loaded .env file from: {dotenv_path}")
    else:
        logger.debug(f".env file not found at: {dotenv_path}")


def get_env(key: str, default: str | None = None) -> str | None:
    """
    Get environment variable value.

    Args:
        key: Environment variable name
        default: Default value if not found

    Returns:
        Environment variable value or default
    """
    return os.getenv(key, default)


def get_env_bool(key: str, default: bool = False) -> bool:
    """
    Get boolean environment variable.

    Accepts: 'true', '1', 'yes', 'on' (case-insensitive) → True
            'false', '0', 'no', 'off' (case-insensitive) → False
    Anything else, including unset, returns ``default``.
    """
    value = os.getenv(key, "").lower().strip()
    if value in ("true", "1", "yes", "on"):
        return True
    if value in ("false", "0", "no", "off"):
        return False
    return default


def get_env_int(key: str, default: int | None = None) -> int | None:
    """
    Get integer environment variable.

    Raises:
        ValueError: If the variable is set but is not an integer
    """
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {value!r}") from None
