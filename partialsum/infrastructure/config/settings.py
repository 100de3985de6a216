"""Pydantic settings for partialsum.toml configuration."""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .environment import (
    ENV_ALGORITHM,
    ENV_CONFIG,
    ENV_INCLUDE_MODTIME,
    ENV_PARTIAL_BYTES,
    ENV_WORKERS,
    get_env,
    get_env_bool,
    get_env_int,
    load_environment_variables,
)

DEFAULT_CONFIG_PATH = "partialsum.toml"


class ChecksumSettings(BaseModel):
    """Checksum configuration settings; must match between generate and check."""

    window_len: int = 100
    include_mtime: bool = False
    algorithm: str = "sha256"

    def __init__(self, **data: Any) -> None:
        """Initialize with environment variable precedence."""
        load_environment_variables()

        env_window = get_env_int(ENV_PARTIAL_BYTES)
        if env_window is not None:
            data["window_len"] = env_window

        if get_env(ENV_INCLUDE_MODTIME) is not None:
            data["include_mtime"] = get_env_bool(ENV_INCLUDE_MODTIME, data.get("include_mtime", False))

        env_algorithm = get_env(ENV_ALGORITHM)
        if env_algorithm:
            data["algorithm"] = env_algorithm

        super().__init__(**data)

    @field_validator("window_len")
    @classmethod
    def validate_window_len(cls, v: int) -> int:
        """Window length must be positive."""
        if v <= 0:
            raise ValueError(f"window_len must be >= 1, got {v}")
        return v


class RunSettings(BaseModel):
    """Execution settings for a run."""

    skip_errors: bool = False
    strict: bool = True
    workers: int | None = None
    read_retries: int = 2

    def __init__(self, **data: Any) -> None:
        """Initialize with environment variable precedence."""
        load_environment_variables()

        env_workers = get_env_int(ENV_WORKERS)
        if env_workers is not None:
            data["workers"] = env_workers

        super().__init__(**data)

    @field_validator("workers")
    @classmethod
    def validate_workers(cls, v: int | None) -> int | None:
        """Worker count must be positive when set."""
        if v is not None and v < 1:
            raise ValueError(f"workers must be >= 1, got {v}")
        return v


class Settings(BaseModel):
    """Main settings loaded from partialsum.toml."""

    checksum: ChecksumSettings = Field(default_factory=ChecksumSettings)
    run: RunSettings = Field(default_factory=RunSettings)

    @classmethod
    def from_toml(cls, toml_path: Path | str | None = None) -> "Settings":
        """
        Load settings from partialsum.toml with environment variable precedence.

        Environment variables (system env > .env file) override TOML values.
        A missing default partialsum.toml yields defaults; a file named
        explicitly (argument or $PARTIALSUM_CONFIG) must exist.

        Args:
            toml_path: Path to the TOML file (defaults to $PARTIALSUM_CONFIG or partialsum.toml)

        Returns:
            Settings instance with loaded configuration

        Raises:
            FileNotFoundError: If an explicitly named configuration file does not exist
        """
        load_environment_variables()

        if toml_path is None:
            toml_path = get_env(ENV_CONFIG) or None
        explicit = toml_path is not None
        toml_path = Path(toml_path or DEFAULT_CONFIG_PATH)

        if not toml_path.exists():
            if explicit:
                raise FileNotFoundError(f"Configuration file not found: {toml_path}")
            return cls()

        with toml_path.open("rb") as f:
            data = tomllib.load(f)

        return cls(
            checksum=ChecksumSettings(**data.get("checksum", {})),
            run=RunSettings(**data.get("run", {})),
        )
