"""
Runtime Configuration

Selects the default digest merge strategy and configures logging for
host applications.
"""

from __future__ import annotations

import copy
import logging
import os
import sys
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass
class HashConfig:
    """Digest used by the ready-made merge strategies."""
    algorithm: str = "sha256"
    digest_size: int = 32
    # blake2b personalization, at most 16 bytes once encoded
    person: str = ""


@dataclass
class LoggingConfig:
    """Configuration for the host's logging handlers."""
    level: str = "WARNING"
    log_file: Optional[str] = None


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Configure root logging with a stderr handler and an optional file."""
    log_level = getattr(logging, level.upper(), logging.WARNING)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables (a .env file is honoured)
    - YAML file
    - Programmatic construction
    """
    hash: HashConfig = field(default_factory=HashConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - CBMT_HASH_ALGORITHM: digest for the default merge strategy
        - CBMT_DIGEST_SIZE: blake2b digest size in bytes
        - CBMT_BLAKE2B_PERSON: blake2b personalization string
        - CBMT_LOG_LEVEL: logging level name
        - CBMT_LOG_FILE: optional log file path
        """
        overrides: dict[str, Any] = {}

        if os.getenv("CBMT_HASH_ALGORITHM"):
            overrides.setdefault("hash", {})["algorithm"] = os.getenv("CBMT_HASH_ALGORITHM").lower()
        if os.getenv("CBMT_DIGEST_SIZE"):
            overrides.setdefault("hash", {})["digest_size"] = int(os.getenv("CBMT_DIGEST_SIZE"))
        if os.getenv("CBMT_BLAKE2B_PERSON"):
            overrides.setdefault("hash", {})["person"] = os.getenv("CBMT_BLAKE2B_PERSON")

        if os.getenv("CBMT_LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv("CBMT_LOG_LEVEL")
        if os.getenv("CBMT_LOG_FILE"):
            overrides.setdefault("logging", {})["log_file"] = os.getenv("CBMT_LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        hash_data = data.get("hash", {})
        logging_data = data.get("logging", {})

        return cls(
            hash=HashConfig(**hash_data) if hash_data else HashConfig(),
            logging=LoggingConfig(**logging_data) if logging_data else LoggingConfig(),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for key, value in overrides.get("hash", {}).items():
            setattr(new_config.hash, key, value)
        for key, value in overrides.get("logging", {}).items():
            setattr(new_config.logging, key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def setup_logging(self) -> None:
        setup_logging(self.logging.level, self.logging.log_file)
