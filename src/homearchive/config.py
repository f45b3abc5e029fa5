"""Configuration management for homearchive.

Loads configuration from environment variables and provides defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

# Hard ceiling on results returned by a single search
RESULT_CEILING = 50

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class Config:
    """Application configuration."""

    # Database
    db_path: Path

    # Search
    max_results: int
    default_limit: int

    # Logging
    log_level: str

    # History
    record_history: bool

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        db_path_str = os.environ.get(
            "HOMEARCHIVE_DB_PATH",
            str(Path.home() / ".homearchive" / "library.db"),
        )
        db_path = Path(db_path_str).expanduser()

        max_results = int(os.environ.get("HOMEARCHIVE_MAX_RESULTS", str(RESULT_CEILING)))
        max_results = max(1, min(max_results, RESULT_CEILING))

        default_limit = int(
            os.environ.get("HOMEARCHIVE_DEFAULT_LIMIT", str(max_results))
        )
        default_limit = max(1, min(default_limit, max_results))

        return cls(
            db_path=db_path,
            max_results=max_results,
            default_limit=default_limit,
            log_level=os.environ.get("HOMEARCHIVE_LOG_LEVEL", "WARNING").upper(),
            record_history=(
                os.environ.get("HOMEARCHIVE_RECORD_HISTORY", "true").lower()
                in _TRUE_VALUES
            ),
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        # Check database directory is writable
        if not self.db_path.parent.exists():
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            except PermissionError:
                errors.append(f"Cannot create database directory: {self.db_path.parent}")

        if self.log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            errors.append(f"Unknown log level: {self.log_level}")

        return errors


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
