"""Configuration management for reviewpool."""
from pathlib import Path
from typing import Optional

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReviewPoolConfig(BaseSettings):
    """Main configuration for the reviewpool service.

    Configuration can be loaded from:
    1. Environment variables (prefixed with REVIEWPOOL_)
    2. YAML configuration file (reviewpool.yaml)
    3. Default values
    """

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host address")
    api_port: int = Field(default=8080, description="API port")

    # Database Configuration
    storage: str = Field(default="sqlite", description="Storage backend (sqlite or postgresql)")
    db_path: str = Field(default="./reviewpool.db", description="Database file path for SQLite")
    db_url: Optional[str] = Field(default=None, description="Database URL for PostgreSQL")

    # Assignment Configuration
    max_reviewers: int = Field(
        default=2,
        ge=0,
        description="Number of reviewers picked when a pull request is opened"
    )
    selection_seed: Optional[int] = Field(
        default=None,
        description="Seed for reviewer selection; unset means non-deterministic"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_file: Optional[str] = Field(default=None, description="Log file path")

    model_config = SettingsConfigDict(
        env_prefix="REVIEWPOOL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    def get_database_url(self) -> str:
        """Get the database URL based on configuration.

        Returns:
            Database URL string
        """
        if self.db_url:
            return self.db_url

        if self.storage == "sqlite":
            if self.db_path == ":memory:":
                return "sqlite+aiosqlite:///:memory:"
            # Ensure path is absolute
            db_path = Path(self.db_path)
            if not db_path.is_absolute():
                db_path = Path.cwd() / db_path
            return f"sqlite+aiosqlite:///{db_path}"
        elif self.storage == "postgresql":
            raise ValueError(
                "PostgreSQL selected but db_url not provided. "
                "Set REVIEWPOOL_DB_URL or db_url in config file."
            )
        else:
            raise ValueError(f"Unknown storage backend: {self.storage}")

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "ReviewPoolConfig":
        """Load configuration from YAML file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            ReviewPoolConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Invalid configuration file: {config_path}")

        return cls(**data)

    def to_yaml(self, config_path: str | Path) -> None:
        """Save configuration to YAML file.

        Args:
            config_path: Path to save configuration file
        """
        config_path = Path(config_path)

        # Convert to dict and remove None values
        data = self.model_dump(exclude_none=True)

        with open(config_path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    @classmethod
    def create_default_config(cls, config_path: str | Path) -> "ReviewPoolConfig":
        """Create a default configuration file.

        Args:
            config_path: Path to save configuration file

        Returns:
            ReviewPoolConfig instance with default values
        """
        config = cls()
        config.to_yaml(config_path)
        return config


# Global configuration instance
_config: Optional[ReviewPoolConfig] = None


def init_config(config_path: Optional[str | Path] = None) -> ReviewPoolConfig:
    """Initialize the global configuration.

    Args:
        config_path: Optional path to YAML configuration file.
                    If not provided, uses environment variables and defaults.

    Returns:
        ReviewPoolConfig instance
    """
    global _config

    if config_path:
        _config = ReviewPoolConfig.from_yaml(config_path)
    else:
        default_paths = [
            Path("reviewpool.yaml"),
            Path("reviewpool.yml"),
            Path(".reviewpool.yaml"),
            Path.home() / ".reviewpool" / "config.yaml",
        ]

        for path in default_paths:
            if path.exists():
                _config = ReviewPoolConfig.from_yaml(path)
                return _config

        _config = ReviewPoolConfig()

    return _config


def get_config() -> ReviewPoolConfig:
    """Get the global configuration instance, initializing it on first use."""
    if _config is None:
        return init_config()
    return _config
