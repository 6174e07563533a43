"""
Configuration management for the Shop Dashboard application.

This module handles:
- Database path configuration
- Environment-specific configuration (development vs. production)
- Report settings (reporting locale, default period, purchase list cache TTL)
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .constants import (
    APP_DIR_NAME,
    APP_NAME,
    APP_VERSION,
    DATABASE_FILENAME,
    DATABASE_VERSION,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_PERIOD_DAYS,
    ENV_VAR_CACHE_TTL,
    ENV_VAR_ENVIRONMENT,
    REPORTING_LOCALE,
)

logger = logging.getLogger(__name__)


class Config:
    """
    Application configuration manager.

    Handles database paths, environment settings and report defaults.
    """

    def __init__(self, environment: str = "production"):
        """
        Initialize configuration.

        Args:
            environment: Environment mode - 'production' or 'development'
        """
        self.environment = environment

        if environment == "development":
            self._base_dir = self._get_project_data_dir()
        else:
            self._base_dir = self._get_user_documents_dir()

        self._database_dir = self._base_dir
        self._database_path = self._database_dir / DATABASE_FILENAME
        self._cache_ttl = self._read_cache_ttl()

        self._ensure_directories()

    def _get_project_data_dir(self) -> Path:
        """Project data/ directory for development."""
        project_root = Path(__file__).parent.parent.parent.parent
        return project_root / "data"

    def _get_user_documents_dir(self) -> Path:
        """User's Documents folder with app subdirectory for production."""
        if os.name == "nt":  # Windows
            documents = Path(os.path.expanduser("~")) / "Documents"
        else:
            documents = Path.home() / "Documents"
        return documents / APP_DIR_NAME

    def _read_cache_ttl(self) -> int:
        raw = os.environ.get(ENV_VAR_CACHE_TTL)
        if raw is None:
            return DEFAULT_CACHE_TTL_SECONDS
        try:
            return max(0, int(raw))
        except ValueError:
            logger.warning(
                f"Ignoring invalid {ENV_VAR_CACHE_TTL}={raw!r}; "
                f"using {DEFAULT_CACHE_TTL_SECONDS} seconds"
            )
            return DEFAULT_CACHE_TTL_SECONDS

    def _ensure_directories(self):
        """Create necessary directories if they don't exist."""
        self._database_dir.mkdir(parents=True, exist_ok=True)

    @property
    def app_name(self) -> str:
        return APP_NAME

    @property
    def app_version(self) -> str:
        return APP_VERSION

    @property
    def database_version(self) -> str:
        return DATABASE_VERSION

    @property
    def database_path(self) -> Path:
        """Full path to the database file."""
        return self._database_path

    @property
    def database_url(self) -> str:
        """SQLAlchemy database URL."""
        db_path_str = str(self._database_path).replace("\\", "/")
        return f"sqlite:///{db_path_str}"

    @property
    def reporting_locale(self) -> str:
        """Locale whose collation orders material names in reports."""
        return REPORTING_LOCALE

    @property
    def default_period_days(self) -> int:
        """Length of the default reporting window, today inclusive."""
        return DEFAULT_PERIOD_DAYS

    @property
    def purchase_list_cache_ttl(self) -> int:
        """Seconds a computed purchase list stays cached."""
        return self._cache_ttl

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def database_exists(self) -> bool:
        """Check if database file exists."""
        return self._database_path.exists()

    def __repr__(self) -> str:
        return f"Config(environment='{self.environment}', database_path='{self._database_path}')"


_config_instance: Optional[Config] = None


def get_config(environment: Optional[str] = None) -> Config:
    """
    Get the global configuration instance.

    Once created, the singleton's environment cannot be changed by passing
    a different environment argument.

    Args:
        environment: Optional environment for initial creation. If None, uses
                    SHOP_DASHBOARD_ENV or defaults to production. Ignored if
                    singleton already exists.

    Returns:
        Config instance
    """
    global _config_instance

    if _config_instance is None:
        if environment is None:
            environment = os.environ.get(ENV_VAR_ENVIRONMENT, "production")
        _config_instance = Config(environment)
    elif environment is not None and environment != _config_instance.environment:
        logger.warning(
            f"get_config() called with environment='{environment}' but singleton "
            f"already exists with environment='{_config_instance.environment}'. "
            f"Returning existing singleton to prevent database switching."
        )

    return _config_instance


def reset_config():
    """Reset the global configuration instance. Useful for testing."""
    global _config_instance
    _config_instance = None


def get_database_url() -> str:
    return get_config().database_url
