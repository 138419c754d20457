"""
Unified Configuration Management System
Centralizes all application settings with validation, type checking, and environment support
"""

import os
import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from enum import Enum


class Environment(Enum):
    """Application environments"""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class ConfigValidationError(Exception):
    """Raised when configuration validation fails"""

    pass


STORE_BACKENDS = ("remote", "local")


@dataclass
class SiteConfig:
    """Site rendering configuration"""

    title: str = "Portfolio"
    items_per_page: int = 6

    # Vertical offset applied when scrolling to a paginated section
    scroll_offset: int = -100
    notification_duration_ms: int = 3000

    # Paginated sections and their DOM targets
    sections: Dict[str, Dict[str, str]] = field(
        default_factory=lambda: {
            "latest": {
                "container": "latestProjects",
                "pagination": "latestPagination",
            },
            "all": {
                "container": "allProjects",
                "pagination": "allPagination",
            },
            "experimental": {
                "container": "experimentalProjects",
                "pagination": "experimentalPagination",
            },
        }
    )


@dataclass
class StoreConfig:
    """Backing store configuration"""

    backend: str = "local"

    # Remote document store
    remote_url: str = ""
    collection: str = "projects"
    request_timeout: float = 10.0
    ready_timeout: float = 30.0

    # Local key-value storage
    local_storage_path: str = field(
        default_factory=lambda: os.path.join(os.getcwd(), "data", "local_storage.json")
    )
    local_storage_key: str = "portfolioProjects"


@dataclass
class ServerConfig:
    """Web server configuration"""

    host: str = "0.0.0.0"
    port: int = 5000
    secret_key: str = "dev-secret-key-change-in-production"


@dataclass
class UnifiedConfig:
    """Main configuration container"""

    # Sub-configurations
    site: SiteConfig = field(default_factory=SiteConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    # Environment settings
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False
    log_level: str = "INFO"

    # Application metadata
    version: str = "1.0.0"


class ConfigManager:
    """Manages configuration loading, validation, and access"""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir or Path(__file__).parent
        self.config: Optional[UnifiedConfig] = None
        self.logger = logging.getLogger("ConfigManager")

        # Load configuration
        self._load_config()

    def _load_config(self):
        """Load configuration from files and environment"""
        # Start with default configuration
        self.config = UnifiedConfig()

        # Apply user overrides
        self._apply_user_overrides()

        # Apply environment overrides
        self._apply_environment_overrides()

        # Validate configuration
        self._validate_config()

    def _apply_user_overrides(self):
        """Apply user settings from user_settings.json"""
        user_settings_file = self.config_dir / "user_settings.json"

        if not user_settings_file.exists():
            return

        try:
            with open(user_settings_file, "r", encoding="utf-8") as f:
                user_settings = json.load(f)

            self._apply_settings_dict(user_settings)
            self.logger.info("Applied user settings overrides")

        except (json.JSONDecodeError, FileNotFoundError) as e:
            self.logger.warning(f"Could not load user settings: {e}")

    def _apply_environment_overrides(self):
        """Apply environment-specific overrides"""
        env_name = os.getenv("PORTFOLIO_ENV", "development").lower()
        try:
            self.config.environment = Environment(env_name)
        except ValueError:
            self.logger.warning(f"Unknown environment '{env_name}', using development")
            self.config.environment = Environment.DEVELOPMENT

        # Debug mode
        if os.getenv("DEBUG") is not None:
            self.config.debug = os.getenv("DEBUG").lower() in ("true", "1", "yes", "on")

        # Log level
        if os.getenv("LOG_LEVEL"):
            self.config.log_level = os.getenv("LOG_LEVEL").upper()

        # Store
        if os.getenv("STORE_BACKEND"):
            self.config.store.backend = os.getenv("STORE_BACKEND").lower()
        if os.getenv("STORE_URL"):
            self.config.store.remote_url = os.getenv("STORE_URL")
        if os.getenv("STORE_COLLECTION"):
            self.config.store.collection = os.getenv("STORE_COLLECTION")
        if os.getenv("LOCAL_STORAGE_PATH"):
            self.config.store.local_storage_path = os.getenv("LOCAL_STORAGE_PATH")

        # Site
        if os.getenv("ITEMS_PER_PAGE"):
            try:
                self.config.site.items_per_page = int(os.getenv("ITEMS_PER_PAGE"))
            except ValueError:
                self.logger.warning(
                    f"Ignoring non-integer ITEMS_PER_PAGE: {os.getenv('ITEMS_PER_PAGE')}"
                )

        # Server
        if os.getenv("HOST"):
            self.config.server.host = os.getenv("HOST")
        if os.getenv("PORT"):
            try:
                self.config.server.port = int(os.getenv("PORT"))
            except ValueError:
                self.logger.warning(f"Ignoring non-integer PORT: {os.getenv('PORT')}")
        if os.getenv("SECRET_KEY"):
            self.config.server.secret_key = os.getenv("SECRET_KEY")

    def _apply_settings_dict(self, settings: Dict[str, Any]):
        """Apply settings from a dictionary using dot notation"""
        for key, value in settings.items():
            self._set_nested_value(self.config, key, value)

    def _set_nested_value(self, obj: Any, key_path: str, value: Any):
        """Set a nested value using dot notation (e.g., 'store.backend')"""
        keys = key_path.split(".")
        current = obj

        # Navigate to the parent object
        for index, key in enumerate(keys[:-1]):
            if isinstance(current, dict) and key in current:
                current = current[key]
            elif not isinstance(current, dict) and hasattr(current, key):
                current = getattr(current, key)
            else:
                self.logger.warning(f"Unknown config path: {'.'.join(keys[:index + 1])}")
                return

        final_key = keys[-1]

        if isinstance(current, dict):
            if final_key not in current:
                self.logger.warning(f"Unknown config key: {key_path}")
            elif isinstance(current[final_key], dict) and isinstance(value, dict):
                # Merge dictionaries
                current[final_key].update(value)
            else:
                current[final_key] = value
        elif hasattr(current, final_key):
            existing = getattr(current, final_key)
            if isinstance(existing, dict) and isinstance(value, dict):
                # Merge dictionaries
                existing.update(value)
            else:
                setattr(current, final_key, value)
        else:
            self.logger.warning(f"Unknown config key: {key_path}")

    def _validate_config(self):
        """Validate the loaded configuration"""
        store = self.config.store

        if store.backend not in STORE_BACKENDS:
            raise ConfigValidationError(
                f"Unknown store backend '{store.backend}', expected one of {STORE_BACKENDS}"
            )

        if store.backend == "remote" and not store.remote_url:
            raise ConfigValidationError("Remote store backend requires store.remote_url")

        if store.request_timeout <= 0 or store.ready_timeout <= 0:
            raise ConfigValidationError("Store timeouts must be positive")

        if self.config.site.items_per_page < 1:
            raise ConfigValidationError("Items per page must be at least 1")

        if store.backend == "local":
            storage_dir = Path(store.local_storage_path).parent
            if not storage_dir.exists():
                self.logger.warning(
                    f"Local storage directory does not exist yet: {storage_dir}"
                )

        self.logger.info("Configuration validation completed")

    def get_config(self) -> UnifiedConfig:
        """Get the current configuration"""
        if self.config is None:
            raise RuntimeError("Configuration not loaded")
        return self.config


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def initialize_config(config_dir: Optional[Path] = None) -> ConfigManager:
    """Initialize the global configuration manager"""
    global _config_manager
    _config_manager = ConfigManager(config_dir)
    return _config_manager


def get_config() -> UnifiedConfig:
    """Get the current configuration"""
    if _config_manager is None:
        # Auto-initialize with default settings
        initialize_config()
    return _config_manager.get_config()


# Convenience functions for common access patterns
def get_site_config() -> SiteConfig:
    """Get site configuration"""
    return get_config().site


def get_store_config() -> StoreConfig:
    """Get store configuration"""
    return get_config().store
