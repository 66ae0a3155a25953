"""
Main configuration class for the Franchise Catalog.

Contains the Config class that orchestrates all configuration sections and
loads them from defaults, a YAML file or FC_* environment variables.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Union

from ..exceptions import ConfigurationError
from .base import ENV_PREFIX, Environment, StoreBackend
from .runtime import APIConfig, LoggingConfig, StoreConfig
from .yaml_loader import YAMLConfigLoader

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """Main configuration class for the Franchise Catalog."""

    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False

    store: StoreConfig = field(default_factory=StoreConfig)
    api: APIConfig = field(default_factory=APIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        """Apply environment-specific defaults."""
        if self.environment == Environment.PRODUCTION:
            self.debug = False
        elif self.environment == Environment.TESTING:
            self.debug = True
            self.store.backend = StoreBackend.MEMORY
            self.store.create_indexes_on_startup = True
            self.logging.json_format = False

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "Config":
        """Load configuration from YAML file."""
        config_path = Path(config_path)
        data = YAMLConfigLoader.load_yaml(config_path)
        logger.info(f"Loaded configuration from {config_path}")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Build configuration from a plain dictionary."""
        store_data = dict(data.get("store", {}) or {})
        api_data = dict(data.get("api", {}) or {})
        logging_data = dict(data.get("logging", {}) or {})

        try:
            environment = Environment(data.get("environment", "development"))
            if "backend" in store_data:
                store_data["backend"] = StoreBackend(store_data["backend"])
            config = cls(
                environment=environment,
                debug=bool(data.get("debug", False)),
                store=StoreConfig(**store_data),
                api=APIConfig(**api_data),
                logging=LoggingConfig(**logging_data),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid configuration: {e}", component="Config"
            ) from e

        if "backend" in store_data:
            config.store.backend = store_data["backend"]
        return config

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""

        def getenv_bool(name: str, default: bool) -> bool:
            v = os.getenv(ENV_PREFIX + name)
            return default if v is None else v.lower() in {"1", "true", "yes", "on"}

        def getenv_int(name: str, default: int) -> int:
            v = os.getenv(ENV_PREFIX + name)
            return default if v is None else int(v)

        def getenv_str(name: str, default: str) -> str:
            return os.getenv(ENV_PREFIX + name, default)

        # FC_* env overrides only
        try:
            env = Environment(getenv_str("ENV", "development"))
            defaults = StoreConfig()
            backend_default = (
                StoreBackend.MEMORY.value
                if env == Environment.TESTING
                else defaults.backend.value
            )

            store = StoreConfig(
                backend=StoreBackend(getenv_str("STORE__BACKEND", backend_default)),
                uri=getenv_str("STORE__URI", defaults.uri),
                database=getenv_str("STORE__DATABASE", defaults.database),
                server_selection_timeout_ms=getenv_int(
                    "STORE__SERVER_SELECTION_TIMEOUT_MS",
                    defaults.server_selection_timeout_ms,
                ),
                create_indexes_on_startup=getenv_bool(
                    "STORE__CREATE_INDEXES_ON_STARTUP",
                    defaults.create_indexes_on_startup,
                ),
            )

            api = APIConfig(
                host=getenv_str("API__HOST", "0.0.0.0"),
                port=getenv_int("API__PORT", 8080),
                envelope_enabled=getenv_bool("API__ENVELOPE_ENABLED", True),
            )

            logging_config = LoggingConfig(
                level=getenv_str("LOGGING__LEVEL", "INFO").upper(),
                json_format=getenv_bool("LOGGING__JSON_FORMAT", True),
            )
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid environment configuration: {e}", component="Config"
            ) from e

        explicit_backend = store.backend
        config = cls(
            environment=env,
            debug=getenv_bool("DEBUG", False),
            store=store,
            api=api,
            logging=logging_config,
        )
        # An explicit backend wins over the TESTING default
        config.store.backend = explicit_backend
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "environment": self.environment.value,
            "debug": self.debug,
            "store": {
                "backend": self.store.backend.value,
                "uri": self.store.uri,
                "database": self.store.database,
                "server_selection_timeout_ms": self.store.server_selection_timeout_ms,
                "create_indexes_on_startup": self.store.create_indexes_on_startup,
            },
            "api": {
                "host": self.api.host,
                "port": self.api.port,
                "envelope_enabled": self.api.envelope_enabled,
            },
            "logging": {
                "level": self.logging.level,
                "json_format": self.logging.json_format,
            },
        }

    def save(self, config_path: Union[str, Path]) -> None:
        """Save configuration to YAML file."""
        YAMLConfigLoader.save_yaml(self.to_dict(), Path(config_path))
