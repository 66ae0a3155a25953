"""
Runtime configuration for the Franchise Catalog.

Contains store, API and logging configuration sections.
"""

from dataclasses import dataclass

from .base import DEFAULT_DATABASE, DEFAULT_MONGO_URI, StoreBackend


@dataclass
class StoreConfig:
    """Document store configuration."""

    backend: StoreBackend = StoreBackend.MONGO
    uri: str = DEFAULT_MONGO_URI
    database: str = DEFAULT_DATABASE
    server_selection_timeout_ms: int = 5000
    create_indexes_on_startup: bool = True


@dataclass
class APIConfig:
    """HTTP API configuration."""

    host: str = "0.0.0.0"
    port: int = 8080
    envelope_enabled: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    json_format: bool = True
