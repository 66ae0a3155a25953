"""
Configuration management for the Franchise Catalog.

Provides a clean public API for all configuration components.
"""

from .base import ENV_PREFIX, Environment, StoreBackend
from .main import Config
from .runtime import APIConfig, LoggingConfig, StoreConfig
from .yaml_loader import YAMLConfigLoader

__all__ = [
    "Config",
    "Environment",
    "StoreBackend",
    "ENV_PREFIX",
    "APIConfig",
    "LoggingConfig",
    "StoreConfig",
    "YAMLConfigLoader",
]
