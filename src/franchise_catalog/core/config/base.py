"""
Base configuration infrastructure for the Franchise Catalog.

Contains shared constants and the Environment enum.
"""

from enum import Enum

ENV_PREFIX = "FC_"

DEFAULT_MONGO_URI = "mongodb://localhost:27017"
DEFAULT_DATABASE = "franchises-db"


class Environment(Enum):
    """Environment types for configuration."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class StoreBackend(Enum):
    """Document store implementations the catalog can run on."""

    MONGO = "mongo"
    MEMORY = "memory"
