"""
Centralized YAML configuration loading utilities.

Provides consistent YAML loading with error handling and logging.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


class YAMLConfigLoader:
    """Centralized YAML configuration loader with consistent error handling."""

    @staticmethod
    def load_yaml(path: Path) -> Dict[str, Any]:
        """
        Load YAML file with consistent error handling and logging.

        Args:
            path: Path to YAML file

        Returns:
            Dictionary containing YAML data, empty dict if file is empty/invalid

        Raises:
            FileNotFoundError: If file doesn't exist
            yaml.YAMLError: If YAML parsing fails
        """
        if not path.exists():
            raise FileNotFoundError(f"YAML file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)

            if data is None:
                logger.warning(f"YAML file is empty or contains only comments: {path}")
                return {}

            logger.debug(f"Successfully loaded YAML from {path}")
            return data if isinstance(data, dict) else {}

        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML file {path}: {e}")
            raise

    @staticmethod
    def load_yaml_safe(
        path: Path, default: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Load YAML file, returning default on any error."""
        if default is None:
            default = {}

        try:
            return YAMLConfigLoader.load_yaml(path)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load YAML file {path}, using default: {e}")
            return default

    @staticmethod
    def save_yaml(data: Dict[str, Any], path: Path) -> None:
        """Save data to YAML file with consistent formatting."""
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

        logger.debug(f"Successfully saved YAML to {path}")
