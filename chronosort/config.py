"""
Read-only defaults file for chronosort.
"""

from pathlib import Path
from typing import Dict, Optional

import yaml

from .constants import PROGRAM, get_logger
from .models import Action, Collision, DateSource


class Config:
    """Loads default settings from a YAML file. The file is never written."""

    def __init__(self, config_path: Optional[Path] = None):
        # Default config location: ~/.<PROGRAM>/config.yml
        if config_path:
            self.config_path = Path(config_path)
        else:
            self.config_path = Path.home() / f".{PROGRAM}" / "config.yml"
        self.data = self._load_config()

    def _load_config(self) -> Dict:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            return {}

        try:
            with open(self.config_path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            get_logger().warning(f"Could not load config: {e}")
            return {}

        if not isinstance(data, dict):
            get_logger().warning(f"Ignoring config {self.config_path}: expected a mapping")
            return {}
        return data

    def _get_enum(self, key: str, enum_cls):
        value = self.data.get(key)
        if value is None:
            return None
        try:
            return enum_cls(value)
        except ValueError:
            get_logger().warning(f"Ignoring invalid {key} {value!r} in {self.config_path}")
            return None

    def get_date_source(self) -> Optional[DateSource]:
        """Get the configured date source."""
        return self._get_enum('date_source', DateSource)

    def get_collision(self) -> Optional[Collision]:
        """Get the configured collision policy."""
        return self._get_enum('collision', Collision)

    def get_action(self) -> Optional[Action]:
        """Get the configured file action."""
        return self._get_enum('action', Action)

    def get_target_dir(self) -> Optional[str]:
        """Get the configured target directory."""
        target = self.data.get('target_dir')
        return str(target) if target is not None else None
