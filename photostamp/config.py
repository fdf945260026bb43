"""
Configuration management for photostamp.
"""

import re
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from .constants import CONFIG_FILENAME, PROGRAM, get_logger
from .extractors import ExtractorRule


class Config:
    """Loads optional user settings from a YAML file.

    Only ``filename_rules`` is recognized: a list of mappings with ``pattern``
    and ``format`` keys, consulted after the built-in filename rules.
    """

    def __init__(self, config_path: Optional[Path] = None):
        # Default config location: ~/.<PROGRAM>/config.yml
        if config_path:
            self.config_path = Path(config_path)
        else:
            self.config_path = Path.home() / f".{PROGRAM}" / CONFIG_FILENAME
        self.logger = get_logger()
        self.data = self._load_config()

    def _load_config(self) -> Dict:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            return {}

        try:
            with open(self.config_path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            self.logger.warning(f"Could not load config {self.config_path}: {e}")
            return {}

        if not isinstance(data, dict):
            self.logger.warning(f"Ignoring config {self.config_path}: expected a mapping")
            return {}
        return data

    def get_filename_rules(self) -> List[ExtractorRule]:
        """Build the extra filename rules, skipping invalid entries."""
        entries = self.data.get('filename_rules') or []
        if not isinstance(entries, list):
            self.logger.warning("Ignoring 'filename_rules': expected a list")
            return []

        rules = []
        for entry in entries:
            try:
                rules.append(ExtractorRule(str(entry['pattern']), str(entry['format'])))
            except (KeyError, TypeError, ValueError, re.error) as e:
                self.logger.warning(f"Ignoring invalid filename rule {entry!r}: {e}")
        return rules
