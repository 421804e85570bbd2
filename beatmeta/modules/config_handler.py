import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from settings import BeatmetaSettings


class ConfigurationManager:
    def __init__(self, config_path: Union[str, Path]):
        self.config_path = Path(config_path)

    def read_config_file(self) -> Dict[str, Any]:
        """Read raw settings from a JSON or YAML file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, 'r') as f:
                if self.config_path.suffix in ['.yaml', '.yml']:
                    config_data = yaml.safe_load(f)
                else:
                    config_data = json.load(f)
        except Exception as e:
            logging.error(f"Error loading configuration: {e}")
            raise

        return config_data or {}

    def load_config(self) -> BeatmetaSettings:
        """Load settings, with file values taking precedence over the environment."""
        config_data = self.read_config_file()
        try:
            return BeatmetaSettings(**config_data)
        except Exception as e:
            logging.error(f"Invalid configuration in {self.config_path}: {e}")
            raise
