# config/config_loader.py
"""
Config loader module for the client's YAML configuration.
"""

from pathlib import Path

import yaml

CLIENT_CONFIG_FILE = "client.yml"


class ConfigLoader:
    """Loads client.yml and fills in defaults for anything it omits."""

    def __init__(self, config_dir="config"):
        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

    def load_all(self):
        """Load the client configuration merged over defaults."""
        defaults = self._create_default_client_config()

        client_path = self.config_dir / CLIENT_CONFIG_FILE
        if not client_path.exists():
            self._save_client_config(defaults)
            return defaults

        with open(client_path) as f:
            client_data = yaml.safe_load(f) or {}

        if not isinstance(client_data, dict):
            raise ValueError(f"{client_path} must contain a mapping")

        config = {}
        for section, section_defaults in defaults.items():
            section_data = client_data.get(section) or {}
            if not isinstance(section_data, dict):
                raise ValueError(f"Section '{section}' in {client_path} must be a mapping")
            config[section] = {**section_defaults, **section_data}

        return config

    def _create_default_client_config(self):
        """Create default client configuration."""
        return {
            "target": {
                "host": "",
                "port": 502,
                "unit_id": 1,
                "timeout": 3.0,
                "retries": 3,
            },
            "schedule": {
                "repeat": 1,
                "interval_ms": 1000,
            },
            "logging": {
                "log_dir": None,
                "level": "INFO",
            },
        }

    def _save_client_config(self, config):
        """Save client configuration to file."""
        client_path = self.config_dir / CLIENT_CONFIG_FILE
        with open(client_path, "w") as f:
            yaml.dump(config, f, default_flow_style=False)
        print(f"[INFO] Created default client config at {client_path}")
