import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .exceptions import ConfigError

ENV_PREFIX = "REQUESTBUILDER_"

class Config:
    def __init__(self, config_path: Optional[Path] = None):
        self._config: Dict[str, Any] = {}
        self._load_defaults()
        self._load_environment_variables()
        if config_path:
            self.load(config_path)
        self.validate(self._config)

    def _load_defaults(self) -> None:
        """Load default configuration values"""
        self._config = {
            "app": {
                "name": "requestbuilder",
                "version": "1.0.0",
                "debug": False
            },
            "http": {
                "base_url": "",
                "timeout": 30.0,
                "verify_ssl": True,
                "user_agent": "requestbuilder/1.0",
                "default_accept": "application/json"
            },
            "logging": {
                "level": "INFO",
                "file": None,
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s - method:%(method)s - url:%(url)s"
            }
        }

    def load(self, path: Path) -> None:
        """Load configuration from JSON file"""
        try:
            with open(path, 'r') as f:
                file_config = json.load(f)
                self.update(file_config)
        except Exception as e:
            raise ConfigError(f"Failed to load config from {path}: {str(e)}")

    def save(self, path: Path) -> None:
        """Save configuration to JSON file"""
        with open(path, 'w') as f:
            json.dump(self._config, f, indent=2)

    def _load_environment_variables(self) -> None:
        """Load configuration from environment variables"""
        for key, value in os.environ.items():
            if key.startswith(ENV_PREFIX):
                # REQUESTBUILDER_HTTP_BASE_URL -> http.base_url
                parts = key[len(ENV_PREFIX):].lower().split('_')

                if len(parts) > 2:
                    config_key = f"{parts[0]}.{'_'.join(parts[1:])}"
                else:
                    config_key = '.'.join(parts)

                converted_value = self._convert_value(value)
                self.set(config_key, converted_value)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot notation key"""
        try:
            value = self._config
            for k in key.split('.'):
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any) -> None:
        """Set configuration value by dot notation key"""
        keys = key.split('.')
        d = self._config
        for k in keys[:-1]:
            if k not in d:
                d[k] = {}
            d = d[k]
        d[keys[-1]] = value

    def update(self, config_dict: Dict[str, Any]) -> None:
        """Update configuration with dictionary"""
        def update_recursive(d1, d2):
            for k, v in d2.items():
                if isinstance(v, dict):
                    if k not in d1 or not isinstance(d1[k], dict):
                        d1[k] = {}
                    update_recursive(d1[k], v)
                else:
                    d1[k] = v
            return d1

        update_recursive(self._config, config_dict)

    def validate(self, config: Dict[str, Any]) -> None:
        """Validate configuration values"""
        if "http" in config:
            http_config = config["http"]
            if "timeout" in http_config:
                timeout = http_config["timeout"]
                if not isinstance(timeout, (int, float)) or timeout <= 0:
                    raise ConfigError("timeout must be a positive number")
            if "default_accept" in http_config:
                accept = http_config["default_accept"]
                if not isinstance(accept, str) or not accept.strip():
                    raise ConfigError("default_accept must be a non-empty media type")

    @staticmethod
    def _convert_value(value: str) -> Any:
        """Convert string value to appropriate type"""
        if value.lower() == "true":
            return True
        if value.lower() == "false":
            return False

        try:
            if '.' in value:
                return float(value)
            return int(value)
        except ValueError:
            return value
