"""
Configuration management for Job Coverage.
"""

from pathlib import Path
from typing import Optional
import copy
import json
import os


class Config:
    """Manages application configuration and API keys."""

    DEFAULT_CONFIG = {
        "api_keys": {
            "anthropic": "",
        },
        "llm": {
            "enabled": True,
            "provider": "ollama",  # ollama, anthropic
            "models": {
                "ollama": "llama3.2",
                "anthropic": "claude-sonnet-4-20250514",
            },
            "base_url": "http://localhost:11434",
            "timeout": 60,
            "max_gap_questions": 5,
            "parallel": False,
            "max_attempts": 2,
        },
        "storage": {
            "data_dir": "~/.job_coverage/data",
        },
        "profile": {
            "default_user": "default",
        },
    }

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to config file (default: ~/.job_coverage/config.json)
        """
        if config_path:
            self.config_path = Path(config_path)
        else:
            self.config_path = Path.home() / ".job_coverage" / "config.json"

        self.config = self._load_config()

    def _load_config(self) -> dict:
        """Load configuration from file or create default."""
        defaults = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path.exists():
            with open(self.config_path, 'r') as f:
                user_config = json.load(f)

            if not isinstance(user_config, dict):
                raise ValueError(f"Config file {self.config_path} must contain a JSON object")

            # Merge with defaults
            return self._deep_merge(defaults, user_config)

        return defaults

    def _deep_merge(self, base: dict, override: dict) -> dict:
        """Deep merge two dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def save(self) -> None:
        """Save current configuration to file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.config_path, 'w') as f:
            json.dump(self.config, f, indent=2)

    def get(self, key: str, default=None):
        """
        Get a configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "llm.models.ollama")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value) -> None:
        """
        Set a configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "llm.provider")
            value: Value to set
        """
        keys = key.split('.')
        config = self.config

        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def get_api_key(self, provider: str) -> str:
        """
        Get API key for a provider.

        Checks both config file and environment variables.
        Environment variables take precedence.

        Args:
            provider: Provider name (e.g. anthropic)

        Returns:
            API key string
        """
        env_value = os.environ.get(f"{provider.upper()}_API_KEY")

        if env_value:
            return env_value

        return self.get(f"api_keys.{provider}", "")

    def set_api_key(self, provider: str, key: str) -> None:
        """Set API key for a provider."""
        self.set(f"api_keys.{provider}", key)
        self.save()

    def get_ollama_base_url(self) -> str:
        """Ollama server URL; OLLAMA_BASE_URL overrides the config file."""
        return os.environ.get("OLLAMA_BASE_URL") or self.get("llm.base_url", "http://localhost:11434")

    def get_data_dir(self) -> Path:
        """Get the directory that holds profiles and jobs."""
        return Path(self.get("storage.data_dir", "~/.job_coverage/data")).expanduser()

    def use_llm(self) -> bool:
        """Whether assisted parsing and questions are enabled."""
        return bool(self.get("llm.enabled", True))

    def print_config(self) -> None:
        """Print current configuration (with API keys masked)."""
        masked_config = self._mask_sensitive(self.config)
        print(json.dumps(masked_config, indent=2))

    def _mask_sensitive(self, data: dict, sensitive_keys: set = None, masked: bool = False) -> dict:
        """Mask sensitive values in configuration."""
        if sensitive_keys is None:
            sensitive_keys = {"api_key", "api_keys", "key", "secret", "password", "token"}

        result = {}
        for key, value in data.items():
            is_sensitive = masked or any(s in key.lower() for s in sensitive_keys)
            if isinstance(value, dict):
                result[key] = self._mask_sensitive(value, sensitive_keys, is_sensitive)
            elif is_sensitive:
                if value:
                    value = str(value)
                    result[key] = f"{value[:4]}...{value[-4:]}" if len(value) > 8 else "****"
                else:
                    result[key] = "(not set)"
            else:
                result[key] = value
        return result
