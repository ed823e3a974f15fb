"""Spock - Configuration Manager for CloudCrud.

Spock manages configuration from JSON files, config dicts and environment
variables, providing a unified interface for accessing settings.

Configuration hierarchy:
- cloudcrud: Core settings
  - default_limit: Page size of readTable when no limit is given (100)
  - max_limit: Optional upper bound for limit (None = unbounded)
  - strict_filter_operators: Reject unknown filter operators (False)
  - seed_record_on_create_table: Legacy createTable seeding (False)
  - server_version: Version reported by getServerInfo
  - features: Capability flags reported by getServerInfo
- store: Document store settings
  - backend: Store backend ("memory")
  - ... (backend-specific settings)

Environment variables follow the naming convention:
CLOUDCRUD__<section>__<key> for nested values
Example: CLOUDCRUD__CLOUDCRUD__DEFAULT_LIMIT=50
         CLOUDCRUD__STORE__BACKEND="memory"
"""

import json
import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

SECTIONS = ("cloudcrud", "store")


class Spock:
    """Configuration manager for CloudCrud instances.

    Each CloudCrud instance has its own Spock instance to maintain
    isolated configuration state.

    Famous quote from Spock in Star Trek:
    "Logic is the beginning of wisdom, not the end."
    """

    ENV_PREFIX = "CLOUDCRUD"
    ENV_SEPARATOR = "__"

    def __init__(self, config_path: str | None = None):
        """Initialize Spock configuration manager.

        Args:
            config_path: Path to JSON configuration file. If None, only
                        defaults, a config dict and environment variables are used.
        """
        self._config_path = config_path
        self._config = self.default_config()
        self._config_object: dict[str, Any] | None = None
        self._loaded = False
        logger.debug("Spock instance created with config_path=%s", config_path)

    @staticmethod
    def default_config() -> dict[str, Any]:
        """Return a new default config dict each time."""
        return {
            "cloudcrud": {
                "default_limit": 100,
                "max_limit": None,
                "strict_filter_operators": False,
                "seed_record_on_create_table": False,
                "server_version": "4.10.4",
                "features": {
                    "liveQueries": True,
                    "redisCache": True,
                    "dashboard": True,
                    "publicAccess": True,
                },
            },
            "store": {"backend": "memory"},
        }

    def load(self, config: dict[str, Any] | None = None) -> None:
        """Load configuration from a config dict, a JSON file and environment variables.

        Args:
            config: Optional config dict merged over the defaults.

        Priority (highest to lowest):
        1. Environment variables
        2. JSON file
        3. Provided config (if any)
        4. Default values
        """
        if self._loaded:
            logger.debug("Configuration already loaded, skipping reload")
            return

        self._config = self.default_config()

        if config is not None:
            self._config_object = config
        if self._config_object is not None:
            self._merge_sections(self._config_object, source="config dict")

        if self._config_path:
            self._load_from_json()

        self._load_from_env()

        self._loaded = True
        logger.info("Configuration loaded successfully")
        logger.debug(
            "Final config structure: cloudcrud keys=%s, store keys=%s",
            list(self._config["cloudcrud"].keys()),
            list(self._config["store"].keys()),
        )

    def _merge_sections(self, data: Any, *, source: str) -> None:
        """Validate a config mapping and merge its sections over the current values."""
        if not isinstance(data, dict):
            raise ValueError(f"Configuration from {source} must be an object")

        for section in SECTIONS:
            if section not in data:
                continue
            if not isinstance(data[section], dict):
                raise ValueError(f"'{section}' section must be an object")
            self._config[section].update(deepcopy(data[section]))

    def _load_from_json(self) -> None:
        """Load configuration from JSON file."""
        config_file = Path(self._config_path)
        if not config_file.exists():
            logger.warning("Config file not found: %s", self._config_path)
            return

        try:
            with open(config_file, encoding="utf-8") as f:
                json_config = json.load(f)
        except json.JSONDecodeError as e:
            logger.error("Invalid JSON in config file %s: %s", self._config_path, e)
            raise ValueError(f"Invalid JSON configuration file: {e}") from e

        self._merge_sections(json_config, source=str(config_file))
        logger.info("Loaded configuration from JSON: %s", self._config_path)

    def _load_from_env(self) -> None:
        """Load configuration from environment variables.

        Environment variables follow the pattern:
        CLOUDCRUD__<SECTION>__<KEY>__<SUBKEY>...

        Examples:
        - CLOUDCRUD__CLOUDCRUD__STRICT_FILTER_OPERATORS=true
        - CLOUDCRUD__CLOUDCRUD__FEATURES__DASHBOARD=false
        - CLOUDCRUD__STORE__BACKEND=memory
        """
        prefix = f"{self.ENV_PREFIX}{self.ENV_SEPARATOR}"

        for env_key, env_value in os.environ.items():
            if not env_key.startswith(prefix):
                continue

            key_path = env_key[len(prefix) :].split(self.ENV_SEPARATOR)

            if len(key_path) < 2:
                logger.warning("Invalid env var format (too short): %s", env_key)
                continue

            section = key_path[0].lower()
            if section not in SECTIONS:
                logger.warning("Invalid section in env var %s: %s", env_key, section)
                continue

            parsed_value = self._parse_env_value(env_value)
            self._set_nested_value(section, key_path[1:], parsed_value)
            logger.debug("Set from env: %s = %s", env_key, parsed_value)

    def _parse_env_value(self, value: str) -> Any:
        """Parse environment variable value with type inference.

        Attempts to parse as JSON first, falls back to string.
        """
        try:
            return json.loads(value)
        except (json.JSONDecodeError, ValueError):
            return value

    def _set_nested_value(self, section: str, path: list[str], value: Any) -> None:
        """Set a value in nested configuration structure.

        Keys are matched case-insensitively against existing keys so that
        camelCase feature flags (``liveQueries``) can be set from env vars.

        Args:
            section: Top-level section ('cloudcrud' or 'store')
            path: List of keys representing the path to the value
            value: Value to set
        """
        target = self._config[section]
        for key in path[:-1]:
            key = self._resolve_key(target, key)
            if not isinstance(target.get(key), dict):
                target[key] = {}
            target = target[key]
        target[self._resolve_key(target, path[-1])] = value

    @staticmethod
    def _resolve_key(target: dict[str, Any], key: str) -> str:
        for existing in target:
            if existing.lower() == key.lower():
                return existing
        return key.lower()

    def get_cloudcrud_config(self, key: str | None = None, default: Any = None) -> Any:
        """Get CloudCrud core configuration.

        Args:
            key: Specific configuration key. If None, returns entire cloudcrud config.
            default: Default value if key not found.

        Returns:
            Configuration value or default.
        """
        if not self._loaded:
            self.load()

        if key is None:
            return deepcopy(self._config["cloudcrud"])

        return self._config["cloudcrud"].get(key, default)

    def get_store_config(self, key: str | None = None, default: Any = None) -> Any:
        """Get document store configuration.

        Args:
            key: Specific configuration key. If None, returns entire store config.
            default: Default value if key not found.

        Returns:
            Configuration value or default.
        """
        if not self._loaded:
            self.load()

        if key is None:
            return deepcopy(self._config["store"])

        return self._config["store"].get(key, default)

    def set_cloudcrud_config(self, key: str, value: Any) -> None:
        """Set CloudCrud core configuration (runtime only, not persisted).

        Args:
            key: Configuration key
            value: Configuration value
        """
        if not self._loaded:
            self.load()

        self._config["cloudcrud"][key] = value
        logger.debug("Set cloudcrud config: %s = %s", key, value)

    def get_all_config(self) -> dict[str, Any]:
        """Get complete configuration snapshot.

        Returns:
            Deep copy of entire configuration.
        """
        if not self._loaded:
            self.load()

        return deepcopy(self._config)

    def reload(self) -> None:
        """Reload configuration from sources.

        Useful for picking up configuration changes at runtime.
        """
        self._loaded = False
        self.load()
        logger.info("Configuration reloaded")

    @property
    def config_path(self) -> str | None:
        """Get the configuration file path."""
        return self._config_path

    @property
    def is_loaded(self) -> bool:
        """Check if configuration has been loaded."""
        return self._loaded


ConfigManager = Spock
