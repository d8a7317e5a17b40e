"""
Settings loader with priority: CLI > env > TOML > defaults
"""
import os
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Any, Optional

from ...core.constants import DEFAULT_SERVERLESS_BIN, ENV_PREFIX, SETTINGS_FILENAME
from ...core.exceptions import ConfigError


@dataclass
class WatchSettings:
    """Effective settings of a watch session"""
    serverless_bin: str = DEFAULT_SERVERLESS_BIN
    function: Optional[str] = None
    config: Optional[str] = None
    stage: Optional[str] = None
    region: Optional[str] = None
    verbose: bool = False
    use_polling: bool = False
    max_parallel: Optional[int] = None

    def deploy_options(self) -> Dict[str, Any]:
        """User options forwarded to the deploy primitives"""
        return {
            "stage": self.stage,
            "region": self.region,
            "config": self.config,
            "function": self.function,
            "verbose": True if self.verbose else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WatchSettings":
        """Create from dictionary, ignoring unknown keys"""
        known = {f.name for f in fields(cls)}
        settings = cls(**{k: v for k, v in data.items() if k in known})
        settings.validate()
        return settings

    def validate(self) -> None:
        """Validate settings"""
        if not self.serverless_bin:
            raise ConfigError("serverless_bin must not be empty")
        if self.max_parallel is not None:
            if not isinstance(self.max_parallel, int) or self.max_parallel < 1:
                raise ConfigError(f"Invalid max_parallel: {self.max_parallel}")


class ConfigLoader:
    """Configuration loader with priority support"""

    def __init__(self):
        self._env_prefix = ENV_PREFIX

    def load_toml(self, path: Path) -> Dict[str, Any]:
        """Load TOML settings file"""
        if not path.exists():
            raise ConfigError(f"Settings file not found: {path}")

        try:
            data = tomllib.loads(path.read_text(encoding='utf-8'))
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Failed to parse TOML settings: {e}") from e

        # Settings may live at the top level or under [deploywatch]
        if isinstance(data.get("deploywatch"), dict):
            data = data["deploywatch"]
        return {key.replace("-", "_"): value for key, value in data.items()}

    def load_env(self) -> Dict[str, Any]:
        """Load settings from environment variables"""
        config = {}

        env_mappings = {
            f"{self._env_prefix}SERVERLESS_BIN": "serverless_bin",
            f"{self._env_prefix}STAGE": "stage",
            f"{self._env_prefix}REGION": "region",
            f"{self._env_prefix}VERBOSE": "verbose",
            f"{self._env_prefix}USE_POLLING": "use_polling",
            f"{self._env_prefix}MAX_PARALLEL": "max_parallel",
        }

        for env_key, config_key in env_mappings.items():
            value = os.getenv(env_key)
            if value:
                config[config_key] = self._convert_value(value)

        return config

    def _convert_value(self, value: str) -> Any:
        """Convert string value to appropriate type"""
        if value.lower() in ("true", "yes", "on"):
            return True
        if value.lower() in ("false", "no", "off"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        return value

    def merge_configs(self, *configs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge multiple configurations with priority.
        Later configs override earlier ones; None values never override.
        """
        result: Dict[str, Any] = {}

        for config in configs:
            for key, value in config.items():
                if value is not None:
                    result[key] = value

        return result

    def load(
        self,
        toml_path: Optional[Path] = None,
        cli_overrides: Optional[Dict[str, Any]] = None,
        use_env: bool = True,
    ) -> WatchSettings:
        """
        Load settings with priority: CLI > env > TOML > defaults

        Args:
            toml_path: Path to TOML settings file
            cli_overrides: CLI parameter overrides
            use_env: Whether to load from environment variables

        Returns:
            Effective settings
        """
        configs = []

        if toml_path:
            configs.append(self.load_toml(toml_path))

        if use_env:
            env_config = self.load_env()
            if env_config:
                configs.append(env_config)

        if cli_overrides:
            configs.append(cli_overrides)

        return WatchSettings.from_dict(self.merge_configs(*configs))


def find_settings_file(service_dir: Path, explicit: Optional[Path] = None) -> Optional[Path]:
    """Explicit settings path, else deploywatch.toml in the service directory if present"""
    if explicit:
        return explicit.expanduser()
    candidate = service_dir / SETTINGS_FILENAME
    return candidate if candidate.exists() else None
