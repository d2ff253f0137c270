"""
Config Loader - Resolve the config file and layer it under the environment.

Resolution order for the YAML file:
    1. The path passed explicitly (must exist)
    2. The path named by WEB_TEST_RECORDER_CONFIG (must exist)
    3. The first of DEFAULT_CONFIG_PATHS that exists

Value precedence, highest first: overrides, environment (including a
dotenv file), YAML file, model defaults.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv

from web_test_recorder.config.settings import Settings
from web_test_recorder.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "WEB_TEST_RECORDER_CONFIG"
ENV_FILES = (".env", ".env.local")

PathLike = Union[str, Path]


class ConfigLoader:
    """Builds a Settings instance from files, environment and overrides."""

    DEFAULT_CONFIG_PATHS: List[Path] = [
        Path("config.yaml"),
        Path("config.yml"),
        Path.home() / ".config" / "web-test-recorder" / "config.yaml",
    ]

    def __init__(self, config_path: Optional[PathLike] = None):
        self._explicit = Path(config_path) if config_path else None

    def resolve(self) -> Optional[Path]:
        """Return the config file to read, or None when there is none."""
        requested = self._explicit
        source = "argument"
        if requested is None and os.environ.get(CONFIG_PATH_ENV):
            requested = Path(os.environ[CONFIG_PATH_ENV])
            source = CONFIG_PATH_ENV

        if requested is not None:
            if not requested.is_file():
                raise ConfigurationError(
                    f"Config file not found: {requested}",
                    {"path": str(requested), "source": source},
                )
            return requested

        return next((p for p in self.DEFAULT_CONFIG_PATHS if p.is_file()), None)

    @staticmethod
    def read_yaml(path: Path) -> Dict[str, Any]:
        """Parse ``path``; an empty file is an empty mapping."""
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}", {"path": str(path)})

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file {path} must contain a mapping, got {type(data).__name__}",
                {"path": str(path)},
            )
        return data

    @staticmethod
    def apply_env_file(env_file: Optional[PathLike] = None) -> None:
        if env_file:
            load_dotenv(env_file)
            return
        found = next((Path(name) for name in ENV_FILES if Path(name).is_file()), None)
        if found is not None:
            load_dotenv(found)

    def load(
        self,
        env_file: Optional[PathLike] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> Settings:
        self.apply_env_file(env_file)

        settings = Settings()
        path = self.resolve()
        if path is not None:
            logger.debug(f"Loading config from {path}")
            file_values = self.read_yaml(path)
            if file_values:
                # Constructor kwargs outrank env vars in pydantic-settings,
                # so re-apply whatever the environment set on top of the file.
                from_env = settings.model_dump(exclude_defaults=True)
                settings = Settings(**file_values).merge_with(from_env)

        return settings.merge_with(overrides) if overrides else settings


def load_config(
    config_path: Optional[PathLike] = None,
    env_file: Optional[PathLike] = None,
    **overrides: Any,
) -> Settings:
    """
    Load settings from every source.

    Example:
        >>> settings = load_config()
        >>> settings = load_config("my-config.yaml")
        >>> settings = load_config(ai={"max_retries": 3})
    """
    return ConfigLoader(config_path).load(env_file=env_file, overrides=overrides or None)
