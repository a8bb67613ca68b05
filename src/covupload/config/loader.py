"""Configuration loading with pydantic-settings.

Sources, highest precedence first:
1. Direct kwargs (CLI options)
2. COVUPLOAD__* environment variables
3. Legacy uploader environment variables (LIBRECOV_URL, PROJECT_TOKEN, COVERAGE_DIR)
4. Project config (covupload.yaml in the project root)
5. Global config (~/.config/covupload/config.yaml)
6. Built-in defaults

The project token is mandatory; load_config() fails before anything else
happens when it is missing.
"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from covupload.config.models import (
    DEFAULT_COVERAGE_DIR,
    DEFAULT_SERVICE_NAME,
    DEFAULT_URL,
    CoverageFormat,
    LoggingConfig,
    UploadConfig,
)
from covupload.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/covupload/config.yaml").expanduser()
PROJECT_CONFIG_NAME = "covupload.yaml"

# Plain environment names used by existing CI upload scripts
LEGACY_ENV_VARS: dict[str, str] = {
    "LIBRECOV_URL": "url",
    "PROJECT_TOKEN": "project_token",
    "COVERAGE_DIR": "coverage_dir",
}


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top-level value must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _legacy_env(environ: Mapping[str, str]) -> dict[str, Any]:
    """Pick up the plain-named variables, ignoring empty values."""
    return {
        field: environ[name] for name, field in LEGACY_ENV_VARS.items() if environ.get(name)
    }


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with instance-based YAML source."""

    class CovUploadSettings(BaseSettings):
        """Root config. Env vars: COVUPLOAD__URL, COVUPLOAD__LOGGING__LEVEL, etc."""

        model_config = SettingsConfigDict(
            env_prefix="COVUPLOAD__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        url: str = DEFAULT_URL
        project_token: str | None = None
        coverage_dir: str = DEFAULT_COVERAGE_DIR
        coverage_file: str | None = None
        format: CoverageFormat | None = None
        service_name: str = DEFAULT_SERVICE_NAME
        timeout_sec: float = 30.0
        project_root: str | None = None
        logging: LoggingConfig = LoggingConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml + legacy env
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return CovUploadSettings


def load_config(
    project_root: Path | None = None,
    **kwargs: Any,
) -> UploadConfig:
    """Resolve configuration once for an upload run.

    Args:
        project_root: Directory holding covupload.yaml and the sources.
                      Defaults to the current working directory.
        **kwargs: Override values (highest precedence). None values are ignored,
                  so unset CLI options fall through to lower layers.

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On invalid YAML, invalid values, or a missing token.
    """
    root = (project_root or Path.cwd()).resolve()

    yaml_config = _deep_merge(
        _load_yaml(GLOBAL_CONFIG_PATH), _load_yaml(root / PROJECT_CONFIG_NAME)
    )
    yaml_config = _deep_merge(yaml_config, _legacy_env(os.environ))
    yaml_config.setdefault("project_root", str(root))

    overrides = {key: value for key, value in kwargs.items() if value is not None}
    if project_root is not None:
        overrides["project_root"] = str(root)

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**overrides)
        config = UploadConfig.model_validate(settings.model_dump())
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e

    if not (config.project_token and config.project_token.strip()):
        raise ConfigError.missing_required("project_token")

    return config
