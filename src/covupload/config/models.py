"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config() (CLI options)
2. Environment variables (COVUPLOAD__KEY, COVUPLOAD__SECTION__KEY)
3. Legacy uploader variables (LIBRECOV_URL, PROJECT_TOKEN, COVERAGE_DIR)
4. Project YAML (covupload.yaml in the project root)
5. Global YAML (~/.config/covupload/config.yaml)
6. Built-in defaults (this file)

Examples:
    COVUPLOAD__URL=https://cov.example.com
    COVUPLOAD__TIMEOUT_SEC=10
    COVUPLOAD__LOGGING__LEVEL=DEBUG
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
CoverageFormat = Literal["istanbul", "gocov"]

DEFAULT_URL = "http://localhost:4000"
DEFAULT_COVERAGE_DIR = "coverage"
DEFAULT_SERVICE_NAME = "manual"
UPLOAD_PATH = "/api/upload"

# Default artifact file name per coverage format
DEFAULT_ARTIFACT_NAMES: dict[str, str] = {
    "istanbul": "coverage-final.json",
    "gocov": "coverage.out",
}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        COVUPLOAD__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        COVUPLOAD__LOGGING__FORMAT: console or json
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. Operator progress lines are printed regardless.",
    )
    format: Literal["console", "json"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v


class UploadConfig(BaseModel):
    """Resolved settings for one conversion-and-upload run.

    Built once by load_config() and passed through the pipeline; nothing
    downstream reads the environment.
    """

    url: str = Field(
        default=DEFAULT_URL,
        description="Base URL of the coverage service. The upload goes to <url>/api/upload.",
    )
    project_token: str | None = Field(
        default=None,
        description="Opaque project token sent as repo_token. Required.",
    )
    coverage_dir: str = Field(
        default=DEFAULT_COVERAGE_DIR,
        description="Directory holding the instrumentation artifact.",
    )
    coverage_file: str | None = Field(
        default=None,
        description="Explicit artifact path. Overrides coverage_dir when set.",
    )
    format: CoverageFormat | None = Field(
        default=None,
        description="Artifact format. Auto-detected when unset.",
    )
    service_name: str = Field(
        default=DEFAULT_SERVICE_NAME,
        description="service_name reported in the upload job.",
    )
    timeout_sec: float = Field(
        default=30.0,
        description="HTTP timeout for the single upload attempt.",
    )
    project_root: str | None = Field(
        default=None,
        description="Root that source file names are made relative to. Default: cwd.",
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"URL must start with http:// or https://, got {v}")
        return v.rstrip("/")

    @field_validator("timeout_sec")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Timeout must be positive, got {v}")
        return v

    @property
    def root(self) -> Path:
        return Path(self.project_root).resolve() if self.project_root else Path.cwd().resolve()

    @property
    def artifact_path(self) -> Path:
        """Location of the instrumentation artifact, relative paths resolved against root."""
        if self.coverage_file:
            path = Path(self.coverage_file)
        else:
            name = DEFAULT_ARTIFACT_NAMES[self.format or "istanbul"]
            path = Path(self.coverage_dir) / name
        path = path.expanduser()
        return path if path.is_absolute() else self.root / path
