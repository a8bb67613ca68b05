"""covupload error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Coverage artifact
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_MISSING_REQUIRED = 2003

    # Coverage artifact (3xxx)
    ARTIFACT_NOT_FOUND = 3001
    ARTIFACT_PARSE_ERROR = 3002
    ARTIFACT_UNKNOWN_FORMAT = 3003


@dataclass(frozen=True, slots=True)
class CovUploadError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(CovUploadError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def missing_required(cls, field: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_MISSING_REQUIRED,
            message=f"Missing required config field: {field}",
            details={"field": field},
        )


class ArtifactError(CovUploadError):
    """Errors locating or reading the coverage artifact."""

    @classmethod
    def not_found(cls, path: str) -> "ArtifactError":
        return cls(
            code=ErrorCode.ARTIFACT_NOT_FOUND,
            message=f"Coverage file not found at {path}",
            details={"path": path},
        )

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ArtifactError":
        return cls(
            code=ErrorCode.ARTIFACT_PARSE_ERROR,
            message=f"Failed to parse coverage at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def unknown_format(cls, path: str, valid: list[str]) -> "ArtifactError":
        return cls(
            code=ErrorCode.ARTIFACT_UNKNOWN_FORMAT,
            message=f"Could not detect coverage format for: {path}. "
            f"Supported formats: {', '.join(valid)}",
            details={"path": path, "valid": valid},
        )
