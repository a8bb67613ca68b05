"""Configuration for covupload."""

from covupload.config.loader import load_config
from covupload.config.models import LoggingConfig, UploadConfig

__all__ = ["LoggingConfig", "UploadConfig", "load_config"]
