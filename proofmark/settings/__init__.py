"""Settings package exports."""

from .loader import (
    AppConfig,
    CloudinarySettings,
    ConfigError,
    GitSettings,
    MediaSettings,
    SiteSettings,
    build_config,
    load_config,
    validate_config,
)

__all__ = [
    "AppConfig",
    "CloudinarySettings",
    "ConfigError",
    "GitSettings",
    "MediaSettings",
    "SiteSettings",
    "build_config",
    "load_config",
    "validate_config",
]
