"""Helpers for loading the proofmark configuration file."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_CONFIG_NAME = "proofmark.toml"
CONFIG_ENV_VAR = "PROOFMARK_CONFIG"

DEFAULT_CONTENT_DIR = "src/content"
DEFAULT_CATEGORIES = ("posts", "projects", "pieces", "notes")
DEFAULT_CACHE_FILE = ".upload-cache.json"
DEFAULT_MEDIA_URL_PREFIX = "/media"
DEFAULT_CLOUDINARY_FOLDER = "casey-site"


class ConfigError(ValueError):
    """Raised when the configuration file is missing or malformed."""


@dataclass(slots=True)
class SiteSettings:
    path: Path
    content_dir: str = DEFAULT_CONTENT_DIR
    categories: tuple[str, ...] = DEFAULT_CATEGORIES
    cache_file: str = DEFAULT_CACHE_FILE

    @property
    def content_root(self) -> Path:
        return self.path / self.content_dir

    @property
    def cache_path(self) -> Path:
        return self.path / self.cache_file


@dataclass(slots=True)
class MediaSettings:
    path: Path
    url_prefix: str = DEFAULT_MEDIA_URL_PREFIX


@dataclass(slots=True)
class CloudinarySettings:
    cloud_name: str
    folder: str = DEFAULT_CLOUDINARY_FOLDER
    timeout: float = 120.0


@dataclass(slots=True)
class GitSettings:
    remote: str | None = None


@dataclass(slots=True)
class AppConfig:
    site: SiteSettings
    media: MediaSettings
    cloudinary: CloudinarySettings
    git: GitSettings = field(default_factory=GitSettings)
    source: Path | None = None


def _config_path(explicit: str | os.PathLike[str] | None = None) -> Path:
    if explicit:
        return Path(explicit).expanduser().resolve()
    env_value = os.environ.get(CONFIG_ENV_VAR)
    if env_value:
        return Path(env_value).expanduser().resolve()
    return Path.cwd() / DEFAULT_CONFIG_NAME


def _load_toml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        with path.open("rb") as fp:
            return tomllib.load(fp)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def _to_path(value: Any, *, base: Path, key: str) -> Path:
    if not value or not isinstance(value, str):
        raise ConfigError(f"Missing required setting '{key}'")
    candidate = Path(value).expanduser()
    return candidate if candidate.is_absolute() else (base / candidate).resolve()


def _categories(value: Any) -> tuple[str, ...]:
    if value is None:
        return DEFAULT_CATEGORIES
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError("'site.categories' must be a list of strings")
    return tuple(value)


def build_config(data: dict[str, Any], *, base_dir: Path, source: Path | None = None) -> AppConfig:
    """Build an :class:`AppConfig` from an already parsed mapping."""

    site_section = data.get("site", {})
    media_section = data.get("media", {})
    cloud_section = data.get("cloudinary", {})
    git_section = data.get("git", {})

    site = SiteSettings(
        path=_to_path(site_section.get("path"), base=base_dir, key="site.path"),
        content_dir=str(site_section.get("content_dir", DEFAULT_CONTENT_DIR)),
        categories=_categories(site_section.get("categories")),
        cache_file=str(site_section.get("cache_file", DEFAULT_CACHE_FILE)),
    )

    url_prefix = str(media_section.get("url_prefix", DEFAULT_MEDIA_URL_PREFIX)).rstrip("/")
    if not url_prefix.startswith("/"):
        url_prefix = f"/{url_prefix}"
    media = MediaSettings(
        path=_to_path(media_section.get("path"), base=base_dir, key="media.path"),
        url_prefix=url_prefix,
    )

    cloud_name = cloud_section.get("cloud_name")
    if not cloud_name:
        raise ConfigError("Missing required setting 'cloudinary.cloud_name'")
    cloudinary = CloudinarySettings(
        cloud_name=str(cloud_name),
        folder=str(cloud_section.get("folder", DEFAULT_CLOUDINARY_FOLDER)).strip("/"),
        timeout=float(cloud_section.get("timeout", 120)),
    )

    return AppConfig(
        site=site,
        media=media,
        cloudinary=cloudinary,
        git=GitSettings(remote=git_section.get("remote")),
        source=source,
    )


def load_config(config_path: str | os.PathLike[str] | None = None) -> AppConfig:
    path = _config_path(config_path)
    data = _load_toml(path)
    return build_config(data, base_dir=path.parent, source=path)


def validate_config(config: AppConfig) -> list[str]:
    """Return human readable problems with the configured directories."""

    errors: list[str] = []
    site_path = config.site.path
    if not site_path.exists():
        errors.append(f"Website directory not found: {site_path}")
    elif not config.site.content_root.is_dir():
        errors.append(f"No {config.site.content_dir}/ folder found in website directory")

    if not config.media.path.exists():
        errors.append(f"Media library not found: {config.media.path}")
    return errors
