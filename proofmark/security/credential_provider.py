"""Interfaces and basic implementations for secret resolution."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from configparser import ConfigParser
from pathlib import Path
from typing import Iterable, Mapping, MutableMapping

from dotenv import dotenv_values, set_key


class SecretNotFoundError(KeyError):
    """Raised when a secret cannot be resolved."""


def _env_name(key: str) -> str:
    return key.upper().replace(".", "_").replace("-", "_")


class SecretProvider(ABC):
    """Abstract secret lookup contract."""

    @abstractmethod
    def get_secret(self, key: str) -> str:
        """Return the secret associated with ``key``."""

    def set_secret(self, key: str, value: str) -> None:
        raise NotImplementedError(f"{type(self).__name__} is read-only")


class EnvSecretProvider(SecretProvider):
    """Reads secrets from process environment variables.

    ``cloudinary.api_key`` is looked up as ``CLOUDINARY_API_KEY``.
    """

    def __init__(self, prefix: str = "", env: Mapping[str, str] | None = None) -> None:
        self._env = env if env is not None else os.environ
        self._prefix = prefix

    def get_secret(self, key: str) -> str:
        compound = f"{self._prefix}{key}" if self._prefix else key
        value = self._env.get(_env_name(compound))
        if not value:
            raise SecretNotFoundError(compound)
        return value


class DotenvSecretProvider(SecretProvider):
    """Reads and writes secrets in a ``.env`` file using the env-style names."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def get_secret(self, key: str) -> str:
        if not self._path.is_file():
            raise SecretNotFoundError(key)
        value = dotenv_values(self._path).get(_env_name(key))
        if not value:
            raise SecretNotFoundError(key)
        return value

    def set_secret(self, key: str, value: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.touch(exist_ok=True)
        set_key(str(self._path), _env_name(key), value)


class FileSecretProvider(SecretProvider):
    """Loads secrets from INI-style files where ``section.option`` is the key."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._parser = ConfigParser()
        if path.exists():
            self._parser.read(path, encoding="utf-8")

    def get_secret(self, key: str) -> str:
        section, _, option = key.partition(".")
        if not section or not option:
            raise SecretNotFoundError(key)
        if self._parser.has_option(section, option):
            value = self._parser.get(section, option)
            if value:
                return value
        raise SecretNotFoundError(key)

    def set_secret(self, key: str, value: str) -> None:
        section, _, option = key.partition(".")
        if not section or not option:
            raise ValueError(f"Secret key must look like 'section.option': {key}")
        if not self._parser.has_section(section):
            self._parser.add_section(section)
        self._parser.set(section, option, value)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("w", encoding="utf-8") as fp:
            self._parser.write(fp)
        if os.name != "nt":
            os.chmod(self._path, 0o600)


class MappingSecretProvider(SecretProvider):
    """Wraps a simple dictionary for testing."""

    def __init__(self, mapping: MutableMapping[str, str]) -> None:
        self._mapping = mapping

    def get_secret(self, key: str) -> str:
        try:
            return self._mapping[key]
        except KeyError as exc:
            raise SecretNotFoundError(key) from exc

    def set_secret(self, key: str, value: str) -> None:
        self._mapping[key] = value


class ChainedSecretProvider(SecretProvider):
    """Tries multiple providers until one returns a secret.

    Writes go to the first provider that accepts them.
    """

    def __init__(self, providers: Iterable[SecretProvider]) -> None:
        self._providers = tuple(providers)

    def get_secret(self, key: str) -> str:
        for provider in self._providers:
            try:
                return provider.get_secret(key)
            except SecretNotFoundError:
                continue
        raise SecretNotFoundError(key)

    def set_secret(self, key: str, value: str) -> None:
        for provider in self._providers:
            try:
                provider.set_secret(key, value)
            except NotImplementedError:
                continue
            return
        raise NotImplementedError("No writable secret provider configured")


def default_secret_provider(dotenv_path: Path | None = None) -> SecretProvider:
    """Environment first, then the ``.env`` file in the working directory."""
    return ChainedSecretProvider(
        [
            EnvSecretProvider(),
            DotenvSecretProvider(dotenv_path or Path.cwd() / ".env"),
        ]
    )


__all__ = [
    "ChainedSecretProvider",
    "DotenvSecretProvider",
    "EnvSecretProvider",
    "FileSecretProvider",
    "MappingSecretProvider",
    "SecretNotFoundError",
    "SecretProvider",
    "default_secret_provider",
]
