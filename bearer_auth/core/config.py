"""
Configuration for bearer_auth

Module: core.config
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - AuthConfig dataclass with defaults from constants
  - Environment overrides (BEARER_AUTH_*)
  - Validation with ConfigError
"""

import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Mapping, Optional

from .constants import (
    DEFAULT_DATA_DIR,
    DEFAULT_KEYS_DIR,
    DEFAULT_TOKEN_TTL_SECONDS,
    DEFAULT_LEEWAY_SECONDS,
    DEFAULT_BCRYPT_ROUNDS,
    MIN_BCRYPT_ROUNDS,
    MAX_BCRYPT_ROUNDS,
    DEFAULT_HTTP_HOST,
    DEFAULT_HTTP_PORT,
    MAX_REQUEST_BODY_SIZE,
    PRIVATE_KEY_FILE,
    PUBLIC_KEY_FILE,
    ENV_DATA_DIR,
    ENV_PRIVATE_KEY_PATH,
    ENV_PUBLIC_KEY_PATH,
    ENV_TOKEN_TTL_SECONDS,
    ENV_LEEWAY_SECONDS,
    ENV_BCRYPT_ROUNDS,
    ENV_HOST,
    ENV_PORT,
)


class ConfigError(ValueError):
    """Invalid configuration value"""
    pass


@dataclass
class HTTPConfig:
    """HTTP surface configuration"""
    host: str = DEFAULT_HTTP_HOST
    port: int = DEFAULT_HTTP_PORT
    max_body_size: int = MAX_REQUEST_BODY_SIZE


@dataclass
class AuthConfig:
    """Service configuration"""
    data_dir: str = DEFAULT_DATA_DIR
    private_key_path: str = str(Path(DEFAULT_KEYS_DIR) / PRIVATE_KEY_FILE)
    public_key_path: str = str(Path(DEFAULT_KEYS_DIR) / PUBLIC_KEY_FILE)
    token_ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS
    leeway_seconds: int = DEFAULT_LEEWAY_SECONDS
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS
    http: HTTPConfig = field(default_factory=HTTPConfig)

    @property
    def token_ttl(self) -> timedelta:
        return timedelta(seconds=self.token_ttl_seconds)

    @property
    def leeway(self) -> timedelta:
        return timedelta(seconds=self.leeway_seconds)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AuthConfig":
        """
        Build config from environment variables, falling back to defaults

        Args:
            environ: Mapping to read (defaults to os.environ)

        Raises:
            ConfigError: If a numeric variable does not parse or is out of range
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        config = cls(
            data_dir=env.get(ENV_DATA_DIR, defaults.data_dir),
            private_key_path=env.get(ENV_PRIVATE_KEY_PATH, defaults.private_key_path),
            public_key_path=env.get(ENV_PUBLIC_KEY_PATH, defaults.public_key_path),
            token_ttl_seconds=_int_from_env(env, ENV_TOKEN_TTL_SECONDS, defaults.token_ttl_seconds),
            leeway_seconds=_int_from_env(env, ENV_LEEWAY_SECONDS, defaults.leeway_seconds),
            bcrypt_rounds=_int_from_env(env, ENV_BCRYPT_ROUNDS, defaults.bcrypt_rounds),
            http=HTTPConfig(
                host=env.get(ENV_HOST, defaults.http.host),
                port=_int_from_env(env, ENV_PORT, defaults.http.port),
            ),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """
        Raises:
            ConfigError: On the first invalid field
        """
        if self.token_ttl_seconds <= 0:
            raise ConfigError("token_ttl_seconds must be positive")
        if self.leeway_seconds < 0:
            raise ConfigError("leeway_seconds must not be negative")
        if not MIN_BCRYPT_ROUNDS <= self.bcrypt_rounds <= MAX_BCRYPT_ROUNDS:
            raise ConfigError(
                f"bcrypt_rounds must be between {MIN_BCRYPT_ROUNDS} and {MAX_BCRYPT_ROUNDS}"
            )
        if not 0 <= self.http.port <= 65535:
            raise ConfigError("port must be between 0 and 65535")
        if self.http.max_body_size <= 0:
            raise ConfigError("max_body_size must be positive")


def _int_from_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e
