"""Unified configuration layer for the relay.

Goals
-----
* Centralize defaults (provider type, model, base URL, server address).
* Merge sources in a predictable order:
    1. Built-in defaults (``config.defaults``)
    2. ``.env`` file in the working directory (``DOTENV_FILE`` overrides path)
    3. Process environment variables (``LLMAGENT_*``)
* Read once at startup and validate before any provider is constructed.

Public API
----------
* load_config() -> AppConfig
* get_config() -> AppConfig (process cached)
* AppConfig.validate() raises ConfigError
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx

from .defaults import (
    DEFAULT_PROVIDER_TYPE,
    MCP_DEFAULT_HOST,
    MCP_DEFAULT_PORT,
    MOCK_DEFAULT_DELAY_MS,
    OPENROUTER_DEFAULT_BASE_URL,
    OPENROUTER_DEFAULT_MODEL,
    PROVIDER_OPENROUTER,
    SUPPORTED_PROVIDERS,
)
from .env import (
    ENV_LOG_FILE,
    ENV_LOG_LEVEL,
    ENV_MCP_SERVER_HOST,
    ENV_MCP_SERVER_PORT,
    ENV_MOCK_DELAY_MS,
    ENV_OPENROUTER_API_KEY,
    ENV_OPENROUTER_BASE_URL,
    ENV_OPENROUTER_MODEL,
    ENV_PROVIDER_TYPE,
    env_str,
    load_dotenv_once,
)


class ConfigError(Exception):
    """Raised for fatal startup configuration problems.

    Failure modes include an unknown provider type, a missing credential for a
    provider that needs one, a malformed OpenRouter base URL, and non-numeric
    port or delay values.
    """


def _env_int(name: str, default: int) -> int:
    raw = env_str(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {value}")
    return value


def _check_base_url(value: str) -> None:
    """Raise :class:`ConfigError` unless ``value`` is an absolute http(s) URL."""
    try:
        url = httpx.URL(value)
    except (httpx.InvalidURL, ValueError) as exc:
        raise ConfigError(f"{ENV_OPENROUTER_BASE_URL} is not a valid URL: {exc}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigError(f"{ENV_OPENROUTER_BASE_URL} must be an absolute http(s) URL, got {value!r}")


@dataclass(frozen=True)
class AppConfig:
    """Process configuration read once from the environment.

    Attributes:
        provider_type: ``"mock"`` or ``"openrouter"`` (lowercased).
        openrouter_api_key: Credential, required when ``provider_type`` is
            ``"openrouter"``.
        openrouter_model: Model identifier sent in each request.
        openrouter_base_url: API base; requests go to ``<base>/chat/completions``.
        server_host: Bind address for the HTTP endpoint.
        server_port: Bind port for the HTTP endpoint.
        mock_delay_ms: Per-fragment delay for the mock provider.
        log_level: Optional level name applied to the ``llmagent`` logger.
        log_file: Optional path for a rotating JSON log file.
    """

    provider_type: str = DEFAULT_PROVIDER_TYPE
    openrouter_api_key: Optional[str] = None
    openrouter_model: str = OPENROUTER_DEFAULT_MODEL
    openrouter_base_url: str = OPENROUTER_DEFAULT_BASE_URL
    server_host: str = MCP_DEFAULT_HOST
    server_port: int = MCP_DEFAULT_PORT
    mock_delay_ms: int = MOCK_DEFAULT_DELAY_MS
    log_level: Optional[str] = None
    log_file: Optional[str] = None

    @property
    def mock_delay_seconds(self) -> float:
        return self.mock_delay_ms / 1000.0

    @property
    def server_address(self) -> str:
        return f"{self.server_host}:{self.server_port}"

    def validate(self) -> "AppConfig":
        """Raise :class:`ConfigError` when the configuration is unusable."""
        if self.provider_type not in SUPPORTED_PROVIDERS:
            raise ConfigError(
                f"unknown LLM provider type {self.provider_type!r} "
                f"(expected one of: {', '.join(SUPPORTED_PROVIDERS)})"
            )
        if self.provider_type == PROVIDER_OPENROUTER:
            if not self.openrouter_api_key:
                raise ConfigError(f"{ENV_OPENROUTER_API_KEY} is required for the openrouter provider")
            _check_base_url(self.openrouter_base_url)
        if not 0 < self.server_port < 65536:
            raise ConfigError(f"{ENV_MCP_SERVER_PORT} out of range: {self.server_port}")
        return self

    def describe(self) -> str:
        """Return a multi-line summary safe to print (the key is masked)."""
        key = "set" if self.openrouter_api_key else "not set"
        return "\n".join(
            [
                f"  provider type : {self.provider_type}",
                f"  openrouter    : model={self.openrouter_model} base_url={self.openrouter_base_url} api_key={key}",
                f"  server        : {self.server_address}",
                f"  mock delay    : {self.mock_delay_ms}ms",
            ]
        )


def load_config(*, dotenv: bool = True) -> AppConfig:
    """Build an :class:`AppConfig` from the environment (not validated)."""
    if dotenv:
        load_dotenv_once()
    return AppConfig(
        provider_type=(env_str(ENV_PROVIDER_TYPE, DEFAULT_PROVIDER_TYPE) or DEFAULT_PROVIDER_TYPE).lower(),
        openrouter_api_key=env_str(ENV_OPENROUTER_API_KEY),
        openrouter_model=env_str(ENV_OPENROUTER_MODEL, OPENROUTER_DEFAULT_MODEL) or OPENROUTER_DEFAULT_MODEL,
        openrouter_base_url=(env_str(ENV_OPENROUTER_BASE_URL, OPENROUTER_DEFAULT_BASE_URL) or OPENROUTER_DEFAULT_BASE_URL).rstrip("/"),
        server_host=env_str(ENV_MCP_SERVER_HOST, MCP_DEFAULT_HOST) or MCP_DEFAULT_HOST,
        server_port=_env_int(ENV_MCP_SERVER_PORT, MCP_DEFAULT_PORT),
        mock_delay_ms=_env_int(ENV_MOCK_DELAY_MS, MOCK_DEFAULT_DELAY_MS),
        log_level=env_str(ENV_LOG_LEVEL),
        log_file=env_str(ENV_LOG_FILE),
    )


_CACHED: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Return the process-cached, validated configuration."""
    global _CACHED  # noqa: PLW0603 - intentional module cache
    if _CACHED is None:
        _CACHED = load_config().validate()
    return _CACHED


__all__ = [
    "AppConfig",
    "ConfigError",
    "load_config",
    "get_config",
]
