"""
Configuration dataclasses for the RDAP lookup client.

This module defines the client configuration (timeouts, retry behavior,
header randomization and an optional outbound proxy) together with the
logging configuration, plus helpers to load them from a JSON file.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from .enums import LogLevel
from .exceptions import ConfigurationError


@dataclass(frozen=True)
class ProxyAuth:
    """Credentials for an outbound proxy."""

    username: str
    password: str


@dataclass(frozen=True)
class ProxyConfig:
    """Outbound proxy settings."""

    host: str
    port: int
    auth: Optional[ProxyAuth] = None
    scheme: str = "http"

    def __post_init__(self) -> None:
        if not self.host:
            raise ConfigurationError(
                code="invalid_proxy",
                message="Proxy host must not be empty",
                details={"host": self.host},
            )
        if not 0 < self.port < 65536:
            raise ConfigurationError(
                code="invalid_proxy",
                message=f"Proxy port out of range: {self.port}",
                details={"port": self.port},
            )

    def to_url(self) -> str:
        """Render the proxy as a URL accepted by httpx; credentials are percent-encoded."""
        credentials = ""
        if self.auth is not None:
            username = quote(self.auth.username, safe="")
            password = quote(self.auth.password, safe="")
            credentials = f"{username}:{password}@"
        return f"{self.scheme}://{credentials}{self.host}:{self.port}"


@dataclass(frozen=True)
class ClientConfig:
    """Client behavior configuration. Immutable after construction."""

    timeout_seconds: float = 30.0
    max_retries: int = 3
    retry_delay_seconds: float = 1.0
    randomize_headers: bool = True
    proxy: Optional[ProxyConfig] = None

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ConfigurationError(
                code="invalid_timeout",
                message=f"Timeout must be positive: {self.timeout_seconds}",
                details={"timeout_seconds": self.timeout_seconds},
            )
        if self.max_retries < 0:
            raise ConfigurationError(
                code="invalid_retries",
                message=f"Retry count must not be negative: {self.max_retries}",
                details={"max_retries": self.max_retries},
            )
        if self.retry_delay_seconds < 0:
            raise ConfigurationError(
                code="invalid_retry_delay",
                message=f"Retry delay must not be negative: {self.retry_delay_seconds}",
                details={"retry_delay_seconds": self.retry_delay_seconds},
            )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "info"
    output_format: str = "text"  # 'json', 'text', 'both'

    @property
    def log_level(self) -> LogLevel:
        try:
            return LogLevel(self.level.lower())
        except ValueError:
            raise ConfigurationError(
                code="invalid_log_level",
                message=f"Unknown log level: {self.level}",
                details={"level": self.level},
            )


def config_to_dict(config: ClientConfig) -> dict:
    """Serialize a client configuration to the JSON file layout."""
    data = {
        "timeout_seconds": config.timeout_seconds,
        "max_retries": config.max_retries,
        "retry_delay_seconds": config.retry_delay_seconds,
        "randomize_headers": config.randomize_headers,
        "proxy": None,
    }
    if config.proxy is not None:
        proxy = {
            "host": config.proxy.host,
            "port": config.proxy.port,
            "scheme": config.proxy.scheme,
            "auth": None,
        }
        if config.proxy.auth is not None:
            proxy["auth"] = {
                "username": config.proxy.auth.username,
                "password": config.proxy.auth.password,
            }
        data["proxy"] = proxy
    return data


def config_from_dict(data: dict) -> ClientConfig:
    """
    Build a client configuration from a parsed JSON mapping.

    Args:
        data: Mapping in the layout produced by config_to_dict

    Returns:
        ClientConfig with defaults for missing keys

    Raises:
        ConfigurationError: If the mapping has the wrong shape
    """
    if not isinstance(data, dict):
        raise ConfigurationError(
            code="invalid_config",
            message="Configuration must be a JSON object",
            details={"type": type(data).__name__},
        )

    try:
        proxy = None
        proxy_data = data.get("proxy")
        if proxy_data:
            auth = None
            auth_data = proxy_data.get("auth")
            if auth_data:
                auth = ProxyAuth(
                    username=auth_data["username"],
                    password=auth_data["password"],
                )
            proxy = ProxyConfig(
                host=proxy_data["host"],
                port=int(proxy_data["port"]),
                auth=auth,
                scheme=proxy_data.get("scheme", "http"),
            )

        return ClientConfig(
            timeout_seconds=float(data.get("timeout_seconds", 30.0)),
            max_retries=int(data.get("max_retries", 3)),
            retry_delay_seconds=float(data.get("retry_delay_seconds", 1.0)),
            randomize_headers=bool(data.get("randomize_headers", True)),
            proxy=proxy,
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(
            code="invalid_config",
            message=f"Invalid configuration: {e}",
            details={"error": str(e)},
        )


def load_config_from_file(config_path: Path) -> ClientConfig:
    """
    Load client configuration from a JSON file.

    Args:
        config_path: Path to the configuration file

    Returns:
        The loaded ClientConfig

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            code="parse_error",
            message=f"Failed to parse config file: {e}",
            details={"file_path": str(config_path)},
        )
    except OSError as e:
        raise ConfigurationError(
            code="io_error",
            message=f"Failed to read config file: {e}",
            details={"file_path": str(config_path)},
        )

    return config_from_dict(data)
