"""Configuration for the asset gateway."""

from .provider import (
    NO_HOST_OVERRIDE,
    APIConfig,
    ConfigProvider,
    ConnectionConfig,
    EnvConfigProvider,
)

__all__ = [
    "APIConfig",
    "ConfigProvider",
    "ConnectionConfig",
    "EnvConfigProvider",
    "NO_HOST_OVERRIDE",
]
