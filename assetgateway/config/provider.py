"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Protocol

# FABRIC_HOST value meaning "leave profile endpoints as they are"
NO_HOST_OVERRIDE = "localhost"

DEFAULT_PROFILE_PATH = Path("connection") / "connection-org1.json"
DEFAULT_WALLET_PATH = Path("wallet")


@dataclass(frozen=True)
class ConnectionConfig:
    """Ledger connection parameters, resolved once per connection attempt."""
    profile_path: Path
    channel_name: str
    chaincode_name: str
    identity_label: str
    wallet_path: Path
    discovery_enabled: bool
    as_localhost: bool
    host_override: str


@dataclass
class APIConfig:
    """API server configuration."""
    host: str
    port: int
    log_level: str
    debug: bool


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_connection_config(self) -> ConnectionConfig:
        """Get ledger connection configuration."""
        ...

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...


def _flag(value: str) -> bool:
    return value.lower() == "true"


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """
        Args:
            environ: Mapping to read instead of os.environ (tests)
        """
        self._environ = environ

    def _get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        environ = os.environ if self._environ is None else self._environ
        return environ.get(key) or default

    def _path(self, key: str, default: Path) -> Path:
        raw = self._get(key)
        return Path(raw).resolve() if raw else default.resolve()

    def get_connection_config(self) -> ConnectionConfig:
        """
        Get ledger connection configuration from environment variables.

        Paths are made absolute against the working directory; the files
        themselves are not checked here.
        """
        return ConnectionConfig(
            profile_path=self._path("CCP_PATH", DEFAULT_PROFILE_PATH),
            channel_name=self._get("CHANNEL_NAME", "mychannel"),
            chaincode_name=self._get("CHAINCODE_NAME", "assettrack"),
            identity_label=self._get("APP_IDENTITY", "appUser"),
            wallet_path=self._path("WALLET_PATH", DEFAULT_WALLET_PATH),
            discovery_enabled=_flag(self._get("DISCOVERY_ENABLED", "true")),
            as_localhost=_flag(self._get("AS_LOCALHOST", "true")),
            host_override=self._get("FABRIC_HOST", NO_HOST_OVERRIDE),
        )

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        return APIConfig(
            host=self._get("API_HOST", "0.0.0.0"),
            port=int(self._get("API_PORT", "8080")),
            log_level=self._get("LOG_LEVEL", "INFO").upper(),
            debug=_flag(self._get("DEBUG", "false")),
        )
