"""Ledger client interfaces following Black Box Design principles."""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from .wallet import Identity


@dataclass(frozen=True)
class DiscoveryOptions:
    """Service discovery flags handed to the ledger client."""
    enabled: bool = True
    as_localhost: bool = True


class IdentityStore(Protocol):
    """Protocol for credential stores keyed by identity label."""

    async def get(self, label: str) -> Optional[Identity]:
        """Return the identity stored under label, or None."""
        ...


@dataclass(frozen=True)
class ConnectOptions:
    """Everything a connector needs besides the network profile."""
    identity_store: IdentityStore
    identity_label: str
    identity: Identity
    discovery: DiscoveryOptions


class TransactionHandle(Protocol):
    """Protocol for issuing chaincode transactions."""

    async def submit(self, tx_name: str, *args: str) -> bytes:
        """Submit a state-changing transaction and wait for commit."""
        ...

    async def evaluate(self, tx_name: str, *args: str) -> bytes:
        """Evaluate a read-only transaction on a peer."""
        ...


class Channel(Protocol):
    """Protocol for a connected channel."""

    def get_transaction_handle(self, chaincode_name: str) -> TransactionHandle:
        """Get the handle for a chaincode deployed on this channel."""
        ...


class Connection(Protocol):
    """Protocol for an open ledger network connection."""

    async def get_channel(self, name: str) -> Channel:
        """Join the named channel."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...


class LedgerConnector(Protocol):
    """Protocol for opening ledger network connections."""

    async def connect(self, profile: Dict[str, Any], options: ConnectOptions) -> Connection:
        """
        Open a connection to the network described by profile.

        Raises:
            NetworkConnectionError: If the network cannot be reached
        """
        ...
