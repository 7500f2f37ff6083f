"""
Gateway Module - Black Box Interface

Purpose: Own the single ledger session
Interface: SessionManager.get_handle(), SessionManager.disconnect(), ShutdownHook
Hidden: Profile loading, host rewriting, wallet lookup, ledger client specifics

The ledger client is injected as a LedgerConnector, so the Fabric SDK can be
swapped for any client implementing the same interfaces.
"""

from .errors import (
    GatewayError,
    IdentityNotFoundError,
    NetworkConnectionError,
    ProfileNotFoundError,
    ProfileParseError,
    ResponseParseError,
    TransactionError,
    WalletError,
)
from .interfaces import ConnectOptions, DiscoveryOptions, LedgerConnector, TransactionHandle
from .profile import load_profile, rewrite_host
from .session import SessionManager, SessionState
from .shutdown import ShutdownHook
from .wallet import FileSystemWallet, Identity

__all__ = [
    "ConnectOptions",
    "DiscoveryOptions",
    "FileSystemWallet",
    "GatewayError",
    "Identity",
    "IdentityNotFoundError",
    "LedgerConnector",
    "NetworkConnectionError",
    "ProfileNotFoundError",
    "ProfileParseError",
    "ResponseParseError",
    "SessionManager",
    "SessionState",
    "ShutdownHook",
    "TransactionError",
    "TransactionHandle",
    "WalletError",
    "load_profile",
    "rewrite_host",
]
