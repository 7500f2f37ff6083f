"""Errors raised by the ledger gateway."""
from pathlib import Path


class GatewayError(Exception):
    """Base class for every ledger gateway failure."""


class ProfileNotFoundError(GatewayError):
    """The connection profile does not exist."""

    def __init__(self, path: Path):
        super().__init__(f"Connection profile not found at {path}")
        self.path = path


class ProfileParseError(GatewayError):
    """The connection profile is not a well-formed document."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Connection profile at {path} could not be parsed: {reason}")
        self.path = path


class WalletError(GatewayError):
    """The wallet directory or one of its entries is unusable."""


class IdentityNotFoundError(GatewayError):
    """
    The configured identity is missing from the wallet.

    The identity has to be enrolled out-of-band before retrying.
    """

    def __init__(self, label: str, wallet_path: Path):
        super().__init__(
            f'User identity "{label}" not found in wallet at {wallet_path}. '
            "Enroll the user before retrying."
        )
        self.label = label
        self.wallet_path = wallet_path


class NetworkConnectionError(GatewayError):
    """The ledger network could not be reached or the session was aborted."""


class TransactionError(GatewayError):
    """A submit or evaluate call was rejected."""


class ResponseParseError(GatewayError):
    """The ledger returned a payload that is not valid JSON."""
