"""
File system wallet.

Reads identities in the layout written by the Fabric enrolment tooling:
one ``<label>.id`` JSON file per identity::

    {
        "credentials": {"certificate": "...", "privateKey": "..."},
        "mspId": "Org1MSP",
        "type": "X.509",
        "version": 1
    }

The wallet never creates identities; they are provisioned out-of-band.
"""

import asyncio
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import WalletError

ID_SUFFIX = ".id"


@dataclass(frozen=True)
class Identity:
    """X.509 credentials used to sign ledger requests."""
    label: str
    msp_id: str
    certificate: str
    private_key: str
    type: str = "X.509"
    version: int = 1

    @classmethod
    def from_dict(cls, label: str, data: dict) -> "Identity":
        """Build an identity from its stored JSON form."""
        credentials = data["credentials"]
        return cls(
            label=label,
            msp_id=data["mspId"],
            certificate=credentials["certificate"],
            private_key=credentials["privateKey"],
            type=data.get("type", "X.509"),
            version=data.get("version", 1),
        )


class FileSystemWallet:
    """Identity store backed by a directory of ``.id`` files."""

    def __init__(self, path: Path):
        self.path = Path(path)

    @classmethod
    async def open(cls, path: Path) -> "FileSystemWallet":
        """
        Open the wallet at path, creating the directory if needed.

        Raises:
            WalletError: If the directory cannot be created or used
        """
        path = Path(path)
        try:
            await asyncio.to_thread(path.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise WalletError(f"Wallet at {path} is not accessible: {e}") from e
        return cls(path)

    def _entry(self, label: str) -> Path:
        return self.path / f"{label}{ID_SUFFIX}"

    def _read(self, label: str) -> Optional[Identity]:
        entry = self._entry(label)
        if not entry.is_file():
            return None
        try:
            data = json.loads(entry.read_text(encoding="utf-8"))
            return Identity.from_dict(label, data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise WalletError(f"Wallet entry {entry} is unreadable: {e}") from e

    async def get(self, label: str) -> Optional[Identity]:
        """
        Get the identity stored under label.

        Returns:
            Identity, or None when the wallet has no such entry

        Raises:
            WalletError: If the entry exists but is malformed
        """
        return await asyncio.to_thread(self._read, label)
