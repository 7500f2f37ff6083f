"""
Hyperledger Fabric connector built on fabric-sdk-py (``hfc``).

Install with the ``fabric`` extra. The SDK is imported when the first
connection is opened so the rest of the gateway runs without it.

hfc reads network profiles from disk, so the rewritten profile is written
to a private temporary directory that lives as long as the connection.
"""

import json
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, List

from .errors import NetworkConnectionError, TransactionError
from .interfaces import ConnectOptions
from .wallet import Identity

logger = logging.getLogger(__name__)

PROFILE_FILE = "connection-profile.json"


def _build_user(identity: Identity, org: str, workdir: Path):
    from cryptography.hazmat.backends import default_backend
    from cryptography.hazmat.primitives import serialization
    from hfc.fabric.user import User
    from hfc.fabric_ca.caservice import Enrollment
    from hfc.util.keyvaluestore import FileKeyValueStore

    private_key = serialization.load_pem_private_key(
        identity.private_key.encode("utf-8"), password=None, backend=default_backend()
    )
    user = User(identity.label, org, FileKeyValueStore(str(workdir / "state")))
    user.enrollment = Enrollment(private_key, identity.certificate.encode("utf-8"))
    user.msp_id = identity.msp_id
    return user


class FabricTransactionHandle:
    """Submits and evaluates chaincode functions through an hfc client."""

    def __init__(self, client, user, channel_name: str, chaincode_name: str, peers: List[Any]):
        self.client = client
        self.user = user
        self.channel_name = channel_name
        self.chaincode_name = chaincode_name
        self.peers = peers

    async def submit(self, tx_name: str, *args: str) -> bytes:
        """Endorse, order and wait for the commit of tx_name."""
        try:
            result = await self.client.chaincode_invoke(
                requestor=self.user,
                channel_name=self.channel_name,
                peers=self.peers,
                args=list(args),
                cc_name=self.chaincode_name,
                fcn=tx_name,
                wait_for_event=True,
                raise_on_error=True,
            )
        except Exception as e:
            raise TransactionError(f"{tx_name} was rejected: {e}") from e
        return _to_bytes(result)

    async def evaluate(self, tx_name: str, *args: str) -> bytes:
        """Query tx_name on the endorsing peers without ordering."""
        try:
            result = await self.client.chaincode_query(
                requestor=self.user,
                channel_name=self.channel_name,
                peers=self.peers,
                args=list(args),
                cc_name=self.chaincode_name,
                fcn=tx_name,
            )
        except Exception as e:
            raise TransactionError(f"{tx_name} was rejected: {e}") from e
        return _to_bytes(result)


def _to_bytes(result) -> bytes:
    if result is None:
        return b""
    if isinstance(result, bytes):
        return result
    if isinstance(result, str):
        return result.encode("utf-8")
    return json.dumps(result).encode("utf-8")


class FabricChannel:
    def __init__(self, connection: "FabricConnection", name: str, peers: List[Any]):
        self.connection = connection
        self.name = name
        self.peers = peers

    def get_transaction_handle(self, chaincode_name: str) -> FabricTransactionHandle:
        return FabricTransactionHandle(
            self.connection.client, self.connection.user, self.name, chaincode_name, self.peers
        )


class FabricConnection:
    """An hfc client bound to one identity."""

    def __init__(self, client, user, options: ConnectOptions, workdir: Path):
        self.client = client
        self.user = user
        self.options = options
        self.workdir = workdir
        self.channels: Dict[str, FabricChannel] = {}

    async def get_channel(self, name: str) -> FabricChannel:
        """
        Join channel name.

        With discovery enabled the endorsing peers come from the discovery
        service, unless as_localhost is set: discovered endpoints advertise
        in-network hostnames, so the profile's own endpoints are used then.
        """
        if name in self.channels:
            return self.channels[name]

        peers = list(self.client.peers.values())
        if not peers:
            raise NetworkConnectionError("Connection profile defines no peers")

        self.client.new_channel(name)
        discovery = self.options.discovery
        if discovery.enabled and not discovery.as_localhost:
            try:
                await self.client.init_with_discovery(self.user, peers[0], name)
            except Exception as e:
                raise NetworkConnectionError(f"Service discovery on {name} failed: {e}") from e
            peers = list(self.client.peers.values())

        channel = FabricChannel(self, name, peers)
        self.channels[name] = channel
        return channel

    async def close(self) -> None:
        """Close the client's gRPC channels and remove the working directory."""
        self.channels.clear()
        try:
            await self.client.close_grpc_channels()
        finally:
            shutil.rmtree(self.workdir, ignore_errors=True)


class FabricConnector:
    """Opens hfc-backed connections to a Fabric network."""

    async def connect(self, profile: Dict[str, Any], options: ConnectOptions) -> FabricConnection:
        workdir = Path(tempfile.mkdtemp(prefix="assetgateway-"))
        try:
            from hfc.fabric import Client

            profile_path = workdir / PROFILE_FILE
            profile_path.write_text(json.dumps(profile), encoding="utf-8")
            client = Client(net_profile=str(profile_path))

            org = profile.get("client", {}).get("organization", "")
            user = _build_user(options.identity, org, workdir)
        except Exception as e:
            shutil.rmtree(workdir, ignore_errors=True)
            raise NetworkConnectionError(f"Failed to connect to Fabric network: {e}") from e

        logger.debug(f"Opened Fabric client as {options.identity_label} ({options.identity.msp_id})")
        return FabricConnection(client, user, options, workdir)
