"""
Tests for the fabric-sdk-py connector pieces that do not need the SDK.

The hfc client is replaced by a mock; connecting for real is covered by
integration runs against a Fabric test network.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from assetgateway.modules.gateway import (
    ConnectOptions,
    DiscoveryOptions,
    Identity,
    NetworkConnectionError,
    TransactionError,
)
from assetgateway.modules.gateway.fabric import FabricConnection, FabricTransactionHandle


def make_options(enabled=True, as_localhost=True) -> ConnectOptions:
    identity = Identity(label="appUser", msp_id="Org1MSP", certificate="cert", private_key="key")
    return ConnectOptions(
        identity_store=MagicMock(),
        identity_label="appUser",
        identity=identity,
        discovery=DiscoveryOptions(enabled=enabled, as_localhost=as_localhost),
    )


# Methods of hfc.fabric.Client the connector relies on
HFC_CLIENT_API = [
    "peers",
    "new_channel",
    "init_with_discovery",
    "chaincode_invoke",
    "chaincode_query",
    "close_grpc_channels",
]


@pytest.fixture
def hfc_client():
    client = MagicMock(spec=HFC_CLIENT_API)
    client.peers = {"peer0.org1.example.com": MagicMock(name="peer0")}
    client.init_with_discovery = AsyncMock()
    client.chaincode_invoke = AsyncMock(return_value="")
    client.chaincode_query = AsyncMock(return_value='{"BALANCE": 500}')
    client.close_grpc_channels = AsyncMock()
    return client


@pytest.mark.asyncio
async def test_evaluate(hfc_client):
    handle = FabricTransactionHandle(hfc_client, "user", "mychannel", "assettrack", ["peer"])

    result = await handle.evaluate("ReadAsset", "asset1")

    assert result == b'{"BALANCE": 500}'
    kwargs = hfc_client.chaincode_query.await_args.kwargs
    assert kwargs["fcn"] == "ReadAsset"
    assert kwargs["args"] == ["asset1"]
    assert kwargs["cc_name"] == "assettrack"
    assert kwargs["channel_name"] == "mychannel"
    assert kwargs["requestor"] == "user"


@pytest.mark.asyncio
async def test_submit_waits_for_commit(hfc_client):
    handle = FabricTransactionHandle(hfc_client, "user", "mychannel", "assettrack", ["peer"])

    assert await handle.submit("CreateAsset", "a1", "d1") == b""

    kwargs = hfc_client.chaincode_invoke.await_args.kwargs
    assert kwargs["fcn"] == "CreateAsset"
    assert kwargs["args"] == ["a1", "d1"]
    assert kwargs["wait_for_event"] is True


@pytest.mark.asyncio
async def test_rejection_becomes_transaction_error(hfc_client):
    hfc_client.chaincode_invoke.side_effect = Exception("endorsement failure")
    handle = FabricTransactionHandle(hfc_client, "user", "mychannel", "assettrack", ["peer"])

    with pytest.raises(TransactionError, match="CreateAsset was rejected: endorsement failure"):
        await handle.submit("CreateAsset", "a1")


@pytest.mark.asyncio
async def test_channel_uses_profile_peers_as_localhost(hfc_client, tmp_path):
    connection = FabricConnection(hfc_client, "user", make_options(), tmp_path)

    channel = await connection.get_channel("mychannel")

    hfc_client.new_channel.assert_called_once_with("mychannel")
    hfc_client.init_with_discovery.assert_not_awaited()
    assert channel.peers == list(hfc_client.peers.values())
    assert await connection.get_channel("mychannel") is channel


@pytest.mark.asyncio
async def test_channel_runs_discovery(hfc_client, tmp_path):
    connection = FabricConnection(hfc_client, "user", make_options(as_localhost=False), tmp_path)

    await connection.get_channel("mychannel")

    hfc_client.init_with_discovery.assert_awaited_once()
    assert hfc_client.init_with_discovery.await_args.args[2] == "mychannel"


@pytest.mark.asyncio
async def test_discovery_failure(hfc_client, tmp_path):
    hfc_client.init_with_discovery.side_effect = Exception("no peers reachable")
    connection = FabricConnection(hfc_client, "user", make_options(as_localhost=False), tmp_path)

    with pytest.raises(NetworkConnectionError, match="discovery"):
        await connection.get_channel("mychannel")


@pytest.mark.asyncio
async def test_profile_without_peers(hfc_client, tmp_path):
    hfc_client.peers = {}
    connection = FabricConnection(hfc_client, "user", make_options(), tmp_path)

    with pytest.raises(NetworkConnectionError, match="no peers"):
        await connection.get_channel("mychannel")


@pytest.mark.asyncio
async def test_close_releases_channels_and_workdir(hfc_client, tmp_path):
    workdir = tmp_path / "work"
    workdir.mkdir()
    connection = FabricConnection(hfc_client, "user", make_options(), workdir)
    channel = await connection.get_channel("mychannel")
    handle = channel.get_transaction_handle("assettrack")
    assert handle.chaincode_name == "assettrack"

    await connection.close()

    hfc_client.close_grpc_channels.assert_awaited_once()
    assert not workdir.exists()
    assert connection.channels == {}


@pytest.mark.asyncio
async def test_close_removes_workdir_when_grpc_close_fails(hfc_client, tmp_path):
    workdir = tmp_path / "work"
    workdir.mkdir()
    (workdir / "connection-profile.json").write_text("{}")
    hfc_client.close_grpc_channels.side_effect = RuntimeError("channel already closed")
    connection = FabricConnection(hfc_client, "user", make_options(), workdir)

    with pytest.raises(RuntimeError):
        await connection.close()

    assert not workdir.exists()
