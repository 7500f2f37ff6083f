import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Optional, Tuple

from assetgateway.config import ConfigProvider, ConnectionConfig

from .errors import GatewayError, IdentityNotFoundError, NetworkConnectionError
from .interfaces import (
    ConnectOptions,
    Connection,
    DiscoveryOptions,
    IdentityStore,
    LedgerConnector,
    TransactionHandle,
)
from .profile import load_profile, rewrite_host
from .wallet import FileSystemWallet

logger = logging.getLogger(__name__)

WalletOpener = Callable[..., Awaitable[IdentityStore]]


class SessionState(str, Enum):
    """Lifecycle state of the ledger session."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    READY = "ready"


class SessionManager:
    def __init__(
        self,
        config_provider: ConfigProvider,
        connector: LedgerConnector,
        open_wallet: WalletOpener = FileSystemWallet.open,
    ):
        """
        Initialize session manager.

        Args:
            config_provider: Source of connection configuration
            connector: Ledger client used to open connections
            open_wallet: Coroutine opening the identity store at a path
        """
        self.config_provider = config_provider
        self.connector = connector
        self.open_wallet = open_wallet

        self._state = SessionState.DISCONNECTED
        self._connection: Optional[Connection] = None
        self._handle: Optional[TransactionHandle] = None
        self._config: Optional[ConnectionConfig] = None
        self._pending: Optional[asyncio.Task] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def config(self) -> Optional[ConnectionConfig]:
        """Configuration the live session was opened with."""
        return self._config

    async def get_handle(self) -> TransactionHandle:
        """
        Get the transaction handle, connecting first if needed.

        Callers arriving while a connection attempt is in flight wait on
        that same attempt, so at most one connection is ever opened.

        Returns:
            Cached transaction handle

        Raises:
            GatewayError: If the connection attempt fails; the session is
                left disconnected and the next call retries
        """
        if self._handle is not None:
            return self._handle

        if self._pending is None:
            self._state = SessionState.CONNECTING
            self._pending = asyncio.create_task(self._connect())

        pending = self._pending
        try:
            # Shielded so one cancelled request does not abort the others
            return await asyncio.shield(pending)
        except asyncio.CancelledError:
            if pending.cancelled():
                raise NetworkConnectionError(
                    "Connection attempt aborted by disconnect"
                ) from None
            raise

    async def _connect(self) -> TransactionHandle:
        """
        Run one connection attempt.

        Logic:
        1. Resolve configuration
        2. Load the profile and rewrite endpoint hosts
        3. Check the identity exists in the wallet
        4. Connect, join the channel, get the chaincode handle
        5. Cache connection and handle

        State is only touched while this task is still the pending attempt;
        disconnect() detaches it before cancelling.
        """
        task = asyncio.current_task()
        try:
            config = self.config_provider.get_connection_config()
            profile = await asyncio.to_thread(load_profile, config.profile_path)
            rewrite_host(profile, config.host_override)

            wallet = await self.open_wallet(config.wallet_path)
            identity = await wallet.get(config.identity_label)
            if identity is None:
                logger.error(
                    f'An identity for the user "{config.identity_label}" '
                    "does not exist in the wallet"
                )
                logger.error("Enroll the user before retrying")
                raise IdentityNotFoundError(config.identity_label, config.wallet_path)

            options = ConnectOptions(
                identity_store=wallet,
                identity_label=config.identity_label,
                identity=identity,
                discovery=DiscoveryOptions(
                    enabled=config.discovery_enabled,
                    as_localhost=config.as_localhost,
                ),
            )
            connection, handle = await self._open(profile, options, config)
        except asyncio.CancelledError:
            logger.info("Fabric connection attempt aborted")
            raise
        except Exception as e:
            if self._pending is task:
                self._pending = None
                self._state = SessionState.DISCONNECTED
            logger.error(f"Failed to connect to Fabric network: {e}")
            raise

        self._connection = connection
        self._handle = handle
        self._config = config
        self._state = SessionState.READY
        self._pending = None

        logger.info("Successfully connected to Fabric network")
        logger.info(
            f"Using channel={config.channel_name}, chaincode={config.chaincode_name}, "
            f"identity={config.identity_label}"
        )
        return handle

    async def _open(
        self, profile: dict, options: ConnectOptions, config: ConnectionConfig
    ) -> Tuple[Connection, TransactionHandle]:
        try:
            connection = await self.connector.connect(profile, options)
        except GatewayError:
            raise
        except Exception as e:
            raise NetworkConnectionError(f"Failed to connect to Fabric network: {e}") from e

        try:
            channel = await connection.get_channel(config.channel_name)
            handle = channel.get_transaction_handle(config.chaincode_name)
        except BaseException as e:
            await self._close(connection)
            if isinstance(e, Exception) and not isinstance(e, GatewayError):
                raise NetworkConnectionError(
                    f"Failed to open channel {config.channel_name}: {e}"
                ) from e
            raise

        return connection, handle

    async def _close(self, connection: Connection) -> None:
        try:
            await connection.close()
        except Exception as e:
            logger.warning(f"Error while closing Fabric connection: {e}")

    async def disconnect(self) -> None:
        """
        Close the session. Safe to call at any time, any number of times.

        An in-flight connection attempt is aborted; its waiters receive
        NetworkConnectionError.
        """
        pending, self._pending = self._pending, None
        connection, self._connection = self._connection, None
        self._handle = None
        self._config = None
        self._state = SessionState.DISCONNECTED

        if pending is not None and not pending.done():
            pending.cancel()
            await asyncio.wait([pending])

        if connection is not None:
            await self._close(connection)
            logger.info("Disconnected from Fabric network")
