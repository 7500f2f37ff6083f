"""Graceful shutdown of the ledger session on termination signals."""

import logging
import signal
from typing import Optional

from .session import SessionManager

logger = logging.getLogger(__name__)


class ShutdownHook:
    """
    Disconnects the one SessionManager when the process is told to stop.

    The server records the signal it received; the application lifespan
    runs the hook once on its way out.
    """

    def __init__(self, session_manager: SessionManager):
        self.session_manager = session_manager
        self.signal: Optional[signal.Signals] = None
        self.completed = False

    def record_signal(self, sig: int) -> None:
        """Remember which termination signal triggered the shutdown."""
        self.signal = signal.Signals(sig)

    async def run(self) -> None:
        """Disconnect from the ledger network. Runs at most once."""
        if self.completed:
            return
        self.completed = True

        if self.signal is not None:
            logger.info(f"Received {self.signal.name}, disconnecting from Fabric network...")
        else:
            logger.info("Shutting down, disconnecting from Fabric network...")

        await self.session_manager.disconnect()
