"""External signing agent.

Wraps a wallet connected by the host application. The host owns the
connection; this agent only references it and forwards signing requests.
"""

import logging
from decimal import Decimal
from typing import Awaitable, Callable

from goldium.chain.transaction import TransferTransaction
from goldium.signing.base import (
    SignerType,
    SigningAgent,
    SigningCancelledError,
    SigningError,
)

logger = logging.getLogger(__name__)

SignTransactionFn = Callable[[TransferTransaction], Awaitable[bytes]]

REJECTION_MARKERS = ("user rejected", "rejected the request")


class ExternalSigningAgent(SigningAgent):
    """Host-connected wallet that signs through a callback."""

    def __init__(
        self,
        address: str,
        sign_transaction: SignTransactionFn,
        balance: Decimal = Decimal("0"),
        connected: bool = True,
    ):
        """Initialize external agent.

        Args:
            address: Wallet address reported by the host
            sign_transaction: Async callback returning the signed wire transaction
            balance: Balance snapshot reported by the host
            connected: Connectivity flag
        """
        super().__init__(SignerType.EXTERNAL)
        self._address = address
        self._sign_transaction = sign_transaction
        self.balance = Decimal(balance)
        self.connected = connected

    @property
    def address(self) -> str:
        return self._address

    @property
    def is_available(self) -> bool:
        return self.connected

    async def sign(self, tx: TransferTransaction) -> bytes:
        """Request a signature from the connected wallet."""
        if not self.connected:
            raise SigningError("External wallet is not connected")

        try:
            signed = await self._sign_transaction(tx)
        except SigningError:
            raise
        except Exception as e:
            message = str(e)
            if any(marker in message.lower() for marker in REJECTION_MARKERS):
                raise SigningCancelledError(message) from e
            raise SigningError(message or "External wallet failed to sign") from e

        if not signed:
            raise SigningError("External wallet returned an empty transaction")
        return bytes(signed)

    async def get_balance(self) -> Decimal:
        """Return the balance snapshot reported by the host."""
        return self.balance

    def update_balance(self, balance: Decimal) -> None:
        """Replace the balance snapshot after the host refreshes it."""
        self.balance = Decimal(balance)

    def disconnect(self) -> None:
        """Mark the wallet as disconnected."""
        self.connected = False
        logger.info(f"External wallet {self._address} disconnected")
