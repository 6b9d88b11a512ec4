"""Base interfaces for transaction signing.

Signing flow:
1. Build unsigned transfer anchored to a recent blockhash
2. Hand it to the active signing agent
3. Agent returns the signed wire transaction (never the key)
4. Broadcast signed transaction
"""

import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from enum import Enum

from goldium.chain.transaction import TransferTransaction

logger = logging.getLogger(__name__)


class SignerType(str, Enum):
    """Who holds the key."""
    EXTERNAL = "external"  # Host-connected wallet signs via callback
    EMBEDDED = "embedded"  # Service-owned in-memory key


class SigningAgent(ABC):
    """Abstract base class for signing agents.

    Implementations return signed transactions only and never expose
    raw private keys.
    """

    def __init__(self, signer_type: SignerType):
        self.signer_type = signer_type

    @property
    @abstractmethod
    def address(self) -> str:
        """Base58 address of the signing account."""
        pass

    @property
    def is_available(self) -> bool:
        """Whether the agent can sign right now."""
        return True

    @abstractmethod
    async def sign(self, tx: TransferTransaction) -> bytes:
        """Sign a transfer.

        Args:
            tx: Unsigned transfer whose fee payer is this agent's address

        Returns:
            Signed transaction in wire format

        Raises:
            SigningCancelledError: If the user declined to sign
            SigningError: For any other signing failure
        """
        pass

    @abstractmethod
    async def get_balance(self) -> Decimal:
        """Spendable SOL available to this agent."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(type={self.signer_type.value}, address={self.address})"


class SigningError(Exception):
    """Exception raised when signing fails."""
    pass


class SigningCancelledError(SigningError):
    """Exception raised when the user declines to sign."""
    pass
