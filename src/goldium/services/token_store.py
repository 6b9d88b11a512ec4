"""In-memory GOLD balances.

The treasury settles GOLD off-chain for now, so GOLD holdings live here
for the duration of the process. Nothing is persisted.
"""

import logging
from decimal import Decimal
from typing import Optional

logger = logging.getLogger(__name__)


class InsufficientTokenBalanceError(Exception):
    """Raised when a debit exceeds the available GOLD balance."""
    pass


class SwapTokenStore:
    """GOLD balances keyed by account address."""

    def __init__(self, initial: Optional[dict[str, Decimal]] = None):
        self._balances: dict[str, Decimal] = {}
        for address, amount in (initial or {}).items():
            self.credit(address, Decimal(amount))

    def get(self, address: str) -> Decimal:
        """Get GOLD balance for an address (zero if unknown)."""
        return self._balances.get(address, Decimal("0"))

    def credit(self, address: str, amount: Decimal) -> Decimal:
        """Add GOLD to an address, returning the new balance."""
        if amount < 0:
            raise ValueError("Credit amount must not be negative")
        new_balance = self.get(address) + amount
        self._balances[address] = new_balance
        logger.debug(f"Credited {amount} GOLD to {address}, balance {new_balance}")
        return new_balance

    def debit(self, address: str, amount: Decimal) -> Decimal:
        """Remove GOLD from an address, returning the new balance.

        Raises:
            InsufficientTokenBalanceError: If the balance is too low
        """
        if amount < 0:
            raise ValueError("Debit amount must not be negative")
        current = self.get(address)
        if current < amount:
            raise InsufficientTokenBalanceError(
                f"Insufficient GOLD balance. Need {amount} GOLD but only have {current} GOLD"
            )
        new_balance = current - amount
        self._balances[address] = new_balance
        logger.debug(f"Debited {amount} GOLD from {address}, balance {new_balance}")
        return new_balance

    def clear(self) -> None:
        """Forget all balances."""
        self._balances.clear()
