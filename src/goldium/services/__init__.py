"""Wallet services: balances, exchange and transaction history."""

from goldium.services.balance_resolver import BalanceResolver, InvalidAccountError
from goldium.services.token_store import InsufficientTokenBalanceError, SwapTokenStore

__all__ = [
    "BalanceResolver",
    "InvalidAccountError",
    "InsufficientTokenBalanceError",
    "SwapTokenStore",
]
