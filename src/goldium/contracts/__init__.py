"""Request and response contracts shared by services and the API.

These Pydantic models define the data passed across the UI boundary.
"""

from goldium.contracts.balances import (
    Asset,
    Balance,
    BalanceResponse,
    BalanceSource,
)
from goldium.contracts.swaps import (
    ExchangeDirection,
    ExchangeRequest,
    ExchangeResult,
    SwapRecord,
)
from goldium.contracts.transactions import (
    HistoryState,
    TransactionHistoryView,
    TransactionRecord,
    TransactionStatus,
    TransactionType,
)

__all__ = [
    # Balance contracts
    "Asset",
    "Balance",
    "BalanceResponse",
    "BalanceSource",
    # Swap contracts
    "ExchangeDirection",
    "ExchangeRequest",
    "ExchangeResult",
    "SwapRecord",
    # Transaction contracts
    "HistoryState",
    "TransactionHistoryView",
    "TransactionRecord",
    "TransactionStatus",
    "TransactionType",
]
