"""Transaction history contracts.

Records are produced by external sources (treasury and user feeds) and
are read-only to the aggregator.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TransactionType(str, Enum):
    """Kind of on-chain activity."""
    SWAP = "swap"
    STAKE = "stake"
    UNSTAKE = "unstake"
    CLAIM = "claim"
    OTHER = "other"


class TransactionStatus(str, Enum):
    """Settlement status of a transaction."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


class HistoryState(str, Enum):
    """Lifecycle of one refresh cycle."""
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    EMPTY = "empty"
    PARTIAL = "partial"


class TransactionRecord(BaseModel):
    """A transaction as shown in the merged history."""

    model_config = ConfigDict(frozen=True, json_encoders={Decimal: str})

    signature: str = Field(..., description="Transaction signature (unique key)")
    type: TransactionType = Field(default=TransactionType.OTHER)
    status: TransactionStatus = Field(default=TransactionStatus.PENDING)
    token: str = Field(default="SOL", description="Asset symbol")
    amount: Decimal = Field(default=Decimal("0"), description="Amount moved, if known")
    timestamp: int = Field(..., description="Block time (epoch milliseconds)")
    explorer_url: Optional[str] = Field(None, description="Link to explorer")


class TransactionHistoryView(BaseModel):
    """Published result of the latest refresh cycle."""

    state: HistoryState = Field(default=HistoryState.IDLE)
    transactions: list[TransactionRecord] = Field(default_factory=list)
    failed_sources: list[str] = Field(default_factory=list, description="Sources that failed")
