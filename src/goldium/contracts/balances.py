"""Balance contracts.

Balances are resolved from ledger state on every request and never
cached, so these models are snapshots of a single resolution.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Asset(str, Enum):
    """The two assets the wallet models."""
    SOL = "SOL"    # Native network asset
    GOLD = "GOLD"  # Secondary SPL token


class BalanceSource(str, Enum):
    """Where a resolved balance came from."""
    PRIMARY = "primary"
    FALLBACK = "fallback"
    DEFAULT = "default"


class Balance(BaseModel):
    """Spendable amount of one asset for one account."""

    address: str = Field(..., description="Account address")
    asset: Asset = Field(default=Asset.SOL, description="Asset symbol")
    amount: Decimal = Field(..., ge=0, description="Amount in human-readable units")
    source: BalanceSource = Field(..., description="Endpoint that produced the amount")

    @property
    def is_default(self) -> bool:
        """True when the amount is a placeholder rather than a ledger reading."""
        return self.source == BalanceSource.DEFAULT

    class Config:
        json_encoders = {Decimal: str}


class BalanceResponse(BaseModel):
    """UI-facing balance result. Failures are reported, not raised."""

    success: bool = Field(..., description="Whether a balance could be resolved")
    address: Optional[str] = Field(None, description="Account address queried")
    balance: Optional[Balance] = Field(None, description="Resolved balance")
    error: Optional[str] = Field(None, description="Error message if failed")

    class Config:
        json_encoders = {Decimal: str}
