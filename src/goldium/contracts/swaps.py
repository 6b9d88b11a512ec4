"""Exchange contracts."""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from goldium.contracts.balances import Asset


class ExchangeDirection(str, Enum):
    """Direction of an exchange through the treasury."""
    SOL_TO_GOLD = "SOL_TO_GOLD"  # Real on-chain transfer
    GOLD_TO_SOL = "GOLD_TO_SOL"  # Simulated, no token movement

    @property
    def from_asset(self) -> Asset:
        return Asset.SOL if self == ExchangeDirection.SOL_TO_GOLD else Asset.GOLD

    @property
    def to_asset(self) -> Asset:
        return Asset.GOLD if self == ExchangeDirection.SOL_TO_GOLD else Asset.SOL


class SwapRecord(BaseModel):
    """Immutable record of one completed (or simulated) exchange."""

    model_config = ConfigDict(frozen=True, json_encoders={Decimal: str})

    timestamp: int = Field(..., description="Creation time (epoch milliseconds)")
    tx_hash: str = Field(..., description="Broadcast signature or local reference")
    from_asset: Asset
    to_asset: Asset
    from_amount: Decimal
    to_amount: Decimal
    rate: Decimal = Field(..., description="Exchange rate applied")
    simulated: bool = Field(default=False, description="No asset moved on-chain")


class ExchangeRequest(BaseModel):
    """Request to exchange one asset for the other."""

    direction: ExchangeDirection = Field(..., description="Exchange direction")
    amount: Decimal = Field(..., description="Amount of the source asset")


class ExchangeResult(BaseModel):
    """Outcome of an exchange. Declines and failures carry a reason."""

    success: bool = Field(..., description="Whether the exchange completed")
    signature: Optional[str] = Field(None, description="Transaction reference")
    error: Optional[str] = Field(None, description="Human-readable failure reason")
    record: Optional[SwapRecord] = Field(None, description="Recorded swap on success")

    @classmethod
    def declined(cls, reason: str) -> "ExchangeResult":
        return cls(success=False, error=reason)

    class Config:
        json_encoders = {Decimal: str}
