"""Swap endpoints."""

from fastapi import APIRouter, Depends

from goldium.api.app import get_wallet
from goldium.contracts.swaps import ExchangeRequest, ExchangeResult, SwapRecord
from goldium.services.wallet import WalletFacade

router = APIRouter(prefix="/swaps")


@router.post("", response_model=ExchangeResult)
async def create_swap(
    request: ExchangeRequest,
    wallet: WalletFacade = Depends(get_wallet),
) -> ExchangeResult:
    """Exchange SOL for GOLD or GOLD for SOL.

    Declined and failed exchanges are returned with success=false and a
    reason rather than an HTTP error.
    """
    return await wallet.exchange(request.direction, request.amount)


@router.get("/history", response_model=list[SwapRecord])
async def get_swap_history(wallet: WalletFacade = Depends(get_wallet)) -> list[SwapRecord]:
    """Swaps recorded this session, most recent first."""
    return wallet.get_history()


@router.delete("/history")
async def clear_swap_history(wallet: WalletFacade = Depends(get_wallet)):
    """Clear the session's swap history."""
    wallet.clear_history()
    return {"cleared": True}
