"""Liveness and wallet status endpoints."""

from fastapi import APIRouter, Depends

from goldium.api.app import get_wallet
from goldium.config import get_settings
from goldium.services.wallet import WalletFacade

router = APIRouter()


@router.get("/health")
async def health_check():
    return {"status": "healthy", "service": "goldium"}


@router.get("/health/detailed")
async def detailed_health(wallet: WalletFacade = Depends(get_wallet)):
    """Service status with redacted settings, active signer and history state.

    Makes no network calls, so it stays fast when both RPC endpoints are down.
    """
    settings = get_settings()
    return {
        "status": "healthy",
        "service": "goldium",
        "version": "0.1.0",
        "signer": wallet.wallet_info(),
        "transactions": {
            "state": wallet.transactions_view().state.value,
            "records": len(wallet.transactions_view().transactions),
        },
        "swaps_recorded": len(wallet.get_history()),
        "config": settings.get_safe_dict(),
    }
