"""Transaction history endpoints."""

from fastapi import APIRouter, Depends

from goldium.api.app import get_wallet
from goldium.contracts.transactions import TransactionHistoryView
from goldium.services.wallet import WalletFacade

router = APIRouter(prefix="/transactions")


@router.post("/refresh", response_model=TransactionHistoryView)
async def refresh_transactions(wallet: WalletFacade = Depends(get_wallet)) -> TransactionHistoryView:
    """Fetch treasury and user transactions and return the merged view."""
    await wallet.refresh_transactions()
    return wallet.transactions_view()


@router.get("", response_model=TransactionHistoryView)
async def get_transactions(wallet: WalletFacade = Depends(get_wallet)) -> TransactionHistoryView:
    """Last published transaction view (no network access)."""
    return wallet.transactions_view()
