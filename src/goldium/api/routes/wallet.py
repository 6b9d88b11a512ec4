"""Active wallet endpoint."""

from fastapi import APIRouter, Depends

from goldium.api.app import get_wallet
from goldium.services.wallet import WalletFacade

router = APIRouter(prefix="/wallet")


@router.get("")
async def get_active_wallet(wallet: WalletFacade = Depends(get_wallet)):
    """Type and address of the wallet that signs the next exchange."""
    return wallet.wallet_info()
