"""Balance endpoints."""

from fastapi import APIRouter, Depends

from goldium.api.app import get_wallet
from goldium.contracts.balances import BalanceResponse
from goldium.services.wallet import WalletFacade

router = APIRouter(prefix="/balances")


@router.get("/{address}", response_model=BalanceResponse)
async def get_balance(address: str, wallet: WalletFacade = Depends(get_wallet)) -> BalanceResponse:
    """Resolve the SOL balance of an address.

    Endpoint outages fall back to a default amount; only an invalid
    address yields success=false.
    """
    return await wallet.resolve_balance(address)
