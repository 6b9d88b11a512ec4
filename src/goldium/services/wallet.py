"""UI-facing wallet API.

WalletFacade wires the services together and is the only object the API
layer talks to. None of its methods raise: failures come back as
structured results, empty sequences or default balances.
"""

import logging
from typing import Optional

from goldium.chain.rpc import SolanaRPC
from goldium.config import Settings, get_settings
from goldium.contracts.balances import BalanceResponse
from goldium.contracts.swaps import ExchangeDirection, ExchangeResult, SwapRecord
from goldium.contracts.transactions import TransactionHistoryView, TransactionRecord
from goldium.services.balance_resolver import BalanceResolver, InvalidAccountError
from goldium.services.exchange_service import ExchangeService
from goldium.services.token_store import SwapTokenStore
from goldium.services.transaction_history import (
    RPCTransactionSource,
    TransactionHistoryAggregator,
)
from goldium.signing.embedded import EmbeddedSigningAgent
from goldium.signing.external import ExternalSigningAgent
from goldium.signing.factory import get_signer_info

logger = logging.getLogger(__name__)


class WalletFacade:
    """Entry point for balance, exchange and history operations."""

    def __init__(
        self,
        resolver: BalanceResolver,
        exchange_service: ExchangeService,
        history: TransactionHistoryAggregator,
        rpc_clients: Optional[list[SolanaRPC]] = None,
    ):
        self.resolver = resolver
        self.exchange_service = exchange_service
        self.history = history
        self._rpc_clients = rpc_clients or []

    async def resolve_balance(self, account: Optional[str]) -> BalanceResponse:
        """Resolve the SOL balance of an account."""
        try:
            balance = await self.resolver.resolve(account)
        except InvalidAccountError as e:
            return BalanceResponse(success=False, address=account, error=str(e))
        return BalanceResponse(success=True, address=balance.address, balance=balance)

    async def exchange(self, direction: ExchangeDirection, amount) -> ExchangeResult:
        """Run one exchange with the active signing agent."""
        return await self.exchange_service.exchange(direction, amount)

    def get_history(self) -> list[SwapRecord]:
        """Swap records for this session, most recent first."""
        return self.exchange_service.history()

    def clear_history(self) -> None:
        self.exchange_service.clear()

    async def refresh_transactions(self) -> list[TransactionRecord]:
        """Refresh the merged treasury/user transaction history."""
        return await self.history.refresh()

    def transactions_view(self) -> TransactionHistoryView:
        return self.history.view

    def connect_external(self, agent: ExternalSigningAgent) -> None:
        """Use a host-connected wallet for subsequent exchanges."""
        self.exchange_service.set_external_agent(agent)

    def disconnect_external(self) -> None:
        """Detach the host wallet and reset the session's swap history."""
        agent = self.exchange_service.external_agent
        if agent is not None:
            agent.disconnect()
        self.exchange_service.set_external_agent(None)
        self.exchange_service.clear()

    def wallet_info(self) -> dict:
        """Describe the agent that would sign the next exchange."""
        return get_signer_info(self.exchange_service.active_agent())

    async def close(self) -> None:
        """Close RPC HTTP clients."""
        for rpc in self._rpc_clients:
            await rpc.close()


def build_wallet(settings: Optional[Settings] = None) -> WalletFacade:
    """Construct the service graph from settings."""
    settings = settings or get_settings()

    primary = SolanaRPC(settings.solana_rpc_url, timeout=settings.rpc_timeout_seconds)
    fallback = SolanaRPC(settings.solana_fallback_rpc_url, timeout=settings.rpc_timeout_seconds)

    resolver = BalanceResolver(
        primary=primary,
        fallback=fallback,
        default_amount=settings.default_sol_balance,
        treat_zero_as_unknown=settings.treat_zero_as_unknown,
    )
    embedded = EmbeddedSigningAgent(resolver, secret=settings.embedded_wallet_secret)
    exchange_service = ExchangeService(
        rpc=primary,
        embedded_agent=embedded,
        token_store=SwapTokenStore(),
        settings=settings,
    )

    treasury_source = RPCTransactionSource(
        name="treasury",
        rpc=primary,
        address_provider=lambda: settings.treasury_address,
        limit=settings.history_fetch_limit,
        explorer_url=settings.explorer_url,
    )
    user_source = RPCTransactionSource(
        name="user",
        rpc=primary,
        address_provider=lambda: exchange_service.active_agent().address,
        limit=settings.history_fetch_limit,
        explorer_url=settings.explorer_url,
    )
    history = TransactionHistoryAggregator(
        treasury_source,
        user_source,
        max_records=settings.max_history_records,
    )

    logger.info(f"Wallet services initialized (embedded wallet {embedded.public_address})")
    return WalletFacade(resolver, exchange_service, history, rpc_clients=[primary, fallback])
