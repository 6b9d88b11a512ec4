"""SOL/GOLD exchange through the treasury relay.

SOL -> GOLD is a real on-chain transfer of SOL to the treasury address:
1. Validate amount and balance (amount + fee buffer)
2. Build transfer anchored to a recent blockhash
3. Sign with the active agent (external wallet or embedded key)
4. Broadcast and wait for confirmation
5. Credit GOLD and record the swap

GOLD -> SOL is simulated: GOLD is debited from the in-memory store and a
record is written, but nothing is broadcast.

exchange() never raises; every outcome is an ExchangeResult.
"""

import logging
import time
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from goldium.chain.rpc import SolanaRPC
from goldium.chain.transaction import TransferTransaction, sol_to_lamports
from goldium.config import Settings, get_settings
from goldium.contracts.swaps import ExchangeDirection, ExchangeResult, SwapRecord
from goldium.services.token_store import InsufficientTokenBalanceError, SwapTokenStore
from goldium.signing.base import SigningAgent, SigningCancelledError
from goldium.signing.embedded import EmbeddedSigningAgent
from goldium.signing.external import ExternalSigningAgent
from goldium.signing.factory import select_signing_agent

logger = logging.getLogger(__name__)

CANCELLED_MESSAGE = "Transaction was cancelled by user"
INSUFFICIENT_FUNDS_MESSAGE = "Insufficient SOL balance for this transaction"
INSUFFICIENT_FUNDS_MARKERS = ("insufficient funds", "attempt to debit an account")


class UnconfirmedTransactionError(Exception):
    """Raised when a broadcast transaction does not confirm."""

    def __init__(self, signature: str):
        super().__init__(f"Transaction {signature} was not confirmed")
        self.signature = signature


class ExchangeService:
    """Executes exchanges and owns the session's swap history."""

    def __init__(
        self,
        rpc: SolanaRPC,
        embedded_agent: EmbeddedSigningAgent,
        token_store: Optional[SwapTokenStore] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize exchange service.

        Args:
            rpc: Endpoint used for blockhash, broadcast and confirmation
            embedded_agent: Fallback signer when no external wallet is connected
            token_store: GOLD balances (a fresh store if None)
            settings: Exchange constants (global settings if None)
        """
        settings = settings or get_settings()
        self.rpc = rpc
        self.embedded_agent = embedded_agent
        self.token_store = token_store or SwapTokenStore()
        self.treasury_address = settings.treasury_address
        self.sol_to_gold_rate = settings.sol_to_gold_rate
        self.gold_to_sol_rate = settings.gold_to_sol_rate
        self.fee_buffer = settings.fee_buffer_sol
        self.max_history = settings.max_swap_history
        self.confirm_timeout = settings.confirm_timeout_seconds
        self.confirm_poll_interval = settings.confirm_poll_interval_seconds

        self._external_agent: Optional[ExternalSigningAgent] = None
        self._history: list[SwapRecord] = []
        self._last_timestamp = 0

    @property
    def external_agent(self) -> Optional[ExternalSigningAgent]:
        return self._external_agent

    def set_external_agent(self, agent: Optional[ExternalSigningAgent]) -> None:
        """Attach (or detach with None) the host's connected wallet."""
        self._external_agent = agent
        if agent is not None:
            logger.info(f"External wallet attached: {agent.address}")

    def active_agent(self) -> SigningAgent:
        """Agent that would sign an exchange right now."""
        return select_signing_agent(self._external_agent, self.embedded_agent)

    async def exchange(
        self,
        direction: ExchangeDirection,
        amount: Union[Decimal, str, int, float],
    ) -> ExchangeResult:
        """Exchange `amount` of the source asset in the given direction."""
        try:
            amount = Decimal(str(amount))
        except (InvalidOperation, ValueError):
            return ExchangeResult.declined(f"Invalid amount: {amount}")

        if not amount.is_finite() or amount <= 0:
            return ExchangeResult.declined("Amount must be greater than zero")

        try:
            direction = ExchangeDirection(direction)
        except ValueError:
            return ExchangeResult.declined(f"Unsupported exchange direction: {direction}")

        agent = self.active_agent()

        if direction == ExchangeDirection.SOL_TO_GOLD:
            return await self._swap_sol_to_gold(agent, amount)
        return await self._swap_gold_to_sol(agent, amount)

    async def _swap_sol_to_gold(self, agent: SigningAgent, sol_amount: Decimal) -> ExchangeResult:
        logger.info(f"Swapping {sol_amount} SOL to GOLD through treasury ({agent.signer_type.value} wallet)")

        try:
            current_balance = await agent.get_balance()
        except Exception as e:
            logger.error(f"Balance lookup for {agent.address} failed: {e}")
            return ExchangeResult.declined(f"Unable to determine SOL balance: {e}")

        required = sol_amount + self.fee_buffer
        logger.debug(
            f"Balance check: current={current_balance}, required={required}, "
            f"amount={sol_amount}, fees={self.fee_buffer}"
        )
        if current_balance < required:
            error = (
                f"Insufficient SOL balance. Need {required:.6f} SOL "
                f"but only have {current_balance:.6f} SOL"
            )
            logger.warning(error)
            return ExchangeResult.declined(error)

        gold_amount = sol_amount * self.sol_to_gold_rate

        try:
            signature = await self._transfer_to_treasury(agent, sol_amount)
        except Exception as e:
            logger.error(f"SOL to GOLD swap failed: {e}")
            return ExchangeResult(success=False, error=self._classify_error(e))

        self.token_store.credit(agent.address, gold_amount)
        record = self._record(
            direction=ExchangeDirection.SOL_TO_GOLD,
            tx_hash=signature,
            from_amount=sol_amount,
            to_amount=gold_amount,
            rate=self.sol_to_gold_rate,
        )

        logger.info(f"Swap successful: {signature} ({sol_amount} SOL -> {gold_amount} GOLD)")
        return ExchangeResult(success=True, signature=signature, record=record)

    async def _transfer_to_treasury(self, agent: SigningAgent, sol_amount: Decimal) -> str:
        """Build, sign, broadcast and confirm the SOL transfer.

        Returns:
            Confirmed transaction signature
        """
        blockhash = await self.rpc.get_latest_blockhash()
        tx = TransferTransaction(
            from_address=agent.address,
            to_address=self.treasury_address,
            lamports=sol_to_lamports(sol_amount),
            recent_blockhash=blockhash,
        )

        signed_tx = await agent.sign(tx)
        signature = await self.rpc.send_transaction(signed_tx)
        logger.info(f"Transaction sent: {signature}")

        confirmed = await self.rpc.confirm_transaction(
            signature,
            timeout=self.confirm_timeout,
            poll_interval=self.confirm_poll_interval,
        )
        if not confirmed:
            raise UnconfirmedTransactionError(signature)

        return signature

    async def _swap_gold_to_sol(self, agent: SigningAgent, gold_amount: Decimal) -> ExchangeResult:
        logger.info(f"Swapping {gold_amount} GOLD to SOL through treasury")

        available = self.token_store.get(agent.address)
        if available < gold_amount:
            error = (
                f"Insufficient GOLD balance. Need {gold_amount} GOLD "
                f"but only have {available} GOLD"
            )
            logger.warning(error)
            return ExchangeResult.declined(error)

        sol_amount = gold_amount * self.gold_to_sol_rate
        timestamp = self._next_timestamp()
        reference = f"sim_gold_to_sol_{timestamp}"

        try:
            self.token_store.debit(agent.address, gold_amount)
        except InsufficientTokenBalanceError as e:
            return ExchangeResult.declined(str(e))

        record = self._record(
            direction=ExchangeDirection.GOLD_TO_SOL,
            tx_hash=reference,
            from_amount=gold_amount,
            to_amount=sol_amount,
            rate=self.gold_to_sol_rate,
            timestamp=timestamp,
            simulated=True,
        )

        logger.info(f"GOLD to SOL swap simulated: {reference}")
        return ExchangeResult(success=True, signature=reference, record=record)

    def _record(
        self,
        direction: ExchangeDirection,
        tx_hash: str,
        from_amount: Decimal,
        to_amount: Decimal,
        rate: Decimal,
        timestamp: Optional[int] = None,
        simulated: bool = False,
    ) -> SwapRecord:
        """Append a swap record, evicting the oldest past the cap."""
        record = SwapRecord(
            timestamp=timestamp if timestamp is not None else self._next_timestamp(),
            tx_hash=tx_hash,
            from_asset=direction.from_asset,
            to_asset=direction.to_asset,
            from_amount=from_amount,
            to_amount=to_amount,
            rate=rate,
            simulated=simulated,
        )
        self._history.append(record)
        if self.max_history > 0 and len(self._history) > self.max_history:
            del self._history[: len(self._history) - self.max_history]
        return record

    def _next_timestamp(self) -> int:
        """Epoch milliseconds, strictly increasing within this service."""
        now = int(time.time() * 1000)
        if now <= self._last_timestamp:
            now = self._last_timestamp + 1
        self._last_timestamp = now
        return now

    @staticmethod
    def _classify_error(error: Exception) -> str:
        """Map a failure to the message shown to the user."""
        if isinstance(error, SigningCancelledError):
            return CANCELLED_MESSAGE

        message = str(error)
        lowered = message.lower()
        if "user rejected" in lowered:
            return CANCELLED_MESSAGE
        if any(marker in lowered for marker in INSUFFICIENT_FUNDS_MARKERS):
            return INSUFFICIENT_FUNDS_MESSAGE
        return message or "Transaction failed"

    def history(self) -> list[SwapRecord]:
        """Swap records, most recent first."""
        return list(reversed(self._history))

    def clear(self) -> None:
        """Drop all swap records (session reset)."""
        self._history = []
        logger.info("Swap history cleared")
