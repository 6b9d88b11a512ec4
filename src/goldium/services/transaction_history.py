"""Merged transaction history.

Two independent feeds (treasury-side and user-side) are fetched
concurrently, merged, deduplicated by signature, sorted newest first and
truncated. A failing feed is skipped; total failure yields an empty view.

Each refresh() starts a new generation. Only the newest generation
publishes its result, so a slow earlier refresh cannot overwrite a newer
one.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Callable, Iterable, Optional, Union

from pydantic import ValidationError

from goldium.chain.rpc import RPCError, SolanaRPC
from goldium.chain.transaction import lamports_to_sol
from goldium.contracts.transactions import (
    HistoryState,
    TransactionHistoryView,
    TransactionRecord,
    TransactionStatus,
    TransactionType,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_RECORDS = 20

# Memo keywords -> transaction type, checked in order
MEMO_TYPES = (
    ("unstake", TransactionType.UNSTAKE),
    ("stake", TransactionType.STAKE),
    ("claim", TransactionType.CLAIM),
    ("swap", TransactionType.SWAP),
)


class TransactionSource(ABC):
    """A read-only feed of transaction records."""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    async def fetch(self) -> list[Union[TransactionRecord, dict]]:
        """Fetch recent records (records or record-shaped dicts)."""
        pass


class StaticTransactionSource(TransactionSource):
    """Fixed list of records (testing and offline demos)."""

    def __init__(self, name: str, records: Optional[Iterable[Union[TransactionRecord, dict]]] = None):
        super().__init__(name)
        self.records = list(records or [])

    async def fetch(self) -> list[Union[TransactionRecord, dict]]:
        return list(self.records)


class RPCTransactionSource(TransactionSource):
    """Recent transactions touching one address, read from Solana RPC."""

    def __init__(
        self,
        name: str,
        rpc: SolanaRPC,
        address_provider: Callable[[], Optional[str]],
        limit: int = 20,
        explorer_url: str = "https://solscan.io",
        include_amounts: bool = True,
    ):
        """Initialize RPC-backed source.

        Args:
            name: Source name used in logs and failure reports
            rpc: Endpoint to query
            address_provider: Returns the address to watch (may change between refreshes)
            limit: Max signatures per fetch
            explorer_url: Base URL for transaction links
            include_amounts: Fetch each transaction to compute the SOL moved
        """
        super().__init__(name)
        self.rpc = rpc
        self.address_provider = address_provider
        self.limit = limit
        self.explorer_url = explorer_url.rstrip("/")
        self.include_amounts = include_amounts

    async def fetch(self) -> list[Union[TransactionRecord, dict]]:
        address = self.address_provider()
        if not address:
            logger.debug(f"{self.name} source has no address to watch")
            return []

        entries = await self.rpc.get_signatures_for_address(address, limit=self.limit)

        amounts: list[Decimal] = [Decimal("0")] * len(entries)
        if self.include_amounts and entries:
            amounts = await asyncio.gather(
                *(self._fetch_amount(entry.get("signature", ""), address) for entry in entries)
            )

        records = []
        for entry, amount in zip(entries, amounts):
            record = self._parse_entry(entry, amount)
            if record is not None:
                records.append(record)
        return records

    async def _fetch_amount(self, signature: str, address: str) -> Decimal:
        """SOL balance change of `address` in a transaction (zero if unknown)."""
        if not signature:
            return Decimal("0")
        try:
            tx = await self.rpc.get_transaction(signature)
        except RPCError as e:
            logger.debug(f"Could not load {signature} for amount: {e}")
            return Decimal("0")
        return parse_sol_change(tx, address)

    def _parse_entry(self, entry: dict, amount: Decimal) -> Optional[TransactionRecord]:
        signature = entry.get("signature")
        if not signature:
            return None

        if entry.get("err") is not None:
            status = TransactionStatus.FAILED
        elif entry.get("confirmationStatus") in ("confirmed", "finalized"):
            status = TransactionStatus.CONFIRMED
        else:
            status = TransactionStatus.PENDING

        block_time = entry.get("blockTime")
        timestamp = int(block_time) * 1000 if block_time else int(time.time() * 1000)

        return TransactionRecord(
            signature=signature,
            type=classify_memo(entry.get("memo")),
            status=status,
            token="SOL",
            amount=amount,
            timestamp=timestamp,
            explorer_url=f"{self.explorer_url}/tx/{signature}",
        )


def classify_memo(memo: Optional[str]) -> TransactionType:
    """Infer the transaction type from its memo."""
    if not memo:
        return TransactionType.OTHER
    lowered = memo.lower()
    for keyword, tx_type in MEMO_TYPES:
        if keyword in lowered:
            return tx_type
    return TransactionType.OTHER


def parse_sol_change(tx: Optional[dict], address: str) -> Decimal:
    """Absolute lamport change of an account in a jsonParsed transaction, in SOL."""
    if not tx:
        return Decimal("0")
    try:
        meta = tx["meta"]
        keys = tx["transaction"]["message"]["accountKeys"]
        pubkeys = [k["pubkey"] if isinstance(k, dict) else k for k in keys]
        index = pubkeys.index(address)
        delta = meta["postBalances"][index] - meta["preBalances"][index]
    except (KeyError, IndexError, TypeError, ValueError):
        return Decimal("0")
    return lamports_to_sol(abs(delta))


class TransactionHistoryAggregator:
    """Merges treasury and user transaction feeds into one bounded view."""

    def __init__(
        self,
        treasury_source: TransactionSource,
        user_source: TransactionSource,
        max_records: int = DEFAULT_MAX_RECORDS,
    ):
        self.sources = [treasury_source, user_source]
        self.max_records = max_records
        self._generation = 0
        self._view = TransactionHistoryView()

    @property
    def view(self) -> TransactionHistoryView:
        """Result of the latest completed refresh."""
        return self._view

    @property
    def state(self) -> HistoryState:
        return self._view.state

    async def refresh(self) -> list[TransactionRecord]:
        """Fetch both sources and publish the merged view.

        Returns:
            Merged records, newest first, at most max_records long
        """
        self._generation += 1
        generation = self._generation
        self._view = self._view.model_copy(update={"state": HistoryState.LOADING})

        results = await asyncio.gather(
            *(source.fetch() for source in self.sources),
            return_exceptions=True,
        )

        collected: list[TransactionRecord] = []
        failed: list[str] = []
        for source, result in zip(self.sources, results):
            if isinstance(result, BaseException):
                logger.error(f"Error fetching {source.name} transactions: {result}")
                failed.append(source.name)
                continue
            collected.extend(self._coerce(source.name, result))

        merged = self.merge(collected)

        if generation != self._generation:
            logger.debug(f"Discarding stale transaction refresh {generation} (latest {self._generation})")
            return merged

        if not merged:
            state = HistoryState.EMPTY
        elif failed:
            state = HistoryState.PARTIAL
        else:
            state = HistoryState.SUCCESS

        self._view = TransactionHistoryView(state=state, transactions=merged, failed_sources=failed)
        logger.info(f"Transaction history refreshed: {len(merged)} records ({state.value})")
        return merged

    def merge(self, records: Iterable[TransactionRecord]) -> list[TransactionRecord]:
        """Sort newest first, drop repeated signatures, truncate."""
        ordered = sorted(records, key=lambda r: r.timestamp, reverse=True)

        seen: set[str] = set()
        unique = []
        for record in ordered:
            if record.signature in seen:
                continue
            seen.add(record.signature)
            unique.append(record)

        return unique[: self.max_records]

    @staticmethod
    def _coerce(source_name: str, items: Iterable) -> list[TransactionRecord]:
        """Validate record-shaped data, skipping malformed entries."""
        records = []
        for item in items or []:
            if isinstance(item, TransactionRecord):
                records.append(item)
                continue
            try:
                records.append(TransactionRecord.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping malformed {source_name} record: {e}")
        return records
