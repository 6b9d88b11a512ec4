"""Solana JSON-RPC client.

Thin async wrapper over a single RPC endpoint. Every failure mode
(transport error, HTTP status, JSON-RPC error object, malformed result)
surfaces as RPCError so callers can decide whether to fall back.
"""

import asyncio
import logging
from typing import Any, Optional

import httpx

from goldium.chain.transaction import to_base64

logger = logging.getLogger(__name__)

CONFIRMED_STATUSES = ("confirmed", "finalized")


class RPCError(Exception):
    """Raised when an RPC call fails or returns unusable data."""

    def __init__(self, message: str, code: Optional[int] = None, endpoint: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.endpoint = endpoint


class SolanaRPC:
    """Async client for one Solana RPC endpoint."""

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize RPC client.

        Args:
            url: RPC endpoint URL
            timeout: Per-request timeout in seconds
            client: Optional shared HTTP client (created lazily otherwise)
        """
        self.url = url
        self.timeout = timeout
        self._http_client = client
        self._request_id = 0

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def _call(self, method: str, params: Optional[list] = None) -> Any:
        """Perform a JSON-RPC call and return its result field."""
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params or [],
        }

        client = await self._get_client()
        try:
            response = await client.post(self.url, json=payload)
        except httpx.HTTPError as e:
            raise RPCError(f"{method} request failed: {e}", endpoint=self.url) from e

        if response.status_code != 200:
            raise RPCError(
                f"{method} returned HTTP {response.status_code}",
                code=response.status_code,
                endpoint=self.url,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise RPCError(f"{method} returned invalid JSON", endpoint=self.url) from e

        if not isinstance(data, dict):
            raise RPCError(f"{method} returned malformed response", endpoint=self.url)

        if "error" in data:
            error = data["error"]
            if isinstance(error, dict):
                raise RPCError(
                    error.get("message", str(error)),
                    code=error.get("code"),
                    endpoint=self.url,
                )
            raise RPCError(str(error), endpoint=self.url)

        if "result" not in data:
            raise RPCError(f"{method} response missing result", endpoint=self.url)

        return data["result"]

    async def get_balance(self, address: str, commitment: str = "confirmed") -> int:
        """Get account balance in lamports."""
        result = await self._call("getBalance", [address, {"commitment": commitment}])
        value = result.get("value") if isinstance(result, dict) else None
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise RPCError(f"getBalance returned malformed value: {value!r}", endpoint=self.url)
        return value

    async def get_latest_blockhash(self, commitment: str = "confirmed") -> str:
        """Get a recent blockhash to anchor a transaction."""
        result = await self._call("getLatestBlockhash", [{"commitment": commitment}])
        try:
            blockhash = result["value"]["blockhash"]
        except (KeyError, TypeError) as e:
            raise RPCError("getLatestBlockhash returned malformed value", endpoint=self.url) from e
        if not isinstance(blockhash, str) or not blockhash:
            raise RPCError("getLatestBlockhash returned empty blockhash", endpoint=self.url)
        return blockhash

    async def send_transaction(self, signed_tx: bytes) -> str:
        """Broadcast a signed wire transaction, returning its signature."""
        result = await self._call(
            "sendTransaction",
            [
                to_base64(signed_tx),
                {
                    "encoding": "base64",
                    "skipPreflight": False,
                    "preflightCommitment": "confirmed",
                },
            ],
        )
        if not isinstance(result, str) or not result:
            raise RPCError("sendTransaction returned no signature", endpoint=self.url)
        return result

    async def get_signature_status(self, signature: str) -> Optional[dict]:
        """Get the status of a signature, or None if not yet seen."""
        result = await self._call(
            "getSignatureStatuses",
            [[signature], {"searchTransactionHistory": False}],
        )
        try:
            return result["value"][0]
        except (KeyError, IndexError, TypeError) as e:
            raise RPCError("getSignatureStatuses returned malformed value", endpoint=self.url) from e

    async def confirm_transaction(
        self,
        signature: str,
        timeout: float = 60.0,
        poll_interval: float = 2.0,
    ) -> bool:
        """Wait for a transaction to reach confirmed commitment.

        Returns:
            True if confirmed, False on transaction error or timeout
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout

        while True:
            try:
                status = await self.get_signature_status(signature)
            except RPCError as e:
                logger.debug(f"Status poll for {signature} failed: {e}")
                status = None

            if status is not None:
                if status.get("err") is not None:
                    logger.warning(f"Transaction {signature} failed: {status['err']}")
                    return False
                if status.get("confirmationStatus") in CONFIRMED_STATUSES:
                    return True

            if loop.time() >= deadline:
                logger.warning(f"Transaction {signature} not confirmed within {timeout}s")
                return False

            await asyncio.sleep(poll_interval)

    async def get_signatures_for_address(self, address: str, limit: int = 20) -> list[dict]:
        """Get recent transaction signatures involving an address, newest first."""
        result = await self._call("getSignaturesForAddress", [address, {"limit": limit}])
        if not isinstance(result, list):
            raise RPCError("getSignaturesForAddress returned malformed value", endpoint=self.url)
        return result

    async def get_transaction(self, signature: str) -> Optional[dict]:
        """Get a confirmed transaction in jsonParsed encoding, or None if unknown."""
        result = await self._call(
            "getTransaction",
            [signature, {"encoding": "jsonParsed", "maxSupportedTransactionVersion": 0}],
        )
        if result is not None and not isinstance(result, dict):
            raise RPCError("getTransaction returned malformed value", endpoint=self.url)
        return result

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None
