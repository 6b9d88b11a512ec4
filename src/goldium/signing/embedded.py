"""Embedded signing agent.

Holds an ed25519 key in memory for the lifetime of the process.
Used when no external wallet is connected.

WARNING: The key is kept in plain memory and never persisted. This is a
fallback for demos and development, not a custody design.
"""

import logging
from decimal import Decimal
from typing import Optional

import base58
from nacl.signing import SigningKey

from goldium.chain.transaction import TransferTransaction, extract_signature
from goldium.services.balance_resolver import BalanceResolver
from goldium.signing.base import SignerType, SigningAgent, SigningError

logger = logging.getLogger(__name__)

SEED_LENGTH = 32
SECRET_KEY_LENGTH = 64


def load_signing_key(secret: Optional[str]) -> SigningKey:
    """Load an ed25519 key from configuration, or generate one.

    Accepted formats:
    - 64 hex chars: 32-byte seed
    - base58 64-byte secret key (seed + public key, as exported by wallets)
    - base58 32-byte seed

    Raises:
        ValueError: If the secret cannot be parsed
    """
    if not secret:
        logger.info("No embedded wallet secret configured, generating ephemeral key")
        return SigningKey.generate()

    secret = secret.strip()
    hex_candidate = secret[2:] if secret.startswith("0x") else secret
    if len(hex_candidate) == SEED_LENGTH * 2:
        try:
            return SigningKey(bytes.fromhex(hex_candidate))
        except ValueError:
            pass

    try:
        raw = base58.b58decode(secret)
    except ValueError as e:
        raise ValueError("Embedded wallet secret is neither hex nor base58") from e

    if len(raw) == SECRET_KEY_LENGTH:
        key = SigningKey(raw[:SEED_LENGTH])
        if key.verify_key.encode() != raw[SEED_LENGTH:]:
            raise ValueError("Embedded wallet secret key does not match its public key")
        return key
    if len(raw) == SEED_LENGTH:
        return SigningKey(raw)

    raise ValueError(f"Embedded wallet secret has unexpected length {len(raw)}")


class EmbeddedSigningAgent(SigningAgent):
    """Service-owned key that signs locally."""

    def __init__(self, resolver: BalanceResolver, secret: Optional[str] = None):
        """Initialize embedded agent.

        Args:
            resolver: Used to look up this agent's SOL balance
            secret: Optional key material; a fresh key is generated if None
        """
        super().__init__(SignerType.EMBEDDED)
        self._signing_key = load_signing_key(secret)
        self._public_address = base58.b58encode(self._signing_key.verify_key.encode()).decode()
        self._resolver = resolver
        logger.info(f"Embedded wallet ready: {self._public_address}")

    @property
    def address(self) -> str:
        return self._public_address

    @property
    def public_address(self) -> str:
        return self._public_address

    async def sign(self, tx: TransferTransaction) -> bytes:
        """Sign the transfer message with the in-memory key."""
        if tx.fee_payer != self._public_address:
            raise SigningError(
                f"Transaction fee payer {tx.fee_payer} does not match embedded wallet"
            )
        signature = self._signing_key.sign(tx.message()).signature
        signed_tx = tx.serialize(signature)
        logger.debug(f"Signed transfer {extract_signature(signed_tx)} locally")
        return signed_tx

    async def get_balance(self) -> Decimal:
        """Resolve this wallet's balance through the resolver."""
        balance = await self._resolver.resolve(self._public_address)
        return balance.amount
