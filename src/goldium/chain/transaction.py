"""Solana System Program transfer transactions.

Builds legacy (non-versioned) transactions by hand. Wire format:
- compact-u16 number of signatures, then 64-byte ed25519 signatures
- message: header (3 bytes), account keys, recent blockhash, instructions

Only the single-instruction SOL transfer used for exchanges is supported.
"""

import base64
import logging
import struct
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal
from typing import Optional

import base58

logger = logging.getLogger(__name__)

LAMPORTS_PER_SOL = 10**9
SOL_DECIMALS = 9

SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"
SYSTEM_TRANSFER_INSTRUCTION = 2

SIGNATURE_LENGTH = 64
PUBKEY_LENGTH = 32


def sol_to_lamports(amount: Decimal) -> int:
    """Convert SOL to lamports, truncating sub-lamport dust."""
    lamports = (Decimal(amount) * LAMPORTS_PER_SOL).to_integral_value(rounding=ROUND_DOWN)
    return int(lamports)


def lamports_to_sol(lamports: int) -> Decimal:
    """Convert lamports to SOL."""
    return Decimal(lamports) / Decimal(LAMPORTS_PER_SOL)


def decode_pubkey(address: str) -> bytes:
    """Decode a base58 public key.

    Raises:
        ValueError: If the address is not a valid 32-byte base58 key
    """
    try:
        raw = base58.b58decode(address)
    except ValueError as e:
        raise ValueError(f"Invalid base58 address: {address}") from e

    if len(raw) != PUBKEY_LENGTH:
        raise ValueError(f"Address must decode to {PUBKEY_LENGTH} bytes, got {len(raw)}")
    return raw


def is_valid_address(address: Optional[str]) -> bool:
    """Check that an address is a base58-encoded 32-byte public key."""
    if not address:
        return False
    try:
        decode_pubkey(address)
        return True
    except ValueError:
        return False


def encode_length(length: int) -> bytes:
    """Encode an integer as Solana compact-u16."""
    out = bytearray()
    remaining = length
    while True:
        elem = remaining & 0x7F
        remaining >>= 7
        if remaining == 0:
            out.append(elem)
            break
        out.append(elem | 0x80)
    return bytes(out)


@dataclass(frozen=True)
class TransferTransaction:
    """Unsigned SOL transfer anchored to a recent blockhash.

    The sender is also the fee payer and the only required signer.
    """

    from_address: str
    to_address: str
    lamports: int
    recent_blockhash: str

    def __post_init__(self):
        if self.lamports <= 0:
            raise ValueError("Transfer amount must be positive")
        if self.from_address == self.to_address:
            raise ValueError("Sender and recipient must differ")

    @property
    def fee_payer(self) -> str:
        return self.from_address

    def message(self) -> bytes:
        """Serialize the message that signers sign."""
        # Accounts: sender (signer, writable), recipient (writable), system program (readonly)
        header = bytes([1, 0, 1])
        account_keys = [
            decode_pubkey(self.from_address),
            decode_pubkey(self.to_address),
            decode_pubkey(SYSTEM_PROGRAM_ID),
        ]
        blockhash = decode_pubkey(self.recent_blockhash)

        data = struct.pack("<IQ", SYSTEM_TRANSFER_INSTRUCTION, self.lamports)
        instruction = (
            bytes([2])  # program id index
            + encode_length(2)
            + bytes([0, 1])
            + encode_length(len(data))
            + data
        )

        return (
            header
            + encode_length(len(account_keys))
            + b"".join(account_keys)
            + blockhash
            + encode_length(1)
            + instruction
        )

    def serialize(self, signature: bytes) -> bytes:
        """Serialize the signed transaction to wire format."""
        if len(signature) != SIGNATURE_LENGTH:
            raise ValueError(f"Signature must be {SIGNATURE_LENGTH} bytes")
        return encode_length(1) + signature + self.message()


def extract_signature(signed_tx: bytes) -> str:
    """Return the fee payer signature (the transaction id) as base58."""
    if not signed_tx or signed_tx[0] < 1:
        raise ValueError("Signed transaction carries no signatures")
    return base58.b58encode(signed_tx[1:1 + SIGNATURE_LENGTH]).decode()


def to_base64(signed_tx: bytes) -> str:
    """Encode a wire transaction for sendTransaction."""
    return base64.b64encode(signed_tx).decode()
