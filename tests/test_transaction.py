"""Tests for transfer transaction encoding."""

import struct
from decimal import Decimal

import base58
import pytest

from goldium.chain.transaction import (
    SYSTEM_PROGRAM_ID,
    TransferTransaction,
    encode_length,
    extract_signature,
    is_valid_address,
    lamports_to_sol,
    sol_to_lamports,
)

from conftest import BLOCKHASH, TREASURY, make_address


class TestConversions:
    """Tests for SOL/lamport conversion."""

    def test_sol_to_lamports(self):
        assert sol_to_lamports(Decimal("0.5")) == 500_000_000
        assert sol_to_lamports(Decimal("1")) == 1_000_000_000

    def test_sol_to_lamports_truncates_dust(self):
        assert sol_to_lamports(Decimal("0.0000000019")) == 1

    def test_lamports_to_sol(self):
        assert lamports_to_sol(32_454_000) == Decimal("0.032454")


class TestAddressValidation:
    """Tests for base58 address validation."""

    def test_valid_address(self):
        assert is_valid_address(TREASURY)
        assert is_valid_address(SYSTEM_PROGRAM_ID)

    @pytest.mark.parametrize("address", [None, "", "not-base58-0OIl", "abc"])
    def test_invalid_address(self, address):
        assert not is_valid_address(address)


class TestCompactLength:
    """Tests for compact-u16 encoding."""

    @pytest.mark.parametrize(
        "value,encoded",
        [(0, b"\x00"), (1, b"\x01"), (127, b"\x7f"), (128, b"\x80\x01"), (16384, b"\x80\x80\x01")],
    )
    def test_encode_length(self, value, encoded):
        assert encode_length(value) == encoded


class TestTransferTransaction:
    """Tests for the legacy transfer message layout."""

    def _tx(self, lamports: int = 500_000_000) -> TransferTransaction:
        return TransferTransaction(
            from_address=make_address(1),
            to_address=TREASURY,
            lamports=lamports,
            recent_blockhash=BLOCKHASH,
        )

    def test_message_layout(self):
        """Header, keys, blockhash and transfer instruction are in order."""
        message = self._tx().message()

        assert message[:3] == bytes([1, 0, 1])
        assert message[3] == 3
        assert message[4:36] == base58.b58decode(make_address(1))
        assert message[36:68] == base58.b58decode(TREASURY)
        assert message[68:100] == bytes(32)
        assert message[100:132] == base58.b58decode(BLOCKHASH)
        assert message[132] == 1  # one instruction
        assert message[133] == 2  # system program index
        assert message[134:137] == bytes([2, 0, 1])
        assert message[137] == 12
        assert message[138:] == struct.pack("<IQ", 2, 500_000_000)

    def test_serialize_prefixes_signature(self):
        tx = self._tx()
        signature = bytes(range(64))

        wire = tx.serialize(signature)

        assert wire[0] == 1
        assert wire[1:65] == signature
        assert wire[65:] == tx.message()
        assert extract_signature(wire) == base58.b58encode(signature).decode()

    def test_serialize_rejects_bad_signature(self):
        with pytest.raises(ValueError):
            self._tx().serialize(b"short")

    def test_rejects_non_positive_amount(self):
        with pytest.raises(ValueError):
            self._tx(lamports=0)

    def test_rejects_self_transfer(self):
        with pytest.raises(ValueError):
            TransferTransaction(
                from_address=TREASURY,
                to_address=TREASURY,
                lamports=1,
                recent_blockhash=BLOCKHASH,
            )
