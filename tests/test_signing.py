"""Tests for signing agents."""

from decimal import Decimal
from unittest.mock import AsyncMock

import base58
import pytest
from nacl.signing import SigningKey, VerifyKey

from goldium.chain.transaction import TransferTransaction
from goldium.contracts.balances import Balance, BalanceSource
from goldium.signing import (
    EmbeddedSigningAgent,
    ExternalSigningAgent,
    SignerType,
    SigningCancelledError,
    SigningError,
    select_signing_agent,
)
from goldium.signing.embedded import load_signing_key

from conftest import BLOCKHASH, SEED_HEX, TREASURY, make_address


def transfer_from(address: str) -> TransferTransaction:
    return TransferTransaction(
        from_address=address,
        to_address=TREASURY,
        lamports=1_000,
        recent_blockhash=BLOCKHASH,
    )


class TestLoadSigningKey:
    """Tests for embedded key parsing."""

    def test_hex_seed(self):
        key = load_signing_key(SEED_HEX)
        assert bytes(key) == bytes.fromhex(SEED_HEX)

    def test_base58_secret_key(self):
        reference_key = SigningKey(bytes.fromhex(SEED_HEX))
        secret = base58.b58encode(bytes(reference_key) + reference_key.verify_key.encode()).decode()

        key = load_signing_key(secret)

        assert key.verify_key.encode() == reference_key.verify_key.encode()

    def test_mismatched_secret_key_rejected(self):
        reference_key = SigningKey(bytes.fromhex(SEED_HEX))
        secret = base58.b58encode(bytes(reference_key) + bytes(32)).decode()

        with pytest.raises(ValueError):
            load_signing_key(secret)

    def test_generated_when_unset(self):
        assert load_signing_key(None) is not None


class TestEmbeddedSigningAgent:
    """Tests for the in-memory key agent."""

    @pytest.mark.asyncio
    async def test_signature_verifies(self, embedded_agent):
        tx = transfer_from(embedded_agent.public_address)

        wire = await embedded_agent.sign(tx)

        verify_key = VerifyKey(base58.b58decode(embedded_agent.public_address))
        verify_key.verify(tx.message(), wire[1:65])
        assert embedded_agent.signer_type == SignerType.EMBEDDED

    @pytest.mark.asyncio
    async def test_rejects_foreign_fee_payer(self, embedded_agent):
        with pytest.raises(SigningError):
            await embedded_agent.sign(transfer_from(make_address(4)))

    @pytest.mark.asyncio
    async def test_balance_comes_from_resolver(self, embedded_agent, mock_resolver):
        mock_resolver.resolve.return_value = Balance(
            address=embedded_agent.address,
            amount=Decimal("1.25"),
            source=BalanceSource.PRIMARY,
        )

        assert await embedded_agent.get_balance() == Decimal("1.25")
        mock_resolver.resolve.assert_awaited_once_with(embedded_agent.public_address)


class TestExternalSigningAgent:
    """Tests for the host wallet agent."""

    @pytest.mark.asyncio
    async def test_sign_forwards_to_callback(self):
        callback = AsyncMock(return_value=b"\x01signed")
        agent = ExternalSigningAgent(make_address(5), callback, balance=Decimal("2"))
        tx = transfer_from(make_address(5))

        assert await agent.sign(tx) == b"\x01signed"
        callback.assert_awaited_once_with(tx)
        assert await agent.get_balance() == Decimal("2")

    @pytest.mark.asyncio
    async def test_user_rejection_becomes_cancelled(self):
        callback = AsyncMock(side_effect=RuntimeError("User rejected the request."))
        agent = ExternalSigningAgent(make_address(5), callback)

        with pytest.raises(SigningCancelledError):
            await agent.sign(transfer_from(make_address(5)))

    @pytest.mark.asyncio
    async def test_other_failure_becomes_signing_error(self):
        callback = AsyncMock(side_effect=RuntimeError("wallet crashed"))
        agent = ExternalSigningAgent(make_address(5), callback)

        with pytest.raises(SigningError) as exc_info:
            await agent.sign(transfer_from(make_address(5)))
        assert not isinstance(exc_info.value, SigningCancelledError)

    @pytest.mark.asyncio
    async def test_disconnected_agent_refuses(self):
        agent = ExternalSigningAgent(make_address(5), AsyncMock(), connected=False)

        with pytest.raises(SigningError):
            await agent.sign(transfer_from(make_address(5)))


class TestSelectSigningAgent:
    """Tests for active agent selection."""

    def test_connected_external_wins(self, embedded_agent):
        external = ExternalSigningAgent(make_address(5), AsyncMock())
        assert select_signing_agent(external, embedded_agent) is external

    def test_disconnected_external_falls_back(self, embedded_agent):
        external = ExternalSigningAgent(make_address(5), AsyncMock())
        external.disconnect()
        assert select_signing_agent(external, embedded_agent) is embedded_agent

    def test_no_external_uses_embedded(self, embedded_agent):
        assert select_signing_agent(None, embedded_agent) is embedded_agent
