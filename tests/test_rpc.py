"""Tests for the Solana JSON-RPC client."""

import httpx
import pytest

from goldium.chain.rpc import RPCError

from conftest import balance_result, make_address, rpc_from_handler


class TestRPCCalls:
    """Tests for individual RPC methods."""

    @pytest.mark.asyncio
    async def test_get_balance(self):
        calls = []

        def handler(method, params):
            calls.append((method, params))
            return balance_result(1_500_000_000)

        rpc = rpc_from_handler(handler)
        lamports = await rpc.get_balance(make_address(1))

        assert lamports == 1_500_000_000
        assert calls[0][0] == "getBalance"
        assert calls[0][1][0] == make_address(1)
        await rpc.close()

    @pytest.mark.asyncio
    async def test_json_rpc_error_raises(self):
        def handler(method, params):
            return httpx.Response(
                200,
                json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32602, "message": "Invalid param"}},
            )

        rpc = rpc_from_handler(handler)
        with pytest.raises(RPCError) as exc_info:
            await rpc.get_balance(make_address(1))

        assert exc_info.value.code == -32602
        assert "Invalid param" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_http_error_raises(self):
        rpc = rpc_from_handler(lambda method, params: httpx.Response(503, text="unavailable"))

        with pytest.raises(RPCError) as exc_info:
            await rpc.get_balance(make_address(1))

        assert exc_info.value.code == 503

    @pytest.mark.asyncio
    async def test_connection_error_raises(self):
        def handler(method, params):
            raise httpx.ConnectError("connection refused")

        rpc = rpc_from_handler(handler)
        with pytest.raises(RPCError):
            await rpc.get_balance(make_address(1))

    @pytest.mark.asyncio
    async def test_malformed_balance_raises(self):
        rpc = rpc_from_handler(lambda method, params: {"value": "lots"})

        with pytest.raises(RPCError):
            await rpc.get_balance(make_address(1))

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self):
        rpc = rpc_from_handler(lambda method, params: httpx.Response(200, text="<html>"))

        with pytest.raises(RPCError):
            await rpc.get_latest_blockhash()

    @pytest.mark.asyncio
    async def test_get_latest_blockhash(self):
        rpc = rpc_from_handler(
            lambda method, params: {"context": {"slot": 1}, "value": {"blockhash": "abc", "lastValidBlockHeight": 9}}
        )

        assert await rpc.get_latest_blockhash() == "abc"

    @pytest.mark.asyncio
    async def test_send_transaction_encodes_base64(self):
        seen = {}

        def handler(method, params):
            seen["method"] = method
            seen["params"] = params
            return "sig123"

        rpc = rpc_from_handler(handler)
        signature = await rpc.send_transaction(b"\x01\x02\x03")

        assert signature == "sig123"
        assert seen["method"] == "sendTransaction"
        assert seen["params"][0] == "AQID"
        assert seen["params"][1]["encoding"] == "base64"


class TestConfirmTransaction:
    """Tests for confirmation polling."""

    @pytest.mark.asyncio
    async def test_confirmed_after_pending(self):
        statuses = iter([
            {"context": {"slot": 1}, "value": [None]},
            {"context": {"slot": 2}, "value": [{"err": None, "confirmationStatus": "processed"}]},
            {"context": {"slot": 3}, "value": [{"err": None, "confirmationStatus": "confirmed"}]},
        ])
        rpc = rpc_from_handler(lambda method, params: next(statuses))

        assert await rpc.confirm_transaction("sig", timeout=5, poll_interval=0) is True

    @pytest.mark.asyncio
    async def test_transaction_error_is_not_confirmed(self):
        rpc = rpc_from_handler(
            lambda method, params: {
                "context": {"slot": 1},
                "value": [{"err": {"InstructionError": [0, "Custom"]}, "confirmationStatus": "confirmed"}],
            }
        )

        assert await rpc.confirm_transaction("sig", timeout=5, poll_interval=0) is False

    @pytest.mark.asyncio
    async def test_timeout_is_not_confirmed(self):
        rpc = rpc_from_handler(lambda method, params: {"context": {"slot": 1}, "value": [None]})

        assert await rpc.confirm_transaction("sig", timeout=0.02, poll_interval=0.005) is False
