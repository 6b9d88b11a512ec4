"""Tests for the in-memory GOLD store."""

from decimal import Decimal

import pytest

from goldium.services.token_store import InsufficientTokenBalanceError, SwapTokenStore

from conftest import make_address

HOLDER = make_address(8)


class TestSwapTokenStore:
    """Tests for SwapTokenStore."""

    def test_unknown_holder_has_zero(self):
        assert SwapTokenStore().get(HOLDER) == Decimal("0")

    def test_credit_and_debit(self):
        store = SwapTokenStore()
        store.credit(HOLDER, Decimal("10"))
        store.debit(HOLDER, Decimal("4"))

        assert store.get(HOLDER) == Decimal("6")

    def test_overdraw_rejected(self):
        store = SwapTokenStore({HOLDER: Decimal("1")})

        with pytest.raises(InsufficientTokenBalanceError):
            store.debit(HOLDER, Decimal("2"))
        assert store.get(HOLDER) == Decimal("1")

    def test_clear(self):
        store = SwapTokenStore({HOLDER: Decimal("1")})
        store.clear()

        assert store.get(HOLDER) == Decimal("0")
