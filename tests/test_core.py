"""
test_core.py - Unit tests for core.py

Tests:
- Move validation
- PendingTransaction intent hashing and signers
- Transaction construction
- Unit factories and rounding
"""

import pytest
from datetime import datetime
from decimal import Decimal

from presale import (
    Move, PendingTransaction, Transaction, TransactionOrigin, OriginType, UnitStateChange,
    native_currency, stable_token, sale_token,
    UNIT_TYPE_NATIVE, UNIT_TYPE_STABLE, UNIT_TYPE_SALE_TOKEN,
)


T = datetime(2025, 1, 1)
ORIGIN = TransactionOrigin(OriginType.CONTRACT, "presale", "presale:admin", "BUY_TOKENS")


class TestMove:

    def test_valid_move(self):
        m = Move(Decimal("5"), "SOL", "alice", "bob", "c1")
        assert m.quantity == Decimal("5")

    @pytest.mark.parametrize("quantity", [Decimal("0"), Decimal("-1"), Decimal("NaN"), Decimal("Infinity")])
    def test_rejects_bad_quantity(self, quantity):
        with pytest.raises(ValueError):
            Move(quantity, "SOL", "alice", "bob", "c1")

    def test_rejects_float_quantity(self):
        with pytest.raises(ValueError, match="must be Decimal"):
            Move(5.0, "SOL", "alice", "bob", "c1")

    def test_rejects_self_transfer(self):
        with pytest.raises(ValueError, match="must be different"):
            Move(Decimal("1"), "SOL", "alice", "alice", "c1")

    def test_rejects_empty_contract_id(self):
        with pytest.raises(ValueError):
            Move(Decimal("1"), "SOL", "alice", "bob", " ")


class TestIntentId:

    def test_same_content_same_intent(self):
        moves = (Move(Decimal("1.0"), "SOL", "alice", "bob", "c1"),)
        a = PendingTransaction(moves, (), ORIGIN, T)
        b = PendingTransaction((Move(Decimal("1.00"), "SOL", "alice", "bob", "c1"),), (), ORIGIN, T)
        assert a.intent_id == b.intent_id

    def test_timestamp_not_part_of_intent(self):
        moves = (Move(Decimal("1"), "SOL", "alice", "bob", "c1"),)
        a = PendingTransaction(moves, (), ORIGIN, T)
        b = PendingTransaction(moves, (), ORIGIN, datetime(2026, 1, 1))
        assert a.intent_id == b.intent_id

    def test_state_change_changes_intent(self):
        a = PendingTransaction((), (UnitStateChange("S", {'n': 0}, {'n': 1}),), ORIGIN, T)
        b = PendingTransaction((), (UnitStateChange("S", {'n': 1}, {'n': 2}),), ORIGIN, T)
        assert a.intent_id != b.intent_id

    def test_datetime_state_is_canonical(self):
        a = PendingTransaction((), (UnitStateChange("S", {'t': None}, {'t': T}),), ORIGIN, T)
        b = PendingTransaction((), (UnitStateChange("S", {'t': None}, {'t': T}),), ORIGIN, T)
        assert a.intent_id == b.intent_id

    def test_signers_frozen(self):
        p = PendingTransaction((), (UnitStateChange("S", {}, {'n': 1}),), ORIGIN, T, signers=frozenset({"alice"}))
        assert p.signers == frozenset({"alice"})
        assert not p.is_empty()


class TestTransaction:

    def test_requires_content(self):
        with pytest.raises(ValueError):
            Transaction((), (), ORIGIN, T, "i", "e", "l", T, 0)

    def test_contract_ids_collected(self):
        moves = (
            Move(Decimal("1"), "SOL", "alice", "bob", "c1"),
            Move(Decimal("1"), "NLOV", "vault", "alice", "c2"),
        )
        tx = Transaction(moves, (), ORIGIN, T, "i", "e", "l", T, 0)
        assert tx.contract_ids == frozenset({"c1", "c2"})
        assert "presale" in repr(tx)


class TestUnitFactories:

    def test_native_currency(self):
        sol = native_currency("SOL", "Solana")
        assert sol.unit_type == UNIT_TYPE_NATIVE
        assert sol.min_balance == Decimal("0")
        assert sol.round(Decimal("10.9")) == Decimal("10")

    def test_stable_token(self):
        usdc = stable_token("USDC", "USD Coin")
        assert usdc.unit_type == UNIT_TYPE_STABLE
        assert usdc.decimal_places == 6
        assert usdc.state == {'pegged_to': 'USD'}

    def test_sale_token(self):
        token = sale_token("NLOV", "Neurolov", issuer="admin")
        assert token.unit_type == UNIT_TYPE_SALE_TOKEN
        assert token.decimal_places == 0

    def test_sale_token_requires_issuer(self):
        with pytest.raises(ValueError):
            sale_token("NLOV", "Neurolov", issuer="")
