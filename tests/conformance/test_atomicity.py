"""
Atomicity Conformance Tests

INVARIANT: Presale operations are all-or-nothing.

    ∀ operation O:
        O succeeds ⟹ record update, payment and delivery are all applied
        O fails ⟹ balances, sale record and transaction log are unchanged
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from decimal import Decimal

from presale import (
    PaymentType, PresaleError, LedgerError, InsufficientFunds, USDC_MINT,
)

from tests.presale_helpers import (
    ADMIN, SOL, TOKEN, MERCHANT, NATIVE_PRICE, build_program, ledger_snapshot,
)


def _started_program(vault_tokens=1000, hardcap=1000):
    ledger, program, sale_id = build_program(vault_tokens=vault_tokens, hardcap=hardcap)
    program.set_stage(ADMIN, sale_id)
    return ledger, program, sale_id


class TestAtomicityProperties:
    """Property-based atomicity tests."""

    @given(st.integers(min_value=0, max_value=300_000))
    @settings(max_examples=50, deadline=None)
    def test_buy_applies_fully_or_not_at_all(self, amount):
        """
        PROPERTY: A native purchase either moves payment, tokens and the
        record together, or leaves the ledger exactly as it was.
        """
        ledger, program, sale_id = _started_program(vault_tokens=500)
        before = ledger_snapshot(ledger)
        try:
            bought = program.buy_tokens("alice", sale_id, PaymentType.WEB3, amount)
        except (PresaleError, LedgerError):
            assert ledger_snapshot(ledger) == before
            return

        assert bought * NATIVE_PRICE == amount
        assert ledger.get_balance("alice", TOKEN) == Decimal(bought)
        assert ledger.get_balance(MERCHANT, SOL) == Decimal(amount)
        assert program.load(sale_id).total_sold == bought

    @given(st.integers(min_value=1, max_value=20))
    @settings(max_examples=20, deadline=None)
    def test_unfunded_stable_payment_changes_nothing(self, excess):
        """
        PROPERTY: A WEB3 stable purchase the buyer cannot pay for delivers
        no tokens and leaves the record untouched.
        """
        ledger, program, sale_id = _started_program()
        ledger.set_balance("alice", USDC_MINT, Decimal("5"))
        before = ledger_snapshot(ledger)
        with pytest.raises(InsufficientFunds):
            program.buy_tokens_by_stable_coin("alice", sale_id, PaymentType.WEB3, 5 + excess, USDC_MINT)
        assert ledger_snapshot(ledger) == before


class TestAtomicityEdgeCases:

    def test_low_inventory_rejects_whole_purchase(self):
        ledger, program, sale_id = _started_program(vault_tokens=3)
        before = ledger_snapshot(ledger)
        with pytest.raises(PresaleError):
            program.buy_tokens("alice", sale_id, PaymentType.WEB3, 4 * NATIVE_PRICE)
        assert ledger_snapshot(ledger) == before

    def test_failed_finalize_keeps_flag_clear(self, ended_sale):
        ledger, program, sale_id = ended_sale
        before = ledger_snapshot(ledger)
        with pytest.raises(PresaleError):
            program.finalize_presale(ADMIN, sale_id, "unregistered")
        assert ledger_snapshot(ledger) == before
        assert program.load(sale_id).pool_created is False

    def test_premature_stage_change_keeps_record(self, private_sale):
        ledger, program, sale_id = private_sale
        before = ledger_snapshot(ledger)
        with pytest.raises(PresaleError):
            program.set_stage(ADMIN, sale_id)
        assert ledger_snapshot(ledger) == before
