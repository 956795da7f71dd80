"""
Sale Invariant Conformance Tests

INVARIANTS:

    total_sold ≤ hardcap, at every point
    stage only moves forward: NOT_STARTED → PRIVATE → PUBLIC → ENDED
    a successful purchase of N tokens raises total_sold by exactly N
    pool_created goes from False to True at most once, and only after ENDED
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from presale import (
    Stage, PaymentType, PresaleError, LedgerError, LiquidityPoolAlreadyCreated,
)

from tests.presale_helpers import ADMIN, LIQUIDITY, NATIVE_PRICE, build_program, advance_days


action = st.one_of(
    st.tuples(st.just("buy"), st.sampled_from(["alice", "bob"]), st.integers(min_value=0, max_value=400)),
    st.tuples(st.just("advance"), st.integers(min_value=0, max_value=10)),
    st.tuples(st.just("stage"), st.sampled_from([ADMIN, "alice"])),
    st.tuples(st.just("finalize"), st.sampled_from([ADMIN, "bob"])),
)


def _apply(ledger, program, sale_id, step):
    kind = step[0]
    if kind == "buy":
        _, buyer, units = step
        program.buy_tokens(buyer, sale_id, PaymentType.WEB3, units * NATIVE_PRICE)
    elif kind == "advance":
        advance_days(ledger, step[1])
    elif kind == "stage":
        program.set_stage(step[1], sale_id)
    else:
        program.finalize_presale(step[1], sale_id, LIQUIDITY)


class TestSaleInvariants:

    @given(st.integers(min_value=1, max_value=500), st.lists(action, max_size=25))
    @settings(max_examples=60, deadline=None)
    def test_random_operation_sequences(self, hardcap, steps):
        """
        PROPERTY: Under any interleaving of buys, time steps, stage changes
        and finalization attempts the sale invariants hold after every step.
        """
        ledger, program, sale_id = build_program(vault_tokens=hardcap, hardcap=hardcap)
        previous = program.load(sale_id)

        for step in steps:
            try:
                _apply(ledger, program, sale_id, step)
            except (PresaleError, LedgerError):
                assert program.load(sale_id) == previous
                continue

            current = program.load(sale_id)
            assert current.total_sold <= current.hardcap
            assert current.stage >= previous.stage
            assert current.stage - previous.stage <= 1
            if previous.pool_created:
                assert current.pool_created
            if current.pool_created:
                assert current.stage == Stage.ENDED
            if step[0] == "buy":
                assert current.total_sold - previous.total_sold == step[2]
            previous = current

    @given(st.integers(min_value=1, max_value=50))
    @settings(max_examples=20, deadline=None)
    def test_hardcap_exact_fill(self, hardcap):
        """
        PROPERTY: A sale fills to exactly its hardcap and refuses one more.
        """
        ledger, program, sale_id = build_program(vault_tokens=hardcap + 10, hardcap=hardcap)
        program.set_stage(ADMIN, sale_id)
        assert program.buy_tokens("alice", sale_id, PaymentType.WEB3, hardcap * NATIVE_PRICE) == hardcap
        assert program.check_presale_token_balance(sale_id) == 0
        with pytest.raises(PresaleError):
            program.buy_tokens("bob", sale_id, PaymentType.WEB3, NATIVE_PRICE)
        assert program.load(sale_id).total_sold == hardcap


class TestFinalizeOnce:

    def test_pool_created_once(self, ended_sale):
        ledger, program, sale_id = ended_sale
        program.finalize_presale(ADMIN, sale_id, LIQUIDITY)
        log_length = len(ledger.transaction_log)
        with pytest.raises(LiquidityPoolAlreadyCreated):
            program.finalize_presale(ADMIN, sale_id, LIQUIDITY)
        assert len(ledger.transaction_log) == log_length
