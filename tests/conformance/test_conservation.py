"""
Conservation Conformance Tests

INVARIANT: Sale tokens and payments are only moved between wallets.

    ∀ unit U, after any sequence of presale operations:
        Σ balances(U) = Σ initial balances(U)

    and for the sale token:
        inventory + Σ buyer holdings + liquidity = initial inventory
"""

from hypothesis import given, settings
from hypothesis import strategies as st
from decimal import Decimal

from presale import PaymentType, PresaleError, LedgerError, USDC_MINT, USDT_MINT

from tests.presale_helpers import (
    ADMIN, SOL, TOKEN, VAULT, LIQUIDITY, NATIVE_PRICE, PRIVATE_DAYS, PUBLIC_DAYS,
    build_program, advance_days,
)


purchase = st.tuples(
    st.sampled_from(["alice", "bob"]),
    st.sampled_from(["native", USDC_MINT, USDT_MINT]),
    st.sampled_from([PaymentType.WEB3, PaymentType.WEB2]),
    st.integers(min_value=1, max_value=120),
)


class TestConservationProperties:

    @given(st.lists(purchase, max_size=12))
    @settings(max_examples=40, deadline=None)
    def test_supplies_unchanged_through_lifecycle(self, purchases):
        """
        PROPERTY: Buying, ending and finalizing never changes any unit's
        total supply, and every initial token ends up with a buyer or in
        the liquidity wallet.
        """
        ledger, program, sale_id = build_program()
        supplies = {u: ledger.total_supply(u) for u in (SOL, USDC_MINT, USDT_MINT, TOKEN)}
        initial_inventory = ledger.get_balance(VAULT, TOKEN)

        program.set_stage(ADMIN, sale_id)
        for buyer, currency, payment_type, units in purchases:
            try:
                if currency == "native":
                    program.buy_tokens(buyer, sale_id, payment_type, units * NATIVE_PRICE)
                else:
                    program.buy_tokens_by_stable_coin(buyer, sale_id, payment_type, units, currency)
            except (PresaleError, LedgerError):
                pass

        advance_days(ledger, PRIVATE_DAYS)
        program.set_stage(ADMIN, sale_id)
        advance_days(ledger, PUBLIC_DAYS)
        program.set_stage(ADMIN, sale_id)
        program.finalize_presale(ADMIN, sale_id, LIQUIDITY)

        result = ledger.verify_double_entry(supplies)
        assert result['valid'], result
        held = ledger.get_balance("alice", TOKEN) + ledger.get_balance("bob", TOKEN)
        assert held + ledger.get_balance(LIQUIDITY, TOKEN) == initial_inventory
        assert held == Decimal(program.load(sale_id).total_sold)
        assert ledger.get_balance(VAULT, TOKEN) == Decimal("0")
