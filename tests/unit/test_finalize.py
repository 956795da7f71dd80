"""
test_finalize.py - Unit tests for compute_finalize_presale
"""

import pytest
from datetime import datetime
from decimal import Decimal

from presale import (
    Stage, SaleRecord, compute_finalize_presale, load_sale,
    Unauthorized, PresaleActive, LiquidityPoolAlreadyCreated, InvalidTokenAccount,
)
from presale.sale.record import to_state_dict

from tests.fake_view import FakeView
from tests.presale_helpers import (
    ADMIN, SALE_ID, VAULT, MERCHANT, LIQUIDITY, TOKEN, SOL, HARDCAP, ledger_snapshot, build_program,
    advance_days, PRIVATE_DAYS, PUBLIC_DAYS,
)


START = datetime(2025, 1, 1)


def _record(**overrides) -> SaleRecord:
    fields = dict(
        admin=ADMIN,
        usd_price_cents_per_unit=100,
        native_price_per_unit=100,
        private_duration=7 * 86_400,
        public_duration=14 * 86_400,
        hardcap=1000,
        inventory_source_id=VAULT,
        proceeds_destination_id=MERCHANT,
        sale_token=TOKEN,
        native_currency=SOL,
        stage=Stage.ENDED,
        sale_start=START,
    )
    fields.update(overrides)
    return SaleRecord(**fields)


def _view(record: SaleRecord, vault_tokens: int = 400) -> FakeView:
    return FakeView(
        balances={VAULT: {TOKEN: Decimal(vault_tokens)}},
        states={SALE_ID: to_state_dict(record)},
        time=START,
        authorities={VAULT: SALE_ID, LIQUIDITY: LIQUIDITY},
    )


class TestComputeFinalize:

    def test_moves_remaining_inventory(self):
        pending = compute_finalize_presale(_view(_record()), SALE_ID, ADMIN, LIQUIDITY)
        (move,) = pending.moves
        assert (move.source, move.dest, move.quantity) == (VAULT, LIQUIDITY, Decimal(400))
        assert pending.state_changes[0].new_state['pool_created'] is True
        assert pending.signers == frozenset({ADMIN, SALE_ID})

    def test_empty_inventory_only_sets_flag(self):
        pending = compute_finalize_presale(_view(_record(), vault_tokens=0), SALE_ID, ADMIN, LIQUIDITY)
        assert pending.moves == ()
        assert pending.state_changes[0].new_state['pool_created'] is True

    @pytest.mark.parametrize("stage", [Stage.NOT_STARTED, Stage.PRIVATE, Stage.PUBLIC])
    def test_not_ended(self, stage):
        with pytest.raises(PresaleActive):
            compute_finalize_presale(_view(_record(stage=stage)), SALE_ID, ADMIN, LIQUIDITY)

    def test_non_admin(self):
        with pytest.raises(Unauthorized):
            compute_finalize_presale(_view(_record()), SALE_ID, "mallory", LIQUIDITY)

    def test_already_finalized(self):
        record = _record(pool_created=True)
        with pytest.raises(LiquidityPoolAlreadyCreated):
            compute_finalize_presale(_view(record), SALE_ID, ADMIN, LIQUIDITY)

    def test_destination_is_inventory_wallet(self):
        with pytest.raises(InvalidTokenAccount):
            compute_finalize_presale(_view(_record()), SALE_ID, ADMIN, VAULT)

    def test_unregistered_destination(self):
        with pytest.raises(InvalidTokenAccount):
            compute_finalize_presale(_view(_record()), SALE_ID, ADMIN, "nowhere")

    def test_unregistered_destination_with_empty_inventory(self):
        with pytest.raises(InvalidTokenAccount):
            compute_finalize_presale(_view(_record(), vault_tokens=0), SALE_ID, ADMIN, "nowhere")


class TestFinalizeThroughProgram:

    def test_unsold_tokens_released(self, ended_sale):
        ledger, program, sale_id = ended_sale
        released = program.finalize_presale(ADMIN, sale_id, LIQUIDITY)
        assert released == HARDCAP
        assert ledger.get_balance(LIQUIDITY, TOKEN) == Decimal(HARDCAP)
        assert ledger.get_balance(VAULT, TOKEN) == Decimal("0")
        assert load_sale(ledger, sale_id).pool_created is True

    def test_second_finalize_changes_nothing(self, ended_sale):
        ledger, program, sale_id = ended_sale
        program.finalize_presale(ADMIN, sale_id, LIQUIDITY)
        before = ledger_snapshot(ledger)
        with pytest.raises(LiquidityPoolAlreadyCreated):
            program.finalize_presale(ADMIN, sale_id, LIQUIDITY)
        assert ledger_snapshot(ledger) == before

    def test_release_to_inventory_wallet_rejected(self, ended_sale):
        ledger, program, sale_id = ended_sale
        before = ledger_snapshot(ledger)
        with pytest.raises(InvalidTokenAccount):
            program.finalize_presale(ADMIN, sale_id, VAULT)
        assert ledger_snapshot(ledger) == before

    def test_empty_inventory_to_unregistered_wallet_keeps_pool_open(self):
        ledger, program, sale_id = build_program(vault_tokens=0)
        program.set_stage(ADMIN, sale_id)
        advance_days(ledger, PRIVATE_DAYS)
        program.set_stage(ADMIN, sale_id)
        advance_days(ledger, PUBLIC_DAYS)
        program.set_stage(ADMIN, sale_id)

        with pytest.raises(InvalidTokenAccount):
            program.finalize_presale(ADMIN, sale_id, "nowhere")
        assert load_sale(ledger, sale_id).pool_created is False
        assert program.finalize_presale(ADMIN, sale_id, LIQUIDITY) == 0
        assert load_sale(ledger, sale_id).pool_created is True

    def test_finalize_during_public_sale(self, public_sale):
        ledger, program, sale_id = public_sale
        with pytest.raises(PresaleActive):
            program.finalize_presale(ADMIN, sale_id, LIQUIDITY)
        assert ledger.get_balance(VAULT, TOKEN) == Decimal(HARDCAP)
