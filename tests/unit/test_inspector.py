"""
test_inspector.py - Unit tests for read-only sale queries
"""

import pytest
from datetime import timedelta
from decimal import Decimal

from presale import (
    Stage, check_presale_token_balance, get_sale_info, SaleNotFound, PaymentType,
)

from tests.presale_helpers import T0, ADMIN, HARDCAP, PRIVATE_DAYS, PUBLIC_DAYS, build_program


class TestCheckPresaleTokenBalance:

    def test_full_before_any_sale(self, presale_setup):
        ledger, program, sale_id = presale_setup
        assert check_presale_token_balance(ledger, sale_id) == HARDCAP

    def test_decreases_with_purchases(self, private_sale):
        ledger, program, sale_id = private_sale
        program.buy_tokens("alice", sale_id, PaymentType.WEB3, 25_000)
        assert program.check_presale_token_balance(sale_id) == HARDCAP - 250

    def test_independent_of_inventory_balance(self):
        ledger, program, sale_id = build_program(vault_tokens=10)
        assert check_presale_token_balance(ledger, sale_id) == HARDCAP

    def test_unknown_sale(self, presale_ledger):
        with pytest.raises(SaleNotFound):
            check_presale_token_balance(presale_ledger, "presale:nobody")


class TestGetSaleInfo:

    def test_not_started(self, presale_setup):
        ledger, program, sale_id = presale_setup
        info = get_sale_info(ledger, sale_id)
        assert info.stage == Stage.NOT_STARTED
        assert info.admin == ADMIN
        assert info.sale_start is None
        assert info.private_end is None
        assert info.inventory_balance == Decimal(HARDCAP)
        assert info.pool_created is False

    def test_windows_after_start(self, private_sale):
        ledger, program, sale_id = private_sale
        info = program.get_sale_info(sale_id)
        assert info.sale_start == T0
        assert info.private_end == T0 + timedelta(days=PRIVATE_DAYS)
        assert info.public_end == T0 + timedelta(days=PRIVATE_DAYS + PUBLIC_DAYS)
