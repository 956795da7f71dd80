"""
conftest.py - Shared pytest fixtures for presale tests

Provides common fixtures used across unit, functional and conformance tests:
- Basic ledgers (empty, funded)
- Presale-ready ledger (units, buyers, custodial vault)
- A PresaleProgram with an initialized sale, in each stage
"""

import pytest
from decimal import Decimal

from presale import Ledger, native_currency

from tests.presale_helpers import (
    T0, ADMIN, SOL, PRIVATE_DAYS, PUBLIC_DAYS,
    build_presale_ledger, build_program, advance_days,
)


@pytest.fixture
def empty_ledger():
    """Fresh ledger with no registrations."""
    return Ledger("test", T0, verbose=False, test_mode=True)


@pytest.fixture
def basic_ledger():
    """Ledger with SOL and two wallets, alice holding 1000."""
    ledger = Ledger("test", T0, verbose=False, test_mode=True)
    ledger.register_unit(native_currency(SOL, "Solana"))
    ledger.register_wallet("alice")
    ledger.register_wallet("bob")
    ledger.set_balance("alice", SOL, Decimal("1000"))
    return ledger


@pytest.fixture
def presale_ledger():
    return build_presale_ledger()


@pytest.fixture
def presale_setup():
    """(ledger, program, sale_id) with the sale in NOT_STARTED."""
    return build_program()


@pytest.fixture
def private_sale(presale_setup):
    """(ledger, program, sale_id) with the sale in PRIVATE."""
    ledger, program, sale_id = presale_setup
    program.set_stage(ADMIN, sale_id)
    return ledger, program, sale_id


@pytest.fixture
def public_sale(private_sale):
    """(ledger, program, sale_id) with the sale in PUBLIC."""
    ledger, program, sale_id = private_sale
    advance_days(ledger, PRIVATE_DAYS)
    program.set_stage(ADMIN, sale_id)
    return ledger, program, sale_id


@pytest.fixture
def ended_sale(public_sale):
    """(ledger, program, sale_id) with the sale ENDED."""
    ledger, program, sale_id = public_sale
    advance_days(ledger, PUBLIC_DAYS)
    program.set_stage(ADMIN, sale_id)
    return ledger, program, sale_id
