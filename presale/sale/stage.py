"""
stage.py - Stage progression and admin edits of a sale.

Stages advance one step per call, NOT_STARTED -> PRIVATE -> PUBLIC -> ENDED,
each step gated by the time elapsed since sale_start. All functions are pure:
they read the record through a LedgerView and return a PendingTransaction
carrying a single UnitStateChange of the record.
"""

from __future__ import annotations
from datetime import datetime

from ..config import PresaleConfig, PeriodEditPolicy, DEFAULT_CONFIG
from ..core import LedgerView, PendingTransaction, build_transaction, empty_pending_transaction
from .arithmetic import check_amount, checked_add, checked_mul
from .errors import (
    Unauthorized, PrivateSaleNotOver, PublicSaleNotOver, SaleAlreadyEnded,
    PresaleNotActive, InvalidPrice,
)
from .record import SaleRecord, Stage, load_sale, record_change, sale_origin


def require_admin(record: SaleRecord, caller: str) -> None:
    if caller != record.admin:
        raise Unauthorized(f"{caller} is not the admin of this presale")


def next_stage(record: SaleRecord, now: datetime) -> SaleRecord:
    """
    Return the record advanced by exactly one stage.

    Raises:
        PrivateSaleNotOver: PRIVATE and the private window is still open
        PublicSaleNotOver: PUBLIC and the public window is still open
        SaleAlreadyEnded: Already ENDED
    """
    if record.stage == Stage.NOT_STARTED:
        return record.evolve(stage=Stage.PRIVATE, sale_start=now)
    if record.stage == Stage.PRIVATE:
        if now < record.private_end:
            raise PrivateSaleNotOver(f"Private sale runs until {record.private_end}")
        return record.evolve(stage=Stage.PUBLIC)
    if record.stage == Stage.PUBLIC:
        if now < record.public_end:
            raise PublicSaleNotOver(f"Public sale runs until {record.public_end}")
        return record.evolve(stage=Stage.ENDED)
    raise SaleAlreadyEnded()


def compute_set_stage(view: LedgerView, sale_id: str, caller: str) -> PendingTransaction:
    """
    Advance the sale by one stage.

    Leaving NOT_STARTED stamps sale_start with the ledger's current time;
    both later steps require the corresponding window to have elapsed.

    Raises:
        Unauthorized: caller is not the admin
        PrivateSaleNotOver, PublicSaleNotOver, SaleAlreadyEnded: see next_stage()
    """
    record = load_sale(view, sale_id)
    require_admin(record, caller)
    updated = next_stage(record, view.current_time)
    return build_transaction(
        view,
        moves=[],
        state_changes=[record_change(sale_id, record, updated)],
        origin=sale_origin(sale_id, "SET_STAGE"),
        signers=[caller],
    )


def compute_update_sale_period(
    view: LedgerView,
    sale_id: str,
    caller: str,
    new_private_duration_days: int,
    new_public_duration_days: int,
    config: PresaleConfig = DEFAULT_CONFIG,
) -> PendingTransaction:
    """
    Change the private and public stage durations.

    Allowed in NOT_STARTED and PRIVATE only. Once the private stage is under
    way, whether its own duration may still change is decided by
    config.period_edit_policy. Submitting a duration equal to the current one
    does not count as a change.

    Returns:
        PendingTransaction with the record update, or an empty one if neither
        duration changes.

    Raises:
        Unauthorized: caller is not the admin
        SaleAlreadyEnded: The sale is ENDED
        PrivateSaleNotOver: The sale is PUBLIC, or the private duration can
            no longer be edited under the configured policy
        ValueError: A duration is not positive
        ArithmeticOverflow: A duration in seconds exceeds config.max_amount
    """
    record = load_sale(view, sale_id)
    require_admin(record, caller)
    if record.stage == Stage.ENDED:
        raise SaleAlreadyEnded()
    if record.stage == Stage.PUBLIC:
        raise PrivateSaleNotOver("Sale periods can only change before the public sale")

    max_amount = config.max_amount
    for name, days in (
        ("new_private_duration_days", new_private_duration_days),
        ("new_public_duration_days", new_public_duration_days),
    ):
        check_amount(days, name, max_amount)
        if days <= 0:
            raise ValueError(f"{name} must be positive, got {days}")
    private_duration = checked_mul(new_private_duration_days, config.seconds_per_day, max_amount)
    public_duration = checked_mul(new_public_duration_days, config.seconds_per_day, max_amount)
    checked_add(private_duration, public_duration, max_amount)

    if record.stage == Stage.PRIVATE and private_duration != record.private_duration:
        if config.period_edit_policy == PeriodEditPolicy.BEFORE_STAGE_START:
            raise PrivateSaleNotOver("Private sale duration is fixed once the private sale starts")
        if view.current_time >= record.private_end:
            raise PrivateSaleNotOver("Private sale window has already closed")

    updated = record.evolve(private_duration=private_duration, public_duration=public_duration)
    if updated == record:
        return empty_pending_transaction(view)

    return build_transaction(
        view,
        moves=[],
        state_changes=[record_change(sale_id, record, updated)],
        origin=sale_origin(sale_id, "UPDATE_SALE_PERIOD"),
        signers=[caller],
    )


def compute_update_sale_price(
    view: LedgerView,
    sale_id: str,
    caller: str,
    new_usd_price_cents: int,
    new_native_price: int,
    config: PresaleConfig = DEFAULT_CONFIG,
) -> PendingTransaction:
    """
    Reprice the sale while it is PRIVATE or PUBLIC.

    Raises:
        Unauthorized: caller is not the admin
        PresaleNotActive: The sale is not PRIVATE or PUBLIC
        InvalidPrice: A price is not positive
    """
    record = load_sale(view, sale_id)
    require_admin(record, caller)
    if not record.is_active:
        raise PresaleNotActive()

    check_amount(new_usd_price_cents, "new_usd_price_cents", config.max_amount)
    check_amount(new_native_price, "new_native_price", config.max_amount)
    if new_usd_price_cents <= 0 or new_native_price <= 0:
        raise InvalidPrice("Prices must be positive")

    updated = record.evolve(
        usd_price_cents_per_unit=new_usd_price_cents,
        native_price_per_unit=new_native_price,
    )
    if updated == record:
        return empty_pending_transaction(view)

    return build_transaction(
        view,
        moves=[],
        state_changes=[record_change(sale_id, record, updated)],
        origin=sale_origin(sale_id, "UPDATE_SALE_PRICE"),
        signers=[caller],
    )
