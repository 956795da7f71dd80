"""
inspector.py - Read-only queries on a sale.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple

from ..core import LedgerView
from .record import SaleRecord, Stage, load_sale


@dataclass(frozen=True, slots=True)
class SaleInfo:
    """Snapshot of a sale for display. All quantities are whole tokens."""
    sale_id: str
    admin: str
    stage: Stage
    usd_price_cents_per_unit: int
    native_price_per_unit: int
    hardcap: int
    total_sold: int
    remaining: int
    inventory_balance: Decimal
    sale_start: Optional[datetime]
    private_end: Optional[datetime]
    public_end: Optional[datetime]
    pool_created: bool


def check_presale_token_balance(view: LedgerView, sale_id: str) -> int:
    """Tokens that can still be sold before the hardcap is reached."""
    return load_sale(view, sale_id).remaining


def get_stage_windows(record: SaleRecord) -> Tuple[Optional[datetime], Optional[datetime]]:
    return record.private_end, record.public_end


def get_sale_info(view: LedgerView, sale_id: str) -> SaleInfo:
    record = load_sale(view, sale_id)
    private_end, public_end = get_stage_windows(record)
    return SaleInfo(
        sale_id=sale_id,
        admin=record.admin,
        stage=record.stage,
        usd_price_cents_per_unit=record.usd_price_cents_per_unit,
        native_price_per_unit=record.native_price_per_unit,
        hardcap=record.hardcap,
        total_sold=record.total_sold,
        remaining=record.remaining,
        inventory_balance=view.get_balance(record.inventory_source_id, record.sale_token),
        sale_start=record.sale_start,
        private_end=private_end,
        public_end=public_end,
        pool_created=record.pool_created,
    )
