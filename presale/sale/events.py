"""
events.py - Records emitted after each committed presale operation.

Events are just data. The ledger's transaction log remains the audit trail;
events carry the business-level summary a caller would otherwise have to
reconstruct from moves and state changes.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .record import Stage, PaymentType


@dataclass(frozen=True, slots=True)
class PresaleEvent:
    """
    Attributes:
        sale_id: Sale record key
        timestamp: Ledger time at which the operation committed
        exec_id: Execution id of the ledger transaction (None if nothing changed)
    """
    sale_id: str
    timestamp: datetime
    exec_id: Optional[str]


@dataclass(frozen=True, slots=True)
class PresaleInitializedEvent(PresaleEvent):
    admin: str = ""
    usd_price_cents_per_unit: int = 0
    native_price_per_unit: int = 0
    private_duration_days: int = 0
    public_duration_days: int = 0
    hardcap: int = 0


@dataclass(frozen=True, slots=True)
class StageChangedEvent(PresaleEvent):
    old_stage: Stage = Stage.NOT_STARTED
    new_stage: Stage = Stage.NOT_STARTED


@dataclass(frozen=True, slots=True)
class SalePeriodUpdatedEvent(PresaleEvent):
    private_duration_days: int = 0
    public_duration_days: int = 0


@dataclass(frozen=True, slots=True)
class SalePriceUpdatedEvent(PresaleEvent):
    admin: str = ""
    new_usd_price_cents: int = 0
    new_native_price: int = 0
    stage: Stage = Stage.NOT_STARTED


@dataclass(frozen=True, slots=True)
class BuyTokensEvent(PresaleEvent):
    buyer: str = ""
    tokens_purchased: int = 0
    native_spent: int = 0
    native_price_per_unit: int = 0
    payment_type: PaymentType = PaymentType.WEB3


@dataclass(frozen=True, slots=True)
class BuyTokensByStableCoinEvent(PresaleEvent):
    buyer: str = ""
    tokens_purchased: int = 0
    stable_coin_amount: int = 0
    stable_token: str = ""
    payment_type: PaymentType = PaymentType.WEB3


@dataclass(frozen=True, slots=True)
class FinalizePresaleEvent(PresaleEvent):
    admin: str = ""
    unsold_tokens: int = 0
    liquidity_destination: str = ""
