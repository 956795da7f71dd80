"""
record.py - The sale record and its initialization.

ARCHITECTURE:
=============

The sale record lives in the ledger as the state of a PRESALE unit whose
symbol is the sale id. Storing it there means every record update commits in
the same atomic transaction as the transfers it accounts for.

1. FROZEN DATACLASS (SaleRecord):
   - Typed snapshot of the record, one new instance per change

2. ADAPTER FUNCTIONS (load_sale / to_state_dict):
   - load_sale is the only place that reads the record from a LedgerView
   - to_state_dict is its inverse, used to build UnitStateChange.new_state

3. COMPUTE FUNCTIONS (compute_initialize):
   - Validate, then return a PendingTransaction; never mutate anything
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import IntEnum
from typing import Dict, Any, Optional

from ..config import PresaleConfig, DEFAULT_CONFIG, PRESALE_SEED
from ..core import (
    LedgerView, PendingTransaction, Unit, UnitStateChange,
    TransactionOrigin, OriginType,
    UnitNotRegistered, WalletNotRegistered,
    UNIT_TYPE_PRESALE,
    build_transaction, non_transferable_rule, _freeze_state,
)
from .arithmetic import check_amount, checked_add, checked_mul
from .errors import (
    InvalidPrice, InvalidTokenAccount, SaleNotFound, SaleAlreadyInitialized,
)


PROGRAM_ID = "presale"


class Stage(IntEnum):
    NOT_STARTED = 0
    PRIVATE = 1
    PUBLIC = 2
    ENDED = 3


class PaymentType(IntEnum):
    """WEB3 pays through the ledger; WEB2 was settled off-ledger."""
    WEB3 = 0
    WEB2 = 1


ACTIVE_STAGES = frozenset({Stage.PRIVATE, Stage.PUBLIC})


@dataclass(frozen=True, slots=True)
class SaleRecord:
    """
    Immutable snapshot of a sale.

    Durations are in seconds. sale_start is None until the sale leaves
    NOT_STARTED and is fixed from then on.
    """
    admin: str
    usd_price_cents_per_unit: int
    native_price_per_unit: int
    private_duration: int
    public_duration: int
    hardcap: int
    inventory_source_id: str
    proceeds_destination_id: str
    sale_token: str
    native_currency: str
    stage: Stage = Stage.NOT_STARTED
    sale_start: Optional[datetime] = None
    total_sold: int = 0
    pool_created: bool = False
    revision: int = 0

    def __post_init__(self):
        if not isinstance(self.stage, Stage):
            object.__setattr__(self, 'stage', Stage(self.stage))

    @property
    def remaining(self) -> int:
        return self.hardcap - self.total_sold

    @property
    def is_active(self) -> bool:
        return self.stage in ACTIVE_STAGES

    @property
    def private_end(self) -> Optional[datetime]:
        """When the private window closes, or None before the sale starts."""
        if self.sale_start is None:
            return None
        return self.sale_start + timedelta(seconds=self.private_duration)

    @property
    def public_end(self) -> Optional[datetime]:
        if self.sale_start is None:
            return None
        return self.sale_start + timedelta(seconds=self.private_duration + self.public_duration)

    def evolve(self, **changes) -> SaleRecord:
        return replace(self, **changes)


# ============================================================================
# ADAPTER FUNCTIONS
# ============================================================================

def derive_sale_id(admin: str) -> str:
    """One sale per admin: the id is derived from the admin identity."""
    if not admin or not admin.strip():
        raise ValueError("admin cannot be empty")
    return f"{PRESALE_SEED}:{admin}"


def load_sale(view: LedgerView, sale_id: str) -> SaleRecord:
    """
    Load a sale record from ledger state.

    Raises:
        SaleNotFound: If no sale record is stored under sale_id
    """
    try:
        raw = view.get_unit_state(sale_id)
    except UnitNotRegistered:
        raise SaleNotFound(f"No presale exists for {sale_id}")
    if not raw or 'admin' not in raw:
        raise SaleNotFound(f"No presale exists for {sale_id}")

    return SaleRecord(
        admin=raw['admin'],
        usd_price_cents_per_unit=raw['usd_price_cents_per_unit'],
        native_price_per_unit=raw['native_price_per_unit'],
        private_duration=raw['private_duration'],
        public_duration=raw['public_duration'],
        hardcap=raw['hardcap'],
        inventory_source_id=raw['inventory_source_id'],
        proceeds_destination_id=raw['proceeds_destination_id'],
        sale_token=raw['sale_token'],
        native_currency=raw['native_currency'],
        stage=Stage(raw['stage']),
        sale_start=raw.get('sale_start'),
        total_sold=raw.get('total_sold', 0),
        pool_created=raw.get('pool_created', False),
        revision=raw.get('revision', 0),
    )


def to_state_dict(record: SaleRecord) -> Dict[str, Any]:
    """Inverse of load_sale(). Stage is stored as its plain int value."""
    return {
        'admin': record.admin,
        'usd_price_cents_per_unit': record.usd_price_cents_per_unit,
        'native_price_per_unit': record.native_price_per_unit,
        'private_duration': record.private_duration,
        'public_duration': record.public_duration,
        'hardcap': record.hardcap,
        'inventory_source_id': record.inventory_source_id,
        'proceeds_destination_id': record.proceeds_destination_id,
        'sale_token': record.sale_token,
        'native_currency': record.native_currency,
        'stage': int(record.stage),
        'sale_start': record.sale_start,
        'total_sold': record.total_sold,
        'pool_created': record.pool_created,
        'revision': record.revision,
    }


def sale_origin(sale_id: str, event_type: str) -> TransactionOrigin:
    return TransactionOrigin(
        origin_type=OriginType.CONTRACT,
        source_id=PROGRAM_ID,
        unit_symbol=sale_id,
        event_type=event_type,
    )


def record_change(sale_id: str, old: SaleRecord, new: SaleRecord) -> UnitStateChange:
    """
    State change replacing old with new; the ledger rejects it if old is stale.

    The revision is bumped on every change, so no two updates of a record
    share an intent_id even when they restore an earlier value.
    """
    new = new.evolve(revision=old.revision + 1)
    return UnitStateChange(unit=sale_id, old_state=to_state_dict(old), new_state=to_state_dict(new))


def sale_exists(view: LedgerView, sale_id: str) -> bool:
    try:
        return bool(view.get_unit_state(sale_id))
    except UnitNotRegistered:
        return False


def create_presale_unit(sale_id: str, record: SaleRecord) -> Unit:
    """
    Create the PRESALE unit that carries a sale record.

    Nobody holds positions in it; the transfer rule rejects every move.
    """
    return Unit(
        symbol=sale_id,
        name=f"Presale by {record.admin}",
        unit_type=UNIT_TYPE_PRESALE,
        transfer_rule=non_transferable_rule,
        _frozen_state=_freeze_state(to_state_dict(record)),
    )


# ============================================================================
# INITIALIZE
# ============================================================================

def _require_unit(view: LedgerView, symbol: str) -> None:
    try:
        view.get_unit(symbol)
    except UnitNotRegistered:
        raise InvalidTokenAccount(f"Unit {symbol} is not registered")


def require_wallet(view: LedgerView, wallet_id: str, authority: Optional[str] = None) -> None:
    try:
        owner = view.get_authority(wallet_id)
    except WalletNotRegistered:
        raise InvalidTokenAccount(f"Wallet {wallet_id} is not registered")
    if authority is not None and owner != authority:
        raise InvalidTokenAccount(
            f"Wallet {wallet_id} is controlled by {owner}, expected {authority}"
        )


def compute_initialize(
    view: LedgerView,
    admin: str,
    usd_price_cents_per_unit: int,
    native_price_per_unit: int,
    private_duration_days: int,
    public_duration_days: int,
    hardcap: int,
    sale_token: str,
    inventory_source_id: str,
    proceeds_destination_id: str,
    config: PresaleConfig = DEFAULT_CONFIG,
    sale_id: Optional[str] = None,
) -> PendingTransaction:
    """
    Create a new sale record in NOT_STARTED.

    The inventory wallet must already be registered under the sale id as its
    authority, so that only the sale program can release tokens from it.

    Args:
        view: Read-only ledger access
        admin: Identity allowed to run privileged operations on the sale
        usd_price_cents_per_unit: Price in hundredths of USD per token
        native_price_per_unit: Price in the smallest native denomination per token
        private_duration_days: Length of the private stage in days
        public_duration_days: Length of the public stage in days
        hardcap: Maximum number of tokens that can be sold
        sale_token: Ledger symbol of the token being sold
        inventory_source_id: Custodial wallet holding the tokens for sale
        proceeds_destination_id: Wallet receiving WEB3 payments
        config: Program configuration
        sale_id: Record key (default: derived from admin)

    Returns:
        PendingTransaction creating the PRESALE unit.

    Raises:
        InvalidPrice: If either price is not positive
        ValueError: If a duration or the hardcap is not positive
        ArithmeticOverflow: If a value exceeds config.max_amount
        SaleAlreadyInitialized: If a record already exists under sale_id
        InvalidTokenAccount: If a wallet or unit reference is not usable
    """
    sale_id = sale_id or derive_sale_id(admin)
    max_amount = config.max_amount

    check_amount(usd_price_cents_per_unit, "usd_price_cents_per_unit", max_amount)
    check_amount(native_price_per_unit, "native_price_per_unit", max_amount)
    if usd_price_cents_per_unit <= 0 or native_price_per_unit <= 0:
        raise InvalidPrice("Prices must be positive")
    for name, value in (
        ("private_duration_days", private_duration_days),
        ("public_duration_days", public_duration_days),
        ("hardcap", hardcap),
    ):
        check_amount(value, name, max_amount)
        if value <= 0:
            raise ValueError(f"{name} must be positive, got {value}")

    private_duration = checked_mul(private_duration_days, config.seconds_per_day, max_amount)
    public_duration = checked_mul(public_duration_days, config.seconds_per_day, max_amount)
    checked_add(private_duration, public_duration, max_amount)

    if sale_exists(view, sale_id):
        raise SaleAlreadyInitialized(f"Presale {sale_id} is already initialized")

    _require_unit(view, sale_token)
    _require_unit(view, config.native_currency)
    require_wallet(view, inventory_source_id, authority=sale_id)
    require_wallet(view, proceeds_destination_id)

    record = SaleRecord(
        admin=admin,
        usd_price_cents_per_unit=usd_price_cents_per_unit,
        native_price_per_unit=native_price_per_unit,
        private_duration=private_duration,
        public_duration=public_duration,
        hardcap=hardcap,
        inventory_source_id=inventory_source_id,
        proceeds_destination_id=proceeds_destination_id,
        sale_token=sale_token,
        native_currency=config.native_currency,
    )

    return build_transaction(
        view,
        moves=[],
        origin=sale_origin(sale_id, "INITIALIZE"),
        units_to_create=(create_presale_unit(sale_id, record),),
        signers=[admin],
    )
