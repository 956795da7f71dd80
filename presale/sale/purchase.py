"""
purchase.py - Token purchases in native currency and stable-value tokens.

Quantities convert exactly: an amount that does not buy a whole number of
tokens at the current price is rejected rather than rounded in anyone's
favour.

A purchase is one PendingTransaction holding:
    - the record update (total_sold += units)
    - the inventory move, sale tokens from the custodial wallet to the buyer,
      signed by the sale id
    - for WEB3 payments, the payment move from the buyer to the proceeds
      wallet, signed by the buyer

Either all three are applied or none is.
"""

from __future__ import annotations
from decimal import Decimal
from typing import List, Optional

from ..config import PresaleConfig, DEFAULT_CONFIG, CENTS_PER_USD
from ..core import LedgerView, Move, PendingTransaction, build_transaction
from .arithmetic import check_amount, checked_mul
from .errors import (
    PresaleNotActive, InvalidPrice, HardcapReached, InsufficientTokens,
    InvalidPaymentType, InvalidStableToken, InvalidTokenAccount,
)
from .record import SaleRecord, PaymentType, load_sale, record_change, sale_origin


# ============================================================================
# PURE CALCULATION FUNCTIONS
# ============================================================================

def units_for_native(native_amount: int, native_price_per_unit: int) -> int:
    """
    Number of whole tokens bought by native_amount.

    Raises:
        InvalidPrice: The amount buys nothing or leaves a remainder
    """
    if native_amount <= 0:
        raise InvalidPrice("Native amount must be positive")
    units, remainder = divmod(native_amount, native_price_per_unit)
    if units == 0:
        raise InvalidPrice(f"{native_amount} is below the price of one token ({native_price_per_unit})")
    if remainder:
        raise InvalidPrice(
            f"{native_amount} is not a whole multiple of the token price {native_price_per_unit}"
        )
    return units


def units_for_stable(
    stable_amount_user_units: int,
    usd_price_cents_per_unit: int,
    max_amount: int = DEFAULT_CONFIG.max_amount,
) -> int:
    """
    Number of whole tokens bought by a stable-value amount (1 token = 1 USD).

    Raises:
        InvalidPrice: Less than one whole stable token, nothing bought, or a remainder
        ArithmeticOverflow: The amount in cents exceeds max_amount
    """
    if stable_amount_user_units < 1:
        raise InvalidPrice()
    cents = checked_mul(stable_amount_user_units, CENTS_PER_USD, max_amount)
    units, remainder = divmod(cents, usd_price_cents_per_unit)
    if units == 0:
        raise InvalidPrice(f"{cents} cents is below the price of one token ({usd_price_cents_per_unit})")
    if remainder:
        raise InvalidPrice(
            f"{cents} cents is not a whole multiple of the token price {usd_price_cents_per_unit}"
        )
    return units


def _payment_type(payment_type: int) -> PaymentType:
    if isinstance(payment_type, bool) or not isinstance(payment_type, int):
        raise InvalidPaymentType(f"Unknown payment type {payment_type!r}")
    try:
        return PaymentType(payment_type)
    except ValueError:
        raise InvalidPaymentType(f"Unknown payment type {payment_type!r}")


def _require_active(record: SaleRecord) -> None:
    if not record.is_active:
        raise PresaleNotActive()


# ============================================================================
# COMPUTE FUNCTIONS
# ============================================================================

def _build_purchase(
    view: LedgerView,
    sale_id: str,
    record: SaleRecord,
    buyer: str,
    buyer_wallet: str,
    payment_type: int,
    units: int,
    payment_unit: str,
    payment_amount: int,
    event_type: str,
) -> PendingTransaction:
    """Check capacity and payment type, then assemble the purchase transaction."""
    new_total = record.total_sold + units
    if new_total > record.hardcap:
        raise HardcapReached(
            f"Buying {units} would bring total sold to {new_total}, above hardcap {record.hardcap}"
        )

    available = view.get_balance(record.inventory_source_id, record.sale_token)
    if available < units:
        raise InsufficientTokens(f"Only {available} tokens left in inventory, {units} requested")

    kind = _payment_type(payment_type)

    if buyer_wallet in (record.inventory_source_id, record.proceeds_destination_id):
        raise InvalidTokenAccount(f"Buyer wallet {buyer_wallet} is a sale wallet")

    contract_id = f"{event_type.lower()}_{sale_id}"
    moves: List[Move] = []
    if kind == PaymentType.WEB3:
        moves.append(Move(
            quantity=Decimal(payment_amount),
            unit_symbol=payment_unit,
            source=buyer_wallet,
            dest=record.proceeds_destination_id,
            contract_id=contract_id,
        ))
    moves.append(Move(
        quantity=Decimal(units),
        unit_symbol=record.sale_token,
        source=record.inventory_source_id,
        dest=buyer_wallet,
        contract_id=contract_id,
        metadata={'payment_type': int(kind), 'payment_unit': payment_unit},
    ))

    updated = record.evolve(total_sold=new_total)
    return build_transaction(
        view,
        moves=moves,
        state_changes=[record_change(sale_id, record, updated)],
        origin=sale_origin(sale_id, event_type),
        signers=[buyer, sale_id],
    )


def compute_buy_tokens(
    view: LedgerView,
    sale_id: str,
    buyer: str,
    payment_type: int,
    native_amount_sent: int,
    config: PresaleConfig = DEFAULT_CONFIG,
    buyer_wallet: Optional[str] = None,
) -> PendingTransaction:
    """
    Buy tokens with the native currency.

    Checks run in this order: stage, price exactness, hardcap, inventory,
    payment type, buyer wallet.

    Args:
        view: Read-only ledger access
        sale_id: Sale record key
        buyer: Identity signing the purchase
        payment_type: 0 (WEB3, paid on the ledger) or 1 (WEB2, paid off-ledger)
        native_amount_sent: Amount in the smallest native denomination
        config: Program configuration
        buyer_wallet: Wallet paying and receiving tokens (default: buyer)

    Returns:
        PendingTransaction with the purchase moves and record update.

    Raises:
        PresaleNotActive: The sale is not PRIVATE or PUBLIC
        InvalidPrice: The amount is not an exact positive multiple of the price
        HardcapReached: The purchase would exceed the hardcap
        InsufficientTokens: The inventory wallet holds fewer tokens than bought
        InvalidPaymentType: payment_type is neither 0 nor 1
        InvalidTokenAccount: buyer_wallet is the inventory or proceeds wallet

    Example:
        pending = compute_buy_tokens(ledger, "presale:admin", "alice", 0, 99_900)
        ledger.execute(pending)
    """
    record = load_sale(view, sale_id)
    _require_active(record)
    check_amount(native_amount_sent, "native_amount_sent", config.max_amount)
    units = units_for_native(native_amount_sent, record.native_price_per_unit)
    return _build_purchase(
        view, sale_id, record,
        buyer=buyer,
        buyer_wallet=buyer_wallet or buyer,
        payment_type=payment_type,
        units=units,
        payment_unit=record.native_currency,
        payment_amount=native_amount_sent,
        event_type="BUY_TOKENS",
    )


def compute_buy_tokens_by_stable_coin(
    view: LedgerView,
    sale_id: str,
    buyer: str,
    payment_type: int,
    stable_amount_user_units: int,
    stable_token: str,
    config: PresaleConfig = DEFAULT_CONFIG,
    buyer_wallet: Optional[str] = None,
) -> PendingTransaction:
    """
    Buy tokens with an allow-listed stable-value token.

    The token is checked against the allow-list before anything else, then
    the amount, then the same gates as compute_buy_tokens().

    Raises:
        InvalidStableToken: stable_token is not accepted
        InvalidPrice: Less than one whole stable token, or an inexact amount
        PresaleNotActive, HardcapReached, InsufficientTokens, InvalidTokenAccount,
        InvalidPaymentType: as for compute_buy_tokens()
    """
    if stable_token not in config.accepted_stable_tokens:
        raise InvalidStableToken(f"{stable_token} is not an accepted stable token")
    check_amount(stable_amount_user_units, "stable_amount_user_units", config.max_amount)
    if stable_amount_user_units < 1:
        raise InvalidPrice()

    record = load_sale(view, sale_id)
    _require_active(record)
    units = units_for_stable(stable_amount_user_units, record.usd_price_cents_per_unit, config.max_amount)
    return _build_purchase(
        view, sale_id, record,
        buyer=buyer,
        buyer_wallet=buyer_wallet or buyer,
        payment_type=payment_type,
        units=units,
        payment_unit=stable_token,
        payment_amount=stable_amount_user_units,
        event_type="BUY_TOKENS_BY_STABLE_COIN",
    )
