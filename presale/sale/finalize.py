"""
finalize.py - One-time release of unsold inventory after the sale ends.
"""

from __future__ import annotations
from decimal import Decimal

from ..core import LedgerView, Move, PendingTransaction, build_transaction
from .errors import PresaleActive, LiquidityPoolAlreadyCreated, InvalidTokenAccount
from .record import Stage, load_sale, record_change, require_wallet, sale_origin
from .stage import require_admin


def compute_finalize_presale(
    view: LedgerView,
    sale_id: str,
    caller: str,
    liquidity_destination: str,
) -> PendingTransaction:
    """
    Move every token left in the inventory wallet to liquidity_destination
    and mark the liquidity pool as created.

    The flag and the move are one transaction: if the move is rejected the
    flag stays false and finalization can be retried. With an empty
    inventory only the flag is set.

    Raises:
        Unauthorized: caller is not the admin
        PresaleActive: The sale has not ENDED
        LiquidityPoolAlreadyCreated: Already finalized
        InvalidTokenAccount: liquidity_destination is unregistered or is
            the inventory wallet itself
    """
    record = load_sale(view, sale_id)
    require_admin(record, caller)
    if record.stage != Stage.ENDED:
        raise PresaleActive()
    if record.pool_created:
        raise LiquidityPoolAlreadyCreated()
    require_wallet(view, liquidity_destination)
    if liquidity_destination == record.inventory_source_id:
        raise InvalidTokenAccount("Liquidity destination cannot be the inventory wallet")

    remaining = view.get_balance(record.inventory_source_id, record.sale_token)
    moves = []
    if remaining > 0:
        moves.append(Move(
            quantity=Decimal(remaining),
            unit_symbol=record.sale_token,
            source=record.inventory_source_id,
            dest=liquidity_destination,
            contract_id=f"finalize_{sale_id}",
        ))

    updated = record.evolve(pool_created=True)
    return build_transaction(
        view,
        moves=moves,
        state_changes=[record_change(sale_id, record, updated)],
        origin=sale_origin(sale_id, "FINALIZE_PRESALE"),
        signers=[caller, sale_id],
    )
