"""
store.py - Sale record persistence on top of the ledger.

SaleRecordStore is the only writer of sale records. It submits the
PendingTransactions built by the sale computations and turns ledger
rejections into presale errors.
"""

from __future__ import annotations
from typing import Optional

from .core import (
    PendingTransaction, Transaction, ExecuteResult, LedgerError,
    WalletNotRegistered, UnauthorizedTransfer, StaleUnitState, UnitAlreadyRegistered,
)
from .ledger import Ledger
from .sale.errors import (
    InvalidTokenAccount, Unauthorized, SaleRecordConflict, SaleAlreadyInitialized,
)
from .sale.record import SaleRecord, load_sale, sale_exists


# Ledger rejection -> presale error raised in its place.
_REJECTION_MAP = (
    (UnitAlreadyRegistered, SaleAlreadyInitialized),
    (WalletNotRegistered, InvalidTokenAccount),
    (UnauthorizedTransfer, Unauthorized),
    (StaleUnitState, SaleRecordConflict),
)


class SaleRecordStore:
    """
    Loads and commits sale records kept as PRESALE unit state in a Ledger.

    Example:
        store = SaleRecordStore(ledger)
        tx = store.commit(compute_set_stage(ledger, sale_id, "admin"))
        record = store.load(sale_id)
    """

    def __init__(self, ledger: Ledger):
        self.ledger = ledger

    def load(self, sale_id: str) -> SaleRecord:
        """Raises SaleNotFound if no record exists."""
        return load_sale(self.ledger, sale_id)

    def exists(self, sale_id: str) -> bool:
        return sale_exists(self.ledger, sale_id)

    def commit(self, pending: PendingTransaction) -> Optional[Transaction]:
        """
        Execute a pending transaction atomically.

        Returns:
            The executed Transaction, or None if pending was empty.

        Raises:
            SaleAlreadyInitialized: A record with the same id already exists
            InvalidTokenAccount: A move references an unregistered wallet
            Unauthorized: A debited wallet's authority did not sign
            SaleRecordConflict: The record changed since pending was built,
                or the same update was already applied
            LedgerError: Any other rejection (e.g. InsufficientFunds), unchanged
        """
        if pending.is_empty():
            return None

        result = self.ledger.execute(pending)
        if result == ExecuteResult.APPLIED:
            return self.ledger.transaction_log[-1]
        if result == ExecuteResult.ALREADY_APPLIED:
            raise SaleRecordConflict(f"Intent {pending.intent_id} was already applied")

        error = self.ledger.last_rejection
        if error is None:
            raise LedgerError(f"Transaction {pending.intent_id} rejected")
        for ledger_error, presale_error in _REJECTION_MAP:
            if isinstance(error, ledger_error):
                raise presale_error(str(error)) from error
        raise error
