"""
program.py - Caller-facing presale operations.

PresaleProgram ties the pure sale computations to a ledger: each operation
loads the record, computes a PendingTransaction, commits it through the
SaleRecordStore, then records an event and logs it. A failed operation
raises before anything is committed.
"""

from __future__ import annotations
import logging
from typing import List, Optional

from .config import PresaleConfig, DEFAULT_CONFIG, STABLE_TOKEN_NAMES
from .core import Transaction
from .ledger import Ledger
from .store import SaleRecordStore
from .sale.events import (
    PresaleEvent, PresaleInitializedEvent, StageChangedEvent, SalePeriodUpdatedEvent,
    SalePriceUpdatedEvent, BuyTokensEvent, BuyTokensByStableCoinEvent, FinalizePresaleEvent,
)
from .sale.finalize import compute_finalize_presale
from .sale.inspector import SaleInfo, check_presale_token_balance, get_sale_info
from .sale.purchase import compute_buy_tokens, compute_buy_tokens_by_stable_coin
from .sale.record import SaleRecord, Stage, PaymentType, compute_initialize, derive_sale_id
from .sale.stage import compute_set_stage, compute_update_sale_period, compute_update_sale_price

logger = logging.getLogger(__name__)


class PresaleProgram:
    """
    Presale operations against one ledger.

    Example:
        program = PresaleProgram(ledger)
        sale_id = program.initialize("admin", 100, 100, 7, 14, 1_000_000,
                                     "NLOV", "presale_vault", "merchant")
        program.set_stage("admin", sale_id)
        program.buy_tokens("alice", sale_id, PaymentType.WEB3, 10_000)
    """

    def __init__(self, ledger: Ledger, config: PresaleConfig = DEFAULT_CONFIG):
        self.ledger = ledger
        self.config = config
        self.store = SaleRecordStore(ledger)
        self.events: List[PresaleEvent] = []

    def _emit(self, event: PresaleEvent) -> None:
        self.events.append(event)
        logger.info(
            f"{type(event).__name__} for {event.sale_id}",
            extra={"sale_id": event.sale_id, "exec_id": event.exec_id},
        )

    @staticmethod
    def _exec_id(tx: Optional[Transaction]) -> Optional[str]:
        return tx.exec_id if tx is not None else None

    # ========================================================================
    # QUERIES
    # ========================================================================

    def load(self, sale_id: str) -> SaleRecord:
        return self.store.load(sale_id)

    def check_presale_token_balance(self, sale_id: str) -> int:
        """Tokens left to sell before the hardcap."""
        remaining = check_presale_token_balance(self.ledger, sale_id)
        logger.debug(f"Available presale tokens for {sale_id}: {remaining}")
        return remaining

    def get_sale_info(self, sale_id: str) -> SaleInfo:
        return get_sale_info(self.ledger, sale_id)

    # ========================================================================
    # ADMIN OPERATIONS
    # ========================================================================

    def initialize(
        self,
        admin: str,
        usd_price_cents_per_unit: int,
        native_price_per_unit: int,
        private_duration_days: int,
        public_duration_days: int,
        hardcap: int,
        sale_token: str,
        inventory_source_id: str,
        proceeds_destination_id: str,
        sale_id: Optional[str] = None,
    ) -> str:
        """
        Create a sale record in NOT_STARTED and return its sale id.

        The inventory wallet must be registered with the sale id as its
        authority; derive_sale_id(admin) gives the default id.
        """
        sale_id = sale_id or derive_sale_id(admin)
        pending = compute_initialize(
            self.ledger, admin,
            usd_price_cents_per_unit, native_price_per_unit,
            private_duration_days, public_duration_days, hardcap,
            sale_token, inventory_source_id, proceeds_destination_id,
            config=self.config, sale_id=sale_id,
        )
        tx = self.store.commit(pending)
        self._emit(PresaleInitializedEvent(
            sale_id=sale_id,
            timestamp=self.ledger.current_time,
            exec_id=self._exec_id(tx),
            admin=admin,
            usd_price_cents_per_unit=usd_price_cents_per_unit,
            native_price_per_unit=native_price_per_unit,
            private_duration_days=private_duration_days,
            public_duration_days=public_duration_days,
            hardcap=hardcap,
        ))
        return sale_id

    def set_stage(self, caller: str, sale_id: str) -> Stage:
        """Advance the sale one stage and return the new stage."""
        before = self.store.load(sale_id)
        tx = self.store.commit(compute_set_stage(self.ledger, sale_id, caller))
        after = self.store.load(sale_id)
        self._emit(StageChangedEvent(
            sale_id=sale_id,
            timestamp=self.ledger.current_time,
            exec_id=self._exec_id(tx),
            old_stage=before.stage,
            new_stage=after.stage,
        ))
        return after.stage

    def update_sale_period(
        self,
        caller: str,
        sale_id: str,
        new_private_duration_days: int,
        new_public_duration_days: int,
    ) -> None:
        pending = compute_update_sale_period(
            self.ledger, sale_id, caller,
            new_private_duration_days, new_public_duration_days,
            config=self.config,
        )
        tx = self.store.commit(pending)
        self._emit(SalePeriodUpdatedEvent(
            sale_id=sale_id,
            timestamp=self.ledger.current_time,
            exec_id=self._exec_id(tx),
            private_duration_days=new_private_duration_days,
            public_duration_days=new_public_duration_days,
        ))

    def update_sale_price(
        self,
        caller: str,
        sale_id: str,
        new_usd_price_cents: int,
        new_native_price: int,
    ) -> None:
        pending = compute_update_sale_price(
            self.ledger, sale_id, caller,
            new_usd_price_cents, new_native_price,
            config=self.config,
        )
        tx = self.store.commit(pending)
        self._emit(SalePriceUpdatedEvent(
            sale_id=sale_id,
            timestamp=self.ledger.current_time,
            exec_id=self._exec_id(tx),
            admin=caller,
            new_usd_price_cents=new_usd_price_cents,
            new_native_price=new_native_price,
            stage=self.store.load(sale_id).stage,
        ))

    def finalize_presale(self, caller: str, sale_id: str, liquidity_destination: str) -> int:
        """Release unsold inventory to liquidity_destination; returns the amount moved."""
        record = self.store.load(sale_id)
        unsold = int(self.ledger.get_balance(record.inventory_source_id, record.sale_token))
        tx = self.store.commit(
            compute_finalize_presale(self.ledger, sale_id, caller, liquidity_destination)
        )
        self._emit(FinalizePresaleEvent(
            sale_id=sale_id,
            timestamp=self.ledger.current_time,
            exec_id=self._exec_id(tx),
            admin=caller,
            unsold_tokens=unsold,
            liquidity_destination=liquidity_destination,
        ))
        return unsold

    # ========================================================================
    # PURCHASES
    # ========================================================================

    def buy_tokens(
        self,
        buyer: str,
        sale_id: str,
        payment_type: int,
        native_amount_sent: int,
        buyer_wallet: Optional[str] = None,
    ) -> int:
        """Buy with the native currency; returns the number of tokens bought."""
        before = self.store.load(sale_id)
        pending = compute_buy_tokens(
            self.ledger, sale_id, buyer, payment_type, native_amount_sent,
            config=self.config, buyer_wallet=buyer_wallet,
        )
        tx = self.store.commit(pending)
        purchased = self.store.load(sale_id).total_sold - before.total_sold
        self._emit(BuyTokensEvent(
            sale_id=sale_id,
            timestamp=self.ledger.current_time,
            exec_id=self._exec_id(tx),
            buyer=buyer,
            tokens_purchased=purchased,
            native_spent=native_amount_sent,
            native_price_per_unit=before.native_price_per_unit,
            payment_type=PaymentType(payment_type),
        ))
        return purchased

    def buy_tokens_by_stable_coin(
        self,
        buyer: str,
        sale_id: str,
        payment_type: int,
        stable_amount_user_units: int,
        stable_token: str,
        buyer_wallet: Optional[str] = None,
    ) -> int:
        """Buy with an accepted stable-value token; returns the number of tokens bought."""
        before = self.store.load(sale_id)
        pending = compute_buy_tokens_by_stable_coin(
            self.ledger, sale_id, buyer, payment_type,
            stable_amount_user_units, stable_token,
            config=self.config, buyer_wallet=buyer_wallet,
        )
        tx = self.store.commit(pending)
        purchased = self.store.load(sale_id).total_sold - before.total_sold
        logger.info(
            f"{buyer} bought {purchased} tokens for {stable_amount_user_units} "
            f"{STABLE_TOKEN_NAMES.get(stable_token, stable_token)}",
            extra={"sale_id": sale_id},
        )
        self._emit(BuyTokensByStableCoinEvent(
            sale_id=sale_id,
            timestamp=self.ledger.current_time,
            exec_id=self._exec_id(tx),
            buyer=buyer,
            tokens_purchased=purchased,
            stable_coin_amount=stable_amount_user_units,
            stable_token=stable_token,
            payment_type=PaymentType(payment_type),
        ))
        return purchased
