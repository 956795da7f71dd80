"""
Sale module - Pure computations for a capped multi-stage token presale.

Every compute_* function reads the sale record through a LedgerView and
returns a PendingTransaction; none of them mutates anything.
"""

from .errors import (
    PresaleError,
    InvalidTokenAccount,
    InvalidStableToken,
    StageGateError,
    PrivateSaleNotOver,
    PublicSaleNotOver,
    SaleAlreadyEnded,
    PresaleActive,
    PresaleNotActive,
    InsufficientTokens,
    HardcapReached,
    InvalidPaymentType,
    InvalidPrice,
    ArithmeticOverflow,
    Unauthorized,
    LiquidityPoolAlreadyCreated,
    SaleNotFound,
    SaleAlreadyInitialized,
    SaleRecordConflict,
)

from .arithmetic import check_amount, checked_add, checked_mul

from .record import (
    Stage,
    PaymentType,
    SaleRecord,
    derive_sale_id,
    load_sale,
    to_state_dict,
    create_presale_unit,
    compute_initialize,
)

from .stage import (
    next_stage,
    compute_set_stage,
    compute_update_sale_period,
    compute_update_sale_price,
)

from .purchase import (
    units_for_native,
    units_for_stable,
    compute_buy_tokens,
    compute_buy_tokens_by_stable_coin,
)

from .finalize import compute_finalize_presale

from .inspector import (
    SaleInfo,
    check_presale_token_balance,
    get_sale_info,
    get_stage_windows,
)

from .events import (
    PresaleEvent,
    PresaleInitializedEvent,
    StageChangedEvent,
    SalePeriodUpdatedEvent,
    SalePriceUpdatedEvent,
    BuyTokensEvent,
    BuyTokensByStableCoinEvent,
    FinalizePresaleEvent,
)
