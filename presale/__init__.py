"""
presale - Capped multi-stage token presale on a custodial double-entry ledger.

Usage:
    from presale import Ledger, PresaleProgram, native_currency, sale_token, derive_sale_id

    ledger = Ledger("main")
    ledger.register_unit(native_currency("SOL", "Solana"))
    ledger.register_unit(sale_token("NLOV", "Neurolov", issuer="admin"))
    ledger.register_wallet("admin")
    ledger.register_wallet("merchant")
    ledger.register_wallet("presale_vault", authority=derive_sale_id("admin"))

    program = PresaleProgram(ledger)
    sale_id = program.initialize("admin", 100, 100, 7, 14, 1_000_000,
                                 "NLOV", "presale_vault", "merchant")
    program.set_stage("admin", sale_id)
"""

# Core types
from .core import (
    LedgerView,
    Move,
    Transaction,
    PendingTransaction,
    TransactionOrigin,
    OriginType,
    build_transaction,
    empty_pending_transaction,
    Unit,
    UnitStateChange,
    ExecuteResult,
    LedgerError,
    InsufficientFunds,
    BalanceConstraintViolation,
    TransferRuleViolation,
    UnitNotRegistered,
    UnitAlreadyRegistered,
    WalletNotRegistered,
    UnauthorizedTransfer,
    StaleUnitState,
    non_transferable_rule,
    native_currency,
    stable_token,
    sale_token,
    SYSTEM_WALLET,
    UNIT_TYPE_NATIVE,
    UNIT_TYPE_STABLE,
    UNIT_TYPE_SALE_TOKEN,
    UNIT_TYPE_PRESALE,
)

# Ledger
from .ledger import Ledger

# Configuration
from .config import (
    PresaleConfig,
    PeriodEditPolicy,
    DEFAULT_CONFIG,
    SECONDS_PER_DAY,
    MAX_AMOUNT,
    USDC_MINT,
    USDT_MINT,
)

# Sale computations
from .sale import (
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
    Stage,
    PaymentType,
    SaleRecord,
    SaleInfo,
    derive_sale_id,
    load_sale,
    compute_initialize,
    compute_set_stage,
    compute_update_sale_period,
    compute_update_sale_price,
    compute_buy_tokens,
    compute_buy_tokens_by_stable_coin,
    compute_finalize_presale,
    check_presale_token_balance,
    get_sale_info,
)

# Persistence and facade
from .store import SaleRecordStore
from .program import PresaleProgram


__all__ = [
    # Core
    'LedgerView', 'Move', 'Transaction', 'PendingTransaction', 'TransactionOrigin', 'OriginType',
    'build_transaction', 'empty_pending_transaction',
    'Unit', 'UnitStateChange',
    'ExecuteResult', 'LedgerError', 'InsufficientFunds', 'BalanceConstraintViolation',
    'TransferRuleViolation', 'UnitNotRegistered', 'UnitAlreadyRegistered', 'WalletNotRegistered',
    'UnauthorizedTransfer', 'StaleUnitState',
    'non_transferable_rule', 'native_currency', 'stable_token', 'sale_token',
    'SYSTEM_WALLET', 'UNIT_TYPE_NATIVE', 'UNIT_TYPE_STABLE', 'UNIT_TYPE_SALE_TOKEN', 'UNIT_TYPE_PRESALE',
    # Ledger
    'Ledger',
    # Configuration
    'PresaleConfig', 'PeriodEditPolicy', 'DEFAULT_CONFIG', 'SECONDS_PER_DAY', 'MAX_AMOUNT',
    'USDC_MINT', 'USDT_MINT',
    # Errors
    'PresaleError', 'InvalidTokenAccount', 'InvalidStableToken', 'StageGateError',
    'PrivateSaleNotOver', 'PublicSaleNotOver', 'SaleAlreadyEnded', 'PresaleActive',
    'PresaleNotActive', 'InsufficientTokens', 'HardcapReached', 'InvalidPaymentType',
    'InvalidPrice', 'ArithmeticOverflow', 'Unauthorized', 'LiquidityPoolAlreadyCreated',
    'SaleNotFound', 'SaleAlreadyInitialized', 'SaleRecordConflict',
    # Sale
    'Stage', 'PaymentType', 'SaleRecord', 'SaleInfo', 'derive_sale_id', 'load_sale',
    'compute_initialize', 'compute_set_stage', 'compute_update_sale_period',
    'compute_update_sale_price', 'compute_buy_tokens', 'compute_buy_tokens_by_stable_coin',
    'compute_finalize_presale', 'check_presale_token_balance', 'get_sale_info',
    # Program
    'SaleRecordStore', 'PresaleProgram',
]
