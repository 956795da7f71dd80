"""
errors.py - Presale error taxonomy.

Every presale error is a LedgerError so callers can catch the whole family
with one handler. Each carries a stable ``code`` and a default message.
"""

from __future__ import annotations
from typing import Optional

from ..core import LedgerError


class PresaleError(LedgerError):
    """Base class for errors raised by presale operations."""
    code = "PresaleError"
    default_message = "Presale operation failed."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidTokenAccount(PresaleError):
    code = "InvalidTokenAccount"
    default_message = "Invalid token account provided."


class InvalidStableToken(PresaleError):
    code = "InvalidStableToken"
    default_message = "Invalid stable token. Only USDC or USDT is accepted."


class StageGateError(PresaleError):
    """An operation was attempted before its time window allows it."""
    code = "StageGateError"


class PrivateSaleNotOver(StageGateError):
    code = "PrivateSaleNotOver"
    default_message = "Private sale period is not over yet."


class PublicSaleNotOver(StageGateError):
    code = "PublicSaleNotOver"
    default_message = "Public sale period is not over yet."


class SaleAlreadyEnded(StageGateError):
    code = "SaleAlreadyEnded"
    default_message = "The presale has already ended."


class PresaleActive(StageGateError):
    code = "PresaleActive"
    default_message = "Presale is active now."


class PresaleNotActive(PresaleError):
    code = "PresaleNotActive"
    default_message = "Presale is not active."


class InsufficientTokens(PresaleError):
    code = "InsufficientTokens"
    default_message = "Not enough tokens available for purchase."


class HardcapReached(PresaleError):
    code = "HardcapReached"
    default_message = "Hardcap for tokens has been reached."


class InvalidPaymentType(PresaleError):
    code = "InvalidPaymentType"
    default_message = "Invalid payment type. Please choose 0 for Web3 or 1 for Web2."


class InvalidPrice(PresaleError):
    code = "InvalidPrice"
    default_message = "Invalid price: Equivalent USD value must be at least $1."


class ArithmeticOverflow(InvalidPrice):
    code = "ArithmeticOverflow"
    default_message = "Arithmetic overflow in price calculation."


class Unauthorized(PresaleError):
    code = "Unauthorized"
    default_message = "Unauthorized: Only the presale admin can perform this action."


class LiquidityPoolAlreadyCreated(PresaleError):
    code = "LiquidityPoolAlreadyCreated"
    default_message = "The liquidity pool has already been created."


class SaleNotFound(PresaleError):
    code = "SaleNotFound"
    default_message = "No presale exists for this id."


class SaleAlreadyInitialized(PresaleError):
    code = "SaleAlreadyInitialized"
    default_message = "The presale has already been initialized."


class SaleRecordConflict(PresaleError):
    code = "SaleRecordConflict"
    default_message = "The sale record changed since this operation was prepared."
