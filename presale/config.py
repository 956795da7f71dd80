"""
config.py - Presale program constants and configuration.

The program is configured through module constants and one immutable
PresaleConfig passed to PresaleProgram.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet


SECONDS_PER_DAY = 86_400

# Largest value any sale quantity or price may take (unsigned 64-bit).
MAX_AMOUNT = 2 ** 64 - 1

# Prefix of sale ids derived from the admin identity.
PRESALE_SEED = "presale"

USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
USDT_MINT = "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB"

STABLE_TOKEN_NAMES = {
    USDC_MINT: "USDC",
    USDT_MINT: "USDT",
}

CENTS_PER_USD = 100


class PeriodEditPolicy(Enum):
    """
    When the private sale duration may still be changed once the private
    stage has begun.

    UNTIL_WINDOW_CLOSES: while the private window has not closed yet.
    BEFORE_STAGE_START: never; only before the private stage starts.
    """
    UNTIL_WINDOW_CLOSES = "until_window_closes"
    BEFORE_STAGE_START = "before_stage_start"


@dataclass(frozen=True, slots=True)
class PresaleConfig:
    """
    Immutable program configuration.

    Attributes:
        accepted_stable_tokens: Stable-value token symbols accepted as payment.
        native_currency: Ledger symbol of the native chain currency.
        seconds_per_day: Length of a sale day in seconds.
        period_edit_policy: Rule for editing the private duration mid-stage.
        max_amount: Ceiling for every quantity, price and product.
    """
    accepted_stable_tokens: FrozenSet[str] = frozenset({USDC_MINT, USDT_MINT})
    native_currency: str = "SOL"
    seconds_per_day: int = SECONDS_PER_DAY
    period_edit_policy: PeriodEditPolicy = PeriodEditPolicy.UNTIL_WINDOW_CLOSES
    max_amount: int = MAX_AMOUNT

    def __post_init__(self):
        if not isinstance(self.accepted_stable_tokens, frozenset):
            object.__setattr__(self, 'accepted_stable_tokens', frozenset(self.accepted_stable_tokens))
        if not self.native_currency:
            raise ValueError("native_currency cannot be empty")
        if self.seconds_per_day <= 0:
            raise ValueError(f"seconds_per_day must be positive, got {self.seconds_per_day}")
        if self.max_amount <= 0:
            raise ValueError(f"max_amount must be positive, got {self.max_amount}")


DEFAULT_CONFIG = PresaleConfig()
