"""Display formatting for the model catalog tables.

All helpers are pure: the same input always renders the same string.
Rounding is half-up throughout so ``1_500_000`` renders as ``2M`` and a
price of ``0.15`` discounts to ``0.008``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from megallm.schemas.models import ModelCapabilities

NOT_AVAILABLE = "N/A"

DISCOUNT_FACTOR = Decimal("0.05")
DISCOUNT_BADGE = "95% OFF"

_CENTS = Decimal("0.01")
_MILLS = Decimal("0.001")

# declaration order of ModelCapabilities
FEATURE_ICONS: tuple[tuple[str, str, str], ...] = (
    ("supports_function_calling", "🎯", "Function Calling"),
    ("supports_vision", "🖼️", "Vision"),
    ("supports_streaming", "📡", "Streaming"),
    ("supports_structured_output", "🔧", "Structured Output"),
)

LEGEND = " | ".join(f"{icon} {label}" for _, icon, label in FEATURE_ICONS)


@dataclass(frozen=True)
class DiscountedPrice:
    original: str
    discounted: str
    badge: str = DISCOUNT_BADGE

    def to_dict(self) -> dict[str, str]:
        return {"original": self.original, "discounted": self.discounted, "badge": self.badge}


def _round_half_up(value: Decimal, exp: Decimal) -> Decimal:
    return value.quantize(exp, rounding=ROUND_HALF_UP)


def format_token_count(tokens: Optional[int]) -> str:
    """Render a context window / max output size as ``2M``, ``750K`` or ``500``."""
    if not tokens or not math.isfinite(tokens):
        return NOT_AVAILABLE
    value = Decimal(tokens)
    if value >= 1_000_000:
        return f"{_round_half_up(value / 1_000_000, Decimal(1))}M"
    if value >= 1_000:
        return f"{_round_half_up(value / 1_000, Decimal(1))}K"
    return str(int(tokens))


def format_amount(value: Decimal) -> str:
    """Integers print bare, anything else at 3 decimals with trailing zeros stripped."""
    if value == value.to_integral_value():
        return str(int(value))
    text = f"{_round_half_up(value, _MILLS):f}"
    return text.rstrip("0").rstrip(".")


def format_discounted_price(price: Optional[float]) -> Optional[DiscountedPrice]:
    """Apply the catalog's fixed 95% discount to a per-million price.

    The original is rounded to cents *before* the factor is applied; doing it
    the other way round drifts by a cent on some prices. ``None``, ``0`` and
    non-finite values yield ``None`` which the tables render as ``N/A``.
    """
    if not price or not math.isfinite(price):
        return None
    original = _round_half_up(Decimal(str(price)), _CENTS)
    discounted = original * DISCOUNT_FACTOR
    return DiscountedPrice(original=format_amount(original), discounted=format_amount(discounted))


def feature_icons(capabilities: Optional[ModelCapabilities]) -> str:
    if capabilities is None:
        return ""
    return "".join(icon for attr, icon, _ in FEATURE_ICONS if getattr(capabilities, attr, False))
