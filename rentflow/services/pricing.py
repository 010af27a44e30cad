# Pricing Service - tiered rental rate selection
# Tier order: hourly -> daily -> weekly -> monthly -> daily (fallback)

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from ..core.exceptions import UnpriceableError
from ..enum.rentflow_enum import RateTier

MS_PER_HOUR = 60 * 60 * 1000
MS_PER_DAY = 24 * MS_PER_HOUR
CENTS = Decimal("0.01")

UNIT_NAMES = {
    RateTier.HOURLY: "hour",
    RateTier.DAILY: "day",
    RateTier.WEEKLY: "week",
    RateTier.MONTHLY: "month",
}


@dataclass(frozen=True)
class RateTable:
    hourly_rate: Optional[Decimal] = None
    daily_rate: Optional[Decimal] = None
    weekly_rate: Optional[Decimal] = None
    monthly_rate: Optional[Decimal] = None
    security_deposit: Optional[Decimal] = None


@dataclass(frozen=True)
class TierSelection:
    tier: RateTier
    units: int
    unit_price: Decimal

    @property
    def unit_label(self) -> str:
        name = UNIT_NAMES[self.tier]
        return f"{self.units} {name}{'s' if self.units > 1 else ''}"


@dataclass(frozen=True)
class PriceQuote:
    tier: RateTier
    units: int
    unit_label: str
    duration_days: int
    unit_price: Decimal
    quantity: int
    subtotal: Decimal
    security_deposit: Decimal
    total: Decimal


def _ceil_div(numerator: int, denominator: int) -> int:
    return -(-numerator // denominator)


def _elapsed_ms(start: datetime, end: datetime) -> int:
    return (end - start) // timedelta(milliseconds=1)


def _dec(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _money(value) -> Decimal:
    return _dec(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def _has(rate: Optional[Decimal]) -> bool:
    return rate is not None


def compute_duration_days(start: datetime, end: datetime) -> int:
    """Whole days between start and end; any partial day counts as a full day."""
    return _ceil_div(_elapsed_ms(start, end), MS_PER_DAY)


def select_tier(start: datetime, end: datetime, rates: RateTable) -> Optional[TierSelection]:
    """
    Pick the rate tier for a rental window.

    The fallback order is significant: a product without a weekly or monthly
    rate is billed per day even past the 7-day band.
    Returns None when no tier applies.
    """
    duration_days = compute_duration_days(start, end)

    if duration_days <= 1 and _has(rates.hourly_rate):
        hours = max(1, _ceil_div(_elapsed_ms(start, end), MS_PER_HOUR))
        return TierSelection(RateTier.HOURLY, hours, _dec(rates.hourly_rate) * hours)
    if duration_days <= 7 and _has(rates.daily_rate):
        return TierSelection(RateTier.DAILY, duration_days, _dec(rates.daily_rate) * duration_days)
    if duration_days <= 30 and _has(rates.weekly_rate):
        weeks = _ceil_div(duration_days, 7)
        return TierSelection(RateTier.WEEKLY, weeks, _dec(rates.weekly_rate) * weeks)
    if _has(rates.monthly_rate):
        months = _ceil_div(duration_days, 30)
        return TierSelection(RateTier.MONTHLY, months, _dec(rates.monthly_rate) * months)
    if _has(rates.daily_rate):
        return TierSelection(RateTier.DAILY, duration_days, _dec(rates.daily_rate) * duration_days)
    return None


def compute_total(unit_price: Decimal, quantity: int, security_deposit: Optional[Decimal]) -> tuple[Decimal, Decimal]:
    """Return (subtotal, total). The deposit is added once, not per unit."""
    subtotal = _money(_dec(unit_price) * quantity)
    total = _money(subtotal + _dec(security_deposit or 0))
    return subtotal, total


def calculate_price(start: datetime, end: datetime, quantity: int, rates: RateTable) -> PriceQuote:
    selection = select_tier(start, end, rates)
    if selection is None:
        raise UnpriceableError()

    subtotal, total = compute_total(selection.unit_price, quantity, rates.security_deposit)
    return PriceQuote(
        tier=selection.tier,
        units=selection.units,
        unit_label=selection.unit_label,
        duration_days=compute_duration_days(start, end),
        unit_price=_money(selection.unit_price),
        quantity=quantity,
        subtotal=subtotal,
        security_deposit=_money(rates.security_deposit or 0),
        total=total,
    )
