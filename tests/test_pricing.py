from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from rentflow.core.exceptions import UnpriceableError
from rentflow.enum.rentflow_enum import RateTier
from rentflow.services.pricing import (
    RateTable, calculate_price, compute_duration_days, compute_total, select_tier,
)

DAY0 = datetime(2025, 1, 1, 0, 0, 0)

FULL_RATES = RateTable(
    hourly_rate=Decimal("10"),
    daily_rate=Decimal("50"),
    weekly_rate=Decimal("200"),
    monthly_rate=Decimal("600"),
    security_deposit=Decimal("100"),
)


def test_duration_counts_partial_days_as_full():
    assert compute_duration_days(DAY0, DAY0 + timedelta(days=3)) == 3
    assert compute_duration_days(DAY0, DAY0 + timedelta(days=3, milliseconds=1)) == 4
    assert compute_duration_days(DAY0, DAY0 + timedelta(hours=1)) == 1


def test_duration_ignores_sub_millisecond_remainder():
    assert compute_duration_days(DAY0, DAY0 + timedelta(days=2, microseconds=500)) == 2


@pytest.mark.parametrize(
    "end, tier, units, unit_price, subtotal, total",
    [
        (DAY0 + timedelta(hours=6), RateTier.HOURLY, 6, "60", "120", "220"),
        (DAY0 + timedelta(days=3), RateTier.DAILY, 3, "150", "300", "400"),
        (DAY0 + timedelta(days=10), RateTier.WEEKLY, 2, "400", "800", "900"),
        (DAY0 + timedelta(days=45), RateTier.MONTHLY, 2, "1200", "2400", "2500"),
    ],
)
def test_tier_bands(end, tier, units, unit_price, subtotal, total):
    quote = calculate_price(DAY0, end, 2, FULL_RATES)

    assert quote.tier == tier
    assert quote.units == units
    assert quote.unit_price == Decimal(unit_price)
    assert quote.subtotal == Decimal(subtotal)
    assert quote.total == Decimal(total)
    assert quote.security_deposit == Decimal("100")


def test_daily_fallback_when_weekly_missing():
    rates = RateTable(daily_rate=Decimal("50"), security_deposit=Decimal("100"))
    quote = calculate_price(DAY0, DAY0 + timedelta(days=10), 2, rates)

    assert quote.tier == RateTier.DAILY
    assert quote.unit_price == Decimal("500")
    assert quote.subtotal == Decimal("1000")
    assert quote.total == Decimal("1100")
    assert quote.unit_label == "10 days"


def test_no_rates_is_unpriceable():
    with pytest.raises(UnpriceableError):
        calculate_price(DAY0, DAY0 + timedelta(days=10), 2, RateTable())
    assert select_tier(DAY0, DAY0 + timedelta(days=10), RateTable()) is None


def test_hourly_only_product_cannot_be_rented_for_days():
    rates = RateTable(hourly_rate=Decimal("10"))
    with pytest.raises(UnpriceableError):
        calculate_price(DAY0, DAY0 + timedelta(days=2), 1, rates)


def test_short_rental_without_hourly_rate_uses_daily():
    rates = RateTable(daily_rate=Decimal("50"))
    selection = select_tier(DAY0, DAY0 + timedelta(hours=5), rates)
    assert selection.tier == RateTier.DAILY
    assert selection.units == 1


def test_hourly_minimum_is_one_hour():
    selection = select_tier(DAY0, DAY0 + timedelta(minutes=10), FULL_RATES)
    assert selection.tier == RateTier.HOURLY
    assert selection.units == 1
    assert selection.unit_label == "1 hour"


def test_full_day_still_hourly_when_available():
    selection = select_tier(DAY0, DAY0 + timedelta(days=1), FULL_RATES)
    assert selection.tier == RateTier.HOURLY
    assert selection.units == 24


def test_long_rental_without_monthly_rate_uses_daily():
    rates = RateTable(daily_rate=Decimal("50"), weekly_rate=Decimal("200"))
    selection = select_tier(DAY0, DAY0 + timedelta(days=40), rates)
    assert selection.tier == RateTier.DAILY
    assert selection.unit_price == Decimal("2000")


def test_monthly_used_inside_weekly_band_when_weekly_missing():
    rates = RateTable(monthly_rate=Decimal("600"))
    selection = select_tier(DAY0, DAY0 + timedelta(days=12), rates)
    assert selection.tier == RateTier.MONTHLY
    assert selection.units == 1


def test_deposit_added_once_regardless_of_quantity():
    subtotal, total = compute_total(Decimal("99.99"), 3, Decimal("25"))
    assert subtotal == Decimal("299.97")
    assert total == Decimal("324.97")


def test_missing_deposit_counts_as_zero():
    subtotal, total = compute_total(Decimal("40"), 2, None)
    assert subtotal == total == Decimal("80.00")


def test_decimal_arithmetic_has_no_float_drift():
    rates = RateTable(daily_rate=Decimal("0.10"))
    quote = calculate_price(DAY0, DAY0 + timedelta(days=3), 1, rates)
    assert quote.total == Decimal("0.30")


def test_zero_rate_is_a_real_price():
    rates = RateTable(daily_rate=Decimal("0"))
    quote = calculate_price(DAY0, DAY0 + timedelta(days=2), 1, rates)
    assert quote.total == Decimal("0.00")
