from decimal import Decimal

from rentflow.models.product import Product

RATES = {
    "hourly_rate": "10", "daily_rate": "50", "weekly_rate": "200",
    "monthly_rate": "600", "security_deposit": "100",
}


def _product(db, **overrides):
    fields = dict(
        name="Camping Tent",
        hourly_rate=Decimal("10"), daily_rate=Decimal("50"),
        weekly_rate=Decimal("200"), monthly_rate=Decimal("600"),
        security_deposit=Decimal("100"),
    )
    fields.update(overrides)
    p = Product(**fields)
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


def test_quote_hourly(client):
    res = client.post("/pricing/quote", json={
        "start": "2025-01-01T00:00:00", "end": "2025-01-01T06:00:00",
        "quantity": 2, "rates": RATES,
    })
    assert res.status_code == 200
    body = res.json()
    assert body["tier"] == "hourly"
    assert body["unit_label"] == "6 hours"
    assert Decimal(body["unit_price"]) == Decimal("60")
    assert Decimal(body["subtotal"]) == Decimal("120")
    assert Decimal(body["total"]) == Decimal("220")


def test_quote_weekly(client):
    res = client.post("/pricing/quote", json={
        "start": "2025-01-01T00:00:00", "end": "2025-01-11T00:00:00",
        "quantity": 2, "rates": RATES,
    })
    body = res.json()
    assert body["tier"] == "weekly"
    assert body["duration_days"] == 10
    assert Decimal(body["total"]) == Decimal("900")


def test_quote_unpriceable_is_not_zero(client):
    res = client.post("/pricing/quote", json={
        "start": "2025-01-01T00:00:00", "end": "2025-01-11T00:00:00",
        "quantity": 2, "rates": {},
    })
    assert res.status_code == 422
    assert res.json()["detail"] == "Rental duration not supported for this product"


def test_quote_rejects_reversed_window(client):
    res = client.post("/pricing/quote", json={
        "start": "2025-01-05T00:00:00", "end": "2025-01-01T00:00:00",
        "quantity": 1, "rates": RATES,
    })
    assert res.status_code == 422


def test_quote_rejects_zero_quantity(client):
    res = client.post("/pricing/quote", json={
        "start": "2025-01-01T00:00:00", "end": "2025-01-02T00:00:00",
        "quantity": 0, "rates": RATES,
    })
    assert res.status_code == 422


def test_product_quote_monthly(client, db):
    p = _product(db)
    res = client.post(f"/pricing/products/{p.id}/quote", json={
        "start": "2025-01-01T00:00:00", "end": "2025-02-15T00:00:00", "quantity": 2,
    })
    assert res.status_code == 200
    body = res.json()
    assert body["tier"] == "monthly"
    assert body["product_id"] == p.id
    assert Decimal(body["total"]) == Decimal("2500")


def test_product_quote_daily_fallback(client, db):
    p = _product(db, hourly_rate=None, weekly_rate=None, monthly_rate=None)
    res = client.post(f"/pricing/products/{p.id}/quote", json={
        "start": "2025-01-01T00:00:00", "end": "2025-01-11T00:00:00", "quantity": 2,
    })
    body = res.json()
    assert body["tier"] == "daily"
    assert Decimal(body["total"]) == Decimal("1100")


def test_product_quote_missing_product(client):
    res = client.post("/pricing/products/999/quote", json={
        "start": "2025-01-01T00:00:00", "end": "2025-01-02T00:00:00",
    })
    assert res.status_code == 404


def test_product_quote_not_rentable(client, db):
    p = _product(db, is_rentable=False)
    res = client.post(f"/pricing/products/{p.id}/quote", json={
        "start": "2025-01-01T00:00:00", "end": "2025-01-02T00:00:00",
    })
    assert res.status_code == 409


def test_quote_mixes_naive_and_utc_timestamps(client):
    res = client.post("/pricing/quote", json={
        "start": "2025-01-01T00:00:00", "end": "2025-01-03T00:00:00Z",
        "quantity": 1, "rates": RATES,
    })
    assert res.status_code == 200
    body = res.json()
    assert body["tier"] == "daily"
    assert body["duration_days"] == 2
    assert Decimal(body["unit_price"]) == Decimal("100")


def test_quote_offset_timestamps_are_compared_in_utc(client):
    # 05:30 at +05:30 is midnight UTC, so this is a 6 hour window
    res = client.post("/pricing/quote", json={
        "start": "2025-01-01T05:30:00+05:30", "end": "2025-01-01T06:00:00",
        "quantity": 1, "rates": RATES,
    })
    assert res.status_code == 200
    assert res.json()["unit_label"] == "6 hours"
