from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from ..enum.rentflow_enum import RateTier

class RateTableIn(BaseModel):
    hourly_rate: Optional[Decimal] = Field(None, ge=0)
    daily_rate: Optional[Decimal] = Field(None, ge=0)
    weekly_rate: Optional[Decimal] = Field(None, ge=0)
    monthly_rate: Optional[Decimal] = Field(None, ge=0)
    security_deposit: Optional[Decimal] = Field(None, ge=0)

class RentalWindow(BaseModel):
    start: datetime
    end: datetime
    quantity: int = Field(1, ge=1)

    @field_validator("start", "end")
    @classmethod
    def to_naive_utc(cls, value: datetime) -> datetime:
        # Offset-aware timestamps are converted; naive ones are taken as UTC
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    @model_validator(mode="after")
    def check_window(self):
        if self.end <= self.start:
            raise ValueError("end must be after start")
        return self

class QuoteRequest(RentalWindow):
    rates: RateTableIn

class QuoteResponse(BaseModel):
    tier: RateTier
    units: int
    unit_label: str
    duration_days: int
    unit_price: Decimal
    quantity: int
    subtotal: Decimal
    security_deposit: Decimal
    total: Decimal
    product_id: Optional[int] = None
