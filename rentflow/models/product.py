from decimal import Decimal
from sqlalchemy import Integer, String, DateTime, Boolean, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from ..core.database import Base
from ..services.pricing import RateTable

class Product(Base):
    """Rental product. Only the rate columns are read by this service."""
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_rentable: Mapped[bool] = mapped_column(Boolean, default=True)
    total_quantity: Mapped[int] = mapped_column(Integer, default=1)
    available_quantity: Mapped[int] = mapped_column(Integer, default=1)
    hourly_rate: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    daily_rate: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    weekly_rate: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    monthly_rate: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    security_deposit: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def rate_table(self) -> RateTable:
        return RateTable(
            hourly_rate=self.hourly_rate,
            daily_rate=self.daily_rate,
            weekly_rate=self.weekly_rate,
            monthly_rate=self.monthly_rate,
            security_deposit=self.security_deposit,
        )
