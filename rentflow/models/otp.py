from sqlalchemy import Integer, String, DateTime, Boolean, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from ..core.database import Base

class OTPRecord(Base):
    """
    One-time code issued to a user for a purpose (login/signup).
    Expiry is never stored as state: a record is expired when expires_at <= now.
    """
    __tablename__ = "otp_records"
    __table_args__ = (
        Index("ix_otp_records_lookup", "user_id", "purpose", "otp_code"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    otp_code: Mapped[str] = mapped_column(String(4), nullable=False)
    purpose: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    is_used: Mapped[bool] = mapped_column(Boolean, default=False)
