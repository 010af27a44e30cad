# OTP Service - issue, deliver and verify single-use 4-digit codes
# A record is valid while is_used is false and expires_at > now.

import logging
import math
import re
import secrets
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import settings, otp_lifetime
from ..core.email import render_otp_email
from ..core.exceptions import OtpFormatError, OtpResendThrottledError, PersistenceError
from ..enum.rentflow_enum import OtpPurpose
from ..models.otp import OTPRecord
from ..models.user import User
from .notification_sink import NotificationSink
from .push_notifications import PushNotificationService

logger = logging.getLogger(__name__)

OTP_PATTERN = re.compile(r"[0-9]{4}")


def generate_otp() -> str:
    """Generate a 4-digit OTP code, uniform over 1000-9999."""
    return str(1000 + secrets.randbelow(9000))


def cleanup_expired_otps(db: Session, now: Optional[datetime] = None) -> int:
    """Delete expired codes that were never used. Returns the number removed."""
    now = now or datetime.utcnow()
    result = db.execute(
        delete(OTPRecord)
        .where(OTPRecord.is_used == False, OTPRecord.expires_at <= now)  # noqa: E712
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0


def _persist_otp(db: Session, user_id: str, purpose: OtpPurpose, now: datetime) -> OTPRecord:
    try:
        removed = cleanup_expired_otps(db, now)
        if removed:
            logger.debug("Removed %d expired OTP records", removed)

        record = OTPRecord(
            user_id=user_id,
            otp_code=generate_otp(),
            purpose=purpose.value,
            created_at=now,
            expires_at=now + otp_lifetime(),
            is_used=False,
        )
        db.add(record)
        db.commit()
        db.refresh(record)
        return record
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to persist OTP for user %s: %s", user_id, e)
        raise PersistenceError() from e


async def _deliver_otp(db: Session, user: User, record: OTPRecord, sink: NotificationSink) -> None:
    """Best-effort delivery. The code stays verifiable whatever happens here."""
    subject, body = render_otp_email(record.otp_code, record.purpose)
    try:
        if not await sink.deliver(user.email, subject, body):
            logger.warning("OTP delivery to %s reported failure (%s)", user.email, record.purpose)
    except Exception:
        logger.exception("OTP delivery to %s failed (%s)", user.email, record.purpose)

    try:
        PushNotificationService(db).send_otp_notification(user.id, record.otp_code, record.purpose)
    except Exception:
        db.rollback()
        logger.exception("OTP push notification for user %s failed", user.id)


async def issue_otp(
    db: Session,
    user: User,
    purpose: OtpPurpose,
    sink: NotificationSink,
    now: Optional[datetime] = None,
) -> OTPRecord:
    """
    Create a fresh code for (user, purpose) and send it.

    Earlier unused codes are left valid until they expire or are used.
    Raises PersistenceError if the record cannot be stored; delivery
    problems are only logged.
    """
    purpose = OtpPurpose(purpose)
    now = now or datetime.utcnow()

    record = _persist_otp(db, user.id, purpose, now)
    await _deliver_otp(db, user, record, sink)
    return record


def seconds_until_resend(db: Session, user_id: str, purpose: OtpPurpose, now: Optional[datetime] = None) -> int:
    """Seconds left in the resend cooldown for (user, purpose); 0 when a resend is allowed."""
    cooldown = settings.OTP_RESEND_COOLDOWN_SECONDS
    if cooldown <= 0:
        return 0
    now = now or datetime.utcnow()

    last_issued = db.execute(
        select(OTPRecord.created_at)
        .where(OTPRecord.user_id == user_id, OTPRecord.purpose == OtpPurpose(purpose).value)
        .order_by(OTPRecord.created_at.desc())
        .limit(1)
    ).scalar_one_or_none()
    if last_issued is None:
        return 0

    remaining = (last_issued + timedelta(seconds=cooldown)) - now
    return max(0, math.ceil(remaining.total_seconds()))


async def resend_otp(
    db: Session,
    user: User,
    purpose: OtpPurpose,
    sink: NotificationSink,
    now: Optional[datetime] = None,
) -> OTPRecord:
    purpose = OtpPurpose(purpose)
    now = now or datetime.utcnow()

    retry_after = seconds_until_resend(db, user.id, purpose, now)
    if retry_after:
        raise OtpResendThrottledError(retry_after)
    return await issue_otp(db, user, purpose, sink, now)


def verify_otp(db: Session, user_id: str, code: str, purpose: OtpPurpose, now: Optional[datetime] = None) -> bool:
    """
    Consume a matching, unused, unexpired code.

    The used flag is flipped with a conditional UPDATE so that two concurrent
    verifications of the same code cannot both succeed. Failure reasons are
    not distinguished.
    """
    if not isinstance(code, str) or not OTP_PATTERN.fullmatch(code):
        raise OtpFormatError()
    purpose = OtpPurpose(purpose)
    now = now or datetime.utcnow()

    try:
        record_id = db.execute(
            select(OTPRecord.id)
            .where(
                OTPRecord.user_id == user_id,
                OTPRecord.purpose == purpose.value,
                OTPRecord.otp_code == code,
                OTPRecord.is_used == False,  # noqa: E712
                OTPRecord.expires_at > now,
            )
            .order_by(OTPRecord.created_at.desc())
            .limit(1)
        ).scalar_one_or_none()
        if record_id is None:
            return False

        result = db.execute(
            update(OTPRecord)
            .where(OTPRecord.id == record_id, OTPRecord.is_used == False)  # noqa: E712
            .values(is_used=True)
            .execution_options(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to verify OTP for user %s: %s", user_id, e)
        raise PersistenceError() from e

    return result.rowcount == 1


def verify_user_otp(db: Session, user: User, code: str, purpose: OtpPurpose, now: Optional[datetime] = None) -> bool:
    """verify_otp, plus marking the account verified after a signup code."""
    purpose = OtpPurpose(purpose)
    verified = verify_otp(db, user.id, code, purpose, now)

    if verified and purpose == OtpPurpose.SIGNUP and not user.is_verified:
        user.is_verified = True
        db.commit()
        logger.info("User %s verified their account", user.id)

    return verified
