import logging
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from ..core.database import get_db
from ..core.security import verify_password, create_access_token, get_password_hash, get_current_user
from ..core.config import settings, access_token_expires
from ..core.exceptions import InvalidOtpError, OtpFormatError, OtpResendThrottledError
from ..enum.rentflow_enum import OtpPurpose
from ..schemas.auth import (
    RegisterRequest, LoginRequest, OtpIssuedResponse, ResendOtpRequest, ResendOtpResponse,
    VerifyOtpRequest, VerifyOtpResponse, UserResponse,
)
from ..models.user import User
from ..services.notification_sink import NotificationSink, get_notification_sink
from ..services.otp_service import OTP_PATTERN, issue_otp, resend_otp, verify_user_otp

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

RESEND_MESSAGE = "If the account exists, a new code has been sent"


def _find_user(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email.lower()).first()


@router.post("/register", response_model=OtpIssuedResponse)
async def register(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    sink: NotificationSink = Depends(get_notification_sink),
):
    """Create an unverified account and send a signup code."""
    user = _find_user(db, payload.email)
    if user and user.is_verified:
        raise HTTPException(status_code=400, detail="Email already registered")

    if user is None:
        user = User(email=payload.email.lower(), password_hash="", is_verified=False)
        db.add(user)
    # Re-registering an unverified email replaces its pending credentials
    user.password_hash = get_password_hash(payload.password)
    user.first_name = payload.first_name
    user.last_name = payload.last_name
    db.commit()
    db.refresh(user)
    logger.info("Signup pending verification for user %s", user.id)

    await issue_otp(db, user, OtpPurpose.SIGNUP, sink)
    return OtpIssuedResponse(
        success=True,
        message="Verification code sent to email",
        user_id=user.id,
        expires_in_minutes=settings.OTP_EXPIRE_MINUTES,
    )


@router.post("/login", response_model=OtpIssuedResponse)
async def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    sink: NotificationSink = Depends(get_notification_sink),
):
    """Check credentials, then send a login code."""
    user = _find_user(db, payload.email)
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not user.is_verified:
        raise HTTPException(status_code=403, detail="Account not verified")

    await issue_otp(db, user, OtpPurpose.LOGIN, sink)
    return OtpIssuedResponse(
        success=True,
        message="Verification code sent to email",
        user_id=user.id,
        expires_in_minutes=settings.OTP_EXPIRE_MINUTES,
    )


@router.post("/resend-otp", response_model=ResendOtpResponse)
async def resend(
    payload: ResendOtpRequest,
    db: Session = Depends(get_db),
    sink: NotificationSink = Depends(get_notification_sink),
):
    """Always answers 200 with the same body so callers cannot tell whether an account exists."""
    user = _find_user(db, payload.email)
    if user and not (payload.purpose == OtpPurpose.SIGNUP and user.is_verified):
        try:
            await resend_otp(db, user, payload.purpose, sink)
        except OtpResendThrottledError as e:
            # The client shows its own cooldown timer
            logger.info("Resend for user %s throttled, retry in %ss", user.id, e.retry_after)
    return ResendOtpResponse(success=True, message=RESEND_MESSAGE)


@router.post("/verify-otp", response_model=VerifyOtpResponse)
def verify(payload: VerifyOtpRequest, db: Session = Depends(get_db)):
    """Verify a code. A successful verification also returns an access token."""
    if not OTP_PATTERN.fullmatch(payload.otp_code):
        raise OtpFormatError()

    user = _find_user(db, payload.email)
    verified = bool(user) and verify_user_otp(db, user, payload.otp_code, payload.purpose)

    if not verified:
        return JSONResponse(
            status_code=InvalidOtpError.status_code,
            content=VerifyOtpResponse(verified=False, message=InvalidOtpError.default_message).model_dump(),
        )

    token = create_access_token({"sub": user.id, "email": user.email}, access_token_expires())
    return VerifyOtpResponse(
        verified=True,
        message="Account verified" if payload.purpose == OtpPurpose.SIGNUP else "Login successful",
        access_token=token,
        token_type="bearer",
    )


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return UserResponse.model_validate(current_user)
