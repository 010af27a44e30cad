# Mobile API endpoints for the companion app

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from ..core.config import settings
from ..core.database import get_db
from ..core.security import get_current_user
from ..enum.rentflow_enum import NotificationType
from ..models.user import User
from ..schemas.mobile import (
    RegisterDeviceRequest, UnregisterDeviceRequest, DeviceResponse, DeviceListResponse,
    SendTestNotificationRequest, NotificationResponse, NotificationListResponse,
)
from ..services.push_notifications import PushNotificationService, mask_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/mobile", tags=["mobile"])


def get_push_service(db: Session = Depends(get_db)) -> PushNotificationService:
    return PushNotificationService(db)


@router.post("/register-device")
def register_device(
    payload: RegisterDeviceRequest,
    current_user: User = Depends(get_current_user),
    push: PushNotificationService = Depends(get_push_service),
):
    device = push.register_device(current_user.id, payload.token, payload.platform)
    return {
        "success": True,
        "message": "Device registered successfully for push notifications",
        "device": DeviceResponse(platform=device.platform, token=mask_token(device.token), is_active=device.is_active),
        "device_info": payload.device_info,
    }


@router.post("/unregister-device")
def unregister_device(
    payload: UnregisterDeviceRequest,
    current_user: User = Depends(get_current_user),
    push: PushNotificationService = Depends(get_push_service),
):
    if not push.unregister_device(current_user.id, payload.token):
        raise HTTPException(status_code=404, detail="Device not found")
    return {"success": True, "message": "Device unregistered successfully"}


@router.get("/devices", response_model=DeviceListResponse)
def list_devices(
    current_user: User = Depends(get_current_user),
    push: PushNotificationService = Depends(get_push_service),
):
    devices = push.get_user_devices(current_user.id)
    return DeviceListResponse(devices=[
        DeviceResponse(platform=d.platform, token=mask_token(d.token), is_active=d.is_active)
        for d in devices
    ])


@router.post("/test-notification")
def send_test_notification(
    payload: SendTestNotificationRequest,
    current_user: User = Depends(get_current_user),
    push: PushNotificationService = Depends(get_push_service),
):
    sent = push.send_notification(
        current_user.id,
        payload.title,
        payload.message,
        payload.type,
        {"action": "test"},
    )
    if not sent:
        raise HTTPException(status_code=404, detail="No registered devices found")
    return {"success": True, "message": "Test notification sent successfully"}


@router.get("/notifications", response_model=NotificationListResponse)
def list_notifications(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    push: PushNotificationService = Depends(get_push_service),
):
    notifications = push.get_user_notifications(current_user.id, limit, offset)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        limit=limit,
        offset=offset,
        has_more=len(notifications) == limit,
    )


@router.post("/notifications/{notification_id}/read")
def mark_notification_read(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    push: PushNotificationService = Depends(get_push_service),
):
    if not push.mark_notification_read(current_user.id, notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"success": True, "message": "Notification marked as read"}


@router.get("/config")
def mobile_config():
    """Public configuration for the companion app."""
    return {
        "success": True,
        "config": {
            "app_name": settings.APP_NAME,
            "version": "1.0.0",
            "features": {
                "push_notifications": True,
                "otp_verification": True,
                "payment_integration": False,
            },
            "otp": {
                "length": 4,
                "expires_in_minutes": settings.OTP_EXPIRE_MINUTES,
                "resend_cooldown_seconds": settings.OTP_RESEND_COOLDOWN_SECONDS,
            },
            "endpoints": {
                "auth": "/auth",
                "pricing": "/pricing",
                "mobile": "/mobile",
            },
            "push_notification_types": [t.value for t in NotificationType],
        },
    }


@router.get("/health")
def mobile_health(db: Session = Depends(get_db)):
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Mobile health check failed")
        return JSONResponse(
            status_code=503,
            content={"success": False, "status": "unhealthy", "timestamp": timestamp},
        )
    return {
        "success": True,
        "status": "healthy",
        "timestamp": timestamp,
        "services": {"database": "connected", "notifications": "active", "authentication": "active"},
    }
