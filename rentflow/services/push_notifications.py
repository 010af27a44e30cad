# Push Notification Service - device registry + notification history
# Delivery is simulated with log lines; FCM/APNS/Web Push are not wired in.

import json
import logging
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.config import settings
from ..enum.rentflow_enum import DevicePlatform, NotificationType
from ..models.device_token import DeviceToken
from ..models.notification import Notification

logger = logging.getLogger(__name__)

ORDER_STATUS_MESSAGES = {
    "confirmed": "Your order has been confirmed and is being processed.",
    "picked_up": "Your rental items have been picked up. Enjoy!",
    "returned": "Thank you for returning your rental items.",
    "cancelled": "Your order has been cancelled.",
}

PLATFORM_ICONS = {
    DevicePlatform.IOS.value: "📱",
    DevicePlatform.ANDROID.value: "🤖",
    DevicePlatform.WEB.value: "💻",
}


def mask_token(token: str) -> str:
    return token[:settings.PUSH_TOKEN_MASK_LENGTH] + "..."


class PushNotificationService:
    """Push notifications for the mobile companion app, backed by device_tokens."""

    def __init__(self, db: Session):
        self.db = db

    # ==================== Device registry ====================

    def _find_device(self, user_id: str, token: str) -> Optional[DeviceToken]:
        return self.db.execute(
            select(DeviceToken).where(DeviceToken.user_id == user_id, DeviceToken.token == token)
        ).scalar_one_or_none()

    def register_device(self, user_id: str, token: str, platform: str) -> DeviceToken:
        """Register a token, or reactivate it (and refresh its platform) if already known."""
        platform = DevicePlatform(platform).value
        device = self._find_device(user_id, token)
        if device:
            device.is_active = True
            device.platform = platform
        else:
            device = DeviceToken(user_id=user_id, token=token, platform=platform, is_active=True)
            self.db.add(device)
        self.db.commit()
        self.db.refresh(device)

        logger.info("Device registered for user %s: %s - %s", user_id, platform, mask_token(token))
        return device

    def unregister_device(self, user_id: str, token: str) -> bool:
        device = self._find_device(user_id, token)
        if not device:
            return False
        device.is_active = False
        self.db.commit()
        logger.info("Device unregistered for user %s", user_id)
        return True

    def get_user_devices(self, user_id: str) -> list[DeviceToken]:
        return list(self.db.execute(
            select(DeviceToken).where(DeviceToken.user_id == user_id).order_by(DeviceToken.id)
        ).scalars())

    def _active_devices(self, user_id: str) -> list[DeviceToken]:
        return [d for d in self.get_user_devices(user_id) if d.is_active]

    # ==================== Sending ====================

    def send_notification(
        self,
        user_id: str,
        title: str,
        body: str,
        type: NotificationType,
        data: Optional[dict[str, Any]] = None,
        store: bool = True,
    ) -> bool:
        """
        Send to every active device of the user.
        Returns False when the user has no active device.
        """
        devices = self._active_devices(user_id)
        if not devices:
            logger.info("No active devices for user %s", user_id)
            return False

        for device in devices:
            self._send_to_device(device, title, body, type, data)

        if store:
            self._store_notification(user_id, title, body, type, data)
        return True

    def _send_to_device(self, device: DeviceToken, title: str, body: str,
                        type: NotificationType, data: Optional[dict]) -> None:
        icon = PLATFORM_ICONS.get(device.platform, "📮")
        logger.info(
            "%s PUSH to %s device %s | %s | %s | type=%s data=%s",
            icon, device.platform.upper(), mask_token(device.token), title, body,
            NotificationType(type).value, json.dumps(data) if data else "-",
        )

    def _store_notification(self, user_id: str, title: str, body: str,
                            type: NotificationType, data: Optional[dict]) -> None:
        self.db.add(Notification(
            user_id=user_id,
            title=title,
            message=body,
            type=NotificationType(type).value,
            data=json.dumps(data) if data else None,
            is_read=False,
        ))
        self.db.commit()

    # ==================== History ====================

    def get_user_notifications(self, user_id: str, limit: int = 20, offset: int = 0) -> list[Notification]:
        return list(self.db.execute(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
            .offset(offset)
        ).scalars())

    def mark_notification_read(self, user_id: str, notification_id: int) -> bool:
        notification = self.db.get(Notification, notification_id)
        if not notification or notification.user_id != user_id:
            return False
        notification.is_read = True
        self.db.commit()
        return True

    # ==================== Typed helpers ====================

    def send_rental_reminder(self, user_id: str, product_name: str, due_date: str) -> bool:
        return self.send_notification(
            user_id,
            "Rental Due Soon",
            f'Your rental "{product_name}" is due on {due_date}. Please return it on time to avoid late fees.',
            NotificationType.RENTAL_REMINDER,
            {"productName": product_name, "dueDate": due_date, "action": "view_rental"},
        )

    def send_booking_confirmation(self, user_id: str, product_name: str, booking_id: str) -> bool:
        return self.send_notification(
            user_id,
            "Booking Confirmed",
            f'Your booking for "{product_name}" has been confirmed. Check your orders for details.',
            NotificationType.BOOKING_CONFIRMED,
            {"productName": product_name, "bookingId": booking_id, "action": "view_booking"},
        )

    def send_payment_due(self, user_id: str, amount: str, invoice_id: str) -> bool:
        return self.send_notification(
            user_id,
            "Payment Due",
            f"You have a payment of ₹{amount} due. Tap to pay now.",
            NotificationType.PAYMENT_DUE,
            {"amount": amount, "invoiceId": invoice_id, "action": "pay_invoice"},
        )

    def send_otp_notification(self, user_id: str, otp_code: str, purpose: str) -> bool:
        # Codes are never written to notification history
        return self.send_notification(
            user_id,
            "Verification Code",
            f"Your RentFlow verification code is: {otp_code}",
            NotificationType.OTP_VERIFICATION,
            {"otp": otp_code, "purpose": purpose, "action": "verify_otp"},
            store=False,
        )

    def send_order_status_update(self, user_id: str, order_id: str, status: str) -> bool:
        return self.send_notification(
            user_id,
            "Order Update",
            ORDER_STATUS_MESSAGES.get(status, f"Your order status has been updated to: {status}"),
            NotificationType.ORDER_STATUS,
            {"orderId": order_id, "status": status, "action": "view_order"},
        )
