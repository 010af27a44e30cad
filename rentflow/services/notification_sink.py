from abc import ABC, abstractmethod

from ..core.email import send_email


class NotificationSink(ABC):
    """Delivery channel for user-facing messages (email, SMS, ...)."""

    @abstractmethod
    async def deliver(self, destination: str, subject: str, body: str) -> bool:
        ...


class EmailNotificationSink(NotificationSink):
    """Delivers through the Brevo email API (log-only when no API key is set)."""

    async def deliver(self, destination: str, subject: str, body: str) -> bool:
        return await send_email(destination, subject, body)


def get_notification_sink() -> NotificationSink:
    return EmailNotificationSink()
