from enum import Enum


class OtpPurpose(str, Enum):
    LOGIN = "login"
    SIGNUP = "signup"


class DevicePlatform(str, Enum):
    IOS = "ios"
    ANDROID = "android"
    WEB = "web"


class NotificationType(str, Enum):
    RENTAL_REMINDER = "rental_reminder"
    BOOKING_CONFIRMED = "booking_confirmed"
    PAYMENT_DUE = "payment_due"
    RENTAL_RETURNED = "rental_returned"
    OTP_VERIFICATION = "otp_verification"
    ORDER_STATUS = "order_status"


class RateTier(str, Enum):
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
