class RentFlowError(Exception):
    """Base error for the OTP, pricing and notification services."""

    status_code: int = 400
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(RentFlowError):
    status_code = 400
    default_message = "Invalid input"


class OtpFormatError(ValidationError):
    default_message = "Verification code must be 4 digits"


class InvalidOtpError(RentFlowError):
    # Same message for wrong, expired, used or never-issued codes
    status_code = 400
    default_message = "Invalid or expired code"


class PersistenceError(RentFlowError):
    status_code = 503
    default_message = "Service temporarily unavailable, please try again"


class UnpriceableError(RentFlowError):
    status_code = 422
    default_message = "Rental duration not supported for this product"


class OtpResendThrottledError(RentFlowError):
    status_code = 429
    default_message = "Please wait before requesting a new code"

    def __init__(self, retry_after: int, message: str | None = None):
        self.retry_after = retry_after
        super().__init__(message)
