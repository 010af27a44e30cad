from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ..enum.rentflow_enum import OtpPurpose

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    first_name: Optional[str] = None
    last_name: Optional[str] = None

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class OtpIssuedResponse(BaseModel):
    success: bool
    message: str
    user_id: str
    expires_in_minutes: int

class ResendOtpRequest(BaseModel):
    email: EmailStr
    purpose: OtpPurpose

class ResendOtpResponse(BaseModel):
    success: bool
    message: str

class VerifyOtpRequest(BaseModel):
    email: EmailStr
    # Format is checked by the OTP service so malformed codes get a 400
    otp_code: str
    purpose: OtpPurpose

class VerifyOtpResponse(BaseModel):
    verified: bool
    message: str
    access_token: Optional[str] = None
    token_type: Optional[str] = None

class UserResponse(BaseModel):
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_verified: bool

    model_config = ConfigDict(from_attributes=True)
