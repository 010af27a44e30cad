from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from ..enum.rentflow_enum import DevicePlatform, NotificationType

class DeviceInfo(BaseModel):
    model: Optional[str] = None
    os_version: Optional[str] = None
    app_version: Optional[str] = None

class RegisterDeviceRequest(BaseModel):
    token: str = Field(..., min_length=1, description="Device token is required")
    platform: DevicePlatform
    device_info: Optional[DeviceInfo] = None

class UnregisterDeviceRequest(BaseModel):
    token: str = Field(..., min_length=1)

class DeviceResponse(BaseModel):
    platform: str
    token: str  # masked
    is_active: bool

class DeviceListResponse(BaseModel):
    success: bool = True
    devices: List[DeviceResponse]

class SendTestNotificationRequest(BaseModel):
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.ORDER_STATUS

class NotificationResponse(BaseModel):
    id: int
    title: str
    message: str
    type: str
    data: Optional[str] = None
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class NotificationListResponse(BaseModel):
    success: bool = True
    notifications: List[NotificationResponse]
    limit: int
    offset: int
    has_more: bool
