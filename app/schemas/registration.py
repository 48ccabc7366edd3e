from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from models import RegistrationStatus
from .user import UserOut
from .event import EventSummary


class RegistrationOut(BaseModel):
    id: int
    user_id: int
    event_id: int
    status: RegistrationStatus
    price_paid: float = 0
    qr_code: str
    checked_in_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class RegistrationWithEvent(RegistrationOut):
    event: EventSummary


class RegistrationDetail(RegistrationOut):
    user: UserOut
    event: EventSummary


class CodeIn(BaseModel):
    qr: str


class ValidationOut(BaseModel):
    valid: bool
    registration: Optional[RegistrationDetail] = None


class CheckInOut(BaseModel):
    valid: bool
    already_checked_in: bool
    registration: RegistrationDetail


class CancelOut(BaseModel):
    message: str
    promoted: Optional[RegistrationOut] = None


class NotificationOut(BaseModel):
    id: int
    user_id: int
    message: str
    created_at: datetime

    class Config:
        from_attributes = True
