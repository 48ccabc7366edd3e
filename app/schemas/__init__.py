from .user import UserCreate, LoginRequest, TokenOut, UserOut, ForgotPasswordRequest, ResetPasswordRequest, MessageOut
from .event import EventCreate, EventUpdate, EventSummary, EventOut, AnalyticsOut, OverviewOut
from .registration import (
    RegistrationOut,
    RegistrationWithEvent,
    RegistrationDetail,
    CodeIn,
    ValidationOut,
    CheckInOut,
    CancelOut,
    NotificationOut,
)

__all__ = [
    "UserCreate",
    "LoginRequest",
    "TokenOut",
    "UserOut",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "MessageOut",
    "EventCreate",
    "EventUpdate",
    "EventSummary",
    "EventOut",
    "AnalyticsOut",
    "OverviewOut",
    "RegistrationOut",
    "RegistrationWithEvent",
    "RegistrationDetail",
    "CodeIn",
    "ValidationOut",
    "CheckInOut",
    "CancelOut",
    "NotificationOut",
]
