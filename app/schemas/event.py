from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .user import UserOut


def _naive_utc(value: datetime) -> datetime:
    # Stored datetimes are naive UTC
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class EventBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    venue: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=50)
    start_time: datetime
    end_time: datetime
    capacity: int = Field(..., ge=1)
    price: float = Field(0, ge=0)
    price_type: Optional[str] = None
    image_url: Optional[str] = None


class EventCreate(EventBase):
    @field_validator("start_time", "end_time")
    @classmethod
    def to_naive_utc(cls, v: datetime) -> datetime:
        return _naive_utc(v)

    @model_validator(mode="after")
    def check_time_range(self):
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class EventUpdate(BaseModel):
    """Partial update; the time range is re-checked against the stored event."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    venue: Optional[str] = Field(None, min_length=1, max_length=200)
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    capacity: Optional[int] = Field(None, ge=1)
    price: Optional[float] = Field(None, ge=0)
    price_type: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def to_naive_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _naive_utc(v) if v is not None else v


class AnalyticsOut(BaseModel):
    event_id: int
    registrations_count: int
    revenue: float

    class Config:
        from_attributes = True


class EventSummary(EventBase):
    id: int
    organizer_id: int

    class Config:
        from_attributes = True


class EventOut(EventSummary):
    created_at: Optional[datetime] = None
    registrations_count: int = 0
    organizer: Optional[UserOut] = None
    analytics: Optional[AnalyticsOut] = None


class OverviewOut(BaseModel):
    events: int
    users: int
    registrations: int
