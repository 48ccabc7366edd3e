from datetime import datetime

from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, CheckConstraint
from sqlalchemy.orm import relationship

from database import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(String, default="")
    venue = Column(String(200), nullable=False)
    category = Column(String(50), index=True, nullable=False)
    start_time = Column(DateTime, index=True, nullable=False)
    end_time = Column(DateTime, nullable=False)
    capacity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False, default=0)
    price_type = Column(String(20), nullable=True)  # free, paid, donation
    image_url = Column(String, nullable=True)
    organizer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    organizer = relationship("User", back_populates="events")
    # Deleting an event deletes its analytics row and its registrations
    analytics = relationship("Analytics", back_populates="event", uselist=False, cascade="all, delete-orphan")
    registrations = relationship("Registration", back_populates="event", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="check_event_time_range"),
        CheckConstraint("capacity >= 1", name="check_event_capacity_positive"),
        CheckConstraint("price >= 0", name="check_event_price_non_negative"),
    )

    @property
    def registrations_count(self) -> int:
        return len(self.registrations)


class Analytics(Base):
    __tablename__ = "analytics"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), unique=True, nullable=False)
    registrations_count = Column(Integer, nullable=False, default=0)
    revenue = Column(Float, nullable=False, default=0)

    event = relationship("Event", back_populates="analytics")
