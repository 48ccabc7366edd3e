import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import models
import schemas
from auth import TokenUser
from errors import AppError, Forbidden, InvalidInput, NotFound, PersistenceFailure, ScheduleConflict
from services import registrations as admission
from utils import sanitize_input

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("title", "description", "venue", "category")


def search_query(q: Optional[str] = None, category: Optional[str] = None):
    """Select statement for the public catalog, soonest first."""
    stmt = select(models.Event)
    if q:
        pattern = f"%{q.strip()}%"
        stmt = stmt.where(or_(
            models.Event.title.ilike(pattern),
            models.Event.description.ilike(pattern),
            models.Event.venue.ilike(pattern),
        ))
    if category:
        stmt = stmt.where(models.Event.category == category)
    return stmt.order_by(models.Event.start_time.asc(), models.Event.id.asc())


def get_event(db: Session, event_id: int) -> models.Event:
    event = db.query(models.Event).filter(models.Event.id == event_id).first()
    if not event:
        raise NotFound("Event not found")
    return event


def ensure_can_manage(event: models.Event, user: TokenUser) -> None:
    if user.role != models.Role.ADMIN and event.organizer_id != user.id:
        raise Forbidden("Only the event organizer or an admin can do this")


def _clean(data: dict) -> dict:
    if "description" in data and data["description"] is None:
        data["description"] = ""
    for field in TEXT_FIELDS:
        if field in data and data[field] is not None:
            data[field] = sanitize_input(data[field])
    for field in ("title", "venue", "category"):
        if field in data and data[field] == "":
            raise InvalidInput(f"{field} cannot be empty")
    return data


def create_event(db: Session, payload: schemas.EventCreate, user: TokenUser) -> models.Event:
    data = _clean(payload.model_dump())
    event = models.Event(**data, organizer_id=user.id)
    event.analytics = models.Analytics(registrations_count=0, revenue=0)
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Event %s created by user %s", event.id, user.id)
    return event


def update_event(db: Session, event_id: int, payload: schemas.EventUpdate, user: TokenUser) -> models.Event:
    """Apply a partial edit under the same event lock admissions take.

    Capacity may not drop below the confirmed seats, a new time window may not
    overlap another registration of any registrant, and seats freed by a larger
    capacity go to the waitlist in order.
    """
    try:
        event = admission.lock_event(db, event_id)
        ensure_can_manage(event, user)

        data = _clean(payload.model_dump(exclude_unset=True))
        for field in ("title", "venue", "category", "start_time", "end_time", "capacity", "price"):
            if field in data and data[field] is None:
                raise InvalidInput(f"{field} cannot be null")

        start = data.get("start_time", event.start_time)
        end = data.get("end_time", event.end_time)
        if start >= end:
            raise InvalidInput("start_time must be before end_time")

        if "capacity" in data:
            confirmed = admission.confirmed_count(db, event.id)
            if data["capacity"] < confirmed:
                raise InvalidInput(f"capacity cannot be lower than the {confirmed} confirmed registrations")

        for field, value in data.items():
            setattr(event, field, value)

        if "start_time" in data or "end_time" in data:
            registrants = db.query(models.Registration.user_id).filter(models.Registration.event_id == event.id)
            for (registrant_id,) in registrants.all():
                if admission.find_conflicts(db, registrant_id, event):
                    raise ScheduleConflict("New time overlaps another registration of a registered attendee")

        promoted = 0
        while admission.promote_next(db, event) is not None:
            promoted += 1
        db.commit()
    except AppError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Update failed for event %s", event_id)
        raise PersistenceFailure("Could not update the event") from exc

    db.refresh(event)
    logger.info("Event %s updated by user %s (%s promoted)", event.id, user.id, promoted)
    return event


def delete_event(db: Session, event_id: int, user: TokenUser) -> None:
    event = get_event(db, event_id)
    ensure_can_manage(event, user)
    db.delete(event)
    db.commit()
    logger.info("Event %s deleted by user %s", event_id, user.id)
