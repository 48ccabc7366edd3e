"""
Registration admission.

An admission decides CONFIRMED or WAITLIST for one (user, event) request and
commits it as a single unit of work:

- the user row and then the event row are locked, so admissions for the same
  event (and for the same user) are serialized across processes;
- a user cannot hold two registrations whose events overlap, bounds
  inclusive;
- at most ``capacity`` registrations of an event are CONFIRMED;
- the analytics counter moves with every CONFIRMED seat, best-effort.

Cancelling a confirmed seat promotes the oldest waitlisted registration.
"""
import logging
import secrets
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

import models
from auth import TokenUser
from errors import AlreadyRegistered, AppError, Forbidden, NotFound, PersistenceFailure, ScheduleConflict
from services import analytics
from services.notifications import notify

logger = logging.getLogger(__name__)

CONFIRMED = models.RegistrationStatus.CONFIRMED
WAITLIST = models.RegistrationStatus.WAITLIST


def generate_check_in_code(event_id: int) -> str:
    return f"QR-{event_id}-{secrets.token_urlsafe(16)}"


def _lock_user(db: Session, user_id: int) -> models.User:
    user = db.query(models.User).filter(models.User.id == user_id).with_for_update().first()
    if not user:
        raise NotFound("User not found")
    return user


def lock_event(db: Session, event_id: int) -> models.Event:
    event = db.query(models.Event).filter(models.Event.id == event_id).with_for_update().first()
    if not event:
        raise NotFound("Event not found")
    return event


def find_conflicts(db: Session, user_id: int, event: models.Event) -> List[models.Registration]:
    """The user's registrations whose event window overlaps ``event``'s."""
    return (
        db.query(models.Registration)
        .join(models.Event, models.Registration.event_id == models.Event.id)
        .filter(
            models.Registration.user_id == user_id,
            models.Registration.event_id != event.id,
            models.Event.start_time <= event.end_time,
            models.Event.end_time >= event.start_time,
        )
        .all()
    )


def confirmed_count(db: Session, event_id: int) -> int:
    return (
        db.query(models.Registration)
        .filter(models.Registration.event_id == event_id, models.Registration.status == CONFIRMED)
        .count()
    )


def decide_status(confirmed: int, capacity: int) -> models.RegistrationStatus:
    return WAITLIST if confirmed >= capacity else CONFIRMED


def _status_message(event: models.Event, status: models.RegistrationStatus) -> str:
    if status == CONFIRMED:
        return f"You're confirmed for {event.title}."
    return f"{event.title} is full. You've been added to the waitlist."


def register(db: Session, user_id: int, event_id: int) -> models.Registration:
    try:
        _lock_user(db, user_id)
        event = lock_event(db, event_id)

        existing = db.query(models.Registration).filter(
            models.Registration.user_id == user_id,
            models.Registration.event_id == event_id,
        ).first()
        if existing:
            raise AlreadyRegistered("Already registered for this event")

        if find_conflicts(db, user_id, event):
            raise ScheduleConflict("Schedule conflict")

        status = decide_status(confirmed_count(db, event_id), event.capacity)
        registration = models.Registration(
            user_id=user_id,
            event_id=event_id,
            status=status,
            price_paid=event.price if status == CONFIRMED else 0,
            qr_code=generate_check_in_code(event_id),
        )
        db.add(registration)
        db.flush()

        if status == CONFIRMED:
            analytics.bump(db, event, 1, registration.price_paid)
        notify(db, user_id, _status_message(event, status))
        db.commit()
    except AppError:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        raise AlreadyRegistered("Already registered for this event")
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Admission failed for user %s event %s", user_id, event_id)
        raise PersistenceFailure("Could not save the registration") from exc

    db.refresh(registration)
    logger.info("Admission event=%s user=%s status=%s", event_id, user_id, status.value)
    return registration


def promote_next(db: Session, event: models.Event) -> Optional[models.Registration]:
    if confirmed_count(db, event.id) >= event.capacity:
        return None

    nxt = (
        db.query(models.Registration)
        .filter(models.Registration.event_id == event.id, models.Registration.status == WAITLIST)
        .order_by(models.Registration.created_at.asc(), models.Registration.id.asc())
        .first()
    )
    if not nxt:
        return None

    nxt.status = CONFIRMED
    nxt.price_paid = event.price
    db.flush()
    analytics.bump(db, event, 1, nxt.price_paid)
    notify(db, nxt.user_id, f"A seat opened up: you're confirmed for {event.title}.")
    logger.info("Promoted registration %s for event %s from waitlist", nxt.id, event.id)
    return nxt


def cancel(db: Session, registration_id: int, user: TokenUser) -> Optional[models.Registration]:
    """Delete a registration; returns the waitlisted registration promoted in its place, if any."""
    try:
        registration = db.query(models.Registration).filter(models.Registration.id == registration_id).first()
        if not registration:
            raise NotFound("Registration not found")
        if registration.user_id != user.id and user.role != models.Role.ADMIN:
            raise Forbidden("You can only cancel your own registrations")

        event = lock_event(db, registration.event_id)
        was_confirmed = registration.status == CONFIRMED
        refund = registration.price_paid or 0
        db.delete(registration)
        db.flush()

        promoted = None
        if was_confirmed:
            analytics.bump(db, event, -1, -refund)
            promoted = promote_next(db, event)
        db.commit()
    except AppError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Cancel failed for registration %s", registration_id)
        raise PersistenceFailure("Could not cancel the registration") from exc

    logger.info("Registration %s cancelled by user %s", registration_id, user.id)
    if promoted is not None:
        db.refresh(promoted)
    return promoted


def list_mine(db: Session, user_id: int) -> List[models.Registration]:
    return (
        db.query(models.Registration)
        .options(joinedload(models.Registration.event))
        .filter(models.Registration.user_id == user_id)
        .order_by(models.Registration.created_at.desc(), models.Registration.id.desc())
        .all()
    )
