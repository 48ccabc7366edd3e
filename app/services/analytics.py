import logging
from typing import Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import models
from errors import NotFound

logger = logging.getLogger(__name__)


def bump(db: Session, event: models.Event, seats: int, amount: float) -> bool:
    """Move the event's confirmed counter by ``seats`` and its revenue by ``amount``.

    Runs in a SAVEPOINT of the caller's transaction. A failure is logged and
    rolled back to the savepoint; it never fails the surrounding operation.
    """
    try:
        with db.begin_nested():
            updated = (
                db.query(models.Analytics)
                .filter(models.Analytics.event_id == event.id)
                .update(
                    {
                        models.Analytics.registrations_count: models.Analytics.registrations_count + seats,
                        models.Analytics.revenue: models.Analytics.revenue + amount,
                    },
                    synchronize_session=False,
                )
            )
    except SQLAlchemyError:
        logger.exception("Analytics update failed for event %s", event.id)
        return False

    if not updated:
        logger.warning("No analytics row for event %s", event.id)
        return False
    return True


def get_event_analytics(db: Session, event_id: int) -> models.Analytics:
    row = db.query(models.Analytics).filter(models.Analytics.event_id == event_id).first()
    if not row:
        raise NotFound("Analytics not found")
    return row


def overview(db: Session) -> Dict[str, int]:
    return {
        "events": db.query(models.Event).count(),
        "users": db.query(models.User).count(),
        "registrations": db.query(models.Registration).count(),
    }
