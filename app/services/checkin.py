import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, joinedload

import models
from errors import NotFound

logger = logging.getLogger(__name__)


@dataclass
class CheckInResult:
    valid: bool
    registration: Optional[models.Registration] = None
    already_checked_in: bool = False


def find_by_code(db: Session, code: str) -> Optional[models.Registration]:
    return (
        db.query(models.Registration)
        .options(joinedload(models.Registration.user), joinedload(models.Registration.event))
        .filter(models.Registration.qr_code == code)
        .first()
    )


def validate(db: Session, code: str) -> CheckInResult:
    """Resolve a presented code. Read-only, so repeated calls give the same answer."""
    registration = find_by_code(db, code)
    if not registration:
        logger.info("Check-in code rejected")
        return CheckInResult(valid=False)
    logger.info("Check-in code valid for registration %s", registration.id)
    return CheckInResult(valid=True, registration=registration)


def check_in(db: Session, code: str) -> CheckInResult:
    """Record entry on first use; later uses report ``already_checked_in``."""
    registration = find_by_code(db, code)
    if not registration:
        raise NotFound("Invalid check-in code")

    if registration.checked_in_at is not None:
        logger.info("Registration %s already checked in", registration.id)
        return CheckInResult(valid=True, registration=registration, already_checked_in=True)

    registration.checked_in_at = datetime.utcnow()
    db.commit()
    db.refresh(registration)
    logger.info("Registration %s checked in", registration.id)
    return CheckInResult(valid=True, registration=registration)
