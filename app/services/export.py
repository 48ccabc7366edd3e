import csv
import io
from typing import List, Tuple

from sqlalchemy.orm import Session, joinedload

import models
from auth import TokenUser
from services.events import ensure_can_manage, get_event

HEADER = ("name", "email", "status", "qr")


def attendee_rows(db: Session, event_id: int) -> List[Tuple[str, str, str, str]]:
    registrations = (
        db.query(models.Registration)
        .options(joinedload(models.Registration.user))
        .filter(models.Registration.event_id == event_id)
        .order_by(models.Registration.created_at.asc(), models.Registration.id.asc())
        .all()
    )
    return [(r.user.name, r.user.email, r.status.value, r.qr_code) for r in registrations]


def export_csv(db: Session, event_id: int, user: TokenUser) -> str:
    event = get_event(db, event_id)
    ensure_can_manage(event, user)

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(HEADER)
    writer.writerows(attendee_rows(db, event_id))
    return buffer.getvalue()
