from typing import List

from sqlalchemy.orm import Session

import models


def notify(db: Session, user_id: int, message: str) -> models.Notification:
    """Queue a notification in the caller's transaction; the caller commits."""
    note = models.Notification(user_id=user_id, message=message)
    db.add(note)
    return note


def list_for_user(db: Session, user_id: int) -> List[models.Notification]:
    return (
        db.query(models.Notification)
        .filter(models.Notification.user_id == user_id)
        .order_by(models.Notification.created_at.desc(), models.Notification.id.desc())
        .all()
    )
