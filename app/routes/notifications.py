from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import schemas
from auth import TokenUser, get_current_user
from database import get_db
from services import notifications

router = APIRouter()


@router.get("", response_model=List[schemas.NotificationOut])
def my_notifications(current_user: TokenUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return notifications.list_for_user(db, current_user.id)
