from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import schemas
from auth import TokenUser, require_role
from database import get_db
from models import Role
from services import analytics

router = APIRouter()


@router.get("/events/{event_id}", response_model=schemas.AnalyticsOut)
def event_analytics(
        event_id: int,
        current_user: TokenUser = Depends(require_role(Role.ORGANIZER, Role.ADMIN)),
        db: Session = Depends(get_db),
):
    return analytics.get_event_analytics(db, event_id)


@router.get("/overview", response_model=schemas.OverviewOut)
def overview(
        current_user: TokenUser = Depends(require_role(Role.ADMIN)),
        db: Session = Depends(get_db),
):
    return analytics.overview(db)
