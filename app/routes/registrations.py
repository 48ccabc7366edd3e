from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

import schemas
from auth import TokenUser, get_current_user, require_role
from database import get_db
from models import Role
from services import checkin, export
from services import registrations as admission

router = APIRouter()

organizer_or_admin = require_role(Role.ORGANIZER, Role.ADMIN)


@router.get("/mine", response_model=List[schemas.RegistrationWithEvent])
def my_registrations(current_user: TokenUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return admission.list_mine(db, current_user.id)


@router.post("/validate", response_model=schemas.ValidationOut)
def validate_code(
        body: schemas.CodeIn,
        current_user: TokenUser = Depends(organizer_or_admin),
        db: Session = Depends(get_db),
):
    result = checkin.validate(db, body.qr)
    return {"valid": result.valid, "registration": result.registration}


@router.post("/checkin", response_model=schemas.CheckInOut)
def check_in(
        body: schemas.CodeIn,
        current_user: TokenUser = Depends(organizer_or_admin),
        db: Session = Depends(get_db),
):
    result = checkin.check_in(db, body.qr)
    return {
        "valid": result.valid,
        "already_checked_in": result.already_checked_in,
        "registration": result.registration,
    }


@router.get("/export/{event_id}.csv")
def export_attendees(
        event_id: int,
        current_user: TokenUser = Depends(organizer_or_admin),
        db: Session = Depends(get_db),
):
    body = export.export_csv(db, event_id, current_user)
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=event-{event_id}-attendees.csv"},
    )


@router.post("/{event_id}", response_model=schemas.RegistrationOut, status_code=status.HTTP_201_CREATED)
def register_for_event(
        event_id: int,
        current_user: TokenUser = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    return admission.register(db, current_user.id, event_id)


@router.delete("/{registration_id}", response_model=schemas.CancelOut)
def cancel_registration(
        registration_id: int,
        current_user: TokenUser = Depends(get_current_user),
        db: Session = Depends(get_db),
):
    promoted = admission.cancel(db, registration_id, current_user)
    return {"message": "Registration cancelled", "promoted": promoted}
