from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from fastapi.params import Query
from fastapi_pagination import Page, Params
from fastapi_pagination.ext.sqlalchemy import paginate
from sqlalchemy.orm import Session

import schemas
from auth import TokenUser, require_role
from database import get_db
from models import Role
from services import events as event_service

router = APIRouter()

organizer_or_admin = require_role(Role.ORGANIZER, Role.ADMIN)


@router.get("", response_model=Page[schemas.EventOut])
def list_events(
        q: Optional[str] = Query(None),
        category: Optional[str] = Query(None),
        params: Params = Depends(),
        db: Session = Depends(get_db),
):
    return paginate(db, event_service.search_query(q, category), params=params)


@router.get("/{event_id}", response_model=schemas.EventOut)
def event_detail(event_id: int, db: Session = Depends(get_db)):
    return event_service.get_event(db, event_id)


@router.post("", response_model=schemas.EventOut, status_code=status.HTTP_201_CREATED)
def create_event(
        body: schemas.EventCreate,
        current_user: TokenUser = Depends(organizer_or_admin),
        db: Session = Depends(get_db),
):
    return event_service.create_event(db, body, current_user)


@router.put("/{event_id}", response_model=schemas.EventOut)
def edit_event(
        event_id: int,
        body: schemas.EventUpdate,
        current_user: TokenUser = Depends(organizer_or_admin),
        db: Session = Depends(get_db),
):
    return event_service.update_event(db, event_id, body, current_user)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(
        event_id: int,
        current_user: TokenUser = Depends(organizer_or_admin),
        db: Session = Depends(get_db),
):
    event_service.delete_event(db, event_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
