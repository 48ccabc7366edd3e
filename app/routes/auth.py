from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import auth
import schemas
from database import get_db
from errors import Forbidden, InvalidInput
from models import Role
from services import accounts

router = APIRouter()

RESET_SENT = "If that email exists, a reset link was sent"


@router.post("/register", response_model=schemas.TokenOut)
def register(body: schemas.UserCreate, db: Session = Depends(get_db)):
    if body.role == Role.ADMIN:
        raise Forbidden("Admin accounts cannot be self-registered")
    user = accounts.create_user(db, body.name, body.email, body.password, body.role)
    token = auth.create_access_token(user.id, user.role)
    return {"token": token, "role": user.role, "message": "Registration successful"}


@router.post("/login", response_model=schemas.TokenOut)
def login(body: schemas.LoginRequest, db: Session = Depends(get_db)):
    user = accounts.authenticate(db, body.email, body.password)
    token = auth.create_access_token(user.id, user.role)
    return {"token": token, "role": user.role, "message": "Login successful"}


@router.get("/me", response_model=schemas.UserOut)
def me(current_user: auth.TokenUser = Depends(auth.get_current_user), db: Session = Depends(get_db)):
    return accounts.get_user(db, current_user.id)


@router.post("/forgot-password", response_model=schemas.MessageOut)
def forgot_password(body: schemas.ForgotPasswordRequest, db: Session = Depends(get_db)):
    if not body.email:
        raise InvalidInput("Email required")
    accounts.start_password_reset(db, body.email)
    return {"message": RESET_SENT}


@router.post("/reset-password", response_model=schemas.MessageOut)
def reset_password(body: schemas.ResetPasswordRequest, db: Session = Depends(get_db)):
    if not body.token or not body.password:
        raise InvalidInput("Missing fields")
    accounts.reset_password(db, body.token, body.password)
    return {"message": "Password updated"}
