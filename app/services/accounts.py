import logging
import secrets
import smtplib
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import auth
import models
from config import settings
from errors import InvalidInput, NotFound, Unauthorized
from services import mailer

logger = logging.getLogger(__name__)


def find_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email.lower().strip()).first()


def get_user(db: Session, user_id: int) -> models.User:
    user = db.query(models.User).filter(models.User.id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


def create_user(db: Session, name: str, email: str, password: str,
                role: models.Role = models.Role.STUDENT) -> models.User:
    if find_user_by_email(db, email):
        raise InvalidInput("Email already in use")

    user = models.User(
        name=name.strip(),
        email=email.lower().strip(),
        hashed_password=auth.get_password_hash(password),
        role=role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise InvalidInput("Email already in use")
    db.refresh(user)
    logger.info("Registered user %s (%s)", user.id, user.role.value)
    return user


def authenticate(db: Session, email: str, password: str) -> models.User:
    user = find_user_by_email(db, email)
    if not user or not auth.verify_password(password, user.hashed_password):
        raise Unauthorized("Invalid credentials")
    logger.info("Login ok for user %s", user.id)
    return user


def start_password_reset(db: Session, email: str) -> None:
    """Store a reset token for ``email`` and mail the link.

    Unknown addresses are ignored so callers cannot discover which accounts exist.
    """
    user = find_user_by_email(db, email)
    if not user:
        return

    token = secrets.token_hex(32)
    user.reset_token = token
    user.reset_token_expires = datetime.utcnow() + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
    db.commit()

    link = f"{settings.APP_URL.rstrip('/')}/reset-password?token={token}"
    html = mailer.render(
        "reset_password.html",
        name=user.name,
        link=link,
        expires_minutes=settings.RESET_TOKEN_EXPIRE_MINUTES,
    )
    try:
        mailer.send_mail(user.email, "Reset your password", html)
    except (smtplib.SMTPException, OSError):
        logger.exception("Could not send reset mail to user %s", user.id)
    logger.info("Password reset requested for user %s", user.id)


def reset_password(db: Session, token: str, password: str) -> models.User:
    user = db.query(models.User).filter(
        models.User.reset_token == token,
        models.User.reset_token_expires > datetime.utcnow(),
    ).first()
    if not user:
        raise InvalidInput("Invalid or expired token")

    user.hashed_password = auth.get_password_hash(password)
    user.reset_token = None
    user.reset_token_expires = None
    db.commit()
    logger.info("Password reset for user %s", user.id)
    return user
