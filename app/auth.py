from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext

from config import settings
from errors import Forbidden, Unauthorized
from models import Role

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class TokenUser:
    """Identity carried by a verified bearer token."""
    id: int
    role: Role


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: int, role: Role, expires_minutes: Optional[int] = None) -> str:
    minutes = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    payload = {
        "id": user_id,
        "role": Role(role).value,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=minutes),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> TokenUser:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        return TokenUser(id=int(payload["id"]), role=Role(payload["role"]))
    except (jwt.InvalidTokenError, KeyError, ValueError, TypeError):
        raise Unauthorized("Invalid or expired token")


def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> TokenUser:
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Unauthorized: Token missing")
    return decode_access_token(credentials.credentials)


def require_role(*roles: Role):
    allowed = set(roles)

    def checker(current_user: TokenUser = Depends(get_current_user)) -> TokenUser:
        if current_user.role not in allowed:
            raise Forbidden("Forbidden: Insufficient role")
        return current_user

    return checker
