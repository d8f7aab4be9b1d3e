"""
Login sessions for the payroll API.

Passwords are hashed with passlib; the session is a signed, time-limited
cookie carrying only the user id.
"""

import os
from typing import Optional

from dotenv import load_dotenv
from fastapi import Request
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired
from passlib.context import CryptContext

from app.models.user import User
from app.storage.base import Storage

load_dotenv()

# pbkdf2_sha256 is pure Python, so no compiled bcrypt is needed
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production-min-32-characters")
SESSION_EXPIRE_MINUTES = int(os.getenv("SESSION_EXPIRE_MINUTES", "480"))
SESSION_COOKIE = "session"

_signer = URLSafeTimedSerializer(SECRET_KEY, salt="payroll-session")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """False for a wrong password or a hash passlib cannot parse."""
    try:
        return pwd_context.verify(password, password_hash)
    except (ValueError, TypeError):
        return False


def create_session_token(user_id: int) -> str:
    return _signer.dumps({"user_id": user_id})


def decode_session_token(token: str) -> Optional[dict]:
    """Payload of a valid, unexpired token, else None."""
    try:
        return _signer.loads(token, max_age=SESSION_EXPIRE_MINUTES * 60)
    except (BadSignature, SignatureExpired):
        return None


def get_current_user(request: Request, storage: Storage) -> Optional[User]:
    """The user named by the request's session cookie, if any."""
    token = request.cookies.get(SESSION_COOKIE)
    payload = decode_session_token(token) if token else None
    if not payload or "user_id" not in payload:
        return None
    return storage.get_user_by_id(payload["user_id"])


def authenticate_user(storage: Storage, username: str, password: str) -> Optional[User]:
    user = storage.get_user_by_username(username)
    if user and verify_password(password, user.password_hash):
        return user
    return None


def set_session_cookie(response, user_id: int):
    response.set_cookie(
        key=SESSION_COOKIE,
        value=create_session_token(user_id),
        max_age=SESSION_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
    )
    return response


def clear_session_cookie(response):
    response.delete_cookie(SESSION_COOKIE)
    return response
