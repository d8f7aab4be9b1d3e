from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, Field

from app.auth import (
    authenticate_user,
    clear_session_cookie,
    get_current_user,
    hash_password,
    set_session_cookie,
)
from app.storage import Storage, get_storage

router = APIRouter(prefix="/api", tags=["auth"])


class RegisterRequest(BaseModel):
    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)


class LoginRequest(BaseModel):
    username: str
    password: str


@router.post("/register", status_code=201)
async def register(
    data: RegisterRequest,
    response: Response,
    storage: Storage = Depends(get_storage),
):
    """Create an account and log it in."""
    if storage.get_user_by_username(data.username):
        raise HTTPException(status_code=400, detail="Username taken")

    user = storage.create_user(
        {"username": data.username, "password_hash": hash_password(data.password)}
    )
    set_session_cookie(response, user.id)
    return {"id": user.id, "username": user.username}


@router.post("/login")
async def login(
    data: LoginRequest,
    response: Response,
    storage: Storage = Depends(get_storage),
):
    """Check credentials and set the session cookie."""
    user = authenticate_user(storage, data.username, data.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    set_session_cookie(response, user.id)
    return {"id": user.id, "username": user.username}


@router.post("/logout", status_code=204)
async def logout(response: Response):
    """Log out the current user."""
    clear_session_cookie(response)


@router.get("/me")
async def me(request: Request, storage: Storage = Depends(get_storage)):
    """Return the logged-in user."""
    user = get_current_user(request, storage)
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return {"id": user.id, "username": user.username}
