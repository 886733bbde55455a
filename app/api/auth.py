"""Authentication routes for login, logout and the current user."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, EmailStr
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.models.user import User
from app.services.auth import get_auth_provider
from app.services.auth.dependencies import get_current_user


router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class CurrentUserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_admin: bool


@router.post("/login")
async def login(
    request: Request,
    payload: LoginRequest,
    db: Session = Depends(get_db),
):
    """Check credentials and start a cookie session."""
    auth_provider = get_auth_provider()
    user = await auth_provider.authenticate(db, payload.email, payload.password)

    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = await auth_provider.create_session(db, user, request)

    response = JSONResponse({"id": str(user.id), "email": user.email})
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    return response


@router.post("/logout")
async def logout(request: Request, db: Session = Depends(get_db)):
    """Logout and clear session."""
    auth_provider = get_auth_provider()

    token = request.cookies.get(settings.session_cookie_name)
    if token:
        await auth_provider.revoke_session(db, token)

    response = JSONResponse({"success": True})
    response.delete_cookie(settings.session_cookie_name)
    return response


@router.get("/me", response_model=CurrentUserResponse)
async def me(user: User = Depends(get_current_user)):
    return user
