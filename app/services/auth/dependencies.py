"""Request dependencies that gate the member management routes."""

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.services.auth import get_auth_provider


async def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """The logged-in user; anonymous callers get a 401."""
    user = await get_auth_provider().get_user_from_request(db, request)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated"
        )
    return user
