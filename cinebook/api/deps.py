from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from cinebook.booking.errors import NotAuthenticated
from cinebook.core.config import settings
from cinebook.core.security import decode_token
from cinebook.db.session import get_db
from cinebook.models.user import User

# a missing token raises NotAuthenticated rather than FastAPI's own 401
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login", auto_error=False
)


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    if not token:
        raise NotAuthenticated()
    user_id = decode_token(token)
    if not user_id:
        raise NotAuthenticated("Could not validate credentials")
    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise NotAuthenticated("Could not validate credentials")
    return user


def get_current_user_id(current_user: User = Depends(get_current_user)) -> str:
    return current_user.id


def get_current_admin_user(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_user
