from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import decode_token
from app.core.session_store import token_blacklist
from app.db.session import get_db
from app.models.user import User, UserRole

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")

_credentials_exception = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Could not validate credentials",
    headers={"WWW-Authenticate": "Bearer"},
)


def get_current_token_claims(token: str = Depends(oauth2_scheme)) -> dict:
    """Decoded claims of the bearer token; rejects invalid, expired or logged-out tokens."""
    if token_blacklist.contains(token):
        raise _credentials_exception
    claims = decode_token(token)
    if not claims or not claims.get("sub"):
        raise _credentials_exception
    claims["_raw"] = token
    return claims


def get_current_user(
    claims: dict = Depends(get_current_token_claims),
    db: Session = Depends(get_db),
) -> User:
    try:
        user_id = UUID(claims["sub"])
    except ValueError:
        raise _credentials_exception
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise _credentials_exception
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is inactive")
    return user


def get_current_owner_user(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role not in (UserRole.owner, UserRole.admin):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Facility owner privileges required",
        )
    return current_user


def get_current_admin_user(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_user
