"""
Security utilities for the ERP service
JWT bearer token handling for the authentication collaborator
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, List
from jose import JWTError, jwt
from pydantic import BaseModel, Field

from app.core.config import settings


class CurrentUser(BaseModel):
    """Authenticated caller as carried by the access token"""
    id: str
    company_id: str
    role_id: str
    branch_ids: List[str] = Field(default_factory=list)
    email: Optional[str] = None
    username: Optional[str] = None


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_user_token(user: CurrentUser, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a token whose claims rebuild the given CurrentUser"""
    claims = {
        "sub": user.id,
        "company_id": user.company_id,
        "role_id": user.role_id,
        "branch_ids": list(user.branch_ids),
    }
    if user.email:
        claims["email"] = user.email
    if user.username:
        claims["username"] = user.username
    return create_access_token(claims, expires_delta)


def verify_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify JWT token and return payload, or None when invalid or expired"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


def user_from_payload(payload: Dict[str, Any]) -> Optional[CurrentUser]:
    """Build the caller from token claims; None when a required claim is missing"""
    user_id = payload.get("sub")
    company_id = payload.get("company_id")
    role_id = payload.get("role_id")
    if not user_id or not company_id or not role_id:
        return None

    return CurrentUser(
        id=str(user_id),
        company_id=str(company_id),
        role_id=str(role_id),
        branch_ids=[str(b) for b in payload.get("branch_ids") or []],
        email=payload.get("email"),
        username=payload.get("username"),
    )
