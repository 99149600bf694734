"""
API Dependencies
Common dependencies for API endpoints
"""

from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.exceptions import InsufficientPermissionsError
from app.core.security import CurrentUser, user_from_payload, verify_token
from app.models.company import Role

# Security scheme; a missing header is answered with 401 below, not 403
security = HTTPBearer(auto_error=False)


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CurrentUser:
    """
    Get current authenticated user from JWT token.
    """
    if credentials is None:
        raise _credentials_exception()

    payload = verify_token(credentials.credentials)
    if not payload:
        raise _credentials_exception()

    current_user = user_from_payload(payload)
    if not current_user:
        raise _credentials_exception()

    return current_user


def get_current_role(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Role:
    """
    Load the caller's role; it must be global or belong to the caller's company.
    """
    role = db.query(Role).filter(Role.id == current_user.role_id).first()
    if not role or (role.company_id and role.company_id != current_user.company_id):
        raise InsufficientPermissionsError("Role not found for current user")
    return role


class PermissionChecker:
    """
    Permission checker dependency for a specific permission.
    Resolves to the authenticated user when the role grants it.
    """
    def __init__(self, required_permission: str):
        self.required_permission = required_permission

    def __call__(
        self,
        current_user: CurrentUser = Depends(get_current_user),
        role: Role = Depends(get_current_role)
    ) -> CurrentUser:
        if not role.has_permission(self.required_permission):
            raise InsufficientPermissionsError(
                f"Permission denied. Required: {self.required_permission}"
            )
        return current_user


def check_branch_access(
    branch_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    role: Role = Depends(get_current_role)
) -> str:
    """
    Branch guard for path parameters: the caller must be assigned to the
    branch unless the role covers all branches.
    """
    if role.all_branches or branch_id in current_user.branch_ids:
        return branch_id
    raise InsufficientPermissionsError("Access to this branch is not allowed")
