"""
Caller identity and role checks.

The caller's user id arrives in the X-Acting-User-Id header, set by the
gateway that authenticated the request.
"""
import logging
from typing import Callable, List, Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from gym_api.core.config import settings
from gym_api.core.exceptions import AccessDeniedError, AuthenticationError
from gym_api.database import get_db
from gym_api.models.user import User, UserRole

logger = logging.getLogger(__name__)

ADMIN_ROLES = [UserRole.SUPERADMIN, UserRole.ADMIN]
APPROVER_ROLES = [UserRole.SUPERADMIN, UserRole.ADMIN, UserRole.MANAGER]
TRAINER_DESK_ROLES = [
    UserRole.SUPERADMIN, UserRole.ADMIN, UserRole.MANAGER,
    UserRole.PERSONAL_TRAINER, UserRole.GENERAL_TRAINER, UserRole.RECEPTIONIST,
]


def get_acting_user(
    acting_user_id: Optional[int] = Header(default=None, alias=settings.acting_user_header),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the calling user from the identity header."""
    if acting_user_id is None:
        raise AuthenticationError(f"Missing {settings.acting_user_header} header")

    user = db.get(User, acting_user_id)
    if user is None:
        logger.warning(f"Unknown acting user {acting_user_id}")
        raise AuthenticationError("Acting user not found")
    if not user.is_active:
        logger.warning(f"Inactive acting user {acting_user_id}")
        raise AccessDeniedError("User is inactive")
    return user


def require_role(allowed_roles: List[UserRole]) -> Callable:
    """
    Dependency factory that checks if the acting user has one of the allowed roles.

    Usage:
        @router.post("/{id}/approve")
        def approve(user: User = Depends(require_role(APPROVER_ROLES))):
            ...
    """
    def role_checker(current_user: User = Depends(get_acting_user)) -> User:
        if current_user.role not in allowed_roles:
            raise AccessDeniedError(
                f"Access denied. Required roles: {[r.value for r in allowed_roles]}"
            )
        return current_user
    return role_checker
