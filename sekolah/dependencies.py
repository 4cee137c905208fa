from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from sekolah.core.access import require_locations
from sekolah.core.constants import Lokasi, UserRole
from sekolah.core.errors import AccessDenied, NotAuthenticated
from sekolah.core.security import decode_access_token, get_bearer_token
from sekolah.database.session import get_db
from sekolah.models.user import User
from sekolah.services.auth_service import get_active_user

SESSION_USER_KEY = "user_id"


def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> User:
    token = get_bearer_token(authorization)
    if token:
        user_id = decode_access_token(token).get("sub")
    else:
        user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        raise NotAuthenticated()

    user = get_active_user(db, user_id)
    if user is None:
        request.session.pop(SESSION_USER_KEY, None)
        raise NotAuthenticated()
    return user


def caller_locations(user: User = Depends(get_current_user)) -> frozenset[Lokasi]:
    return require_locations(user.role)


def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != UserRole.ADMIN.value:
        raise AccessDenied()
    return user


def role_scope(role: str, user: User) -> frozenset[Lokasi]:
    """Locations for a ``:role`` path segment, as seen by the calling user.

    Operators may only ask for their own role; admins may view as any role.
    """
    locations = require_locations(role)
    if user.role != UserRole.ADMIN.value and role != user.role:
        raise AccessDenied()
    return locations


__all__ = [
    "SESSION_USER_KEY",
    "caller_locations",
    "get_current_user",
    "get_db",
    "require_admin",
    "role_scope",
]
