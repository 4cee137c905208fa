import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sekolah.core.access import parse_role
from sekolah.core.security import hash_password, verify_password
from sekolah.models.user import User

logger = logging.getLogger(__name__)


def authenticate(db: Session, username: str, password: str) -> Optional[User]:
    username = username.strip()
    user = db.execute(select(User).where(User.username == username)).scalars().first()
    if user is None or not user.is_active:
        logger.warning("Login rejected for unknown or inactive user %r", username)
        return None
    if not verify_password(password, user.password_hash):
        logger.warning("Login rejected for %r: wrong password", username)
        return None
    return user


def get_active_user(db: Session, user_id) -> Optional[User]:
    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        return None
    user = db.get(User, user_id)
    if user is None or not user.is_active:
        return None
    return user


def create_user(
    db: Session,
    username: str,
    password: str,
    role: str,
    *,
    full_name: Optional[str] = None,
    is_active: bool = True,
) -> User:
    parsed = parse_role(role)
    if parsed is None:
        raise ValueError(f"Unknown role: {role}")
    if not password:
        raise ValueError("Password must not be empty.")

    user = User(
        username=username.strip(),
        password_hash=hash_password(password),
        role=parsed.value,
        full_name=full_name,
        is_active=is_active,
    )
    db.add(user)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(user)
    return user


def set_password(db: Session, user: User, password: str) -> User:
    if not password:
        raise ValueError("Password must not be empty.")
    user.password_hash = hash_password(password)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(user)
    return user


__all__ = ["authenticate", "create_user", "get_active_user", "set_password"]
