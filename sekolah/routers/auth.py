from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from sekolah.core.errors import NotAuthenticated
from sekolah.core.security import create_access_token
from sekolah.dependencies import SESSION_USER_KEY, get_current_user, get_db
from sekolah.models.user import User
from sekolah.schemas.user import LoginRequest, LoginResponse, UserRead
from sekolah.services.auth_service import authenticate

router = APIRouter(prefix="/api", tags=["Auth"])


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, request: Request, db: Session = Depends(get_db)):
    user = authenticate(db, payload.username, payload.password)
    if user is None:
        # Same message for unknown user and wrong password.
        raise NotAuthenticated("Username atau password salah")

    request.session[SESSION_USER_KEY] = user.id
    token = create_access_token(user.id, user.role)
    return LoginResponse(
        user=UserRead.model_validate(user),
        access_token=token,
        token_type="bearer" if token else None,
    )


@router.post("/logout")
def logout(request: Request):
    request.session.clear()
    return {"success": True}


@router.get("/me", response_model=UserRead)
def me(user: User = Depends(get_current_user)):
    return user


__all__ = ["router"]
