from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from sekolah.core.constants import UserRole


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserRead(BaseModel):
    id: int
    username: str
    role: UserRole
    full_name: Optional[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    user: UserRead
    access_token: Optional[str] = None
    token_type: Optional[str] = None
