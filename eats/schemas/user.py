from pydantic import BaseModel, EmailStr
from pydantic import ConfigDict
from typing import Optional
import datetime

from eats.models.user import UserRole
from eats.schemas.common import CoreOutput


class CreateAccountInput(BaseModel):
    email: EmailStr
    password: str
    role: UserRole = UserRole.Client


class EditProfileInput(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = None


class UserRead(BaseModel):
    # Pydantic v2: use model_config with from_attributes to support ORM objects
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: EmailStr
    role: UserRole
    verified: bool
    created_at: Optional[datetime.datetime] = None


class LoginInput(BaseModel):
    email: EmailStr
    password: str


class LoginOutput(CoreOutput):
    token: Optional[str] = None


class UserProfileOutput(CoreOutput):
    user: Optional[UserRead] = None


class VerifyEmailInput(BaseModel):
    code: str
