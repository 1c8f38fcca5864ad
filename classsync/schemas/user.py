from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from classsync.core.config import settings


class Role(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


def check_password_length(value: str) -> str:
    # letto a ogni validazione: la soglia segue la configurazione corrente
    if len(value) < settings.min_password_length:
        raise ValueError(f"Password must be at least {settings.min_password_length} characters")
    return value


class UserBase(BaseModel):
    name: str = Field(min_length=2, max_length=50)
    email: EmailStr

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be between 2 and 50 characters")
        return v


class UserRegister(UserBase):
    password: str
    role: Role = Role.STUDENT

    @field_validator("password")
    @classmethod
    def _password_length(cls, v: str) -> str:
        return check_password_length(v)


class UserCreate(UserRegister):
    """Creazione da parte di un admin: qualsiasi ruolo, admin compreso."""


class User(BaseModel):
    id: str
    name: str
    email: str
    passwordHash: str
    role: Role
    isActive: bool = True
    lastLogin: Optional[datetime] = None
    createdAt: datetime


class UserPublic(BaseModel):
    id: str
    name: str
    email: str
    role: Role
    isActive: bool
    lastLogin: Optional[datetime] = None
    createdAt: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserPublic":
        return cls(**user.model_dump(exclude={"passwordHash"}))


class UserSummary(BaseModel):
    id: str
    name: str
    email: str
    role: Role


class UserFilter(BaseModel):
    role: Optional[Role] = None
    isActive: Optional[bool] = None
    search: Optional[str] = None
    ids: Optional[List[str]] = None
    createdSince: Optional[datetime] = None
    lastLoginSince: Optional[datetime] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class ChangePasswordRequest(BaseModel):
    currentPassword: str
    newPassword: str

    @field_validator("currentPassword", "newPassword")
    @classmethod
    def _password_length(cls, v: str) -> str:
        return check_password_length(v)


class StatusUpdate(BaseModel):
    isActive: bool


class RoleUpdate(BaseModel):
    role: Role
