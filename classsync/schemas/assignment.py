from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def as_utc(value: datetime) -> datetime:
    # le date senza fuso arrivano dal client: le consideriamo UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class AssignmentStatusFilter(str, Enum):
    ACTIVE = "active"
    OVERDUE = "overdue"
    INACTIVE = "inactive"
    ALL = "all"


class AssignmentCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=1000)
    dueDate: datetime
    instructions: Optional[str] = Field(default=None, max_length=2000)
    attachments: List[str] = []

    @field_validator("title", "description")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("dueDate")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class AssignmentUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=1, max_length=1000)
    dueDate: Optional[datetime] = None
    instructions: Optional[str] = Field(default=None, max_length=2000)
    attachments: Optional[List[str]] = None

    @field_validator("title", "description")
    @classmethod
    def _non_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("dueDate")
    @classmethod
    def _utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else None


class Assignment(BaseModel):
    id: str
    title: str
    description: str
    dueDate: datetime
    instructions: Optional[str] = None
    isActive: bool = True
    createdBy: str
    attachments: List[str] = []
    createdAt: datetime
    updatedAt: Optional[datetime] = None


class AssignmentSummary(BaseModel):
    id: str
    title: str
    dueDate: datetime


class AssignmentFilter(BaseModel):
    createdBy: Optional[str] = None
    isActive: Optional[bool] = None
    search: Optional[str] = None
    ids: Optional[List[str]] = None
    dueAfter: Optional[datetime] = None
    dueBefore: Optional[datetime] = None
    createdSince: Optional[datetime] = None
