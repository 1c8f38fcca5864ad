from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class SubmissionStatus(str, Enum):
    SUBMITTED = "submitted"
    LATE = "late"


class SubmissionCreate(BaseModel):
    assignmentId: str = Field(min_length=1)
    text: Optional[str] = None
    files: List[str] = []

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Text cannot be empty")
        return v


class SubmissionUpdate(BaseModel):
    text: Optional[str] = None
    files: Optional[List[str]] = None

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Text cannot be empty")
        return v


class FeedbackUpdate(BaseModel):
    feedback: str = Field(min_length=1, max_length=2000)


class Submission(BaseModel):
    id: str
    assignmentId: str
    studentId: str
    status: SubmissionStatus
    submittedAt: datetime
    files: List[str] = []
    text: Optional[str] = None
    feedback: Optional[str] = None
    createdAt: datetime
    updatedAt: Optional[datetime] = None


class SubmissionFilter(BaseModel):
    assignmentId: Optional[str] = None
    assignmentIds: Optional[List[str]] = None
    studentId: Optional[str] = None
    status: Optional[SubmissionStatus] = None
    createdSince: Optional[datetime] = None
