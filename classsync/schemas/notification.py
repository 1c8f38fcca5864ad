from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class NotificationType(str, Enum):
    ASSIGNMENT = "assignment"
    DEADLINE = "deadline"
    SYSTEM = "system"


class RelatedType(str, Enum):
    ASSIGNMENT = "assignment"
    SUBMISSION = "submission"


class Notification(BaseModel):
    id: str
    userId: str
    title: str
    message: str
    type: NotificationType = NotificationType.SYSTEM
    read: bool = False
    relatedId: Optional[str] = None
    relatedType: Optional[RelatedType] = None
    createdAt: datetime


class NotificationFilter(BaseModel):
    userId: Optional[str] = None
    unreadOnly: bool = False
