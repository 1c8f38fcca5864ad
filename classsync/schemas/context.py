from pydantic import BaseModel

from classsync.schemas.user import Role


class UserContext(BaseModel):
    """Identità del chiamante, ricavata dal token verificato."""

    user_id: str
    email: str
    role: Role
