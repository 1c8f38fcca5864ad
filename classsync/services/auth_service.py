import logging
import uuid
from datetime import datetime, timezone
from typing import Annotated, Callable, Optional, Tuple

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from classsync.core import errors
from classsync.core.deps import get_user_repo
from classsync.core.security import create_access_token, decode_access_token, hash_password, verify_password
from classsync.database.user_repo import UserRepo
from classsync.schemas.context import UserContext
from classsync.schemas.user import LoginRequest, Role, User, UserRegister
from classsync.services.access_policy import require_role

logger = logging.getLogger("classsync.auth")

bearer_scheme = HTTPBearer(auto_error=False)


def create_user_id() -> str:
    return f"us-{uuid.uuid4().hex[:12]}"


def new_user(name: str, email: str, password: str, role: Role) -> User:
    return User(
        id=create_user_id(),
        name=name,
        email=email.lower(),
        passwordHash=hash_password(password),
        role=role,
        isActive=True,
        lastLogin=None,
        createdAt=datetime.now(timezone.utc),
    )


class AuthService:

    @staticmethod
    async def get_current_user(
        credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
        users: Annotated[UserRepo, Depends(get_user_repo)],
    ) -> UserContext:
        if credentials is None or not credentials.credentials:
            raise errors.Unauthenticated("Access denied. No token provided.")
        claims = decode_access_token(credentials.credentials)

        # il ruolo vale quello salvato ora, non quello scritto nel token
        user = await users.find_one(claims["id"])
        if user is None or not user.isActive:
            raise errors.Unauthenticated("User not found or inactive")
        return UserContext(user_id=user.id, email=user.email, role=user.role)

    @staticmethod
    def require_roles(*roles: Role) -> Callable:
        async def dependency(
            user: Annotated[UserContext, Depends(AuthService.get_current_user)],
        ) -> UserContext:
            return require_role(user, *roles)

        return dependency

    @staticmethod
    async def register(data: UserRegister, users: UserRepo) -> User:
        if data.role is Role.ADMIN:
            raise errors.ValidationError("Role must be either student or teacher")
        if await users.find_by_email(data.email):
            raise errors.Conflict("User already exists with this email")
        user = new_user(data.name, data.email, data.password, data.role)
        await users.create(user)
        logger.info("registered user %s (%s)", user.id, user.role.value)
        return user

    @staticmethod
    async def login(data: LoginRequest, users: UserRepo) -> Tuple[str, User]:
        user = await users.find_by_email(data.email)
        if user is None or not verify_password(user.passwordHash, data.password):
            logger.info("login failed for %s", data.email.lower())
            raise errors.Unauthenticated("Invalid credentials")
        if not user.isActive:
            raise errors.Forbidden("Account is deactivated")

        updated = await users.update(user.id, {"lastLogin": datetime.now(timezone.utc)})
        user = updated or user
        logger.info("login ok for %s", user.id)
        return create_access_token(user), user

    @staticmethod
    async def me(user: UserContext, users: UserRepo) -> User:
        found = await users.find_one(user.user_id)
        if found is None:
            raise errors.NotFound("User not found")
        return found
