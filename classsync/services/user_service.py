import logging

from classsync.core import errors
from classsync.core.security import hash_password, verify_password
from classsync.database.user_repo import UserRepo
from classsync.schemas.context import UserContext
from classsync.schemas.user import ChangePasswordRequest
from classsync.services.access_policy import Action, Resource, enforce

logger = logging.getLogger("classsync.users")


class UserService:

    @staticmethod
    async def change_password(data: ChangePasswordRequest, user: UserContext, users: UserRepo) -> None:
        if data.currentPassword == data.newPassword:
            raise errors.ValidationError("New password must be different from current password")

        found = await users.find_one(user.user_id)
        if found is None:
            raise errors.NotFound("User not found")
        enforce(user, Action.UPDATE, Resource.USER, owner_id=found.id)

        if not verify_password(found.passwordHash, data.currentPassword):
            raise errors.ValidationError("Current password is incorrect")

        await users.update(found.id, {"passwordHash": hash_password(data.newPassword)})
        logger.info("password changed for %s", found.id)
