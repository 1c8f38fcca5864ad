from fastapi import APIRouter

from classsync.core.responses import ok
from classsync.routers.v1.deps import UserDep, UserRepoDep
from classsync.schemas.user import ChangePasswordRequest
from classsync.services.user_service import UserService

router = APIRouter(prefix="/users")


@router.put("/change-password")
async def change_password_endpoint(data: ChangePasswordRequest, user: UserDep, users: UserRepoDep):
    await UserService.change_password(data, user, users)
    return ok(message="Password updated successfully")
