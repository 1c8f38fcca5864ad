from fastapi import APIRouter, status

from classsync.core.responses import ok
from classsync.routers.v1.deps import UserDep, UserRepoDep
from classsync.schemas.user import LoginRequest, UserPublic, UserRegister
from classsync.services.auth_service import AuthService

router = APIRouter(prefix="/auth")


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register_endpoint(data: UserRegister, users: UserRepoDep):
    user = await AuthService.register(data, users)
    return ok({"user": UserPublic.from_user(user)}, message="User registered successfully")


@router.post("/login")
async def login_endpoint(data: LoginRequest, users: UserRepoDep):
    token, user = await AuthService.login(data, users)
    return ok({"token": token, "user": UserPublic.from_user(user)}, message="Login successful")


@router.get("/me")
async def me_endpoint(user: UserDep, users: UserRepoDep):
    found = await AuthService.me(user, users)
    return ok({"user": UserPublic.from_user(found)})
