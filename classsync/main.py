# classsync/main.py
from contextlib import asynccontextmanager
import logging
import sys

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorClient
from starlette.exceptions import HTTPException as StarletteHTTPException

from classsync.core.config import DEFAULT_JWT_SECRET, settings
from classsync.core.errors import AppError
from classsync.core.responses import fail
from classsync.database.mongo_assignment import MongoAssignmentRepository
from classsync.database.mongo_notification import MongoNotificationRepository
from classsync.database.mongo_submission import MongoSubmissionRepository
from classsync.database.mongo_user import MongoUserRepository
from classsync.routers.v1 import admin, assignment, auth, health, notification, submission, user

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s :: %(message)s",
    stream=sys.stdout,
)

logger = logging.getLogger("classsync")


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s -> %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=fail(exc.message, exc.errors))

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        errs = [
            {"field": ".".join(str(p) for p in e.get("loc", ())), "message": e.get("msg", "")}
            for e in exc.errors()
        ]
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=fail("Validation failed", errs))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
            message = f"Route {request.url.path} not found"
        return JSONResponse(status_code=exc.status_code, content=fail(message), headers=exc.headers)

    @app.exception_handler(Exception)
    async def unexpected_handler(request: Request, exc: Exception):
        # il dettaglio resta nei log, al client solo un messaggio generico
        logger.exception("Errore non gestito su %s %s", request.method, request.url.path)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=fail("Server error"))


def create_app() -> FastAPI:
    if settings.jwt_secret == DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET non impostato: i token vengono firmati con la chiave di default")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = AsyncIOMotorClient(settings.mongo_uri, uuidRepresentation="standard", tz_aware=True)
        db = client[settings.mongo_db_name]

        repos = {
            "user_repo": MongoUserRepository(db),
            "assignment_repo": MongoAssignmentRepository(db),
            "submission_repo": MongoSubmissionRepository(db),
            "notification_repo": MongoNotificationRepository(db),
        }
        for name, repo in repos.items():
            await repo.ensure_indexes()
            setattr(app.state, name, repo)   # repo disponibili alle routes
        logger.info("MongoDB connesso: %s/%s", settings.mongo_uri, settings.mongo_db_name)

        try:
            yield
        finally:
            client.close()

    app = FastAPI(
        title="ClassSync Assignment Service",
        description="Gestione di assignment, consegne e notifiche per teacher, studenti e admin",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins, allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health.router,       prefix="/api/v1", tags=["health"])
    app.include_router(auth.router,         prefix="/api/v1", tags=["auth"])
    app.include_router(assignment.router,   prefix="/api/v1", tags=["assignments"])
    app.include_router(submission.router,   prefix="/api/v1", tags=["submissions"])
    app.include_router(notification.router, prefix="/api/v1", tags=["notifications"])
    app.include_router(user.router,         prefix="/api/v1", tags=["users"])
    app.include_router(admin.router,        prefix="/api/v1", tags=["admin"])
    return app

app = create_app()
