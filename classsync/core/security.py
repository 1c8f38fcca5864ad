from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import jwt
from jose.exceptions import JOSEError
from werkzeug.security import check_password_hash, generate_password_hash

from classsync.core.config import settings
from classsync.core.errors import Unauthenticated
from classsync.schemas.user import User


def hash_password(raw: str) -> str:
    return generate_password_hash(raw)


def verify_password(password_hash: str, raw: str) -> bool:
    if not password_hash:
        return False
    return check_password_hash(password_hash, raw)


def create_access_token(user: User, expires_minutes: int | None = None) -> str:
    minutes = expires_minutes if expires_minutes is not None else settings.jwt_expire_minutes
    now = datetime.now(timezone.utc)
    claims = {
        "id": user.id,
        "email": user.email,
        "role": user.role.value,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=minutes)).timestamp()),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Verifica firma e scadenza; qualsiasi problema diventa Unauthenticated."""
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JOSEError:
        raise Unauthenticated("Invalid token")
    if not claims.get("id"):
        raise Unauthenticated("Invalid token")
    return claims
