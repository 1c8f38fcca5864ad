import math
from typing import Any, Dict, Optional


def pagination(page: int, limit: int, total: int) -> Dict[str, int]:
    return {
        "current": page,
        "pages": math.ceil(total / limit) if limit else 0,
        "total": total,
        "limit": limit,
    }


def ok(
    data: Optional[Dict[str, Any]] = None,
    message: Optional[str] = None,
    page: Optional[Dict[str, int]] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if page is not None:
        body["pagination"] = page
    return body


def fail(message: str, errors: Optional[list] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return body
