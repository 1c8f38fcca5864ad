"""
Regole di accesso per ruolo e proprietario della risorsa.

Funzioni pure: nessun accesso al database. I controller caricano la risorsa,
chiedono una decisione e con ``enforce`` trasformano un diniego nell'errore
giusto (401 se manca l'identità, 403 se ruolo/proprietario non vanno bene).
"""
from datetime import datetime
from enum import Enum
from typing import Optional, assert_never

from classsync.core import errors
from classsync.schemas.context import UserContext
from classsync.schemas.user import Role


class Action(str, Enum):
    LIST = "list"
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class Resource(str, Enum):
    ASSIGNMENT = "assignment"
    SUBMISSION = "submission"
    NOTIFICATION = "notification"
    USER = "user"


class Decision(str, Enum):
    ALLOW = "allow"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


def _is_owner(user: UserContext, owner_id: Optional[str]) -> bool:
    return owner_id is not None and owner_id == user.user_id


def _teacher_decision(user: UserContext, action: Action, resource: Resource, owner_id: Optional[str]) -> Decision:
    if resource is Resource.ASSIGNMENT:
        if action in (Action.LIST, Action.READ, Action.CREATE):
            return Decision.ALLOW
        # update/delete solo sui propri assignment
        return Decision.ALLOW if _is_owner(user, owner_id) else Decision.FORBIDDEN
    if resource is Resource.SUBMISSION:
        # owner_id qui è il creatore dell'assignment a cui appartiene la consegna
        if action is Action.LIST:
            return Decision.ALLOW
        if action in (Action.READ, Action.UPDATE):
            return Decision.ALLOW if _is_owner(user, owner_id) else Decision.FORBIDDEN
        return Decision.FORBIDDEN
    if resource in (Resource.NOTIFICATION, Resource.USER):
        if action is Action.CREATE:
            return Decision.FORBIDDEN
        return Decision.ALLOW if _is_owner(user, owner_id) else Decision.FORBIDDEN
    return Decision.FORBIDDEN


def _student_decision(user: UserContext, action: Action, resource: Resource, owner_id: Optional[str]) -> Decision:
    if resource is Resource.ASSIGNMENT:
        return Decision.ALLOW if action in (Action.LIST, Action.READ) else Decision.FORBIDDEN
    if resource is Resource.SUBMISSION:
        if action in (Action.LIST, Action.CREATE):
            return Decision.ALLOW
        if action in (Action.READ, Action.UPDATE):
            return Decision.ALLOW if _is_owner(user, owner_id) else Decision.FORBIDDEN
        return Decision.FORBIDDEN
    if resource in (Resource.NOTIFICATION, Resource.USER):
        if action is Action.CREATE:
            return Decision.FORBIDDEN
        return Decision.ALLOW if _is_owner(user, owner_id) else Decision.FORBIDDEN
    return Decision.FORBIDDEN


def decide(
    user: Optional[UserContext],
    action: Action,
    resource: Resource,
    owner_id: Optional[str] = None,
) -> Decision:
    if user is None:
        return Decision.UNAUTHENTICATED
    role = user.role
    if role is Role.ADMIN:
        return Decision.ALLOW
    if role is Role.TEACHER:
        return _teacher_decision(user, action, resource, owner_id)
    if role is Role.STUDENT:
        return _student_decision(user, action, resource, owner_id)
    assert_never(role)


def enforce(
    user: Optional[UserContext],
    action: Action,
    resource: Resource,
    owner_id: Optional[str] = None,
    message: Optional[str] = None,
) -> UserContext:
    decision = decide(user, action, resource, owner_id)
    if decision is Decision.UNAUTHENTICATED:
        raise errors.Unauthenticated("Authentication required.")
    if decision is Decision.FORBIDDEN:
        raise errors.Forbidden(message or "Access denied")
    return user


def require_role(user: Optional[UserContext], *roles: Role) -> UserContext:
    if user is None:
        raise errors.Unauthenticated("Authentication required.")
    if user.role not in roles:
        names = " or ".join(r.value.capitalize() for r in roles)
        raise errors.Forbidden(f"Access denied. {names} role required.")
    return user


# --- regole di auto-protezione dell'admin ---

def check_role_change(actor: UserContext, target_id: str, new_role: Role) -> None:
    if actor.user_id == target_id and new_role is not Role.ADMIN:
        raise errors.ValidationError("Cannot change your own admin role")


def check_user_delete(actor: UserContext, target_id: str) -> None:
    if actor.user_id == target_id:
        raise errors.ValidationError("Cannot delete your own account")


def check_status_change(actor: UserContext, target_id: str, is_active: bool) -> None:
    if actor.user_id == target_id and not is_active:
        raise errors.ValidationError("Cannot deactivate your own account")


# --- finestra di consegna ---

def submission_window_open(due_date: datetime, now: datetime, allow_late: bool = False) -> bool:
    return allow_late or now <= due_date
