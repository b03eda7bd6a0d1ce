from __future__ import annotations

from collections.abc import Callable, Iterable
from fnmatch import fnmatchcase
from typing import Any

from pydantic import BaseModel, ConfigDict
from starlette.requests import Request

from casbin_gate.core.audit_logging import audit_failure, audit_success
from casbin_gate.core.config import settings

DEFAULT_CONTEXT_KEY = "roles"
DEFAULT_ROLE = "any"
DEFAULT_ROLES_HEADER = "X-Roles"
DEFAULT_FORBIDDEN_MESSAGE = "Access to this resource has been restricted"


class MissingEnforcerError(RuntimeError):
    pass


def default_skipper(request: Request) -> bool:
    return False


def path_skipper(patterns: Iterable[str]) -> Callable[[Request], bool]:
    normalized = [p.strip() for p in patterns if p and p.strip()]

    def _skip(request: Request) -> bool:
        path = request.url.path
        return any(fnmatchcase(path, pattern) for pattern in normalized)

    return _skip


class CasbinConfig(BaseModel):
    """
    Options for the casbin gate.

    Fields left at None / "" are filled in by `resolve_defaults`. Callables may
    be plain functions or coroutine functions.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    # (request) -> bool; True bypasses enforcement.
    skipper: Callable[..., Any] | None = None
    # Any object exposing enforce(subject, object, action).
    enforcer: Any = None
    context_key: str = ""
    default_role: str = ""
    enable_roles_header: bool = False
    roles_header: str = ""
    # (header_text) -> list[str]
    roles_header_func: Callable[..., Any] | None = None
    # (request) -> list[str]; takes precedence over state and header lookup.
    roles_func: Callable[..., Any] | None = None
    forbidden_message: str = ""
    # (role, obj, act) on grant / (roles, obj, act) on denial.
    success_func: Callable[..., Any] | None = None
    failure_func: Callable[..., Any] | None = None


def resolve_defaults(config: CasbinConfig) -> CasbinConfig:
    if config.enforcer is None:
        raise MissingEnforcerError("casbin gate requires an enforcer")

    updates: dict[str, Any] = {}
    if config.skipper is None:
        updates["skipper"] = default_skipper
    if not config.context_key:
        updates["context_key"] = DEFAULT_CONTEXT_KEY
    if not config.default_role:
        updates["default_role"] = DEFAULT_ROLE
    if not config.roles_header:
        updates["roles_header"] = DEFAULT_ROLES_HEADER
    if not config.forbidden_message:
        updates["forbidden_message"] = DEFAULT_FORBIDDEN_MESSAGE
    if not updates:
        return config
    return config.model_copy(update=updates)


def config_from_settings(enforcer: Any, **overrides: Any) -> CasbinConfig:
    skip_patterns = (settings.CASBIN_SKIP_PATHS or "").split(",")
    options: dict[str, Any] = {
        "enforcer": enforcer,
        "skipper": path_skipper(skip_patterns),
        "context_key": settings.CASBIN_CONTEXT_KEY,
        "default_role": settings.CASBIN_DEFAULT_ROLE,
        "enable_roles_header": settings.CASBIN_ROLES_HEADER_ENABLED,
        "roles_header": settings.CASBIN_ROLES_HEADER,
        "forbidden_message": settings.CASBIN_FORBIDDEN_MESSAGE,
        "success_func": audit_success,
        "failure_func": audit_failure,
    }
    options.update(overrides)
    return resolve_defaults(CasbinConfig(**options))
