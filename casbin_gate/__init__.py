from casbin_gate.api.deps.casbin_access import require_casbin_access
from casbin_gate.api.middleware.casbin import (
    CasbinMiddleware,
    add_casbin_middleware,
    casbin_middleware,
)
from casbin_gate.schemas.authorization import AuthorizationDecision
from casbin_gate.schemas.casbin_config import (
    DEFAULT_CONTEXT_KEY,
    DEFAULT_FORBIDDEN_MESSAGE,
    DEFAULT_ROLE,
    DEFAULT_ROLES_HEADER,
    CasbinConfig,
    MissingEnforcerError,
    resolve_defaults,
)
from casbin_gate.services.enforcement import EnforcementError

__all__ = [
    "DEFAULT_CONTEXT_KEY",
    "DEFAULT_FORBIDDEN_MESSAGE",
    "DEFAULT_ROLE",
    "DEFAULT_ROLES_HEADER",
    "AuthorizationDecision",
    "CasbinConfig",
    "CasbinMiddleware",
    "EnforcementError",
    "MissingEnforcerError",
    "add_casbin_middleware",
    "casbin_middleware",
    "require_casbin_access",
    "resolve_defaults",
]
