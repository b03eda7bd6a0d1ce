from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from http import HTTPStatus

from fastapi import HTTPException, Request

from casbin_gate.core.awaitables import maybe_await
from casbin_gate.core.routes import resolve_route_path
from casbin_gate.schemas.authorization import AuthorizationDecision, ForbiddenResponse
from casbin_gate.schemas.casbin_config import CasbinConfig, resolve_defaults
from casbin_gate.services.enforcement import EnforcementError, authorize
from casbin_gate.services.role_resolution import resolve_effective_roles

logger = logging.getLogger(__name__)


def require_casbin_access(
    config: CasbinConfig,
) -> Callable[[Request], Awaitable[AuthorizationDecision | None]]:
    """
    Router-level policy gate:
    - same skip / role / enforce protocol as CasbinMiddleware
    - runs after routing, so the object is the matched route template

    Usage: ``APIRouter(dependencies=[Depends(require_casbin_access(config))])``.
    """
    resolved = resolve_defaults(config)

    async def enforce_casbin_access(request: Request) -> AuthorizationDecision | None:
        if await maybe_await(resolved.skipper(request)):
            return None

        roles = await resolve_effective_roles(request, resolved)
        obj = resolve_route_path(request)
        act = request.method
        try:
            decision = await authorize(resolved, roles, obj, act)
        except EnforcementError as exc:
            logger.exception(
                "casbin_enforce_error role=%s obj=%s act=%s", exc.role, obj, act
            )
            raise HTTPException(
                status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
                detail=HTTPStatus.INTERNAL_SERVER_ERROR.phrase,
            ) from exc

        if not decision.authorized:
            raise HTTPException(
                status_code=HTTPStatus.FORBIDDEN,
                detail=ForbiddenResponse(message=resolved.forbidden_message).model_dump(),
            )
        return decision

    return enforce_casbin_access
