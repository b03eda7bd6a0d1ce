from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.types import ASGIApp

from casbin_gate.core.awaitables import maybe_await
from casbin_gate.core.routes import resolve_route_path
from casbin_gate.schemas.authorization import ForbiddenResponse
from casbin_gate.schemas.casbin_config import CasbinConfig, resolve_defaults
from casbin_gate.services.enforcement import EnforcementError, authorize
from casbin_gate.services.role_resolution import resolve_effective_roles

logger = logging.getLogger(__name__)


def forbidden_response(message: str) -> JSONResponse:
    return JSONResponse(
        ForbiddenResponse(message=message).model_dump(),
        status_code=HTTPStatus.FORBIDDEN,
    )


def enforcement_error_response() -> PlainTextResponse:
    return PlainTextResponse(
        HTTPStatus.INTERNAL_SERVER_ERROR.phrase,
        status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
    )


class CasbinMiddleware(BaseHTTPMiddleware):
    """
    Authorization gate backed by a casbin-style enforcer.

    Per request: skip check, role resolution, default-role fallback, then one
    enforce(role, route, method) call per role until one grants access.
    Denied requests get a 403 ``{"message": ...}`` body and never reach the
    next handler; enforcer failures become a plain 500.

    The config is resolved here, so a missing enforcer fails when the
    middleware stack is built rather than on a request.
    """

    def __init__(
        self,
        app: ASGIApp,
        config: CasbinConfig | None = None,
        *,
        enforcer: Any = None,
    ) -> None:
        super().__init__(app)
        if config is None:
            config = CasbinConfig(enforcer=enforcer)
        elif enforcer is not None:
            config = config.model_copy(update={"enforcer": enforcer})
        self.config = resolve_defaults(config)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        config = self.config
        if await maybe_await(config.skipper(request)):
            return await call_next(request)

        try:
            roles = await resolve_effective_roles(request, config)
        except HTTPException as exc:
            return await http_exception_handler(request, exc)

        obj = resolve_route_path(request)
        act = request.method
        try:
            decision = await authorize(config, roles, obj, act)
        except EnforcementError as exc:
            logger.exception(
                "casbin_enforce_error role=%s obj=%s act=%s", exc.role, obj, act
            )
            return enforcement_error_response()

        if not decision.authorized:
            logger.info(
                "casbin_forbidden roles=%s obj=%s act=%s",
                decision.subject_roles,
                obj,
                act,
            )
            return forbidden_response(config.forbidden_message)
        return await call_next(request)


def casbin_middleware(enforcer: Any) -> tuple[type[CasbinMiddleware], dict[str, Any]]:
    """Middleware class and options for ``app.add_middleware`` with all defaults."""
    return CasbinMiddleware, {"config": resolve_defaults(CasbinConfig(enforcer=enforcer))}


def add_casbin_middleware(app: Any, config: CasbinConfig) -> CasbinConfig:
    resolved = resolve_defaults(config)
    app.add_middleware(CasbinMiddleware, config=resolved)
    return resolved
