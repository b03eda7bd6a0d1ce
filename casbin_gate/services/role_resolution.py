from __future__ import annotations

import logging
from collections.abc import Iterable

from starlette.requests import Request

from casbin_gate.core.awaitables import maybe_await
from casbin_gate.schemas.casbin_config import CasbinConfig
from casbin_gate.services.role_storage import StoredRolesKind, read_stored_roles

logger = logging.getLogger(__name__)


def parse_roles_header(value: str) -> list[str]:
    return [piece.strip() for piece in value.split(",")]


def apply_default_role(roles: Iterable[str] | None, default_role: str) -> list[str]:
    resolved = list(roles or [])
    if not resolved:
        return [default_role]
    return resolved


async def _roles_from_header(request: Request, config: CasbinConfig) -> list[str]:
    raw_header = request.headers.get(config.roles_header) or ""
    if not raw_header:
        raw_header = config.default_role
    if config.roles_header_func is not None:
        parsed = await maybe_await(config.roles_header_func(raw_header))
        return list(parsed or [])
    return parse_roles_header(raw_header)


async def resolve_roles(request: Request, config: CasbinConfig) -> list[str]:
    """
    Resolve the candidate roles for a request.

    Precedence: custom resolver, then request.state, then the roles header
    (only when state yielded nothing and header extraction is enabled).
    Errors raised by custom functions propagate unchanged.
    """
    if config.roles_func is not None:
        roles = await maybe_await(config.roles_func(request))
        return list(roles or [])

    stored = read_stored_roles(request.state, config.context_key)
    if stored.kind is StoredRolesKind.MIXED and not stored.roles:
        logger.debug(
            "casbin_state_roles_filtered_empty key=%s", config.context_key
        )
    roles = list(stored.roles)

    if not roles and config.enable_roles_header:
        roles = await _roles_from_header(request, config)
    return roles


async def resolve_effective_roles(request: Request, config: CasbinConfig) -> list[str]:
    roles = await resolve_roles(request, config)
    return apply_default_role(roles, config.default_role)
