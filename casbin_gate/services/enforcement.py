from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from casbin_gate.core.awaitables import maybe_await
from casbin_gate.schemas.authorization import AuthorizationDecision
from casbin_gate.schemas.casbin_config import CasbinConfig

logger = logging.getLogger(__name__)


@dataclass
class EnforcementError(Exception):
    role: str
    object: str
    action: str
    message: str = "error enforcing"

    def __str__(self) -> str:
        return f"{self.message}: sub={self.role} obj={self.object} act={self.action}"


async def enforce_roles(
    enforcer: Any,
    roles: Sequence[str],
    obj: str,
    act: str,
) -> AuthorizationDecision:
    """
    Ask the enforcer about each role in order; the first grant wins.

    An engine failure aborts the loop and is raised as EnforcementError,
    remaining roles are not tried.
    """
    for role in roles:
        try:
            allowed = await maybe_await(enforcer.enforce(role, obj, act))
        except Exception as exc:
            raise EnforcementError(role=role, object=obj, action=act) from exc
        if allowed:
            return AuthorizationDecision(
                subject_roles=list(roles),
                object=obj,
                action=act,
                authorized=True,
                role=role,
            )
    return AuthorizationDecision(
        subject_roles=list(roles),
        object=obj,
        action=act,
        authorized=False,
    )


async def notify_observers(config: CasbinConfig, decision: AuthorizationDecision) -> None:
    # Observer results are ignored; they cannot change the decision.
    if decision.authorized:
        if config.success_func is not None:
            await maybe_await(
                config.success_func(decision.role, decision.object, decision.action)
            )
        return
    if config.failure_func is not None:
        await maybe_await(
            config.failure_func(
                list(decision.subject_roles), decision.object, decision.action
            )
        )


async def authorize(
    config: CasbinConfig,
    roles: Sequence[str],
    obj: str,
    act: str,
) -> AuthorizationDecision:
    decision = await enforce_roles(config.enforcer, roles, obj, act)
    logger.debug(
        "casbin_decision authorized=%s role=%s roles=%s obj=%s act=%s",
        decision.authorized,
        decision.role or "-",
        decision.subject_roles,
        obj,
        act,
    )
    await notify_observers(config, decision)
    return decision
