from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from casbin_gate.core.config import settings

logger = logging.getLogger("casbin_gate.audit")


def _audit_sample_rate() -> float:
    try:
        value = float(settings.AUTHZ_AUDIT_SAMPLE_RATE)
    except (TypeError, ValueError):
        value = 1.0
    return max(0.0, min(1.0, value))


def _should_emit_audit_log() -> bool:
    if not settings.AUTHZ_AUDIT_ENABLED:
        return False
    sample_rate = _audit_sample_rate()
    if sample_rate <= 0:
        return False
    if sample_rate >= 1:
        return True
    return random.random() <= sample_rate


def audit_info(
    log: logging.Logger,
    msg: str,
    *args,
    **kwargs,
) -> None:
    if _should_emit_audit_log():
        log.info(msg, *args, **kwargs)


def audit_success(role: str, obj: str, act: str) -> None:
    audit_info(
        logger,
        "casbin_decision outcome=allow role=%s obj=%s act=%s",
        role,
        obj,
        act,
    )


def audit_failure(roles: Sequence[str], obj: str, act: str) -> None:
    audit_info(
        logger,
        "casbin_decision outcome=deny roles=%s obj=%s act=%s",
        list(roles),
        obj,
        act,
    )
