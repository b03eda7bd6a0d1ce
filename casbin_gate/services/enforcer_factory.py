from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import casbin
from casbin.persist.adapters import FileAdapter

from casbin_gate.core.config import settings
from casbin_gate.services.decision_engine_client import RemoteEnforcer

logger = logging.getLogger(__name__)


def build_enforcer(*, model_path: str | Path, policy_path: str | Path) -> casbin.Enforcer:
    adapter = FileAdapter(str(policy_path))
    enforcer = casbin.Enforcer(str(model_path), adapter)
    enforcer.load_policy()
    return enforcer


@lru_cache(maxsize=1)
def get_default_enforcer() -> Any:
    if settings.CASBIN_REMOTE_ENGINE_URL:
        logger.info("casbin_engine source=remote url=%s", settings.CASBIN_REMOTE_ENGINE_URL)
        return RemoteEnforcer(
            settings.CASBIN_REMOTE_ENGINE_URL,
            timeout_seconds=settings.CASBIN_REMOTE_ENGINE_TIMEOUT_SEC,
        )
    logger.info(
        "casbin_engine source=file model=%s policy=%s",
        settings.CASBIN_MODEL_PATH,
        settings.CASBIN_POLICY_PATH,
    )
    return build_enforcer(
        model_path=settings.CASBIN_MODEL_PATH,
        policy_path=settings.CASBIN_POLICY_PATH,
    )
