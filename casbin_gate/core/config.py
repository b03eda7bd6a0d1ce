"""
Centralized runtime configuration for the casbin gate.

Values here feed the demo application and `config_from_settings`; the
middleware itself only ever sees a resolved `CasbinConfig`.

Key compatibility rule:
- Empty string values are treated as "unset" and fall back to the gate's
  built-in defaults (roles / any / X-Roles / restriction notice).
"""

import os
from pathlib import Path

from pydantic import BaseModel

_POLICY_DIR = Path(__file__).resolve().parent / "policy"


def _load_local_env_file() -> None:
    """
    Lightweight .env loader used to keep runtime behavior consistent even when
    the server is started without `--env-file`.

    Precedence:
    - Existing OS environment variables win.
    - .env fills only missing keys.
    """
    current = Path(__file__).resolve()
    project_root = current.parents[2]
    env_path = project_root / ".env"
    if not env_path.exists():
        return

    try:
        lines = env_path.read_text(encoding="utf-8").splitlines()
    except OSError:
        return

    for raw_line in lines:
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.lower().startswith("export "):
            line = line[7:].strip()
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue
        if (value.startswith('"') and value.endswith('"')) or (
            value.startswith("'") and value.endswith("'")
        ):
            value = value[1:-1]
        os.environ.setdefault(key, value)


_load_local_env_file()


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _as_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value.strip())
    except ValueError:
        return default


def _normalize_csv(value: str | None) -> str:
    if value is None:
        return ""
    parts = [p.strip() for p in value.split(",")]
    return ",".join(p for p in parts if p)


class Settings(BaseModel):
    # Casbin model definition (request/policy/role/effect/matchers sections).
    CASBIN_MODEL_PATH: str = os.getenv(
        "CASBIN_MODEL_PATH", str(_POLICY_DIR / "model.conf")
    ).strip()

    # Casbin CSV policy file loaded through FileAdapter.
    CASBIN_POLICY_PATH: str = os.getenv(
        "CASBIN_POLICY_PATH", str(_POLICY_DIR / "policy.csv")
    ).strip()

    # Attribute on request.state where upstream middleware stores resolved roles.
    # Empty => "roles".
    CASBIN_CONTEXT_KEY: str = os.getenv("CASBIN_CONTEXT_KEY", "").strip()

    # Role used when nothing else yields a role. Empty => "any".
    CASBIN_DEFAULT_ROLE: str = os.getenv("CASBIN_DEFAULT_ROLE", "").strip()

    # Header based role extraction:
    # false => only request.state roles (or the default role) are used
    # true  => comma separated roles are read from CASBIN_ROLES_HEADER
    CASBIN_ROLES_HEADER_ENABLED: bool = _as_bool(
        os.getenv("CASBIN_ROLES_HEADER_ENABLED"), False
    )
    # Empty => "X-Roles".
    CASBIN_ROLES_HEADER: str = os.getenv("CASBIN_ROLES_HEADER", "").strip()

    # Message returned in the 403 body. Empty => built-in restriction notice.
    CASBIN_FORBIDDEN_MESSAGE: str = os.getenv("CASBIN_FORBIDDEN_MESSAGE", "").strip()

    # Comma-separated request path patterns that bypass enforcement.
    # Supports fnmatch-style wildcards, e.g.: /health,/docs*,/openapi.json
    CASBIN_SKIP_PATHS: str = _normalize_csv(os.getenv("CASBIN_SKIP_PATHS") or "/health")

    # Optional external policy decision service.
    # Empty => local casbin.Enforcer built from the model/policy paths above.
    CASBIN_REMOTE_ENGINE_URL: str = os.getenv("CASBIN_REMOTE_ENGINE_URL", "").strip()
    CASBIN_REMOTE_ENGINE_TIMEOUT_SEC: float = _as_float(
        os.getenv("CASBIN_REMOTE_ENGINE_TIMEOUT_SEC"), 5.0
    )

    # Audit logging for authorization decisions.
    AUTHZ_AUDIT_ENABLED: bool = _as_bool(os.getenv("AUTHZ_AUDIT_ENABLED"), False)
    # Sampling ratio [0..1] for audit events when enabled.
    # 1.0 => log all, 0.1 => about 10%, 0 => disabled by sampling.
    AUTHZ_AUDIT_SAMPLE_RATE: float = _as_float(
        os.getenv("AUTHZ_AUDIT_SAMPLE_RATE"), 1.0
    )


settings = Settings()
