from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from casbin_gate.api.middleware.casbin import add_casbin_middleware
from casbin_gate.schemas.casbin_config import config_from_settings
from casbin_gate.services.enforcer_factory import get_default_enforcer


def create_app(enforcer: Any = None, **config_overrides: Any) -> FastAPI:
    app = FastAPI(title="casbin gate")

    if enforcer is None:
        enforcer = get_default_enforcer()
    app.state.casbin_config = add_casbin_middleware(
        app, config_from_settings(enforcer, **config_overrides)
    )

    @app.get("/")
    def index():
        return "ok"

    @app.api_route("/user", methods=["GET", "POST", "PUT", "DELETE"])
    def user():
        return "ok"

    @app.get("/admin")
    def admin():
        return "ok"

    @app.get("/health")
    def health():
        return {"status": "up"}

    return app


app = create_app()
