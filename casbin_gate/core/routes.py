from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from starlette.requests import Request
from starlette.routing import BaseRoute, Match, Mount


def _match_routes(
    routes: Sequence[BaseRoute],
    scope: dict[str, Any],
    prefix: str = "",
) -> tuple[Match, str | None]:
    partial: str | None = None
    for route in routes:
        match, child_scope = route.matches(scope)
        if match is Match.NONE:
            continue
        path = getattr(route, "path", None)
        if path is None:
            continue
        if isinstance(route, Mount):
            nested_match, nested_path = _match_routes(
                route.routes, {**scope, **child_scope}, prefix + path
            )
            if nested_match is Match.FULL:
                return nested_match, nested_path
            if nested_match is Match.PARTIAL and partial is None:
                partial = nested_path
            continue
        if match is Match.FULL:
            return Match.FULL, prefix + path
        if partial is None:
            partial = prefix + path
    if partial is not None:
        return Match.PARTIAL, partial
    return Match.NONE, None


def resolve_route_path(request: Request) -> str:
    """
    Route template for the request, e.g. ``/users/{user_id}``.

    Falls back to the literal URL path when no route matches.
    """
    route = request.scope.get("route")
    route_path = getattr(route, "path", None)
    if route_path:
        return route_path

    app = request.scope.get("app")
    router = getattr(app, "router", None)
    routes = getattr(router, "routes", None)
    if routes:
        _, matched = _match_routes(routes, request.scope)
        if matched:
            return matched
    return request.url.path
