from __future__ import annotations

from typing import Any

import requests


def _normalize_enforce_payload(subject: str, obj: str, action: str) -> dict[str, Any]:
    return {
        "subject": str(subject),
        "object": str(obj),
        "action": str(action).upper(),
    }


def _allowed_from_body(body: Any) -> bool:
    if not isinstance(body, dict):
        raise requests.RequestException("Decision engine returned a non-object JSON payload.")
    allowed = body.get("allowed")
    if not isinstance(allowed, bool):
        raise requests.RequestException(
            "Decision engine payload missing boolean field 'allowed'."
        )
    return allowed


class RemoteEnforcer:
    """
    Enforcer backed by an external policy decision service.

    POST <base_url>/enforce {"subject", "object", "action"} -> {"allowed": bool}.
    Transport and payload errors raise requests.RequestException.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 5,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def post_enforce(self, subject: str, obj: str, action: str) -> requests.Response:
        response = self.session.post(
            f"{self.base_url}/enforce",
            json=_normalize_enforce_payload(subject, obj, action),
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response

    def enforce(self, subject: str, obj: str, action: str) -> bool:
        response = self.post_enforce(subject, obj, action)
        try:
            body = response.json()
        except ValueError as exc:
            raise requests.RequestException("Decision engine returned invalid JSON.") from exc
        return _allowed_from_body(body)
