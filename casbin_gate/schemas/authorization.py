from __future__ import annotations

from pydantic import BaseModel, Field


class AuthorizationDecision(BaseModel):
    subject_roles: list[str] = Field(default_factory=list)
    object: str
    action: str
    authorized: bool = False
    role: str | None = None


class ForbiddenResponse(BaseModel):
    message: str
