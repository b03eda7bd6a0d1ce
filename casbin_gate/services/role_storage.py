from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any


class StoredRolesKind(str, enum.Enum):
    ABSENT = "absent"
    STRINGS = "strings"
    MIXED = "mixed"


@dataclass(frozen=True)
class StoredRoles:
    kind: StoredRolesKind
    roles: tuple[str, ...] = field(default_factory=tuple)


_ABSENT = StoredRoles(kind=StoredRolesKind.ABSENT)


def classify_stored_roles(value: Any) -> StoredRoles:
    # A bare string is a value, not a role sequence.
    if not isinstance(value, (list, tuple)):
        return _ABSENT
    if all(isinstance(item, str) for item in value):
        return StoredRoles(kind=StoredRolesKind.STRINGS, roles=tuple(value))
    return StoredRoles(
        kind=StoredRolesKind.MIXED,
        roles=tuple(item for item in value if isinstance(item, str)),
    )


def read_stored_roles(state: Any, key: str) -> StoredRoles:
    """Read roles previously stored on ``request.state`` under ``key``."""
    return classify_stored_roles(getattr(state, key, None))
