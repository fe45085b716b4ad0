"""Roles & Identity — the resolved current user and its privilege level.

Invariants:
    - Lower role value = higher privilege
    - Admin area requires an identity AND role <= CONTRIBUTOR
"""

from dataclasses import dataclass
from enum import IntEnum


class Role(IntEnum):
    ADMIN = 0
    EDITOR = 10
    CONTRIBUTOR = 100
    SUBSCRIBER = 1000
    GUEST = 10000000


# Highest role value still admitted into the manage area.
MANAGE_ROLE_THRESHOLD = Role.CONTRIBUTOR


@dataclass(frozen=True)
class Identity:
    """Current user attached to a request."""
    id: str
    name: str
    email: str = ""
    role: Role = Role.SUBSCRIBER

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": int(self.role),
        }


def can_manage(identity: Identity | None) -> bool:
    return identity is not None and identity.role <= MANAGE_ROLE_THRESHOLD
