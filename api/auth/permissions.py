"""
Capability checks.

Every admin-gated or ownership-gated operation asks this module for a
decision instead of comparing role strings itself. A decision is either
`Allowed()` or `Denied(reason)`; callers turn a denial into a 403.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

ROLE_USER = "user"
ROLE_ADMIN = "admin"


@dataclass(frozen=True)
class Identity:
    """
    The authenticated caller.

    `is_admin` is only True once the persisted role has been checked
    (see `dependencies.require_admin` / `dependencies.get_privileged_identity`).
    """

    user_id: str
    is_admin: bool = False


@dataclass(frozen=True)
class Allowed:
    pass


@dataclass(frozen=True)
class Denied:
    reason: str


Decision = Union[Allowed, Denied]


def check_admin(role: str | None) -> Decision:
    # Unknown users have no role and are denied like any non-admin.
    if role != ROLE_ADMIN:
        return Denied("Admin role required.")
    return Allowed()


def check_owner_or_admin(identity: Identity, *, owner_id: str) -> Decision:
    if identity.is_admin:
        return Allowed()
    if str(owner_id).strip() == identity.user_id:
        return Allowed()
    return Denied("Not allowed to delete this adoption request.")
