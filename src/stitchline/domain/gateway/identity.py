"""Identity and role lookup, resolved as two independent steps."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from stitchline.domain.model.session import Identity
from stitchline.domain.model.staff import UserRole


@dataclass(frozen=True)
class RoleGrant:
    role: UserRole
    staff_id: str | None = None


class IdentityProvider(ABC):

    @abstractmethod
    async def resolve(self, token: str) -> Identity | None:
        """Map a session token to an identity, or None if unknown."""


class RoleDirectory(ABC):

    @abstractmethod
    async def role_for(self, identity: Identity) -> RoleGrant | None:
        """Return the identity's role, or None if it has none on record."""
