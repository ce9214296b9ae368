"""Application service: resolve who is acting.

Two independent, separately cached steps: identity lookup, then role
lookup.  A role lookup that fails or finds nothing yields CLIENT, the
least-privileged role.
"""

from __future__ import annotations

import logging

from stitchline.domain.exceptions import PermissionDeniedError
from stitchline.domain.gateway.identity import IdentityProvider, RoleDirectory, RoleGrant
from stitchline.domain.model.session import Identity, Session
from stitchline.domain.model.staff import UserRole

logger = logging.getLogger(__name__)

DEFAULT_GRANT = RoleGrant(role=UserRole.CLIENT)


class SessionResolver:

    def __init__(self, identities: IdentityProvider, roles: RoleDirectory) -> None:
        self._identities = identities
        self._roles = roles
        self._identity_cache: dict[str, Identity] = {}
        self._role_cache: dict[str, RoleGrant] = {}

    async def resolve(self, token: str) -> Session:
        identity = await self.identity(token)
        grant = await self.role(identity)
        return Session(identity=identity, role=grant.role, staff_id=grant.staff_id)

    async def identity(self, token: str) -> Identity:
        if token not in self._identity_cache:
            identity = await self._identities.resolve(token)
            if identity is None:
                raise PermissionDeniedError("Unknown session; please sign in again")
            self._identity_cache[token] = identity
        return self._identity_cache[token]

    async def role(self, identity: Identity) -> RoleGrant:
        key = identity.subject_id
        if key in self._role_cache:
            return self._role_cache[key]
        try:
            grant = await self._roles.role_for(identity)
        except Exception as exc:
            # Not cached: the next resolve retries the lookup.
            logger.warning("Role lookup failed for %s, using CLIENT: %s", key, exc)
            return DEFAULT_GRANT
        self._role_cache[key] = grant or DEFAULT_GRANT
        return self._role_cache[key]

    def forget(self, token: str | None = None) -> None:
        """Drop cached lookups (all of them when *token* is None)."""
        if token is None:
            self._identity_cache.clear()
            self._role_cache.clear()
            return
        identity = self._identity_cache.pop(token, None)
        if identity is not None:
            self._role_cache.pop(identity.subject_id, None)
