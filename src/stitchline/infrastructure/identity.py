"""Identity and role lookup against the local data.

The token is the acting user's email.  Staff are identified by the
staff directory; anyone else with at least one order is a customer.
"""

from __future__ import annotations

from stitchline.domain.gateway.identity import IdentityProvider, RoleDirectory, RoleGrant
from stitchline.domain.model.session import Identity
from stitchline.domain.repository.order_repository import OrderRepository
from stitchline.domain.repository.staff_repository import StaffRepository


class EmailIdentityProvider(IdentityProvider):

    def __init__(self, staff_repo: StaffRepository, order_repo: OrderRepository) -> None:
        self._staff_repo = staff_repo
        self._order_repo = order_repo

    async def resolve(self, token: str) -> Identity | None:
        email = token.strip().lower()
        if not email:
            return None
        member = await self._staff_repo.get_by_email(email)
        if member is not None:
            return Identity(subject_id=f"staff:{member.id}", email=email, name=member.name)
        orders = await self._order_repo.list_by_customer(email)
        if orders:
            return Identity(
                subject_id=orders[0].customer_id or f"customer:{email}",
                email=email,
                name=orders[0].customer_name,
            )
        return None


class StaffRoleDirectory(RoleDirectory):

    def __init__(self, staff_repo: StaffRepository) -> None:
        self._staff_repo = staff_repo

    async def role_for(self, identity: Identity) -> RoleGrant | None:
        member = await self._staff_repo.get_by_email(identity.email)
        if member is None:
            return None
        return RoleGrant(role=member.role, staff_id=member.id)
