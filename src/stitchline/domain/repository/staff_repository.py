"""Abstract repository for staff members."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stitchline.domain.model.staff import StaffMember, UserRole


class StaffRepository(ABC):

    @abstractmethod
    async def list_all(self) -> list[StaffMember]:
        """Return every staff member, in a stable order."""

    async def list_by_role(self, role: UserRole) -> list[StaffMember]:
        return [member for member in await self.list_all() if member.role == role]

    async def get_by_email(self, email: str) -> StaffMember | None:
        wanted = email.strip().lower()
        for member in await self.list_all():
            if member.email and member.email.lower() == wanted:
                return member
        return None

    @abstractmethod
    async def save(self, member: StaffMember) -> None:
        """Persist a new or updated staff member."""
