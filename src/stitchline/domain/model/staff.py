"""Staff members and the roles every actor can hold."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class UserRole(Enum):
    CLIENT = "CLIENT"
    DESIGNER = "DESIGNER"
    EMBROIDERER = "EMBROIDERER"
    PACKER = "PACKER"
    ADMIN = "ADMIN"

    @property
    def is_staff(self) -> bool:
        return self != UserRole.CLIENT


@dataclass(frozen=True)
class StaffMember:
    """A designer, embroiderer, packer or administrator.

    Load is never stored; the balancer derives it from open orders.
    """

    id: str
    name: str
    role: UserRole
    email: str | None = None
    avatar: str | None = None
