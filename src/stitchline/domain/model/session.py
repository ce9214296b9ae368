"""Who is acting: a resolved identity plus the role it was granted."""

from __future__ import annotations

from dataclasses import dataclass

from stitchline.domain.model.staff import UserRole


@dataclass(frozen=True)
class Identity:
    subject_id: str
    email: str
    name: str | None = None


@dataclass(frozen=True)
class Session:
    identity: Identity
    role: UserRole
    staff_id: str | None = None

    @property
    def subject_id(self) -> str:
        return self.identity.subject_id

    def owns(self, customer_email: str) -> bool:
        return self.identity.email.strip().lower() == customer_email.strip().lower()
