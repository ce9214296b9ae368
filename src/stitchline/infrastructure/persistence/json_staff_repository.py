"""JSON-file-backed implementation of StaffRepository."""

from __future__ import annotations

import json
from pathlib import Path

from stitchline.domain.exceptions import ExternalServiceError
from stitchline.domain.model.staff import StaffMember
from stitchline.domain.repository.staff_repository import StaffRepository
from stitchline.infrastructure.persistence.serialization import staff_from_raw, staff_to_raw


class JsonStaffRepository(StaffRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    async def list_all(self) -> list[StaffMember]:
        return [staff_from_raw(raw) for raw in self._load_raw()]

    async def save(self, member: StaffMember) -> None:
        staff = self._load_raw()

        # Upsert: replace if exists, otherwise append
        for i, raw in enumerate(staff):
            if raw["id"] == member.id:
                staff[i] = staff_to_raw(member)
                break
        else:
            staff.append(staff_to_raw(member))

        self._persist_raw(staff)

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        try:
            return json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ExternalServiceError("Staff directory unreadable", exc) from exc

    def _persist_raw(self, staff: list[dict]) -> None:
        try:
            self._file_path.write_text(json.dumps(staff, indent=2) + "\n", encoding="utf-8")
        except OSError as exc:
            raise ExternalServiceError("Staff directory write failed", exc) from exc

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
