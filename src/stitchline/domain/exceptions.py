"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the mutation coordinator and the CLI can catch them uniformly and turn
them into messages tied to the attempted action.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or precondition was violated."""


class EntityNotFoundError(DomainException):
    """A requested order, item or slot does not exist."""


class PermissionDeniedError(DomainException):
    """The acting role (or customer) may not issue this command."""


class ExternalServiceError(DomainException):
    """Storage, AI or the order store failed or was unreachable."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.cause = cause


class PackSyncError(ExternalServiceError):
    """One or more sibling writes of a pack-sync batch failed.

    Siblings that were written successfully stay written.
    """

    def __init__(self, failed_item_ids: list[str], cause: BaseException | None = None) -> None:
        super().__init__(
            f"Pack sync failed for item(s) {', '.join(failed_item_ids)}", cause
        )
        self.failed_item_ids = failed_item_ids


class ImageEditError(ExternalServiceError):
    """The image-edit collaborator did not produce an image."""
