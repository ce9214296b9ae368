"""Black-box photo quality classifier."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from stitchline.domain.model.value_objects import ImagePayload


@dataclass(frozen=True)
class QualityAssessment:
    approved: bool
    reason: str


class QualityAssessor(ABC):

    @abstractmethod
    async def assess(self, image: ImagePayload) -> QualityAssessment:
        """Judge whether *image* can be embroidered.

        Raise ``ExternalServiceError`` on any failure; callers treat a
        failure as a rejection, never as an approval.
        """
