"""Per-item and per-batch upload outcomes."""

from typing import Any, Literal

from pydantic import BaseModel, Field

from core.models.image import CAMEL_CONFIG, ImageRecord
from core.utils.constants import OUTCOME_FAILED, OUTCOME_SKIPPED, OUTCOME_STORED


class UploadItemResult(BaseModel):
    """Outcome of one file inside a batch upload."""

    model_config = CAMEL_CONFIG

    name: str = Field(..., description="Display name of the uploaded file")
    status: Literal["stored", "skipped", "failed"]
    reason: str | None = Field(None, description="Why the item was skipped or failed")
    image: ImageRecord | None = Field(None, description="Stored record, when stored")

    @classmethod
    def stored(cls, name: str, image: ImageRecord) -> "UploadItemResult":
        return cls(name=name, status=OUTCOME_STORED, image=image)

    @classmethod
    def skipped(cls, name: str, reason: str) -> "UploadItemResult":
        return cls(name=name, status=OUTCOME_SKIPPED, reason=reason)

    @classmethod
    def failed(cls, name: str, reason: str) -> "UploadItemResult":
        return cls(name=name, status=OUTCOME_FAILED, reason=reason)

    def to_response(self) -> dict[str, Any]:
        body: dict[str, Any] = {"name": self.name, "status": self.status}
        if self.reason:
            body["reason"] = self.reason
        if self.image is not None:
            body["image"] = self.image.to_response()
        return body


class BatchUploadResult(BaseModel):
    """Ordered results of a batch upload, one entry per input file."""

    results: list[UploadItemResult] = Field(default_factory=list)

    @property
    def stored(self) -> list[ImageRecord]:
        return [r.image for r in self.results if r.status == OUTCOME_STORED and r.image]

    @property
    def skipped_count(self) -> int:
        return sum(1 for r in self.results if r.status == OUTCOME_SKIPPED)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.results if r.status == OUTCOME_FAILED)

    @property
    def all_duplicates(self) -> bool:
        """True when the batch is non-empty and every item was skipped."""
        return bool(self.results) and self.skipped_count == len(self.results)
