"""Pydantic models for the JSON form of the upload request."""

import base64
import binascii

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.utils.constants import MAX_BATCH_FILES


class UploadFilePayload(BaseModel):
    """One base64-encoded file."""

    model_config = ConfigDict(str_strip_whitespace=True)

    file: str = Field(..., description="Base64 encoded image file")
    image_name: str = Field(..., min_length=1, max_length=255, description="Image filename")

    @field_validator("file")
    @classmethod
    def validate_file(cls, value: str) -> str:
        """File must be non-empty, valid base64."""
        if not value:
            raise ValueError("file must not be empty")

        try:
            decoded = base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("Invalid base64 encoded file") from exc

        if not decoded:
            raise ValueError("Decoded file is empty")

        return value

    def decode(self) -> bytes:
        return base64.b64decode(self.file)


class JsonUploadRequest(BaseModel):
    """Validation model for ``{"images": [...]}`` upload bodies."""

    images: list[UploadFilePayload] = Field(..., max_length=MAX_BATCH_FILES)
