"""
Staging of uploaded file contents.

Uploaded parts are copied into spooled temporary files that belong to an
``ExitStack`` owned by the request. Small files stay in memory, large ones
spill to the Lambda's ephemeral storage, and every file is closed when the
stack unwinds, whatever the exit path.
"""

import io
import tempfile
from contextlib import ExitStack
from typing import IO

from core.utils.constants import SPOOL_MAX_MEMORY


class RawUpload:
    """One uploaded file: display name, declared content type and staged bytes."""

    def __init__(
        self,
        *,
        name: str,
        content_type: str | None,
        stream: IO[bytes],
        size: int,
    ) -> None:
        self.name = name
        self.content_type = content_type
        self.size = size
        self._stream = stream

    @classmethod
    def from_bytes(
        cls,
        name: str,
        data: bytes,
        content_type: str | None = None,
    ) -> "RawUpload":
        return cls(
            name=name,
            content_type=content_type,
            stream=io.BytesIO(data),
            size=len(data),
        )

    def read(self) -> bytes:
        self._stream.seek(0)
        return self._stream.read()

    def __repr__(self) -> str:
        return f"RawUpload(name={self.name!r}, size={self.size})"


def stage_upload(
    stack: ExitStack,
    *,
    name: str,
    content_type: str | None,
    data: bytes,
) -> RawUpload:
    """Copy ``data`` into a spooled temp file whose lifetime is bound to ``stack``."""
    spool = stack.enter_context(
        tempfile.SpooledTemporaryFile(max_size=SPOOL_MAX_MEMORY, mode="w+b")
    )
    spool.write(data)

    return RawUpload(
        name=name,
        content_type=content_type,
        stream=spool,
        size=len(data),
    )
