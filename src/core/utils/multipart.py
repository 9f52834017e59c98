"""multipart/form-data parsing for API Gateway request bodies."""

import io
from dataclasses import dataclass

from werkzeug.formparser import MultiPartParser
from werkzeug.http import parse_options_header

DEFAULT_PART_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class FilePart:
    """One file field of a multipart form."""

    field_name: str
    filename: str
    content_type: str
    data: bytes


def parse_multipart(body: bytes, content_type: str, *, field_name: str) -> list[FilePart]:
    """Return the file parts submitted under ``field_name``, in form order.

    Non-file fields, files under other names and parts without a filename
    are ignored.

    Raises:
        ValueError: If the content type has no boundary or the body is not
            a multipart document
    """
    mimetype, options = parse_options_header(content_type)
    boundary = options.get("boundary")

    if not mimetype.startswith("multipart/") or not boundary:
        raise ValueError("Missing multipart boundary")

    if f"--{boundary}".encode("latin-1") not in body:
        raise ValueError("Request body is not a multipart document")

    parser = MultiPartParser()
    _, files = parser.parse(io.BytesIO(body), boundary.encode("latin-1"), len(body))

    parts: list[FilePart] = []

    for storage in files.getlist(field_name):
        try:
            if not storage.filename:
                continue

            parts.append(
                FilePart(
                    field_name=field_name,
                    filename=storage.filename,
                    content_type=storage.content_type or DEFAULT_PART_CONTENT_TYPE,
                    data=storage.read(),
                )
            )
        finally:
            storage.close()

    return parts
