"""Helpers for reading API Gateway proxy events."""

import base64
from typing import Any

from core.utils.constants import UNKNOWN_SOURCE


def get_header(event: dict[str, Any], name: str) -> str | None:
    """Case-insensitive header lookup."""
    headers = event.get("headers") or {}
    wanted = name.lower()

    for key, value in headers.items():
        if key.lower() == wanted:
            return str(value) if value is not None else None

    return None


def get_body_bytes(event: dict[str, Any]) -> bytes:
    """Raw request body, decoding API Gateway's base64 transport if used."""
    body = event.get("body") or ""

    if event.get("isBase64Encoded"):
        return base64.b64decode(body)

    return body.encode("utf-8") if isinstance(body, str) else bytes(body)


def get_path_parameter(event: dict[str, Any], name: str) -> str | None:
    params = event.get("pathParameters") or {}
    value = params.get(name)
    return str(value).strip() or None if value is not None else None


def get_source_identity(event: dict[str, Any]) -> str:
    """Network origin of the caller, used to allow one like per source.

    Only the address API Gateway observed is used: ``identity.sourceIp`` for
    REST APIs, ``http.sourceIp`` for HTTP APIs. ``X-Forwarded-For`` is set by
    the client and is ignored.
    """
    request_context = event.get("requestContext") or {}

    for section in ("identity", "http"):
        source_ip = (request_context.get(section) or {}).get("sourceIp")
        if source_ip:
            return str(source_ip)

    return UNKNOWN_SOURCE
