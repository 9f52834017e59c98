"""Request validation utilities."""

import binascii
import json
from typing import Any, TypeVar

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ValidationError

from core.utils.events import get_body_bytes
from core.utils.response import ResponseBuilder

logger = Logger(UTC=True)

ModelT = TypeVar("ModelT", bound=BaseModel)

# pydantic error type -> client-facing message
FRIENDLY_MESSAGES: dict[str, str] = {
    "missing": "This field is required",
    "int_parsing": "Must be an integer",
    "int_type": "Must be an integer",
    "string_type": "Must be a string",
    "list_type": "Must be a list",
    "model_type": "Must be an object",
    "extra_forbidden": "Unknown field",
}


def _friendly_message(err: dict[str, Any]) -> str:
    error_type = err.get("type", "")
    if error_type in FRIENDLY_MESSAGES:
        return FRIENDLY_MESSAGES[error_type]

    # Remove noisy prefixes
    msg = str(err.get("msg", "Invalid value")).replace("Value error,", "").strip()

    if "base64" in msg.lower():
        return "File must be a valid Base64-encoded string"
    if msg.lower() == "field required":
        return FRIENDLY_MESSAGES["missing"]

    return msg


def sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Reduce pydantic errors to ``{"field", "message"}`` pairs.

    ``input``, ``ctx`` and ``url`` are dropped so request content and
    library internals never reach the response.
    """
    return [
        {
            "field": ".".join(str(x) for x in err.get("loc", [])) or "body",
            "message": _friendly_message(err),
        }
        for err in errors
    ]


def validate_request(
    model: type[ModelT],
    data: dict[str, Any],
    *,
    request_id: str | None = None,
    cors_origin: str | None = None,
) -> tuple[bool, ModelT | dict[str, Any]]:
    """Validate request data against a Pydantic model.

    Args:
        model: Pydantic model class
        data: Input data to validate
        request_id: Optional request ID for tracing
        cors_origin: Optional CORS origin

    Returns:
        (True, validated_model) on success
        (False, error_response) on validation failure
    """
    try:
        return True, model.model_validate(data)

    except ValidationError as exc:
        sanitized_errors = sanitize_validation_errors(exc.errors())
        logger.info(
            "Request failed validation",
            extra={"model": model.__name__, "errors": sanitized_errors},
        )
        return (
            False,
            ResponseBuilder.validation_error(
                message="Invalid request payload",
                details=sanitized_errors,
                request_id=request_id,
                cors_origin=cors_origin,
            ),
        )


def validate_json_body(
    model: type[ModelT],
    event: dict[str, Any],
    *,
    request_id: str | None = None,
    cors_origin: str | None = None,
) -> tuple[bool, ModelT | dict[str, Any]]:
    """Decode the event's JSON object body and validate it against ``model``.

    A missing body counts as ``{}``, so required fields are reported by name.
    Same return convention as :func:`validate_request`.
    """
    try:
        data = json.loads(get_body_bytes(event) or b"{}")
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError):
        logger.warning("Invalid JSON body received", extra={"request_id": request_id})
        return False, ResponseBuilder.bad_request(
            "Invalid JSON body",
            request_id=request_id,
            cors_origin=cors_origin,
        )

    if not isinstance(data, dict):
        logger.warning(
            "JSON body is not an object",
            extra={"request_id": request_id, "body_type": type(data).__name__},
        )
        return False, ResponseBuilder.bad_request(
            "Request body must be a JSON object",
            request_id=request_id,
            cors_origin=cors_origin,
        )

    return validate_request(model, data, request_id=request_id, cors_origin=cors_origin)
