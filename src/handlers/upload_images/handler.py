"""
Lambda handler for batch image uploads.
"""

from contextlib import ExitStack
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.errors import ValidationError
from core.models.upload import BatchUploadResult
from core.utils.constants import (
    ERROR_CODE_ALL_DUPLICATES,
    ERROR_CODE_UPLOAD_FAILED,
    LAMBDA_DEADLINE_MARGIN_SECONDS,
    METRICS_NAMESPACE,
    OUTCOME_FAILED,
    REASON_FILE_TOO_LARGE,
    REASON_UNSUPPORTED_TYPE,
    UPLOAD_FIELD_NAME,
)
from core.utils.decorators import api_gateway_handler
from core.utils.events import get_body_bytes, get_header
from core.utils.multipart import parse_multipart
from core.utils.response import ResponseBuilder
from core.utils.staging import RawUpload, stage_upload
from core.utils.validators import validate_json_body

from .models import JsonUploadRequest
from .service import UploadService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)

CLIENT_FAILURE_REASONS = frozenset({REASON_FILE_TOO_LARGE, REASON_UNSUPPORTED_TYPE})


def _remaining_seconds(context: LambdaContext) -> float | None:
    if not hasattr(context, "get_remaining_time_in_millis"):
        return None
    remaining = context.get_remaining_time_in_millis() / 1000 - LAMBDA_DEADLINE_MARGIN_SECONDS
    return max(remaining, 0.0)


def _stage_multipart(event: dict[str, Any], content_type: str, stack: ExitStack) -> list[RawUpload]:
    parts = parse_multipart(
        get_body_bytes(event),
        content_type,
        field_name=UPLOAD_FIELD_NAME,
    )
    return [
        stage_upload(stack, name=part.filename, content_type=part.content_type, data=part.data)
        for part in parts
    ]


def _build_response(batch: BatchUploadResult, request_id: str | None) -> dict[str, Any]:
    body = {
        "images": [record.to_response() for record in batch.stored],
        "results": [result.to_response() for result in batch.results],
    }

    if batch.stored:
        return ResponseBuilder.ok(body, request_id=request_id)

    if batch.all_duplicates:
        return ResponseBuilder.conflict(
            "All uploaded images already exist",
            error=ERROR_CODE_ALL_DUPLICATES,
            request_id=request_id,
            extra={"results": body["results"]},
        )

    failure_reasons = {r.reason for r in batch.results if r.status == OUTCOME_FAILED}
    if failure_reasons and failure_reasons <= CLIENT_FAILURE_REASONS:
        return ResponseBuilder.error(
            status=ValidationError.http_status,
            error=ERROR_CODE_UPLOAD_FAILED,
            message="None of the uploaded files could be accepted",
            request_id=request_id,
            extra={"results": body["results"]},
        )

    return ResponseBuilder.internal_error(
        "No image could be stored",
        error=ERROR_CODE_UPLOAD_FAILED,
        request_id=request_id,
        extra={"results": body["results"]},
    )


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle batch image uploads.

    Accepts ``multipart/form-data`` with up to ten files in the ``image``
    field, or a JSON body ``{"images": [{"file": <base64>, "image_name": ...}]}``.
    Every file gets its own outcome; the status code reflects the batch.

    Args:
        event: API Gateway Lambda proxy event containing the upload payload
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response with stored images and per-file results
    """
    request_id = getattr(context, "aws_request_id", None)
    content_type = get_header(event, "content-type") or ""

    logger.info(
        "Received image upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "content_type": content_type,
            "request_id": request_id,
        },
    )

    with ExitStack() as stack:
        if content_type.lower().startswith("multipart/form-data"):
            try:
                uploads = _stage_multipart(event, content_type, stack)
            except ValueError as exc:
                logger.warning("Malformed multipart body", extra={"error": str(exc)})
                return ResponseBuilder.bad_request(
                    "Malformed multipart body",
                    request_id=request_id,
                )
        else:
            is_valid, request = validate_json_body(JsonUploadRequest, event, request_id=request_id)
            if not is_valid:
                return request

            uploads = [
                stage_upload(stack, name=payload.image_name, content_type=None, data=payload.decode())
                for payload in request.images
            ]

        try:
            batch = UploadService().handle_batch(
                uploads,
                deadline_seconds=_remaining_seconds(context),
            )

        except ValidationError as exc:
            logger.warning(
                "Upload batch rejected",
                extra={"error_code": exc.error_code, "count": len(uploads)},
            )
            return ResponseBuilder.bad_request(
                exc.message,
                error=exc.error_code,
                request_id=request_id,
            )

    metrics.add_metric(name="ImagesStored", unit=MetricUnit.Count, value=len(batch.stored))
    metrics.add_metric(name="DuplicatesSkipped", unit=MetricUnit.Count, value=batch.skipped_count)
    metrics.add_metric(name="UploadsFailed", unit=MetricUnit.Count, value=batch.failed_count)

    return _build_response(batch, request_id)
