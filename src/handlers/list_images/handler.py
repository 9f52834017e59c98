"""
Lambda handler responsible for listing gallery images page by page.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.errors import ValidationError
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import ListImagesRequest
from .service import ListService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle requests to list images.

    Query parameters: ``page`` (default 1), ``pageSize`` (1-100, default 20)
    and ``snapshot`` (token echoed by earlier pages of the same session).
    """
    request_id = getattr(context, "aws_request_id", None)
    params = event.get("queryStringParameters") or {}

    logger.info(
        "Received list images request",
        extra={"query_params": params, "request_id": request_id},
    )

    is_valid, result = validate_request(ListImagesRequest, params, request_id=request_id)
    if not is_valid:
        return result

    request: ListImagesRequest = result

    try:
        response = ListService().list_images(
            page=request.page,
            page_size=request.page_size,
            snapshot=request.snapshot,
        )
    except ValidationError as exc:
        logger.warning("Invalid pagination parameters", extra={"error": exc.message})
        return ResponseBuilder.bad_request(exc.message, error=exc.error_code, request_id=request_id)

    return ResponseBuilder.ok(response.model_dump(by_alias=True), request_id=request_id)
