"""
Lambda handler for commenting on an image.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.errors import NotFoundError, ValidationError
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.events import get_path_parameter
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_json_body

from .models import CommentRequest
from .service import CommentService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle ``POST /comment/{id}`` with a JSON body ``{"text": ..., "author": ...}``.
    """
    request_id = getattr(context, "aws_request_id", None)
    image_id = get_path_parameter(event, "id")

    logger.info("Received comment request", extra={"image_id": image_id, "request_id": request_id})

    if not image_id:
        return ResponseBuilder.bad_request("Image id is required", request_id=request_id)

    is_valid, result = validate_json_body(CommentRequest, event, request_id=request_id)
    if not is_valid:
        return result

    request: CommentRequest = result

    try:
        comment = CommentService().add_comment(
            image_id=image_id,
            text=request.text,
            author=request.author,
        )

    except ValidationError as exc:
        logger.warning("Comment rejected", extra={"image_id": image_id, "error": exc.message})
        return ResponseBuilder.bad_request(exc.message, error=exc.error_code, request_id=request_id)

    except NotFoundError as exc:
        logger.info("Comment for unknown image", extra={"image_id": image_id})
        return ResponseBuilder.not_found(exc.message, error=exc.error_code, request_id=request_id)

    metrics.add_metric(name="CommentAdded", unit=MetricUnit.Count, value=1)
    return ResponseBuilder.ok(
        {"success": True, "comment": comment.model_dump(by_alias=True, exclude_none=True)},
        request_id=request_id,
    )
