"""
Lambda handler for liking an image.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.errors import AlreadyLikedError, NotFoundError
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.events import get_path_parameter, get_source_identity
from core.utils.response import ResponseBuilder

from .service import LikeService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle ``POST /like/{id}``.

    A source (client IP as seen by the edge) can like an image once.
    """
    request_id = getattr(context, "aws_request_id", None)
    image_id = get_path_parameter(event, "id")
    source_identity = get_source_identity(event)

    logger.info(
        "Received like request",
        extra={"image_id": image_id, "source": source_identity, "request_id": request_id},
    )

    if not image_id:
        return ResponseBuilder.bad_request("Image id is required", request_id=request_id)

    try:
        LikeService().like(image_id=image_id, source_identity=source_identity)

    except AlreadyLikedError as exc:
        logger.info("Image already liked by source", extra={"image_id": image_id})
        return ResponseBuilder.bad_request(exc.message, error=exc.error_code, request_id=request_id)

    except NotFoundError as exc:
        logger.info("Like for unknown image", extra={"image_id": image_id})
        return ResponseBuilder.not_found(exc.message, error=exc.error_code, request_id=request_id)

    metrics.add_metric(name="ImageLiked", unit=MetricUnit.Count, value=1)
    return ResponseBuilder.ok({"success": True}, request_id=request_id)
