"""
Lambda handler for the ``GET /`` liveness route.
"""

from typing import Any

from aws_lambda_powertools import Logger, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.time import utc_now_iso

logger = Logger(UTC=True)
tracer = Tracer()


@api_gateway_handler
@tracer.capture_lambda_handler
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Report that the backend is up. Touches no AWS resource."""
    request_id = getattr(context, "aws_request_id", None)
    logger.debug("Health check", extra={"request_id": request_id})

    return ResponseBuilder.ok(
        {"status": "ok", "message": "Image gallery backend running", "timestamp": utc_now_iso()},
        request_id=request_id,
    )
