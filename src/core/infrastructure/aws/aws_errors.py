"""Helpers for classifying botocore errors."""

import re
from typing import Final

from botocore.exceptions import ClientError

TRANSIENT_ERROR_CODES: Final[frozenset[str]] = frozenset(
    {
        "InternalError",
        "InternalServerError",
        "ServiceUnavailable",
        "SlowDown",
        "RequestTimeout",
        "RequestTimeoutException",
        "ThrottlingException",
        "Throttling",
        "ProvisionedThroughputExceededException",
        "RequestLimitExceeded",
        "TransactionConflictException",
        "TransactionInProgressException",
    }
)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailed"
CONDITIONAL_CHECK_FAILED_EXCEPTION = "ConditionalCheckFailedException"
TRANSACTION_CANCELED_EXCEPTION = "TransactionCanceledException"

_REASONS_IN_MESSAGE = re.compile(r"\[([^\]]*)\]")


def client_error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


def is_retryable(exc: ClientError) -> bool:
    return client_error_code(exc) in TRANSIENT_ERROR_CODES


def cancellation_codes(exc: ClientError) -> list[str]:
    """Per-item reason codes of a cancelled transaction, in request order.

    botocore exposes them as ``CancellationReasons``; some emulators only put
    them in the message ("... reasons [None, ConditionalCheckFailed]").
    """
    reasons = exc.response.get("CancellationReasons")
    if reasons:
        return [str(reason.get("Code", "None")) for reason in reasons]

    message = str(exc.response.get("Error", {}).get("Message", ""))
    match = _REASONS_IN_MESSAGE.search(message)
    if not match:
        return []

    return [code.strip() for code in match.group(1).split(",")]
