"""Error classifier for transport exceptions.

Converts exceptions raised by a transport into standardized
OperationResult verdicts so the retry loop only ever deals with
SUCCESS / TRANSIENT_ERROR / PERMANENT_ERROR.

Usage:
    from infrastructure.operations import classify_transport_error

    try:
        verdict = transport.deliver(request, timeout_seconds=30)
    except Exception as exc:
        verdict = classify_transport_error(exc)
"""

from infrastructure.operations.result import OperationResult

# Exceptions that usually clear up on their own
TRANSIENT_EXCEPTIONS = (TimeoutError, ConnectionError)


def classify_transport_error(exc: Exception) -> OperationResult:
    """Classify a transport exception into an OperationResult.

    Mapping:
    - TimeoutError: TRANSIENT_ERROR (TIMEOUT)
    - ConnectionError and subclasses: TRANSIENT_ERROR (CONNECTION_ERROR)
    - Anything else: PERMANENT_ERROR (TRANSPORT_ERROR)

    Args:
        exc: Exception raised while delivering

    Returns:
        OperationResult with the exception attached as cause
    """
    if isinstance(exc, TimeoutError):
        return OperationResult.transient_error(
            f"Transport timed out: {exc}",
            error_code="TIMEOUT",
            cause=exc,
        )

    if isinstance(exc, TRANSIENT_EXCEPTIONS):
        return OperationResult.transient_error(
            f"Connection error: {type(exc).__name__}: {exc}",
            error_code="CONNECTION_ERROR",
            cause=exc,
        )

    return OperationResult.permanent_error(
        f"Transport error: {type(exc).__name__}: {exc}",
        error_code="TRANSPORT_ERROR",
        cause=exc,
    )
