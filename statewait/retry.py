"""Retryability predicates for probe errors.

A probe failure is transient by default: the waiter records it and polls
again until the timeout budget runs out. A predicate passed as
``WaitSpec.retryable`` narrows that, turning some errors fatal.
FatalProbeError raised by a probe is fatal regardless of the predicate.

Example:
    from statewait import WaitSpec
    from statewait.retry import any_of, on_error_code, on_exception_message, retry_on

    # Retry only on specific exceptions
    spec = WaitSpec(..., retryable=retry_on(ConnectionError))

    # Retry on AWS throttling or on anything mentioning "timeout"
    spec = WaitSpec(
        ...,
        retryable=any_of(
            on_error_code("Throttling", "RequestLimitExceeded"),
            on_exception_message("timeout"),
        ),
    )
"""

from __future__ import annotations

from collections.abc import Callable

from statewait.core.exceptions import FatalProbeError

# Type for the retry predicate
type RetryPredicate = Callable[[BaseException], bool]


def retry_on(
    on: type[BaseException] | tuple[type[BaseException], ...] | RetryPredicate,
) -> RetryPredicate:
    """Normalize an exception class, a tuple of classes or a predicate.

    The waiter never retries FatalProbeError, whatever the predicate says.
    """
    if isinstance(on, type) and issubclass(on, BaseException):
        return lambda e: isinstance(e, on)
    if isinstance(on, tuple):
        return lambda e: isinstance(e, on)
    return on


def default_retryable(e: BaseException) -> bool:
    """Retry every Exception except FatalProbeError."""
    return isinstance(e, Exception) and not isinstance(e, FatalProbeError)


def never(_: BaseException) -> bool:
    """Treat every probe error as fatal."""
    return False


# =============================================================================
# Common Predicates
# =============================================================================


def on_status_code(*codes: int) -> RetryPredicate:
    """Create a predicate that retries on specific HTTP status codes.

    Works with botocore ClientError (``ResponseMetadata.HTTPStatusCode``)
    and with exceptions that expose a ``status`` attribute.

    Example:
        retryable=on_status_code(429, 503)
    """

    def predicate(e: BaseException) -> bool:
        status = getattr(e, "status", None)
        if status is None:
            response = getattr(e, "response", None)
            if isinstance(response, dict):
                status = response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        return status in codes

    return predicate


def on_error_code(*codes: str) -> RetryPredicate:
    """Create a predicate that retries on botocore-style error codes.

    Example:
        retryable=on_error_code("Throttling", "InvalidDBInstanceState")
    """

    def predicate(e: BaseException) -> bool:
        response = getattr(e, "response", None)
        if not isinstance(response, dict):
            return False
        return response.get("Error", {}).get("Code", "") in codes

    return predicate


def on_exception_message(*patterns: str, case_sensitive: bool = False) -> RetryPredicate:
    """Create a predicate that retries when exception message matches patterns.

    Example:
        retryable=on_exception_message("timeout", "connection reset")
    """

    def predicate(e: BaseException) -> bool:
        msg = str(e)
        if not case_sensitive:
            msg = msg.lower()
            return any(p.lower() in msg for p in patterns)
        return any(p in msg for p in patterns)

    return predicate


# =============================================================================
# Combining Predicates
# =============================================================================


def any_of(*predicates: RetryPredicate) -> RetryPredicate:
    """Combine predicates with OR logic (retry if ANY predicate matches)."""

    def combined(e: BaseException) -> bool:
        return any(p(e) for p in predicates)

    return combined


def all_of(*predicates: RetryPredicate) -> RetryPredicate:
    """Combine predicates with AND logic (retry only if ALL predicates match).

    Example:
        retryable=all_of(
            retry_on(ClientError),
            on_status_code(429),
        )
    """

    def combined(e: BaseException) -> bool:
        return all(p(e) for p in predicates)

    return combined
