"""Custom exception hierarchy for statewait.

All statewait-specific exceptions inherit from StateWaitError, enabling
users to catch all statewait exceptions with a single except clause.
Errors that end a wait call inherit from WaitError and carry the last
known observation so callers can report "still in state X after N minutes".
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


def _labels(labels: Iterable[str]) -> str:
    return ", ".join(repr(s) for s in sorted(labels)) or "<absent>"


def _duration(seconds: float) -> str:
    minutes, secs = divmod(int(round(seconds)), 60)
    if minutes:
        return f"{minutes}m{secs}s"
    return f"{seconds:.1f}s"


class StateWaitError(Exception):
    """Base exception for all statewait errors."""


class ConfigurationError(StateWaitError):
    """Raised for an invalid wait specification or config file."""


class FatalProbeError(StateWaitError):
    """Raised by a probe to mark its failure as not worth retrying."""


class WaitError(StateWaitError):
    """Base exception for a wait call that ended without reaching its target."""

    def __init__(
        self,
        message: str,
        *,
        description: str = "resource",
        last_state: str | None = None,
        last_result: Any = None,
        last_error: BaseException | None = None,
        attempts: int = 0,
    ) -> None:
        self.description = description
        self.last_state = last_state
        self.last_result = last_result
        self.last_error = last_error
        self.attempts = attempts
        super().__init__(message)


class UnexpectedStateError(WaitError):
    """Raised when the resource reports a state outside pending and target."""

    def __init__(
        self,
        state: str,
        expected: Iterable[str],
        *,
        description: str = "resource",
        last_result: Any = None,
        attempts: int = 0,
    ) -> None:
        self.state = state
        self.expected = frozenset(expected)
        super().__init__(
            f"Unexpected state {state!r} for {description}, wanted target {_labels(self.expected)}",
            description=description,
            last_state=state,
            last_result=last_result,
            attempts=attempts,
        )


class WaitTimeoutError(WaitError):
    """Raised when the timeout budget elapsed before the target was reached."""

    def __init__(
        self,
        timeout: float,
        elapsed: float,
        expected: Iterable[str],
        *,
        description: str = "resource",
        last_state: str | None = None,
        last_result: Any = None,
        last_error: BaseException | None = None,
        attempts: int = 0,
    ) -> None:
        self.timeout = timeout
        self.elapsed = elapsed
        self.expected = frozenset(expected)

        message = (
            f"Timeout waiting for {description} to reach {_labels(self.expected)} "
            f"after {_duration(elapsed)} (timeout: {_duration(timeout)})"
        )
        if last_state is not None:
            message += f", last state: {last_state or '<absent>'!s}"
        if last_error is not None:
            message += f", last error: {last_error}"

        super().__init__(
            message,
            description=description,
            last_state=last_state,
            last_result=last_result,
            last_error=last_error,
            attempts=attempts,
        )


class WaitCancelledError(WaitError):
    """Raised when the wait was stopped by a cancel request or an external deadline."""

    def __init__(
        self,
        reason: str = "cancelled",
        *,
        description: str = "resource",
        last_state: str | None = None,
        last_result: Any = None,
        last_error: BaseException | None = None,
        attempts: int = 0,
    ) -> None:
        self.reason = reason
        super().__init__(
            f"Wait for {description} cancelled ({reason}) after {attempts} poll(s)",
            description=description,
            last_state=last_state,
            last_result=last_result,
            last_error=last_error,
            attempts=attempts,
        )


class ProbeFailedError(WaitError):
    """Raised when a probe error is classified as non-retryable."""

    def __init__(
        self,
        error: BaseException,
        *,
        description: str = "resource",
        last_state: str | None = None,
        last_result: Any = None,
        attempts: int = 0,
    ) -> None:
        super().__init__(
            f"Probe for {description} failed: {type(error).__name__}: {error}",
            description=description,
            last_state=last_state,
            last_result=last_result,
            last_error=error,
            attempts=attempts,
        )


class ResourceNotFoundError(WaitError):
    """Raised when a resource stays absent while waiting for it to appear."""

    def __init__(self, checks: int, *, description: str = "resource", attempts: int = 0) -> None:
        self.checks = checks
        super().__init__(
            f"Couldn't find {description} ({checks} consecutive not-found checks)",
            description=description,
            last_state="",
            attempts=attempts,
        )
