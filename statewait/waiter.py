"""Generic state-transition waiter.

Polls a probe until the observed state lands in the target set, the
resource disappears on a deletion wait, or the wait fails with a typed
error. One engine serves every resource type; callers only pick the probe,
the labels and the cadence (see WaitSpec / WaitPolicy).

Example:
    from statewait import WaitSpec, wait_for_state

    spec = WaitSpec(
        probe=status_db_instance(client, "db-1"),
        pending={"deleting", "modifying"},
        target=set(),
        timeout=3600,
        delay=30,
        min_interval=10,
    )
    await wait_for_state(spec)
"""

from __future__ import annotations

import asyncio
import inspect
from typing import TYPE_CHECKING, Any

from loguru import logger

from statewait.backoff import backoff_schedule
from statewait.cancel import CancelToken
from statewait.clock import Clock, MonotonicClock
from statewait.core.exceptions import (
    FatalProbeError,
    ProbeFailedError,
    ResourceNotFoundError,
    UnexpectedStateError,
    WaitCancelledError,
    WaitTimeoutError,
)
from statewait.spec import Duration, Observation, Probe, WaitSpec, to_seconds

if TYPE_CHECKING:
    from loguru import Logger


async def wait_for_state[T](
    spec: WaitSpec[T],
    *,
    cancel: CancelToken | None = None,
    cancel_after: Duration | None = None,
    clock: Clock | None = None,
) -> T | None:
    """Wait until the resource described by ``spec`` reaches a target state.

    Args:
        spec: What to poll and how.
        cancel: Optional token; cancelling it stops the wait before the next
            probe and interrupts any pause.
        cancel_after: External deadline, measured from the start of the call.
            Reaching it is reported as cancellation, not as timeout.
        clock: Time source. Defaults to the event loop's monotonic clock.

    Returns:
        The result of the observation that satisfied the target, or None when
        a deletion wait saw the resource disappear.

    Raises:
        UnexpectedStateError: A state outside pending and target was observed.
        WaitTimeoutError: The timeout elapsed first.
        WaitCancelledError: The token was cancelled or ``cancel_after`` passed.
        ProbeFailedError: The probe raised a non-retryable error.
        ResourceNotFoundError: The resource stayed absent on a non-deletion wait.
    """
    run = _WaitRun(
        spec,
        clock=clock or MonotonicClock(),
        cancel=cancel,
        cancel_after=to_seconds(cancel_after) if cancel_after is not None else None,
    )
    return await run.execute()


def wait_for_state_sync[T](
    spec: WaitSpec[T],
    *,
    cancel: CancelToken | None = None,
    cancel_after: Duration | None = None,
    clock: Clock | None = None,
) -> T | None:
    """Blocking variant of wait_for_state for code without an event loop.

    Must not be called from a running event loop.
    """
    return asyncio.run(wait_for_state(spec, cancel=cancel, cancel_after=cancel_after, clock=clock))


def _is_async(probe: Probe[Any]) -> bool:
    return inspect.iscoroutinefunction(probe) or inspect.iscoroutinefunction(
        getattr(probe, "__call__", None)
    )


async def _invoke[T](probe: Probe[T]) -> Any:
    if _is_async(probe):
        return await probe()
    result = await asyncio.to_thread(probe)
    if inspect.isawaitable(result):
        return await result
    return result


class _WaitRun[T]:
    """Mutable loop state of a single wait call."""

    def __init__(
        self,
        spec: WaitSpec[T],
        *,
        clock: Clock,
        cancel: CancelToken | None,
        cancel_after: float | None,
    ) -> None:
        self.spec = spec
        self.clock = clock
        self.cancel = cancel
        self.cancel_after = cancel_after

        self.attempts = 0
        self.last_state: str | None = None
        self.last_result: T | None = None
        self.last_error: BaseException | None = None
        self._not_found = 0
        self._target_seen = 0

    async def execute(self) -> T | None:
        spec = self.spec
        self.start = self.clock.now()
        self.timeout_at = self.start + spec.timeout
        self.cancel_at = self.start + self.cancel_after if self.cancel_after is not None else None

        self._log().debug(
            f"Waiting: pending={sorted(spec.pending)} "
            f"target={sorted(spec.target) or '<absent>'} timeout={spec.timeout:.1f}s"
        )

        if spec.delay > 0:
            self._raise_if_cancelled()
            self._raise_if_overrun(spec.delay)
            await self._pause(spec.delay)

        schedule = backoff_schedule(spec)

        while True:
            self._raise_if_cancelled()
            if self.clock.now() >= self.timeout_at:
                raise self._timeout()

            done, result = await self._poll()
            if done:
                self._log().debug(
                    f"Reached {self.last_state or '<absent>'} "
                    f"after {self.attempts} poll(s) in {self._elapsed():.1f}s"
                )
                return result

            self._raise_if_cancelled()

            interval = next(schedule)
            self._raise_if_overrun(interval)
            await self._pause(interval)

    # ------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------

    async def _poll(self) -> tuple[bool, T | None]:
        spec = self.spec
        self.attempts += 1

        try:
            observation = await self._probe()
        except Exception as e:
            if isinstance(e, FatalProbeError) or not spec.retryable(e):
                raise ProbeFailedError(
                    e,
                    description=spec.description,
                    last_state=self.last_state,
                    last_result=self.last_result,
                    attempts=self.attempts,
                ) from e
            self.last_error = e
            self._target_seen = 0
            self._log().warning(f"Probe failed: {type(e).__name__}: {e}. Retrying...")
            return False, None

        if not isinstance(observation, Observation):
            error = TypeError(f"probe returned {type(observation).__name__}, expected Observation")
            raise ProbeFailedError(
                error,
                description=spec.description,
                last_state=self.last_state,
                last_result=self.last_result,
                attempts=self.attempts,
            ) from error

        self.last_error = None
        self.last_state = observation.state
        self.last_result = observation.result
        self._log().debug(f"state={observation.state or '<absent>'}")

        return self._classify(observation)

    async def _probe(self) -> Any:
        task = asyncio.ensure_future(_invoke(self.spec.probe))
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            # Let the in-flight probe release its own resources before unwinding.
            if not task.done():
                await asyncio.wait({task})
            if not task.cancelled() and (error := task.exception()) is not None:
                self._log().debug(f"Probe failed after cancellation: {error!r}")
            raise

    def _classify(self, observation: Observation[T]) -> tuple[bool, T | None]:
        spec = self.spec

        if observation.not_found:
            self._target_seen = 0
            if spec.expects_absence:
                return True, None
            self._not_found += 1
            if self._not_found > spec.not_found_checks:
                raise ResourceNotFoundError(
                    self._not_found, description=spec.description, attempts=self.attempts
                )
            return False, None

        self._not_found = 0

        if observation.state in spec.target:
            self._target_seen += 1
            if self._target_seen >= spec.target_occurrences:
                return True, observation.result
            return False, None

        self._target_seen = 0

        if observation.state in spec.pending:
            return False, None

        raise UnexpectedStateError(
            observation.state,
            spec.target,
            description=spec.description,
            last_result=observation.result,
            attempts=self.attempts,
        )

    # ------------------------------------------------------------
    # Scheduling and cancellation
    # ------------------------------------------------------------

    async def _pause(self, seconds: float) -> None:
        if self.cancel is None:
            await self.clock.sleep(seconds)
            return

        self._raise_if_cancelled()
        sleeper = asyncio.ensure_future(self.clock.sleep(seconds))
        watcher = asyncio.ensure_future(self.cancel.wait())
        try:
            await asyncio.wait({sleeper, watcher}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (sleeper, watcher):
                task.cancel()
            await asyncio.gather(sleeper, watcher, return_exceptions=True)

        self._raise_if_cancelled()

    def _raise_if_overrun(self, seconds: float) -> None:
        resume_at = self.clock.now() + seconds
        if self.cancel_at is not None and resume_at >= self.cancel_at and self.cancel_at <= self.timeout_at:
            raise self._cancelled("deadline")
        if resume_at >= self.timeout_at:
            raise self._timeout()

    def _raise_if_cancelled(self) -> None:
        if self.cancel is not None and self.cancel.cancelled:
            raise self._cancelled(self.cancel.reason or "cancelled")
        if self.cancel_at is not None and self.clock.now() >= self.cancel_at:
            raise self._cancelled("deadline")

    def _log(self) -> Logger:
        return logger.bind(wait=self.spec.description, attempt=self.attempts)

    def _elapsed(self) -> float:
        return self.clock.now() - self.start

    def _cancelled(self, reason: str) -> WaitCancelledError:
        self._log().debug(f"Cancelled ({reason})")
        return WaitCancelledError(
            reason,
            description=self.spec.description,
            last_state=self.last_state,
            last_result=self.last_result,
            last_error=self.last_error,
            attempts=self.attempts,
        )

    def _timeout(self) -> WaitTimeoutError:
        return WaitTimeoutError(
            self.spec.timeout,
            self._elapsed(),
            self.spec.target,
            description=self.spec.description,
            last_state=self.last_state,
            last_result=self.last_result,
            last_error=self.last_error,
            attempts=self.attempts,
        )
