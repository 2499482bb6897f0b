from __future__ import annotations

import asyncio
import threading

import pytest

from statewait import (
    CancelToken,
    Observation,
    WaitCancelledError,
    WaitSpec,
    WaitTimeoutError,
    wait_for_state,
)
from tests.conftest import FakeClock, ScriptedProbe

pytestmark = [pytest.mark.unit]


def pending_forever(probe, **kwargs) -> WaitSpec:
    kwargs.setdefault("timeout", 300)
    return WaitSpec(probe=probe, pending={"creating"}, target={"active"}, **kwargs)


class TestCancelToken:
    def test_starts_active(self):
        token = CancelToken()
        assert not token.cancelled
        assert token.reason is None
        assert repr(token) == "CancelToken(active)"

    def test_keeps_first_reason(self):
        token = CancelToken()
        token.cancel("shutdown")
        token.cancel("second")
        assert token.cancelled
        assert token.reason == "shutdown"

    def test_cancel_survives_loop_closing_concurrently(self):
        class ClosingLoop:
            def is_closed(self) -> bool:
                return False

            def call_soon_threadsafe(self, *args) -> None:
                raise RuntimeError("Event loop is closed")

        token = CancelToken()
        token._waiters.add((ClosingLoop(), object()))

        token.cancel("shutdown")

        assert token.reason == "shutdown"

    @pytest.mark.asyncio
    async def test_wait_returns_when_already_cancelled(self):
        token = CancelToken()
        token.cancel()
        await asyncio.wait_for(token.wait(), timeout=1)

    @pytest.mark.asyncio
    async def test_wait_wakes_on_cancel(self):
        token = CancelToken()
        waiter = asyncio.create_task(token.wait())
        await asyncio.sleep(0)
        assert not waiter.done()

        token.cancel()
        await asyncio.wait_for(waiter, timeout=1)


class TestExplicitCancel:
    @pytest.mark.asyncio
    async def test_cancel_between_polls_skips_next_poll(self, clock: FakeClock):
        token = CancelToken()
        probe = ScriptedProbe(
            "creating",
            on_call=lambda n: token.cancel("user abort") if n == 2 else None,
        )

        with pytest.raises(WaitCancelledError) as exc_info:
            await wait_for_state(pending_forever(probe), cancel=token, clock=clock)

        assert probe.calls == 2
        assert exc_info.value.reason == "user abort"
        assert exc_info.value.last_state == "creating"
        assert exc_info.value.attempts == 2

    @pytest.mark.asyncio
    async def test_cancel_during_pause(self, clock: FakeClock):
        token = CancelToken()
        clock.on_sleep = lambda _: token.cancel()
        probe = ScriptedProbe("creating")

        with pytest.raises(WaitCancelledError):
            await wait_for_state(pending_forever(probe), cancel=token, clock=clock)

        assert probe.calls == 1

    @pytest.mark.asyncio
    async def test_cancel_during_initial_delay(self, clock: FakeClock):
        token = CancelToken()
        clock.on_sleep = lambda _: token.cancel()
        probe = ScriptedProbe("active")

        with pytest.raises(WaitCancelledError):
            await wait_for_state(pending_forever(probe, delay=30), cancel=token, clock=clock)

        assert probe.calls == 0

    @pytest.mark.asyncio
    async def test_already_cancelled_token_issues_no_probe(self, clock: FakeClock):
        token = CancelToken()
        token.cancel()
        probe = ScriptedProbe("active")

        with pytest.raises(WaitCancelledError):
            await wait_for_state(pending_forever(probe), cancel=token, clock=clock)

        assert probe.calls == 0

    @pytest.mark.asyncio
    async def test_target_reached_in_cancelled_poll_still_succeeds(self, clock: FakeClock):
        token = CancelToken()
        probe = ScriptedProbe("creating", "active", on_call=lambda n: token.cancel() if n == 2 else None)

        result = await wait_for_state(pending_forever(probe), cancel=token, clock=clock)

        assert result == {"poll": 2, "state": "active"}

    @pytest.mark.asyncio
    async def test_shared_token_cancels_every_wait(self):
        token = CancelToken()
        first = ScriptedProbe("creating")
        second = ScriptedProbe("creating")

        tasks = [
            asyncio.create_task(
                wait_for_state(pending_forever(p, poll_interval=60), cancel=token)
            )
            for p in (first, second)
        ]
        await asyncio.sleep(0.05)
        token.cancel()

        results = await asyncio.gather(*tasks, return_exceptions=True)
        assert all(isinstance(r, WaitCancelledError) for r in results)

    @pytest.mark.asyncio
    async def test_cancel_from_another_thread(self):
        token = CancelToken()
        probe = ScriptedProbe("creating")
        timer = threading.Timer(0.1, token.cancel, args=("from thread",))
        timer.start()
        try:
            with pytest.raises(WaitCancelledError) as exc_info:
                await wait_for_state(
                    pending_forever(probe, timeout=30, poll_interval=0.02), cancel=token
                )
        finally:
            timer.cancel()

        assert exc_info.value.reason == "from thread"


class TestDeadline:
    @pytest.mark.asyncio
    async def test_deadline_is_reported_as_cancellation(self, clock: FakeClock):
        probe = ScriptedProbe("creating")

        with pytest.raises(WaitCancelledError) as exc_info:
            await wait_for_state(pending_forever(probe, poll_interval=1), cancel_after=3.5, clock=clock)

        assert exc_info.value.reason == "deadline"
        assert probe.calls == 4

    @pytest.mark.asyncio
    async def test_deadline_inside_initial_delay(self, clock: FakeClock):
        probe = ScriptedProbe("active")
        start = clock.now()

        with pytest.raises(WaitCancelledError) as exc_info:
            await wait_for_state(pending_forever(probe, delay=300, timeout=600), cancel_after=5, clock=clock)

        assert exc_info.value.reason == "deadline"
        assert clock.now() - start <= 5
        assert probe.calls == 0

    @pytest.mark.asyncio
    async def test_timeout_wins_when_shorter_than_deadline(self, clock: FakeClock):
        probe = ScriptedProbe("creating")

        with pytest.raises(WaitTimeoutError):
            await wait_for_state(
                pending_forever(probe, timeout=3, poll_interval=1), cancel_after=60, clock=clock
            )


class TestTaskCancellation:
    @pytest.mark.asyncio
    async def test_in_flight_probe_finishes_before_cancellation(self, clock: FakeClock):
        started = asyncio.Event()
        release = asyncio.Event()
        finished: list[bool] = []

        async def probe() -> Observation[None]:
            started.set()
            await release.wait()
            finished.append(True)
            return Observation("creating")

        task = asyncio.create_task(wait_for_state(pending_forever(probe), clock=clock))
        await started.wait()

        task.cancel()
        await asyncio.sleep(0)
        assert not task.done()

        release.set()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert finished == [True]
