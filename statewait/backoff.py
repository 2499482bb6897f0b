"""Inter-poll interval schedule.

The schedule starts at ``base_interval`` and multiplies by
``backoff_factor`` after every probe until it reaches ``max_interval``.
Every value is floored by ``min_interval``, so the spacing between probes
never drops below it even while the exponential part is still small.

The arithmetic is tenacity's: ``wait_exponential`` (or ``wait_fixed`` for
a fixed ``poll_interval``) evaluated for successive attempt numbers.
"""

from __future__ import annotations

from collections.abc import Iterator

from tenacity import RetryCallState, wait_exponential, wait_fixed

from statewait.spec import WaitSpec


def backoff_schedule(spec: WaitSpec) -> Iterator[float]:
    """Yield an infinite, non-decreasing sequence of intervals in seconds."""
    if spec.poll_interval is not None:
        strategy = wait_fixed(spec.poll_interval)
    else:
        strategy = wait_exponential(
            multiplier=spec.base_interval,
            exp_base=spec.backoff_factor,
            min=spec.min_interval,
            max=spec.max_interval,
        )

    state = RetryCallState(retry_object=None, fn=None, args=(), kwargs={})
    while True:
        yield max(float(strategy(state)), spec.min_interval)
        state.attempt_number += 1
