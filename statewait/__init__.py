"""statewait - wait for remote resources to reach a state.

Example:

    from statewait import Observation, WaitSpec, wait_for_state

    async def probe() -> Observation[dict]:
        endpoint = await find_endpoint(client, name)
        if endpoint is None:
            return Observation.absent()
        return Observation(endpoint["Status"], endpoint)

    endpoint = await wait_for_state(
        WaitSpec(
            probe=probe,
            pending={"creating", "modifying"},
            target={"available"},
            timeout=600,
        )
    )
"""

# Cancellation
from statewait.cancel import CancelToken

# Clocks
from statewait.clock import Clock, MonotonicClock

# Exceptions
from statewait.core.exceptions import (
    ConfigurationError,
    FatalProbeError,
    ProbeFailedError,
    ResourceNotFoundError,
    StateWaitError,
    UnexpectedStateError,
    WaitCancelledError,
    WaitError,
    WaitTimeoutError,
)

# Logging
from statewait.logging import LogConfig, setup_logging, teardown_logging

# Specification types
from statewait.spec import Observation, WaitPolicy, WaitSpec

# Engine
from statewait.waiter import wait_for_state, wait_for_state_sync

__all__ = [
    "CancelToken",
    "Clock",
    "ConfigurationError",
    "FatalProbeError",
    "LogConfig",
    "MonotonicClock",
    "Observation",
    "ProbeFailedError",
    "ResourceNotFoundError",
    "StateWaitError",
    "UnexpectedStateError",
    "WaitCancelledError",
    "WaitError",
    "WaitPolicy",
    "WaitSpec",
    "WaitTimeoutError",
    "setup_logging",
    "teardown_logging",
    "wait_for_state",
    "wait_for_state_sync",
]
