from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest
from botocore.exceptions import ClientError

from statewait import Observation

NOT_FOUND = object()


class FakeClock:
    """Virtual clock: sleeping advances time instantly and is recorded."""

    def __init__(self, start: float = 1000.0) -> None:
        self.time = start
        self.sleeps: list[float] = []
        self.on_sleep: Callable[[FakeClock], None] | None = None

    def now(self) -> float:
        return self.time

    def advance(self, seconds: float) -> None:
        self.time += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.time += seconds
        if self.on_sleep is not None:
            self.on_sleep(self)
        await asyncio.sleep(0)


class ScriptedProbe:
    """Async probe replaying a script of states, NOT_FOUND markers and exceptions.

    Once the script is exhausted the last step repeats. Each step's result is
    ``{"poll": n, "state": label}`` so tests can tell which call produced it.
    """

    def __init__(
        self,
        *steps: Any,
        clock: FakeClock | None = None,
        latency: float = 0.0,
        on_call: Callable[[int], None] | None = None,
    ) -> None:
        self.steps = list(steps)
        self.calls = 0
        self.clock = clock
        self.latency = latency
        self.on_call = on_call

    async def __call__(self) -> Observation[dict[str, Any]]:
        self.calls += 1
        if self.clock is not None and self.latency:
            self.clock.advance(self.latency)
        if self.on_call is not None:
            self.on_call(self.calls)

        step = self.steps[min(self.calls, len(self.steps)) - 1]
        if isinstance(step, BaseException):
            raise step
        if step is NOT_FOUND:
            return Observation.absent()
        return Observation(step, {"poll": self.calls, "state": step})


def client_error(code: str, operation: str = "DescribeDBInstances", status: int = 400) -> ClientError:
    return ClientError(
        {
            "Error": {"Code": code, "Message": f"{code} raised"},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        operation,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


class FakeRDSClient:
    """Stand-in for an aiobotocore RDS client.

    ``responses`` maps an operation name to a list of steps (response dicts
    or exceptions). Steps are consumed in order; the last one repeats.
    """

    def __init__(self, **responses: list[Any]) -> None:
        self.responses = {op: list(steps) for op, steps in responses.items()}
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def _respond(self, operation: str, kwargs: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((operation, kwargs))
        steps = self.responses[operation]
        step = steps.pop(0) if len(steps) > 1 else steps[0]
        if isinstance(step, BaseException):
            raise step
        return step

    async def describe_event_subscriptions(self, **kwargs: Any) -> dict[str, Any]:
        return await self._respond("describe_event_subscriptions", kwargs)

    async def describe_db_proxy_endpoints(self, **kwargs: Any) -> dict[str, Any]:
        return await self._respond("describe_db_proxy_endpoints", kwargs)

    async def describe_db_clusters(self, **kwargs: Any) -> dict[str, Any]:
        return await self._respond("describe_db_clusters", kwargs)

    async def describe_db_instances(self, **kwargs: Any) -> dict[str, Any]:
        return await self._respond("describe_db_instances", kwargs)

    def count(self, operation: str) -> int:
        return sum(1 for op, _ in self.calls if op == operation)


def db_instance(instance_id: str, status: str) -> dict[str, Any]:
    return {"DBInstances": [{"DBInstanceIdentifier": instance_id, "DBInstanceStatus": status}]}


def db_cluster(cluster_id: str, **fields: Any) -> dict[str, Any]:
    return {"DBClusters": [{"DBClusterIdentifier": cluster_id, **fields}]}
