"""Wait specification types.

WaitSpec is the immutable description of one wait call: which labels mean
"still in progress", which mean "done", how long to keep trying and how
fast to poll. WaitPolicy is the reusable part of it (labels and cadence
without the probe), meant to live in per-resource constant tables.

Example:
    from statewait import Observation, WaitSpec, wait_for_state

    async def probe() -> Observation[dict]:
        sub = await describe(name)
        if sub is None:
            return Observation.absent()
        return Observation(sub["Status"], sub)

    spec = WaitSpec(
        probe=probe,
        pending={"creating"},
        target={"active"},
        timeout=timedelta(minutes=5),
    )
    sub = await wait_for_state(spec)
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from statewait.constants import (
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_BASE_INTERVAL,
    DEFAULT_MAX_INTERVAL,
    DEFAULT_NOT_FOUND_CHECKS,
    DEFAULT_TARGET_OCCURRENCES,
)
from statewait.core.exceptions import ConfigurationError
from statewait.retry import RetryPredicate, default_retryable

type Duration = float | int | timedelta
type Probe[T] = Callable[[], Awaitable[Observation[T]]] | Callable[[], Observation[T]]


def to_seconds(value: Duration) -> float:
    """Normalize a duration given as seconds or timedelta to float seconds."""
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ConfigurationError(f"Expected a duration in seconds or a timedelta, got {value!r}")
    return float(value)


def _label_set(name: str, labels: Iterable[str]) -> frozenset[str]:
    if isinstance(labels, str):
        raise ConfigurationError(f"{name} must be a collection of labels, not the string {labels!r}")
    result = frozenset(labels)
    for label in result:
        if not isinstance(label, str) or not label:
            raise ConfigurationError(f"{name} labels must be non-empty strings, got {label!r}")
    # StrEnum members become their plain values
    return frozenset(str(label) for label in result)


@dataclass(frozen=True, slots=True)
class Observation[T]:
    """Result of one probe call.

    An empty ``state`` means the resource was not found.
    """

    state: str
    result: T | None = None

    @classmethod
    def absent(cls) -> Observation[Any]:
        return cls("", None)

    @property
    def not_found(self) -> bool:
        return self.state == ""


@dataclass(frozen=True, slots=True, kw_only=True)
class WaitSpec[T]:
    """Immutable configuration of a single wait call.

    Args:
        probe: Zero-argument callable (sync or async) returning an Observation.
            Raise to report a failed probe.
        pending: Labels meaning the transition is still in progress.
        target: Labels meaning the transition completed. Empty means the
            resource disappearing is the success condition.
        timeout: Wall-clock budget for the whole call, including ``delay``.
        delay: Grace period before the first probe.
        min_interval: Floor on the spacing between probes.
        base_interval: First backoff interval.
        max_interval: Ceiling of the backoff interval.
        backoff_factor: Multiplier applied to the interval after each probe.
        poll_interval: Fixed interval replacing the exponential schedule.
        not_found_checks: Consecutive not-found observations tolerated while
            ``target`` is non-empty.
        target_occurrences: Consecutive target observations required.
        retryable: Predicate deciding whether a probe error is transient.
        description: Human-readable name used in logs and errors.
    """

    probe: Probe[T]
    pending: Iterable[str] = field(default_factory=frozenset)
    target: Iterable[str] = field(default_factory=frozenset)
    timeout: Duration
    delay: Duration = 0.0
    min_interval: Duration = 0.0
    base_interval: Duration = DEFAULT_BASE_INTERVAL
    max_interval: Duration = DEFAULT_MAX_INTERVAL
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
    poll_interval: Duration | None = None
    not_found_checks: int = DEFAULT_NOT_FOUND_CHECKS
    target_occurrences: int = DEFAULT_TARGET_OCCURRENCES
    retryable: RetryPredicate = default_retryable
    description: str = "resource"

    def __post_init__(self) -> None:
        if not callable(self.probe):
            raise ConfigurationError(f"probe must be callable, got {self.probe!r}")

        pending = _label_set("pending", self.pending)
        target = _label_set("target", self.target)
        if overlap := pending & target:
            raise ConfigurationError(
                f"pending and target must be disjoint, both contain {sorted(overlap)}"
            )
        object.__setattr__(self, "pending", pending)
        object.__setattr__(self, "target", target)

        for name in ("timeout", "delay", "min_interval", "base_interval", "max_interval"):
            object.__setattr__(self, name, to_seconds(getattr(self, name)))
        if self.poll_interval is not None:
            object.__setattr__(self, "poll_interval", to_seconds(self.poll_interval))

        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")
        if self.delay < 0:
            raise ConfigurationError(f"delay must not be negative, got {self.delay}")
        if self.min_interval < 0:
            raise ConfigurationError(f"min_interval must not be negative, got {self.min_interval}")
        if self.base_interval <= 0 or self.max_interval <= 0:
            raise ConfigurationError("base_interval and max_interval must be positive")
        if self.backoff_factor < 1:
            raise ConfigurationError(f"backoff_factor must be >= 1, got {self.backoff_factor}")
        if self.poll_interval is not None and self.poll_interval <= 0:
            raise ConfigurationError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.not_found_checks < 1:
            raise ConfigurationError(f"not_found_checks must be >= 1, got {self.not_found_checks}")
        if self.target_occurrences < 1:
            raise ConfigurationError(
                f"target_occurrences must be >= 1, got {self.target_occurrences}"
            )

    @property
    def expects_absence(self) -> bool:
        """True for deletion waits, where "not found" is the success condition."""
        return not self.target


@dataclass(frozen=True, slots=True)
class WaitPolicy:
    """Labels and cadence for one kind of resource transition.

    Policies are plain data; ``to_spec`` pairs one with a probe. An explicit
    ``timeout`` wins over ``overrides``, which win over the policy itself.
    """

    pending: frozenset[str]
    target: frozenset[str] = frozenset()
    timeout: float | None = None
    delay: float = 0.0
    min_interval: float = 0.0

    def to_spec[T](
        self,
        probe: Probe[T],
        *,
        timeout: Duration | None = None,
        description: str = "resource",
        overrides: Mapping[str, Any] | None = None,
    ) -> WaitSpec[T]:
        params: dict[str, Any] = {
            "delay": self.delay,
            "min_interval": self.min_interval,
            "timeout": self.timeout,
            **(overrides or {}),
        }
        if timeout is not None:
            params["timeout"] = timeout
        if params["timeout"] is None:
            raise ConfigurationError(f"No timeout given for {description} and the policy has none")

        return WaitSpec(
            probe=probe,
            pending=self.pending,
            target=self.target,
            description=description,
            **params,
        )
