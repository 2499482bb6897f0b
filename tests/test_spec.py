from __future__ import annotations

from datetime import timedelta
from enum import StrEnum

import pytest

from statewait import ConfigurationError, Observation, WaitPolicy, WaitSpec

pytestmark = [pytest.mark.unit]


async def probe() -> Observation[None]:
    return Observation.absent()


class Status(StrEnum):
    CREATING = "creating"
    ACTIVE = "active"


class TestObservation:
    def test_absent(self):
        obs = Observation.absent()
        assert obs.not_found
        assert obs.state == ""
        assert obs.result is None

    def test_found(self):
        obs = Observation("active", {"id": 1})
        assert not obs.not_found
        assert obs.result == {"id": 1}


class TestWaitSpec:
    def test_normalizes_labels_and_durations(self):
        spec = WaitSpec(
            probe=probe,
            pending=["creating", "creating"],
            target=(Status.ACTIVE,),
            timeout=timedelta(minutes=5),
            delay=timedelta(seconds=30),
            min_interval=10,
        )

        assert spec.pending == frozenset({"creating"})
        assert spec.target == frozenset({"active"})
        assert type(next(iter(spec.target))) is str
        assert spec.timeout == 300.0
        assert spec.delay == 30.0
        assert spec.min_interval == 10.0

    def test_empty_target_expects_absence(self):
        spec = WaitSpec(probe=probe, pending={"deleting"}, timeout=60)
        assert spec.expects_absence
        assert spec.target == frozenset()

    def test_is_immutable(self):
        spec = WaitSpec(probe=probe, pending={"creating"}, target={"active"}, timeout=60)
        with pytest.raises(AttributeError):
            spec.timeout = 10  # type: ignore[misc]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"timeout": 0},
            {"timeout": -1},
            {"timeout": timedelta(0)},
            {"timeout": 60, "delay": -1},
            {"timeout": 60, "min_interval": -0.5},
            {"timeout": 60, "base_interval": 0},
            {"timeout": 60, "max_interval": 0},
            {"timeout": 60, "backoff_factor": 0.5},
            {"timeout": 60, "poll_interval": 0},
            {"timeout": 60, "not_found_checks": 0},
            {"timeout": 60, "target_occurrences": 0},
            {"timeout": "60"},
            {"timeout": True},
        ],
    )
    def test_rejects_invalid_cadence(self, kwargs):
        with pytest.raises(ConfigurationError):
            WaitSpec(probe=probe, pending={"creating"}, target={"active"}, **kwargs)

    def test_rejects_overlapping_labels(self):
        with pytest.raises(ConfigurationError, match="disjoint"):
            WaitSpec(probe=probe, pending={"creating", "active"}, target={"active"}, timeout=60)

    def test_rejects_empty_label(self):
        with pytest.raises(ConfigurationError):
            WaitSpec(probe=probe, pending={""}, target={"active"}, timeout=60)

    def test_rejects_bare_string_labels(self):
        with pytest.raises(ConfigurationError):
            WaitSpec(probe=probe, pending="creating", target={"active"}, timeout=60)

    def test_rejects_non_callable_probe(self):
        with pytest.raises(ConfigurationError):
            WaitSpec(probe="nope", pending={"creating"}, timeout=60)  # type: ignore[arg-type]


class TestWaitPolicy:
    policy = WaitPolicy(
        pending=frozenset({"creating"}),
        target=frozenset({"active"}),
        timeout=300,
        delay=30,
        min_interval=10,
    )

    def test_to_spec_uses_policy_cadence(self):
        spec = self.policy.to_spec(probe, description="thing")

        assert spec.timeout == 300
        assert spec.delay == 30
        assert spec.min_interval == 10
        assert spec.description == "thing"
        assert spec.probe is probe

    def test_explicit_timeout_wins_over_overrides(self):
        spec = self.policy.to_spec(probe, timeout=60, overrides={"timeout": 900, "delay": 0})

        assert spec.timeout == 60
        assert spec.delay == 0

    def test_overrides_win_over_policy(self):
        spec = self.policy.to_spec(probe, overrides={"timeout": 900, "max_interval": 30})

        assert spec.timeout == 900
        assert spec.max_interval == 30

    def test_policy_without_timeout_needs_one(self):
        policy = WaitPolicy(pending=frozenset({"deleting"}))

        with pytest.raises(ConfigurationError):
            policy.to_spec(probe)

        assert policy.to_spec(probe, timeout=60).expects_absence
