from __future__ import annotations

import pytest
from loguru import logger

from statewait import LogConfig, WaitSpec, setup_logging, teardown_logging, wait_for_state
from tests.conftest import FakeClock, ScriptedProbe

pytestmark = [pytest.mark.unit]


@pytest.fixture
def records():
    handler_ids = setup_logging(LogConfig(console=False))
    collected: list[dict] = []
    sink = logger.add(lambda m: collected.append(m.record), level="DEBUG", filter="statewait")
    yield collected
    logger.remove(sink)
    teardown_logging(handler_ids)


@pytest.mark.asyncio
async def test_records_carry_wait_context(records: list[dict]):
    probe = ScriptedProbe("creating", "active")
    spec = WaitSpec(
        probe=probe, pending={"creating"}, target={"active"}, timeout=60, description="db-1"
    )

    await wait_for_state(spec, clock=FakeClock())

    observed = [(r["extra"]["attempt"], r["message"]) for r in records if r["message"].startswith("state=")]
    assert observed == [(1, "state=creating"), (2, "state=active")]
    assert all(r["extra"]["wait"] == "db-1" for r in records)
    assert records[-1]["message"].startswith("Reached active after 2 poll(s)")


@pytest.mark.asyncio
async def test_transient_errors_are_warned(records: list[dict]):
    probe = ScriptedProbe(RuntimeError("throttled"), "active")
    spec = WaitSpec(probe=probe, pending={"creating"}, target={"active"}, timeout=60)

    await wait_for_state(spec, clock=FakeClock())

    warnings = [r for r in records if r["level"].name == "WARNING"]
    assert len(warnings) == 1
    assert "RuntimeError: throttled" in warnings[0]["message"]
    assert warnings[0]["extra"]["attempt"] == 1


@pytest.mark.asyncio
async def test_file_sink_renders_context(tmp_path):
    path = tmp_path / "waits.log"
    handler_ids = setup_logging(LogConfig(console=False, file=str(path)))
    try:
        spec = WaitSpec(
            probe=ScriptedProbe("active"), pending={"creating"}, target={"active"}, timeout=60,
            description="db-1",
        )
        await wait_for_state(spec, clock=FakeClock())
    finally:
        teardown_logging(handler_ids)

    text = path.read_text()
    assert "[db-1 #1] state=active" in text
    assert "<cyan>" not in text


@pytest.mark.asyncio
async def test_silent_until_enabled():
    collected: list[str] = []
    sink = logger.add(lambda m: collected.append(m.record["name"]), level="DEBUG")
    try:
        spec = WaitSpec(probe=ScriptedProbe("active"), pending={"creating"}, target={"active"}, timeout=60)
        await wait_for_state(spec, clock=FakeClock())
    finally:
        logger.remove(sink)

    assert not [name for name in collected if name.startswith("statewait")]
