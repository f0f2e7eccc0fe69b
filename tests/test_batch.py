import asyncio

from figma_assets.core.batch import run_batch
from figma_assets.exceptions import TransportError


async def _ok(delay=0.0):
    await asyncio.sleep(delay)


async def _fail(message):
    raise TransportError(message)


async def _boom():
    raise RuntimeError("kaboom")


async def test_run_batch_collects_every_result_in_order(tmp_path):
    units = [
        ("slow", tmp_path / "slow", _ok(0.02)),
        ("broken", tmp_path / "broken", _fail("HTTP 500")),
        ("fast", tmp_path / "fast", _ok()),
    ]

    outcome = await run_batch(units)

    assert [r.label for r in outcome.results] == ["slow", "broken", "fast"]
    assert [r.ok for r in outcome.results] == [True, False, True]
    assert outcome.results[1].error == "HTTP 500"
    assert outcome.results[1].target == tmp_path / "broken"
    assert outcome.total == 3
    assert outcome.succeeded == 2
    assert outcome.failed == 1
    assert outcome.has_failures


async def test_run_batch_does_not_fail_fast():
    finished = []

    async def late():
        await asyncio.sleep(0.02)
        finished.append("late")

    outcome = await run_batch([("first", None, _fail("no")), ("late", None, late())])

    assert finished == ["late"]
    assert outcome.failed == 1


async def test_run_batch_converts_unexpected_exceptions():
    outcome = await run_batch([("weird", None, _boom())])

    assert outcome.failed == 1
    assert "kaboom" in outcome.failures[0].error


async def test_run_batch_with_no_units_is_empty():
    outcome = await run_batch([])

    assert outcome.is_empty
    assert not outcome.has_failures
