"""Tests for the manifest readiness wait."""

import asyncio
import logging

import pytest
from manifest_require.waiting import wait_for_assets


def ready_after(checks: int):
    state = {"calls": 0}

    def check() -> bool:
        state["calls"] += 1
        return state["calls"] > checks

    return check, state


@pytest.mark.asyncio
async def test_ready_immediately():
    check, state = ready_after(0)
    calls = []

    await wait_for_assets(check, lambda: calls.append(True), check_interval=0.01)

    assert calls == [True]
    assert state["calls"] == 1


@pytest.mark.asyncio
async def test_polls_until_ready_and_reports(caplog):
    check, state = ready_after(5)

    with caplog.at_level(logging.INFO, logger="manifest_require"):
        await wait_for_assets(
            check,
            description="webpack-assets.json",
            check_interval=0.01,
            message_interval=0.02,
        )

    assert state["calls"] == 6
    assert "waiting for the first bundler build to finish" in caplog.text


@pytest.mark.asyncio
async def test_async_callback_is_awaited():
    check, _ = ready_after(1)

    async def done():
        return "finished"

    assert await wait_for_assets(check, done, check_interval=0.01) == "finished"


@pytest.mark.asyncio
async def test_cancellation_stops_polling():
    check, state = ready_after(10_000)
    task = asyncio.create_task(wait_for_assets(check, check_interval=0.01))
    await asyncio.sleep(0.05)

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    calls = state["calls"]
    await asyncio.sleep(0.03)
    assert state["calls"] == calls
