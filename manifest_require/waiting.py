"""Waiting for the bundler's first build to produce the asset manifest."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

CHECK_INTERVAL = 0.3
MESSAGE_INTERVAL = 2.0


async def wait_for_assets(
    ready_check: Callable[[], bool],
    done: Callable[[], Any] | None = None,
    *,
    description: str = "asset manifest",
    check_interval: float = CHECK_INTERVAL,
    message_interval: float = MESSAGE_INTERVAL,
) -> Any:
    """
    Poll until ready_check() holds, then call done().

    There is no timeout: the loop polls forever if the manifest never
    appears. Cancel the surrounding task to stop it.

    Args:
        ready_check: Returns True once the manifest is available
        done: Optional callback (sync or async) invoked when ready
        description: What is being waited for, used in log messages
        check_interval: Seconds between checks
        message_interval: Seconds between "still waiting" notices

    Returns:
        Whatever done() returns, or None without a callback
    """
    waited = 0.0

    while not ready_check():
        waited += check_interval
        if waited >= message_interval:
            waited = 0.0
            logger.debug(f"({description} not found)")
            logger.info("(waiting for the first bundler build to finish)")
        await asyncio.sleep(check_interval)

    if done is None:
        return None

    result = done()
    if inspect.isawaitable(result):
        result = await result
    return result
