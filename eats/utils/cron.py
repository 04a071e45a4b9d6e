import asyncio
import logging
from typing import Callable

from eats.core.timezone_utils import seconds_until_next_midnight

logger = logging.getLogger("eats.cron")


async def run_daily_at_midnight(job: Callable[[], object], name: str = None):
    """Run ``job`` in a worker thread at every local midnight until cancelled.

    A failing run is logged and the loop waits for the next midnight.
    """
    name = name or getattr(job, "__name__", "job")
    while True:
        delay = seconds_until_next_midnight()
        logger.debug(f"{name}: next run in {int(delay)}s")
        await asyncio.sleep(delay)
        try:
            result = await asyncio.to_thread(job)
            logger.info(f"{name}: finished ({result})")
        except Exception:
            logger.exception(f"{name}: run failed")


def start_daily_job(job: Callable[[], object], name: str = None) -> asyncio.Task:
    return asyncio.get_running_loop().create_task(run_daily_at_midnight(job, name))
