"""Worker process for the periodic leave balance recalculation.

Runs an asyncio loop that executes the accrual engine once per
``accrual_interval_seconds``.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date

from hris.config import configure_logging, get_settings
from hris.db import dispose_engine, session_scope
from hris.services.accrual import recalculate_balances

logger = logging.getLogger(__name__)


async def run_once(as_of_date: date | None = None) -> None:
    """Run one recalculation. Failures are logged, never raised."""
    as_of_date = as_of_date or date.today()
    try:
        async with session_scope() as session:
            result = await recalculate_balances(session, as_of_date)
        logger.info(
            "Accrual run complete for %s: processed=%d updated=%d skipped=%d errors=%d",
            as_of_date,
            result.processed,
            result.updated_count,
            result.skipped,
            result.errors,
        )
    except Exception:
        logger.exception("Accrual run failed for %s", as_of_date)


async def run_accrual_loop() -> None:
    """Main worker loop."""
    interval = get_settings().accrual_interval_seconds
    logger.info("Accrual worker started, interval=%ds", interval)
    try:
        while True:
            await run_once()
            await asyncio.sleep(interval)
    finally:
        await dispose_engine()


def main() -> None:
    """Entry point for the worker process."""
    configure_logging()
    asyncio.run(run_accrual_loop())


if __name__ == "__main__":
    main()
