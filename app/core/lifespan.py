import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from app.ai.factory import get_completion_client
from app.analytics.db import init_db, purge_old_records
from app.services.analysis_service import ResumeAnalyzer

logger = logging.getLogger(__name__)

PURGE_INTERVAL_S = 3600


async def _purge_run_log(stop: asyncio.Event, interval_s: float = PURGE_INTERVAL_S) -> None:
    while not stop.is_set():
        try:
            deleted = purge_old_records()
        except Exception as exc:  # pragma: no cover
            logger.warning("analysis_run_purge_failed: %s", exc)
        else:
            if any(deleted.values()):
                logger.info("analysis_run_purge deleted=%s", deleted)
        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(stop.wait(), timeout=interval_s)


@asynccontextmanager
async def lifespan(app):
    analyzer = ResumeAnalyzer(get_completion_client())
    app.state.analyzer = analyzer
    logger.info("resume_analyzer_ready model=%s", analyzer.model)
    init_db()

    stop = asyncio.Event()
    purger = asyncio.create_task(_purge_run_log(stop))
    try:
        yield
    finally:
        stop.set()
        purger.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await purger
