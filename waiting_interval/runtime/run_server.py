"""Entry point for running a probe service as a separate process.

This file wires URL probes to an asyncio-backed `LoopTimer` through an
`IntervalManager`, then serves the HTTP control endpoints with uvicorn.
Each target is polled with the configured delay progression, and a slow
target never has two requests in flight. See `runtime/config.py` for the
environment variables.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import aiohttp
import uvicorn
from fastapi import FastAPI

from waiting_interval.manager import IntervalManager
from waiting_interval.runtime.config import ServerSettings
from waiting_interval.runtime.http_control import HttpControl
from waiting_interval.runtime.loop_timer import LoopTimer
from waiting_interval.runtime.probe import UrlProbe

logger = logging.getLogger(__name__)


def build_app(settings: ServerSettings, manager: Optional[IntervalManager] = None) -> HttpControl:
    """Create the control app; probe cycles start and stop with its lifespan."""
    manager = manager or IntervalManager(LoopTimer(), await_completion=True)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        session = aiohttp.ClientSession()
        for name, url in sorted(settings.targets.items()):
            probe = UrlProbe(name, url, session, timeout_ms=settings.timeout_ms)
            cycle_id = manager.start(probe, settings.delays_ms)
            logger.info("Probing %s (%s) as cycle %s", name, url, cycle_id)
        try:
            yield
        finally:
            stopped = manager.stop_all()
            logger.info("Stopped %s cycles", stopped)
            await session.close()

    return HttpControl(manager, lifespan=lifespan)


def main():
    """Read settings, configure logging and run the HTTP server."""
    settings = ServerSettings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not settings.targets:
        logger.warning("PROBE_TARGETS is empty; the server will have no cycles")
    control = build_app(settings)
    uvicorn.run(control.app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
