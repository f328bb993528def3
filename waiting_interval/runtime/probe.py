"""Async URL probe used as a cycle handler by `run_server`."""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

logger = logging.getLogger(__name__)


class UrlProbe:
    """GET `url` once per firing and remember how it went.

    Meant for `IntervalManager(..., await_completion=True)`, so a slow
    endpoint delays the next probe instead of piling up requests.
    """

    def __init__(self, name: str, url: str, session: aiohttp.ClientSession, timeout_ms: int = 2000):
        self.name = name
        self.url = url
        self.session = session
        self.timeout = aiohttp.ClientTimeout(total=timeout_ms / 1000.0)
        self.probes = 0
        self.last_status: Optional[int] = None
        self.last_error: Optional[str] = None

    def brief_state(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "url": self.url,
            "probes": self.probes,
            "last_status": self.last_status,
            "last_error": self.last_error,
        }

    async def __call__(self) -> None:
        self.probes += 1
        try:
            async with self.session.get(self.url, timeout=self.timeout) as resp:
                self.last_status = resp.status
                self.last_error = None
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            # Recorded, not raised: the cycle keeps probing.
            self.last_status = None
            self.last_error = repr(exc)
            logger.info("Probe %s (%s) failed: %s", self.name, self.url, self.last_error)
        else:
            logger.debug("Probe %s (%s) -> %s", self.name, self.url, self.last_status)
