"""Minimal HTTP control surface for an `IntervalManager`.

This module exposes three endpoints via FastAPI:
- GET /intervals: brief state of every active cycle.
- GET /intervals/{cycle_id}: brief state of one cycle.
- DELETE /intervals/{cycle_id}: stop a cycle.

Cycles are started in-process (handlers are Python callables); the API only
inspects and stops them.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException

from waiting_interval.manager import IntervalManager

logger = logging.getLogger(__name__)


class HttpControl:
    """FastAPI app bound to one manager.

    Parameters:
    - manager: the `IntervalManager` to inspect and control.
    - lifespan: optional FastAPI lifespan context, used by `run_server` to
      start and stop cycles together with the server.
    """

    def __init__(self, manager: IntervalManager, lifespan: Optional[Any] = None):
        self.manager = manager
        self.app = FastAPI(title="waiting-interval", lifespan=lifespan)

        @self.app.get("/intervals")
        async def list_intervals() -> Dict[str, Any]:
            return self.manager.brief_state()

        @self.app.get("/intervals/{cycle_id}")
        async def get_interval(cycle_id: int) -> Dict[str, Any]:
            cycle = self.manager.get(cycle_id)
            if cycle is None:
                raise HTTPException(status_code=404, detail=f"no active cycle {cycle_id}")
            return cycle.brief_state()

        @self.app.delete("/intervals/{cycle_id}")
        async def stop_interval(cycle_id: int) -> Dict[str, Any]:
            if not self.manager.stop(cycle_id):
                raise HTTPException(status_code=404, detail=f"no active cycle {cycle_id}")
            logger.info("Cycle %s stopped over HTTP", cycle_id)
            return {"ok": True, "stopped": cycle_id}
