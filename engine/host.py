"""
host.py — Background event loop for the controllers
====================================================
Flask handlers run on worker threads; the controllers and their runs
live on ONE asyncio loop on a daemon thread.  Every call is marshalled
onto that loop with `asyncio.run_coroutine_threadsafe`, which also
serialises all access to a model.

    host = EngineHost().start()
    host.call(host.sorting.start, "merge")
    host.call(host.sorting.regenerate)
    host.stop()
"""

import asyncio
import inspect
import logging
import threading
from typing import Any, Callable, Optional

from engine.config import GridConfig, SortConfig
from engine.controller import PathfindingController, SortingController

logger = logging.getLogger(__name__)


class EngineHost:
    """
    Attributes:
        loop        : The event loop the controllers run on.
        sorting     : SortingController.
        pathfinding : PathfindingController.
    """

    def __init__(
        self,
        sort_config: Optional[SortConfig] = None,
        grid_config: Optional[GridConfig] = None,
        seed: Optional[int] = None,
    ):
        self.loop = asyncio.new_event_loop()
        self.sorting = SortingController(sort_config, seed=seed)
        self.pathfinding = PathfindingController(grid_config)
        self._thread = threading.Thread(target=self._serve, name="engine-loop", daemon=True)

    def _serve(self) -> None:
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()

    def start(self) -> "EngineHost":
        if not self._thread.is_alive():
            self._thread.start()
            logger.info("engine loop started")
        return self

    def call(self, fn: Callable, *args, timeout: float = 10.0, **kwargs) -> Any:
        """
        Run `fn(*args, **kwargs)` on the engine loop and return its result.
        Coroutine results are awaited there.  Exceptions propagate.
        """
        async def invoke():
            result = fn(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
            return result

        return asyncio.run_coroutine_threadsafe(invoke(), self.loop).result(timeout)

    def stop(self, timeout: float = 5.0) -> None:
        """Settle both controllers, then stop and close the loop."""
        if not self._thread.is_alive():
            return
        self.call(self._shutdown, timeout=timeout)
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join(timeout)
        self.loop.close()
        logger.info("engine loop stopped")

    async def _shutdown(self) -> None:
        await self.sorting._settle()
        await self.pathfinding._settle()
