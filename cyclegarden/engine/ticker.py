"""Background growth ticker.

Fires one growth tick immediately on start, then one every
``interval_seconds`` (an hour by default) until stopped.  The engine itself
is timer-agnostic; this is the only place that schedules ticks.

Usage::

    ticker = GrowthTicker(engine, interval_seconds=3600)
    ticker.start()
    ...
    await ticker.stop()
"""

from __future__ import annotations

import asyncio
import logging

from cyclegarden.engine.garden import GardenEngine

logger = logging.getLogger("cyclegarden.engine.ticker")


class GrowthTicker:
    """Run ``GardenEngine.tick`` on a fixed interval inside the event loop."""

    def __init__(self, engine: GardenEngine, interval_seconds: float = 3600.0) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self._engine = engine
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def tick_once(self) -> float:
        """Run a single tick now and return the growth added."""
        added = self._engine.tick()
        self.ticks += 1
        return added

    async def _run(self) -> None:
        while True:
            try:
                self.tick_once()
            except Exception:
                # In-memory state is unchanged on failure; the next tick
                # credits the same elapsed time.
                logger.exception("Growth tick failed")
            await asyncio.sleep(self._interval)

    def start(self) -> None:
        """Start ticking on the running event loop (no-op if already running)."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("Growth ticker started (every %.0f s)", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        except Exception as exc:
            logger.error("Growth ticker task had already failed: %s", exc)
        self._task = None
        logger.info("Growth ticker stopped after %d tick(s)", self.ticks)
