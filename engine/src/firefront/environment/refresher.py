"""Periodic environmental refresh for a fire session.

Polls the environment source at the ignition point while an animation
is running. Fetches never overlap: a cycle that finds the previous fetch
still in flight is skipped. Each fetch takes a sequence number from the
session before it starts, and the session only accepts results newer
than the last one applied.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from firefront.errors import FireFrontError

if TYPE_CHECKING:
    from firefront.environment.source import EnvironmentSource
    from firefront.spread.session import FireSession

logger = logging.getLogger(__name__)


class EnvironmentRefresher:
    """Cooperative poll loop that keeps session parameters current."""

    def __init__(
        self,
        session: FireSession,
        source: EnvironmentSource,
        interval_s: float | None = None,
    ):
        self.session = session
        self.source = source
        self.interval_s = (
            interval_s if interval_s is not None else session.config.poll_interval_s
        )
        self.iterations = 0
        self._generation = 0
        self._task: asyncio.Task | None = None
        self._in_flight: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start polling on the running event loop (no-op if already polling)."""
        if self.running:
            return
        self._generation += 1
        self.iterations = 0
        self._task = asyncio.get_running_loop().create_task(self._run(self._generation))

    def stop(self) -> None:
        """Stop polling and abandon any fetch in flight. Idempotent."""
        self._generation += 1
        for task in (self._task, self._in_flight):
            if task is not None and not task.done():
                task.cancel()
        self._task = None
        self._in_flight = None

    async def refresh_once(self) -> bool:
        """Fetch once at the ignition point and apply the result.

        Returns:
            True if the session parameters were updated. Failures are
            logged and leave the previous parameters in place.
        """
        point = self.session.ignition
        if point is None:
            return False

        generation = self._generation
        seq = self.session.begin_fetch()
        try:
            sample = await self.source.fetch(point)
        except FireFrontError as e:
            logger.warning("Environmental fetch #%d failed: %s", seq, e)
            return False

        if generation != self._generation or self.session.ignition != point:
            logger.debug("Discarding fetch #%d after stop/clear", seq)
            return False

        applied = self.session.apply_sample(sample, seq)
        if applied:
            logger.info(
                "Effective spread rate: %.3f m/step (%s)",
                self.session.parameters.rate,
                sample.describe(),
            )
        return applied

    async def _refresh_guarded(self) -> None:
        try:
            await self.refresh_once()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Unexpected error during environmental refresh")

    async def _run(self, generation: int) -> None:
        while generation == self._generation:
            self.iterations += 1
            if self._in_flight is None or self._in_flight.done():
                logger.debug("Environmental update iteration %d", self.iterations)
                self._in_flight = asyncio.get_running_loop().create_task(
                    self._refresh_guarded()
                )
            else:
                logger.debug("Previous fetch still in flight, skipping iteration %d", self.iterations)
            await asyncio.sleep(self.interval_s)
