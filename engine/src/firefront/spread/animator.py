"""Spread animator: drives the simulation clock in real time.

The animator steps the time index from 0 to the configured step count,
recomputing the three scenario fronts from the session's *current*
parameters at every tick and handing them to a renderer. Ticks run on
the asyncio loop and reschedule themselves after their work is done, so
they never overlap and never skip an index.

Usage:
    animator = SpreadAnimator(session, renderer, refresher)
    animator.start(total_real_duration_ms=10_000)
    await animator.wait()
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Callable, Generator, Protocol

from firefront.errors import AnimatorBusyError
from firefront.spread.session import FireSession
from firefront.types import GeoPoint, SimulationState, SpreadFrame

if TYPE_CHECKING:
    from firefront.environment.refresher import EnvironmentRefresher

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    """Drawing surface for the ignition marker and scenario fronts."""

    def present(self, ignition: GeoPoint, frame: SpreadFrame) -> None: ...

    def clear(self) -> None: ...


class RecordingRenderer:
    """Renderer that keeps every presented frame in memory.

    An optional ``on_present`` callback is invoked for each frame, which
    is how the API streams frames to WebSocket clients.
    """

    def __init__(self, on_present: Callable[[GeoPoint, SpreadFrame], None] | None = None):
        self.frames: list[SpreadFrame] = []
        self.ignition: GeoPoint | None = None
        self.on_present = on_present

    @property
    def latest(self) -> SpreadFrame | None:
        return self.frames[-1] if self.frames else None

    def present(self, ignition: GeoPoint, frame: SpreadFrame) -> None:
        self.ignition = ignition
        self.frames.append(frame)
        if self.on_present is not None:
            self.on_present(ignition, frame)

    def clear(self) -> None:
        self.frames = []
        self.ignition = None


class SpreadAnimator:
    """Idle -> Running -> Complete state machine over the simulation clock.

    Attributes:
        session: Fire session providing ignition and parameters
        renderer: Where computed frames are presented
        refresher: Optional environment poller, run while animating
        state: Current lifecycle state
        time_index: Next index to be rendered while running
    """

    def __init__(
        self,
        session: FireSession,
        renderer: Renderer,
        refresher: EnvironmentRefresher | None = None,
    ):
        self.session = session
        self.renderer = renderer
        self.refresher = refresher
        self.state = SimulationState.IDLE
        self.time_index = 0
        self._generation = 0
        self._task: asyncio.Task | None = None

    @property
    def step_count(self) -> int:
        return self.session.config.step_count

    def start(self, total_real_duration_ms: float | None = None) -> None:
        """Start animating from time index 0.

        Args:
            total_real_duration_ms: Wall-clock length of the whole run.
                Defaults to the configured run time.

        Raises:
            MissingIgnitionError: No ignition point is set
            AnimatorBusyError: The animator is not idle
        """
        self.session.require_ignition()
        if self.state != SimulationState.IDLE:
            raise AnimatorBusyError(f"Cannot start while {self.state.value}")
        if total_real_duration_ms is None:
            total_real_duration_ms = self.session.config.default_run_seconds * 1000.0
        if total_real_duration_ms < 0:
            raise ValueError("Run duration must be non-negative")

        delay_s = total_real_duration_ms / self.step_count / 1000.0
        self._generation += 1
        self.state = SimulationState.RUNNING
        self.time_index = 0
        self._task = asyncio.get_running_loop().create_task(
            self._run(self._generation, delay_s)
        )
        if self.refresher is not None:
            self.refresher.start()

        logger.info(
            "Animation started: %d steps of %.1f min, %.3fs per step",
            self.step_count,
            self.session.config.step_minutes,
            delay_s,
        )

    async def wait(self) -> None:
        """Wait until the current run completes or is reset."""
        task = self._task
        if task is not None:
            await asyncio.wait({task})

    def show(self, time_index: int) -> SpreadFrame:
        """Recompute and present a single time index (scrubbing).

        Does not change the animator state or the running clock.
        """
        if not 0 <= time_index <= self.step_count:
            raise ValueError(f"time_index must be in [0, {self.step_count}]")
        ignition = self.session.require_ignition()
        frame = self.session.compute_frame(time_index)
        self.renderer.present(ignition, frame)
        return frame

    def frames(self) -> Generator[SpreadFrame, None, None]:
        """Yield frames for every index 0..step_count without pacing."""
        for t in range(self.step_count + 1):
            yield self.session.compute_frame(t)

    def clear_predictions(self) -> None:
        """Remove drawn fronts but keep the ignition point.

        A running animation keeps its clock and draws the next tick as usual.
        """
        self.renderer.clear()
        if self.state != SimulationState.RUNNING:
            self.time_index = 0

    def reset(self) -> None:
        """Stop everything and forget the ignition point. Idempotent."""
        self._generation += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        if self.refresher is not None:
            self.refresher.stop()
        self.renderer.clear()
        self.session.clear()
        if self.state != SimulationState.IDLE:
            logger.info("Animation reset from %s", self.state.value)
        self.state = SimulationState.IDLE
        self.time_index = 0

    def _tick(self, ignition: GeoPoint) -> None:
        frame = self.session.compute_frame(self.time_index)
        self.renderer.present(ignition, frame)
        logger.debug(
            "Tick %d/%d: rate=%.3f",
            self.time_index,
            self.step_count,
            frame.parameters.rate,
        )

    def _complete(self) -> None:
        self.state = SimulationState.COMPLETE
        if self.refresher is not None:
            self.refresher.stop()
        logger.info("Animation complete after %d steps", self.step_count)

    def _abort(self) -> None:
        self.state = SimulationState.IDLE
        if self.refresher is not None:
            self.refresher.stop()

    async def _run(self, generation: int, delay_s: float) -> None:
        try:
            while generation == self._generation:
                ignition = self.session.ignition
                if ignition is None:
                    logger.warning("Ignition cleared at tick %d, stopping", self.time_index)
                    self._abort()
                    return
                if self.time_index >= self.step_count:
                    self._complete()
                    return
                self._tick(ignition)
                self.time_index += 1
                await asyncio.sleep(delay_s)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Animation tick %d failed", self.time_index)
            if generation == self._generation:
                self._abort()
