"""Session registry service.

Keeps every fire session of the service in memory together with its
renderer, animator and environment refresher. Everything runs on the
application's event loop; no threads are involved.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Callable

from firefront.environment.refresher import EnvironmentRefresher
from firefront.environment.source import EnvironmentSource
from firefront.geodesy import WebMercatorProjector
from firefront.spread.animator import RecordingRenderer, SpreadAnimator
from firefront.spread.session import FireSession
from firefront.types import GeoPoint, SpreadFrame

from firefront_api.schemas.session import SessionCreate
from firefront_api.settings import ServiceSettings

logger = logging.getLogger(__name__)

FrameCallback = Callable[[str, GeoPoint, SpreadFrame], None]


class SessionHandle:
    """Everything the service tracks for one session."""

    def __init__(
        self,
        session_id: str,
        session: FireSession,
        source: EnvironmentSource | None,
        on_frame: FrameCallback | None = None,
    ):
        self.id = session_id
        self.session = session
        self.renderer = RecordingRenderer(on_present=self._presented)
        self.refresher = (
            EnvironmentRefresher(session, source) if source is not None else None
        )
        self.animator = SpreadAnimator(session, self.renderer, self.refresher)
        self._on_frame = on_frame
        self._background: set[asyncio.Task] = set()

    @property
    def projector(self) -> WebMercatorProjector | None:
        projector = self.session.projector
        return projector if isinstance(projector, WebMercatorProjector) else None

    def _presented(self, ignition: GeoPoint, frame: SpreadFrame) -> None:
        if self._on_frame is not None:
            self._on_frame(self.id, ignition, frame)

    def spawn(self, coro) -> asyncio.Task:
        """Run a coroutine in the background, keeping a reference to it."""
        task = asyncio.get_running_loop().create_task(self._logged(coro))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    async def _logged(self, coro) -> None:
        try:
            await coro
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Background task for session %s failed", self.id)

    def set_ignition(self, point: GeoPoint) -> None:
        """Set the ignition point and sample conditions there once."""
        self.session.set_ignition(point)
        if self.refresher is not None:
            self.spawn(self.refresher.refresh_once())


class SessionRegistry:
    """Creates and looks up sessions.

    Stores sessions in memory only; nothing survives a restart.
    """

    def __init__(
        self,
        settings: ServiceSettings | None = None,
        source: EnvironmentSource | None = None,
    ) -> None:
        self.settings = settings or ServiceSettings()
        self.source = source
        self._sessions: dict[str, SessionHandle] = {}

    def create(
        self, params: SessionCreate, on_frame: FrameCallback | None = None
    ) -> SessionHandle:
        """Create a session, optionally with its ignition point already set.

        Raises:
            ValueError: The requested timing is inconsistent
        """
        config = self.settings.animation_config(
            total_sim_minutes=params.total_sim_minutes,
            step_minutes=params.step_minutes,
            min_spacing=params.min_spacing,
        )
        zoom = params.zoom if params.zoom is not None else self.settings.zoom
        projector = WebMercatorProjector(zoom) if zoom is not None else None

        session_id = str(uuid.uuid4())[:8]
        handle = SessionHandle(
            session_id,
            FireSession(config, projector),
            self.source,
            on_frame=on_frame,
        )
        self._sessions[session_id] = handle
        logger.info("Session %s created (%d steps)", session_id, config.step_count)

        if params.ignition is not None:
            handle.set_ignition(GeoPoint(params.ignition.lat, params.ignition.lng))
        return handle

    def get(self, session_id: str) -> SessionHandle | None:
        return self._sessions.get(session_id)

    def shutdown(self) -> None:
        for handle in self._sessions.values():
            handle.animator.reset()
        self._sessions.clear()
