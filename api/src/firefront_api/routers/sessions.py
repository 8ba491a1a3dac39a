"""Fire session REST and WebSocket endpoints."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect

from firefront.environment.model import fuel_density_for
from firefront.errors import (
    AnimatorBusyError,
    IgnitionAlreadySetError,
    MissingIgnitionError,
)
from firefront.spread.export import frame_to_feature_collection
from firefront.types import (
    EnvironmentalSample,
    GeoPoint,
    LandCover,
    SimulationState,
    SpreadFrame,
    SpreadParameters,
)

from firefront_api.schemas.session import (
    EnvironmentParams,
    FrameSchema,
    FrontSchema,
    IgnitionParams,
    ParametersSchema,
    SessionCreate,
    SessionResponse,
    StartRequest,
)
from firefront_api.services.registry import SessionHandle, SessionRegistry
from firefront_api.ws.manager import ConnectionManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])

# Shared state, injected from main app
registry: SessionRegistry | None = None
ws_manager: ConnectionManager | None = None


def _parameters_to_schema(parameters: SpreadParameters) -> ParametersSchema:
    return ParametersSchema(
        rate=round(parameters.rate, 4),
        wind_direction=parameters.wind_direction,
        directional_factor=round(parameters.directional_factor, 4),
    )


def _frame_to_schema(
    frame: SpreadFrame, handle: SessionHandle, with_geojson: bool = False
) -> FrameSchema:
    """Convert an engine SpreadFrame to the API schema."""
    ignition = handle.session.ignition
    geojson = None
    if with_geojson and ignition is not None:
        geojson = frame_to_feature_collection(frame, ignition, handle.projector)
    return FrameSchema(
        time_index=frame.time_index,
        simulated_minutes=frame.simulated_minutes,
        parameters=_parameters_to_schema(frame.parameters),
        fronts=[
            FrontSchema(
                scenario=f.scenario.value,
                color=f.scenario.color,
                fill=f.scenario.fill,
                radius_m=round(f.radius_m, 3),
                radius_screen=round(f.radius_screen, 3),
                area=round(f.area, 2),
                points=[[round(x, 3), round(y, 3)] for x, y in f.points],
            )
            for f in frame.fronts
        ],
        geojson=geojson,
    )


def _session_to_response(handle: SessionHandle) -> SessionResponse:
    session = handle.session
    ignition = session.ignition
    latest = handle.renderer.latest
    return SessionResponse(
        session_id=handle.id,
        state=handle.animator.state,
        ignition=IgnitionParams(lat=ignition.lat, lng=ignition.lng) if ignition else None,
        parameters=_parameters_to_schema(session.parameters),
        reasoning=session.sample.describe() if session.sample else None,
        time_index=handle.animator.time_index,
        step_count=handle.animator.step_count,
        latest_frame=_frame_to_schema(latest, handle) if latest else None,
        subscribers=ws_manager.connection_count(handle.id) if ws_manager else 0,
    )


def _on_frame(session_id: str, ignition: GeoPoint, frame: SpreadFrame) -> None:
    """Renderer callback: broadcast frame via WebSocket."""
    if ws_manager is None or registry is None:
        return
    handle = registry.get(session_id)
    if handle is None:
        return
    ws_manager.broadcast(
        session_id,
        {
            "type": "session.frame",
            "session_id": session_id,
            "frame": _frame_to_schema(frame, handle, with_geojson=True).model_dump(),
        },
    )


async def _watch_completion(handle: SessionHandle) -> None:
    await handle.animator.wait()
    if handle.animator.state == SimulationState.COMPLETE and ws_manager is not None:
        await ws_manager.send_event(
            handle.id, {"type": "session.completed", "session_id": handle.id}
        )


def _get_handle(session_id: str) -> SessionHandle:
    if registry is None:
        raise HTTPException(status_code=500, detail="Registry not initialized")
    handle = registry.get(session_id)
    if handle is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return handle


@router.post("", response_model=SessionResponse)
async def create_session(params: SessionCreate) -> SessionResponse:
    """Create a fire session, optionally with an ignition point."""
    if registry is None:
        raise HTTPException(status_code=500, detail="Registry not initialized")
    try:
        handle = registry.create(params, on_frame=_on_frame)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return _session_to_response(handle)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str) -> SessionResponse:
    """Get session state, parameters and the most recent frame."""
    return _session_to_response(_get_handle(session_id))


@router.put("/{session_id}/ignition", response_model=SessionResponse)
async def set_ignition(session_id: str, params: IgnitionParams) -> SessionResponse:
    """Set the ignition point (once per run)."""
    handle = _get_handle(session_id)
    try:
        handle.set_ignition(GeoPoint(params.lat, params.lng))
    except IgnitionAlreadySetError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return _session_to_response(handle)


@router.put("/{session_id}/environment", response_model=SessionResponse)
async def set_environment(session_id: str, params: EnvironmentParams) -> SessionResponse:
    """Apply manually supplied conditions to the session."""
    handle = _get_handle(session_id)
    land_cover = LandCover.from_tag(params.land_cover)
    sample = EnvironmentalSample(
        temperature=params.temperature,
        wind_speed=params.wind_speed,
        wind_direction=params.wind_direction,
        humidity=params.humidity,
        precipitation=params.precipitation,
        slope=params.slope,
        fuel_density=fuel_density_for(land_cover),
        land_cover=land_cover,
    )
    if not handle.session.apply_sample(sample):
        raise HTTPException(status_code=422, detail="Conditions give no positive spread rate")
    return _session_to_response(handle)


@router.post("/{session_id}/start", response_model=SessionResponse)
async def start_session(session_id: str, params: StartRequest | None = None) -> SessionResponse:
    """Start animating the fire fronts."""
    handle = _get_handle(session_id)
    run_ms = None
    if params is not None and params.run_seconds is not None:
        run_ms = params.run_seconds * 1000.0
    try:
        handle.animator.start(run_ms)
    except MissingIgnitionError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except AnimatorBusyError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    handle.spawn(_watch_completion(handle))
    return _session_to_response(handle)


@router.get("/{session_id}/frames/{time_index}", response_model=FrameSchema)
async def show_frame(session_id: str, time_index: int) -> FrameSchema:
    """Recompute and present the fronts at a single time index."""
    handle = _get_handle(session_id)
    try:
        frame = handle.animator.show(time_index)
    except MissingIgnitionError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return _frame_to_schema(frame, handle, with_geojson=True)


@router.post("/{session_id}/clear-predictions", response_model=SessionResponse)
async def clear_predictions(session_id: str) -> SessionResponse:
    """Remove drawn fronts, keeping the ignition point."""
    handle = _get_handle(session_id)
    handle.animator.clear_predictions()
    return _session_to_response(handle)


@router.post("/{session_id}/reset", response_model=SessionResponse)
async def reset_session(session_id: str) -> SessionResponse:
    """Stop the animation and clear the ignition point."""
    handle = _get_handle(session_id)
    handle.animator.reset()
    if ws_manager is not None:
        ws_manager.broadcast(session_id, {"type": "session.reset", "session_id": session_id})
    return _session_to_response(handle)


@router.websocket("/ws/{session_id}")
async def session_websocket(websocket: WebSocket, session_id: str) -> None:
    """WebSocket endpoint for streaming spread frames."""
    if ws_manager is None or registry is None:
        await websocket.close(code=1011)
        return

    handle = registry.get(session_id)
    if handle is None:
        await websocket.close(code=4004, reason="Session not found")
        return

    await ws_manager.connect(session_id, websocket)

    try:
        latest = handle.renderer.latest
        if latest is not None:
            await websocket.send_json({
                "type": "session.frame",
                "session_id": session_id,
                "frame": _frame_to_schema(latest, handle, with_geojson=True).model_dump(),
            })
        if handle.animator.state == SimulationState.COMPLETE:
            await websocket.send_json({
                "type": "session.completed",
                "session_id": session_id,
            })

        # Keep the connection open; frames are pushed by the animator
        while True:
            try:
                await asyncio.wait_for(websocket.receive_text(), timeout=1.0)
            except asyncio.TimeoutError:
                continue

    except WebSocketDisconnect:
        pass
    finally:
        await ws_manager.disconnect(session_id, websocket)
