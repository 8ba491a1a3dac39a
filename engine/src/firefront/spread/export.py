"""GeoJSON export of scenario fronts.

Fronts are computed as screen-space offsets around the ignition point;
export maps them back to coordinates through the session projector.
"""

from __future__ import annotations

from firefront.geodesy import WebMercatorProjector, offsets_to_geo
from firefront.spread.boundary import close_ring
from firefront.types import GeoPoint, ScenarioFront, SpreadFrame


def front_to_geojson(
    front: ScenarioFront,
    ignition: GeoPoint,
    projector: WebMercatorProjector | None = None,
    properties: dict | None = None,
) -> dict:
    """Convert a scenario front to a GeoJSON Feature.

    Returns:
        GeoJSON Feature dict with Polygon geometry.
        Coordinates are [lng, lat] per RFC 7946.
    """
    props = {
        "scenario": front.scenario.value,
        "color": front.scenario.color,
        "fill": front.scenario.fill,
        "radius_m": front.radius_m,
    }
    props.update(properties or {})

    if not front.points:
        return {
            "type": "Feature",
            "geometry": {"type": "Polygon", "coordinates": []},
            "properties": props,
        }

    coords = [[p.lng, p.lat] for p in offsets_to_geo(front.points, ignition, projector)]
    return {
        "type": "Feature",
        "geometry": {
            "type": "Polygon",
            "coordinates": [close_ring(coords)],
        },
        "properties": props,
    }


def frame_to_feature_collection(
    frame: SpreadFrame,
    ignition: GeoPoint,
    projector: WebMercatorProjector | None = None,
) -> dict:
    """All fronts of a frame plus the ignition marker as a FeatureCollection.

    Fronts are ordered worst -> best so smaller fronts draw on top.
    """
    time_props = {
        "time_index": frame.time_index,
        "simulated_minutes": frame.simulated_minutes,
    }
    features = [
        front_to_geojson(front, ignition, projector, time_props)
        for front in reversed(frame.fronts)
    ]
    features.append(
        {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [ignition.lng, ignition.lat]},
            "properties": {"kind": "ignition", **time_props},
        }
    )
    return {"type": "FeatureCollection", "features": features}
