"""Viewport fitting.

Works out which part of the map should be visible: the smallest box
around every visible point, or the default view of the whole service
region when there is nothing to show.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from ..config import MapConfig, get_config
from ..domain.models import GeoPoint, RoutePlan, Viewport, Waypoint


def visible_points(waypoints: Iterable[Waypoint], route: RoutePlan) -> List[GeoPoint]:
    """Every loaded waypoint followed by every route point."""
    points = [waypoint.coords for waypoint in waypoints]
    points.extend(route.points)
    return points


def bounding_box(points: Iterable[GeoPoint]) -> Optional[tuple[GeoPoint, GeoPoint]]:
    """Return the (south-west, north-east) corners, or None when empty."""
    points = list(points)
    if not points:
        return None

    lats = [p.latitude for p in points]
    lons = [p.longitude for p in points]
    return (
        GeoPoint(latitude=min(lats), longitude=min(lons)),
        GeoPoint(latitude=max(lats), longitude=max(lons)),
    )


def fit_viewport(
    points: Iterable[GeoPoint], config: Optional[MapConfig] = None
) -> Viewport:
    """Fit the map to the given points.

    Args:
        points: Currently visible points.
        config: Map defaults, taken from the app config when omitted.

    Returns:
        A fitted viewport, or the default center and zoom if there are
        no points.
    """
    config = config or get_config().map
    default_center = GeoPoint(
        latitude=config.default_center_lat,
        longitude=config.default_center_lon,
    )

    bounds = bounding_box(points)
    if bounds is None:
        return Viewport(center=default_center, zoom=config.default_zoom)

    south_west, north_east = bounds
    center = GeoPoint(
        latitude=(south_west.latitude + north_east.latitude) / 2,
        longitude=(south_west.longitude + north_east.longitude) / 2,
    )
    return Viewport(
        center=center,
        zoom=config.default_zoom,
        bounds=bounds,
        padding_px=config.fit_padding_px,
    )
