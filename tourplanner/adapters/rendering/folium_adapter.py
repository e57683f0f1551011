"""Folium map renderer adapter.

Draws a session snapshot as an interactive Leaflet map:
- one marker per waypoint, highlighted when selected
- start and (distinct) end markers
- the route line
- the fitted viewport, or the default view when nothing is visible
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Dict

import folium

from ...config import MapConfig, get_config
from ...domain.errors import RenderingError

if TYPE_CHECKING:
    from ...services.session import SessionSnapshot

WAYPOINT_COLOR = "blue"
SELECTED_COLOR = "orange"
START_COLOR = "green"
END_COLOR = "red"


@dataclass
class FoliumMapRenderer:
    """Folium-based implementation of MapRendererPort.

    Attributes:
        config: Map configuration (defaults, padding, styling)
    """

    config: MapConfig = field(default_factory=lambda: get_config().map)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def build(self, snapshot: SessionSnapshot) -> folium.Map:
        """Build the folium map for a snapshot."""
        viewport = snapshot.viewport(self.config)
        route = snapshot.route

        m = folium.Map(
            location=list(viewport.center.as_tuple()),
            zoom_start=viewport.zoom,
            tiles=self.config.tiles,
        )

        stop_numbers: Dict[str, int] = {
            waypoint.id: index
            for index, waypoint in enumerate(snapshot.selection, start=1)
        }
        for waypoint in snapshot.waypoints:
            stop = stop_numbers.get(waypoint.id)
            label = waypoint.name if stop is None else f"{stop}. {waypoint.name}"
            folium.Marker(
                location=list(waypoint.coords.as_tuple()),
                popup=folium.Popup(label),
                tooltip=waypoint.address or waypoint.name,
                icon=folium.Icon(color=WAYPOINT_COLOR if stop is None else SELECTED_COLOR),
            ).add_to(m)

        if snapshot.start.coords is not None:
            folium.Marker(
                location=list(snapshot.start.coords.as_tuple()),
                popup=folium.Popup(f"Start: {snapshot.start.address}"),
                icon=folium.Icon(color=START_COLOR, icon="play"),
            ).add_to(m)

        if snapshot.use_different_end and snapshot.end.coords is not None:
            folium.Marker(
                location=list(snapshot.end.coords.as_tuple()),
                popup=folium.Popup(f"End: {snapshot.end.address}"),
                icon=folium.Icon(color=END_COLOR, icon="flag"),
            ).add_to(m)

        if route.has_path:
            folium.PolyLine(
                [list(point.as_tuple()) for point in route.points],
                color=self.config.route_color,
                weight=self.config.route_weight,
            ).add_to(m)

        if viewport.bounds is not None:
            south_west, north_east = viewport.bounds
            padding = (viewport.padding_px, viewport.padding_px)
            m.fit_bounds(
                [list(south_west.as_tuple()), list(north_east.as_tuple())],
                padding=padding,
            )

        # The container may not have its final size yet when the map first
        # draws; measure again once layout has settled.
        m.get_root().script.add_child(
            folium.Element(
                f"setTimeout(function() {{ {m.get_name()}.invalidateSize(); }}, "
                f"{self.config.settle_delay_ms});"
            )
        )
        return m

    def to_html(self, snapshot: SessionSnapshot) -> str:
        """Render the snapshot as a standalone HTML document.

        Raises:
            RenderingError: If folium fails to render.
        """
        try:
            return self.build(snapshot).get_root().render()
        except Exception as e:
            self._logger.error("Map rendering failed", extra={"error": str(e)})
            raise RenderingError(
                f"Map rendering failed: {e}", renderer_type="folium", cause=e
            ) from e

    def render(self, snapshot: SessionSnapshot, output_path: Path) -> Path:
        """Render the snapshot and save it to file.

        Raises:
            RenderingError: If rendering or writing fails.
        """
        self._logger.info(
            "Rendering tour map",
            extra={
                "waypoints": len(snapshot.waypoints),
                "stops": len(snapshot.selection),
                "output_path": str(output_path),
            },
        )
        try:
            m = self.build(snapshot)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            m.save(str(output_path))
        except Exception as e:
            self._logger.error(
                "Map rendering failed",
                extra={"error": str(e), "output_path": str(output_path)},
            )
            raise RenderingError(
                f"Map rendering failed: {e}",
                output_path=str(output_path),
                renderer_type="folium",
                cause=e,
            ) from e

        return output_path
