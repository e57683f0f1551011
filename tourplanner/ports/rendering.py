"""Rendering port - Abstraction for map generation.

This protocol defines the contract for map rendering, allowing
different implementations (Folium, Plotly, etc.) to be used.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..services.session import SessionSnapshot


class MapRendererPort(Protocol):
    """Port for map rendering.

    Implementation: adapters/rendering/folium_adapter.py

    Renders markers for every waypoint, the start and end points, the
    route line and the fitted viewport of a session snapshot.
    """

    def to_html(self, snapshot: SessionSnapshot) -> str:
        """Render the snapshot as a standalone HTML document."""
        ...

    def render(self, snapshot: SessionSnapshot, output_path: Path) -> Path:
        """Render the snapshot and save it to file.

        Args:
            snapshot: Session state to draw.
            output_path: Where to save the rendered map.

        Returns:
            Path to the generated map file.
        """
        ...
