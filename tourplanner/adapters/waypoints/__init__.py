"""Waypoint source adapters - Implementations of WaypointSourcePort.

Available implementations:
- KmlWaypointSource: Google My Maps KML export, over HTTP or from a file
"""

from .kml_source import KmlWaypointSource, parse_kml

__all__ = ["KmlWaypointSource", "parse_kml"]
