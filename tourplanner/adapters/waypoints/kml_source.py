"""KML waypoint source adapter.

Reads the points of interest published as a Google My Maps KML export.
Each ``Placemark`` with a ``Point`` becomes a Waypoint; custom fields
such as the postal address live in ``ExtendedData``.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Union

import requests

from ...config import WaypointSourceConfig, get_config
from ...domain.errors import WaypointSourceError
from ...domain.models import GeoPoint, Waypoint

logger = logging.getLogger(__name__)

UNNAMED_PLACE = "Unnamed Place"


def _local(tag: str) -> str:
    """Strip the XML namespace from a tag name."""
    return tag.rsplit("}", 1)[-1]


def _children(element: ET.Element, name: str) -> Iterator[ET.Element]:
    return (child for child in element if _local(child.tag) == name)


def _child_text(element: Optional[ET.Element], name: str) -> str:
    if element is None:
        return ""
    for child in _children(element, name):
        return (child.text or "").strip()
    return ""


def _field(placemark: ET.Element, field_name: str) -> str:
    """Read a custom field, falling back to standard tags for the address."""
    for extended in _children(placemark, "ExtendedData"):
        for data in _children(extended, "Data"):
            if data.get("name") == field_name:
                return _child_text(data, "value")

    if field_name.lower() == "address":
        return _child_text(placemark, "address") or _child_text(
            placemark, "description"
        )
    return ""


def _coordinates(placemark: ET.Element) -> Optional[GeoPoint]:
    """Parse ``Point/coordinates`` which KML writes as ``lon,lat[,alt]``."""
    point = next(_children(placemark, "Point"), None)
    raw = _child_text(point, "coordinates")
    if not raw:
        return None

    parts = raw.split(",")
    if len(parts) < 2:
        raise ValueError(f"Expected 'lon,lat', got {raw!r}")
    return GeoPoint(latitude=float(parts[1]), longitude=float(parts[0]))


def parse_kml(document: Union[str, bytes], source: str = "") -> List[Waypoint]:
    """Turn a KML document into waypoints.

    Placemarks without a point are skipped. Placemarks without an ``id``
    attribute get ``brewery-<index>`` based on their position in the file.

    Args:
        document: KML text.
        source: Where the document came from, for error reporting.

    Returns:
        Waypoints in document order.

    Raises:
        WaypointSourceError: If the document is not valid XML.
    """
    try:
        root = ET.fromstring(document)
    except ET.ParseError as e:
        raise WaypointSourceError(
            "Error parsing KML", source=source, cause=e
        ) from e

    placemarks = [el for el in root.iter() if _local(el.tag) == "Placemark"]
    waypoints: List[Waypoint] = []

    for index, placemark in enumerate(placemarks):
        name = _child_text(placemark, "name") or UNNAMED_PLACE
        try:
            coords = _coordinates(placemark)
        except ValueError as e:
            logger.warning(
                "Skipping placemark with invalid coordinates",
                extra={"placemark": name, "error": str(e)},
            )
            continue
        if coords is None:
            continue

        waypoints.append(
            Waypoint(
                id=placemark.get("id") or f"brewery-{index}",
                name=name,
                address=_field(placemark, "Address"),
                coords=coords,
            )
        )

    return waypoints


@dataclass
class KmlWaypointSource:
    """Waypoint source backed by a KML export.

    Reads ``config.kml_path`` when set, otherwise downloads the export
    from ``config.fetch_url``.

    Attributes:
        config: Waypoint source configuration
        session: HTTP session used for the download
    """

    config: WaypointSourceConfig = field(default_factory=lambda: get_config().source)
    session: requests.Session = field(default_factory=requests.Session, repr=False)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def list_waypoints(self) -> Sequence[Waypoint]:
        """Load every placemark of the export.

        Raises:
            WaypointSourceError: If the export cannot be read or parsed.
        """
        if self.config.kml_path is not None:
            source = str(self.config.kml_path)
            document = self._read_file()
        else:
            source = self.config.fetch_url
            document = self._download()

        waypoints = parse_kml(document, source=source)
        self._logger.info(
            "Waypoints loaded",
            extra={"source": source, "waypoints": len(waypoints)},
        )
        return waypoints

    def _read_file(self) -> bytes:
        path = self.config.kml_path
        assert path is not None
        try:
            return path.read_bytes()
        except OSError as e:
            raise WaypointSourceError(
                f"Cannot read KML file {path}", source=str(path), cause=e
            ) from e

    def _download(self) -> bytes:
        url = self.config.fetch_url
        self._logger.debug("Downloading KML export", extra={"url": url})
        try:
            response = self.session.get(url, timeout=self.config.timeout_seconds)
            response.raise_for_status()
        except requests.RequestException as e:
            raise WaypointSourceError(
                "Network response was not ok", source=url, cause=e
            ) from e
        return response.content
