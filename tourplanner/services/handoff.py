"""Sharing and booking hand-offs.

Turns a route plan into links for third parties: a WhatsApp message, an
e-mail draft, and a transport booking request addressed to the
operator. Every builder returns None when the plan is not ready instead
of raising; the caller simply keeps the action disabled.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Sequence
from urllib.parse import quote

from ..domain.errors import BookingError
from ..domain.models import LocationPoint, RoutePlan, Waypoint

SHARE_MESSAGE = "Check out this awesome brewery tour I planned: {url}"
SHARE_SUBJECT = "My Brewery Tour Plan"
BOOKING_SUBJECT = "New Brewery Tour Booking Request"
BOOKING_CONFIRMATION = (
    "Thank you for your request, we will get back to you as soon as possible by whatsapp."
)

SharePlatform = Literal["whatsapp", "email"]


def _encode(text: str) -> str:
    # Same reserved set as JavaScript's encodeURIComponent.
    return quote(text, safe="!~*'()")


def share_link(plan: RoutePlan, platform: SharePlatform) -> Optional[str]:
    """Link that shares the navigation URL on the given platform."""
    if not plan.actionable or plan.navigation_url is None:
        return None

    message = _encode(SHARE_MESSAGE.format(url=plan.navigation_url))
    if platform == "whatsapp":
        return f"https://api.whatsapp.com/send?text={message}"
    return f"mailto:?subject={_encode(SHARE_SUBJECT)}&body={message}"


@dataclass(frozen=True)
class BookingRequest:
    """Contact details entered in the transport booking form."""

    name: str
    phone: str
    email: str
    dates: str
    people_count: int = 1

    def __post_init__(self) -> None:
        for field_name in ("name", "phone", "email", "dates"):
            if not getattr(self, field_name).strip():
                raise BookingError(
                    f"Booking field '{field_name}' is required",
                    field_name=field_name,
                )
        if "@" not in self.email:
            raise BookingError("Invalid email address", field_name="email")
        if self.people_count < 1:
            raise BookingError(
                "At least one person must travel", field_name="people_count"
            )


def describe_route(
    start: LocationPoint, destination: LocationPoint, selection: Sequence[Waypoint]
) -> str:
    """Human-readable itinerary, one line per point."""
    lines = [f"Start: {start.address}"]
    lines.extend(
        f"Stop {index}: {waypoint.name} ({waypoint.address})"
        for index, waypoint in enumerate(selection, start=1)
    )
    lines.append(f"End: {destination.address}")
    return "\n".join(lines)


def booking_email_body(request: BookingRequest, route_description: str) -> str:
    separator = "-" * 29
    return "\n".join(
        [
            "New Transport Booking Request",
            separator,
            f"Name: {request.name}",
            f"Cellphone Number: {request.phone}",
            f"Email Address: {request.email}",
            f"Travel Dates: {request.dates}",
            f"Number of People: {request.people_count}",
            separator,
            "Requested Route:",
            route_description.strip(),
        ]
    )


def booking_link(
    plan: RoutePlan,
    request: BookingRequest,
    start: LocationPoint,
    destination: LocationPoint,
    selection: Sequence[Waypoint],
    recipient: str,
) -> Optional[str]:
    """``mailto:`` link carrying the booking request, if the plan is bookable."""
    if not plan.bookable:
        return None

    body = booking_email_body(request, describe_route(start, destination, selection))
    return f"mailto:{recipient}?subject={_encode(BOOKING_SUBJECT)}&body={_encode(body)}"
