# -*- coding: utf-8 -*-
import html
from typing import Any, Dict, List, Optional, Tuple

import gradio as gr

from tourplanner.container import get_container
from tourplanner.domain.errors import BookingError, RenderingError
from tourplanner.domain.models import FieldId
from tourplanner.logging_config import configure_logging
from tourplanner.ports.rendering import MapRendererPort
from tourplanner.services import PlannerSession, SessionRegistry, SessionSnapshot
from tourplanner.services.handoff import BookingRequest

CONTAINER = get_container()
RENDERER: MapRendererPort = CONTAINER.resolve(MapRendererPort)


# One planner session per browser tab
SESSIONS = SessionRegistry(
    factory=lambda: CONTAINER.resolve(PlannerSession),
    config=CONTAINER.config.sessions,
)

# Keystrokes of a burst must run side by side so each one can cancel the
# lookup queued by the previous one.
ADDRESS_INPUT_LISTENER: Dict[str, Any] = {
    "trigger_mode": "multiple",
    "concurrency_limit": None,
}


def _session(request: gr.Request) -> PlannerSession:
    return SESSIONS.get(request.session_hash or "default")


def _map_iframe_from_html(document_html: str, *, height_px: int = 560) -> str:
    escaped = html.escape(document_html, quote=True)
    return (
        f'<iframe srcdoc="{escaped}" '
        f'style="width: 100%; height: {height_px}px; border: 0;" '
        f'loading="lazy"></iframe>'
    )


def _route_markdown(snapshot: SessionSnapshot) -> str:
    if not snapshot.selection:
        return "_Select breweries on the list to build your route._"
    lines = ["### Your Route"]
    for index, waypoint in enumerate(snapshot.selection, start=1):
        address = f" ({waypoint.address})" if waypoint.address else ""
        lines.append(f"{index}. **{waypoint.name}**{address}")
    return "\n".join(lines)


def _links_markdown(session: PlannerSession, snapshot: SessionSnapshot) -> str:
    route = snapshot.route
    if not route.actionable:
        return "_Add a start point & breweries to enable navigation and sharing._"
    links = [
        f"[🚗 Start Route]({route.navigation_url})",
        f"[💬 Share on WhatsApp]({session.share_link('whatsapp')})",
        f"[✉️ Share by Email]({session.share_link('email')})",
    ]
    if not route.bookable:
        links.append("_Add breweries to book transport._")
    return " · ".join(links)


def _render(session: PlannerSession) -> Tuple[str, str, str, str]:
    snapshot = session.snapshot()
    try:
        map_html = _map_iframe_from_html(RENDERER.to_html(snapshot))
    except RenderingError as e:
        map_html = f"<p>{html.escape(str(e))}</p>"
    banner = f"⚠️ {snapshot.load_error}" if snapshot.load_error else ""
    return map_html, _route_markdown(snapshot), _links_markdown(session, snapshot), banner


def _waypoint_choices(snapshot: SessionSnapshot) -> List[Tuple[str, str]]:
    return [(waypoint.name, waypoint.id) for waypoint in snapshot.waypoints]


async def on_load(request: gr.Request):
    session = _session(request)
    await session.load_waypoints()
    snapshot = session.snapshot()
    choices = gr.update(choices=_waypoint_choices(snapshot), value=[])
    return (choices, *_render(session))


async def _address_input(session: PlannerSession, field_id: FieldId, text: str):
    session.set_from_text(field_id, text)
    await session.suggestion_field(field_id).settle()
    labels = [s.label for s in session.snapshot().suggestions(field_id)]
    return (gr.update(choices=labels, value=None, visible=bool(labels)), *_render(session))


async def _suggestion_pick(session: PlannerSession, field_id: FieldId, label: Optional[str]):
    for suggestion in session.snapshot().suggestions(field_id):
        if suggestion.label == label:
            session.set_from_suggestion(field_id, suggestion)
            break
    address = getattr(session.snapshot(), field_id.value).address
    return (address, gr.update(choices=[], value=None, visible=False), *_render(session))


async def on_start_input(text: str, request: gr.Request):
    return await _address_input(_session(request), FieldId.START, text)


async def on_end_input(text: str, request: gr.Request):
    return await _address_input(_session(request), FieldId.END, text)


async def on_start_pick(label: Optional[str], request: gr.Request):
    return await _suggestion_pick(_session(request), FieldId.START, label)


async def on_end_pick(label: Optional[str], request: gr.Request):
    return await _suggestion_pick(_session(request), FieldId.END, label)


async def on_use_my_location(request: gr.Request):
    session = _session(request)
    await session.use_device_location()
    alert = session.pop_alert()
    if alert:
        gr.Warning(alert)
    return (session.snapshot().start.address, *_render(session))


async def on_toggle_end(enabled: bool, request: gr.Request):
    session = _session(request)
    session.set_use_different_end(enabled)
    return (gr.update(visible=enabled), *_render(session))


async def on_selection_change(selected_ids: List[str], request: gr.Request):
    session = _session(request)
    snapshot = session.snapshot()
    wanted = set(selected_ids or [])
    current = {waypoint.id for waypoint in snapshot.selection}
    for waypoint in snapshot.waypoints:
        if (waypoint.id in wanted) != (waypoint.id in current):
            session.toggle_waypoint(waypoint)
    return _render(session)


async def on_book(
    name: str, phone: str, email: str, dates: str, people: float, request: gr.Request
):
    session = _session(request)
    try:
        booking = BookingRequest(
            name=name, phone=phone, email=email, dates=dates, people_count=int(people or 0)
        )
    except BookingError as e:
        gr.Warning(str(e))
        return ""

    link = session.submit_booking(booking)
    if link is None:
        gr.Warning("Add a start point & breweries to book transport.")
        return ""
    gr.Info(session.snapshot().notification or "")
    return f"[📧 Send your booking request]({link})"


async def on_unload(request: gr.Request) -> None:
    SESSIONS.discard(request.session_hash or "default")


# ============================ UI ============================
with gr.Blocks(title="Brewery Route Planner") as app:
    gr.Markdown(
        """
# 🍺 Brewery Route Planner
✔ Pick a start point (or use your location)
✔ Add breweries in the order you want to visit them
✔ Open the route in Google Maps, share it or book transport
"""
    )

    banner_md = gr.Markdown()

    with gr.Row():
        with gr.Column(scale=1):
            with gr.Row():
                start_tb = gr.Textbox(
                    label="📍 Start Point", placeholder="Enter a start address", scale=4
                )
                locate_btn = gr.Button("Me", scale=1)
            start_dd = gr.Dropdown(choices=[], label="Suggestions", visible=False)

            different_end_cb = gr.Checkbox(label="Different end point?", value=False)
            with gr.Group(visible=False) as end_group:
                end_tb = gr.Textbox(label="🏁 End Point", placeholder="Enter an end address")
                end_dd = gr.Dropdown(choices=[], label="Suggestions", visible=False)

            waypoints_cb = gr.CheckboxGroup(choices=[], label="🍺 Breweries")
            route_md = gr.Markdown()

        with gr.Column(scale=2):
            map_view = gr.HTML(value="<p></p>")
            links_md = gr.Markdown()

    with gr.Accordion("🚌 Book Transport", open=False):
        with gr.Row():
            name_tb = gr.Textbox(label="Name")
            phone_tb = gr.Textbox(label="Cellphone Number")
            email_tb = gr.Textbox(label="Email Address")
        with gr.Row():
            dates_tb = gr.Textbox(label="Travel Dates", placeholder="e.g., 25-26 December 2024")
            people_nb = gr.Number(label="Number of People", value=1, minimum=1, precision=0)
        book_btn = gr.Button("Submit Request")
        booking_md = gr.Markdown()

    view_outputs = [map_view, route_md, links_md, banner_md]

    app.load(on_load, outputs=[waypoints_cb, *view_outputs])
    app.unload(on_unload)

    start_tb.input(
        on_start_input,
        inputs=start_tb,
        outputs=[start_dd, *view_outputs],
        **ADDRESS_INPUT_LISTENER,
    )
    start_dd.select(on_start_pick, inputs=start_dd, outputs=[start_tb, start_dd, *view_outputs])
    end_tb.input(
        on_end_input,
        inputs=end_tb,
        outputs=[end_dd, *view_outputs],
        **ADDRESS_INPUT_LISTENER,
    )
    end_dd.select(on_end_pick, inputs=end_dd, outputs=[end_tb, end_dd, *view_outputs])

    locate_btn.click(on_use_my_location, outputs=[start_tb, *view_outputs])
    different_end_cb.change(
        on_toggle_end, inputs=different_end_cb, outputs=[end_group, *view_outputs]
    )
    waypoints_cb.change(on_selection_change, inputs=waypoints_cb, outputs=view_outputs)
    book_btn.click(
        on_book,
        inputs=[name_tb, phone_tb, email_tb, dates_tb, people_nb],
        outputs=booking_md,
    )


if __name__ == "__main__":
    configure_logging()
    app.launch()
