"""
Client pages - the screens of the app as controllers over client, session
and store, plus plain-text rendering for the command line.
"""

import html
import logging
from datetime import datetime
from typing import Callable, List, Optional

from core.domain.models import Event
from adapters.client.api_client import ApiError, EventHubClient, SessionExpiredError, event_payload
from adapters.client.filters import ELLIPSIS, EventFilters, Page, apply_filters, paginate
from adapters.client.session import AuthSession
from adapters.client.store import (
    EventStore,
    EventsLoaded,
    EventRemoved,
    EventSaved,
    JoinConfirmed,
    JoinFailed,
    JoinRequested,
    LoadFailed,
)

logger = logging.getLogger(__name__)


def _local_now() -> datetime:
    return datetime.now().astimezone()


class EventsPage:
    """All events: search, filter, paginate, join"""

    def __init__(
        self,
        client: EventHubClient,
        session: AuthSession,
        store: Optional[EventStore] = None,
        clock: Callable[[], datetime] = _local_now,
    ):
        self.client = client
        self.session = session
        self.store = store or EventStore()
        self._clock = clock

    async def load(self) -> None:
        try:
            events = await self.client.list_events()
        except ApiError as e:
            self.store.dispatch(LoadFailed(e.message))
            raise
        joined = self.session.user.joined_events if self.session.user else []
        self.store.dispatch(EventsLoaded(tuple(events), frozenset(joined)))

    def view(self, filters: Optional[EventFilters] = None, page: int = 1) -> Page:
        events = self.store.state.events
        if filters is not None:
            events = apply_filters(events, filters, self._clock())
        return paginate(events, page)

    async def join(self, event_id: str) -> Event:
        """Optimistic join, reconciled with (or reverted by) the server's answer"""
        if not self.session.is_authenticated:
            raise SessionExpiredError(401, "Please login to join events")

        self.store.dispatch(JoinRequested(event_id, self.session.user.id))
        try:
            event = await self.client.join_event(event_id)
        except ApiError as e:
            self.store.dispatch(JoinFailed(event_id, e.message))
            raise
        self.store.dispatch(JoinConfirmed(event))
        if event_id not in self.session.user.joined_events:
            self.session.user.joined_events.append(event_id)
        return event


class MyEventsPage:
    """Events owned by the signed-in user"""

    def __init__(self, client: EventHubClient, store: Optional[EventStore] = None):
        self.client = client
        self.store = store or EventStore()

    async def load(self) -> List[Event]:
        try:
            events = await self.client.my_events()
        except ApiError as e:
            self.store.dispatch(LoadFailed(e.message))
            raise
        self.store.dispatch(EventsLoaded(tuple(events)))
        return list(self.store.state.events)

    async def create(self, **fields) -> Event:
        event = await self.client.create_event(event_payload(**fields))
        self.store.dispatch(EventSaved(event))
        return event

    async def update(self, event_id: str, **changes) -> Event:
        """Apply `changes` on top of the current values and save"""
        current = self.store.state.get(event_id) or await self.client.get_event(event_id)
        fields = {
            # Stored text comes back HTML-escaped; send it raw so it is not escaped twice
            "title": html.unescape(current.title),
            "name": html.unescape(current.name),
            "date": current.date,
            "location": html.unescape(current.location),
            "description": html.unescape(current.description),
            "image_url": current.image_url,
        }
        fields.update({k: v for k, v in changes.items() if v is not None})
        event = await self.client.update_event(event_id, event_payload(**fields))
        self.store.dispatch(EventSaved(event))
        return event

    async def delete(self, event_id: str) -> None:
        await self.client.delete_event(event_id)
        self.store.dispatch(EventRemoved(event_id))


# === RENDERING ===

def _text(value: str) -> str:
    return html.unescape(value)


def format_date(value: datetime) -> str:
    return value.astimezone().strftime("%a %d %b %Y, %H:%M")


def render_event_line(event: Event, joined: bool = False) -> str:
    people = "person" if event.attendee_count == 1 else "people"
    mark = " [joined]" if joined else ""
    return (
        f"{event.id}  {format_date(event.date)}  {_text(event.title)} "
        f"@ {_text(event.location)} ({event.attendee_count} {people}){mark}"
    )


def render_event_detail(event: Event, joined: bool = False) -> str:
    people = "person" if event.attendee_count == 1 else "people"
    lines = [
        _text(event.title),
        f"  Organizer:  {_text(event.name)}",
        f"  When:       {format_date(event.date)}",
        f"  Where:      {_text(event.location)}",
        f"  Attending:  {event.attendee_count} {people}",
    ]
    if event.image_url:
        lines.append(f"  Image:      {event.image_url}")
    lines += ["", _text(event.description)]
    if joined:
        lines += ["", "You have joined this event."]
    return "\n".join(lines)


def render_page(page: Page, joined_ids=frozenset()) -> str:
    if not page.items:
        return "No events found. Try adjusting your search or filters."
    lines = [render_event_line(e, str(e.id) in joined_ids) for e in page.items]
    if page.total_pages > 1:
        numbers = " ".join(
            p if p == ELLIPSIS else (f"[{p}]" if p == page.number else str(p))
            for p in page.pages
        )
        lines += ["", f"Page {page.number}/{page.total_pages}: {numbers}"]
    return "\n".join(lines)
