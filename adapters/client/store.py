"""
Event store - the client's single piece of shared state.

State changes only through `EventStore.dispatch(action)`, which runs the pure
`reduce(state, action)` and notifies subscribers. Joining is optimistic:
JoinRequested applies the change locally, JoinConfirmed replaces it with the
server's copy, JoinFailed puts the previous copy back.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple, Union

from core.domain.models import Event

logger = logging.getLogger(__name__)


# === ACTIONS ===

@dataclass(frozen=True)
class EventsLoaded:
    events: Tuple[Event, ...]
    joined_ids: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class LoadFailed:
    message: str


@dataclass(frozen=True)
class JoinRequested:
    event_id: str
    user_id: str


@dataclass(frozen=True)
class JoinConfirmed:
    event: Event


@dataclass(frozen=True)
class JoinFailed:
    event_id: str
    message: str


@dataclass(frozen=True)
class EventSaved:
    """Created or updated on the server"""
    event: Event


@dataclass(frozen=True)
class EventRemoved:
    event_id: str


Action = Union[EventsLoaded, LoadFailed, JoinRequested, JoinConfirmed, JoinFailed, EventSaved, EventRemoved]


# === STATE ===

@dataclass(frozen=True)
class EventsState:
    events: Tuple[Event, ...] = ()
    joined_ids: FrozenSet[str] = frozenset()
    # Copies taken before an optimistic join, keyed by event id
    pending: Dict[str, Event] = field(default_factory=dict)
    loaded: bool = False
    error: Optional[str] = None

    def get(self, event_id: str) -> Optional[Event]:
        for event in self.events:
            if str(event.id) == event_id:
                return event
        return None

    def is_joined(self, event_id: str) -> bool:
        return event_id in self.joined_ids


def _sorted(events) -> Tuple[Event, ...]:
    return tuple(sorted(events, key=lambda e: e.date, reverse=True))


def _replace_event(events: Tuple[Event, ...], new: Event) -> Tuple[Event, ...]:
    key = str(new.id)
    return tuple(new if str(e.id) == key else e for e in events)


def reduce(state: EventsState, action: Action) -> EventsState:
    """Next state for `action`; never mutates `state`"""
    if isinstance(action, EventsLoaded):
        return EventsState(
            events=_sorted(action.events),
            joined_ids=frozenset(action.joined_ids),
            loaded=True,
        )

    if isinstance(action, LoadFailed):
        return replace(state, error=action.message)

    if isinstance(action, JoinRequested):
        event = state.get(action.event_id)
        if event is None or event.has_attendee(action.user_id) or action.event_id in state.pending:
            return state
        optimistic = event.model_copy(update={
            "attendee_count": event.attendee_count + 1,
            "attendees": [*event.attendees, action.user_id],
        })
        return replace(
            state,
            events=_replace_event(state.events, optimistic),
            joined_ids=state.joined_ids | {action.event_id},
            pending={**state.pending, action.event_id: event},
            error=None,
        )

    if isinstance(action, JoinConfirmed):
        key = str(action.event.id)
        pending = {k: v for k, v in state.pending.items() if k != key}
        return replace(
            state,
            events=_replace_event(state.events, action.event),
            joined_ids=state.joined_ids | {key},
            pending=pending,
        )

    if isinstance(action, JoinFailed):
        previous = state.pending.get(action.event_id)
        if previous is None:
            return replace(state, error=action.message)
        pending = {k: v for k, v in state.pending.items() if k != action.event_id}
        return replace(
            state,
            events=_replace_event(state.events, previous),
            joined_ids=state.joined_ids - {action.event_id},
            pending=pending,
            error=action.message,
        )

    if isinstance(action, EventSaved):
        key = str(action.event.id)
        others = [e for e in state.events if str(e.id) != key]
        return replace(state, events=_sorted([*others, action.event]), error=None)

    if isinstance(action, EventRemoved):
        return replace(
            state,
            events=tuple(e for e in state.events if str(e.id) != action.event_id),
            joined_ids=state.joined_ids - {action.event_id},
            error=None,
        )

    raise TypeError(f"Unknown action: {action!r}")


Listener = Callable[[EventsState], None]


class EventStore:
    """Owns the event list; change it with dispatch()"""

    def __init__(self, state: Optional[EventsState] = None):
        self._state = state or EventsState()
        self._listeners: List[Listener] = []

    @property
    def state(self) -> EventsState:
        return self._state

    def dispatch(self, action: Action) -> EventsState:
        self._state = reduce(self._state, action)
        logger.debug(f"[STORE] {type(action).__name__} -> {len(self._state.events)} events")
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe
