from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from core.domain.models import Event
from adapters.client.store import (
    EventRemoved,
    EventSaved,
    EventsLoaded,
    EventsState,
    EventStore,
    JoinConfirmed,
    JoinFailed,
    JoinRequested,
    LoadFailed,
    reduce,
)

NOW = datetime(2026, 10, 19, 12, tzinfo=timezone.utc)
USER = str(uuid4())


def event(days: int = 0, **overrides) -> Event:
    fields = dict(
        id=uuid4(),
        title=f"in {days}",
        name="Ada",
        date=NOW + timedelta(days=days),
        location="Hub",
        description="Talks",
        created_by=uuid4(),
    )
    fields.update(overrides)
    return Event(**fields)


def loaded(*events, joined=()) -> EventsState:
    return reduce(EventsState(), EventsLoaded(tuple(events), frozenset(joined)))


def test_loaded_events_are_sorted_newest_first():
    state = loaded(event(1), event(5), event(-3))
    assert [e.title for e in state.events] == ["in 5", "in 1", "in -3"]
    assert state.loaded
    assert state.error is None


def test_load_failure_keeps_events():
    state = reduce(loaded(event()), LoadFailed("boom"))
    assert state.error == "boom"
    assert len(state.events) == 1


def test_optimistic_join_then_confirm():
    original = event()
    key = str(original.id)
    state = reduce(loaded(original), JoinRequested(key, USER))

    optimistic = state.get(key)
    assert optimistic.attendee_count == 1
    assert optimistic.attendees == [USER]
    assert state.is_joined(key)
    assert state.pending[key] == original

    server_copy = original.model_copy(update={"attendee_count": 4, "attendees": ["a", "b", "c", USER]})
    state = reduce(state, JoinConfirmed(server_copy))
    assert state.get(key).attendee_count == 4
    assert state.pending == {}
    assert state.is_joined(key)


def test_failed_join_is_reverted():
    original = event()
    key = str(original.id)
    state = reduce(loaded(original), JoinRequested(key, USER))

    state = reduce(state, JoinFailed(key, "Already joined this event"))
    assert state.get(key) == original
    assert not state.is_joined(key)
    assert state.pending == {}
    assert state.error == "Already joined this event"


def test_join_request_ignored_when_already_attending_or_pending():
    attending = event(attendees=[USER], attendee_count=1)
    state = loaded(attending)
    assert reduce(state, JoinRequested(str(attending.id), USER)) is state

    fresh = event()
    state = reduce(loaded(fresh), JoinRequested(str(fresh.id), USER))
    assert reduce(state, JoinRequested(str(fresh.id), USER)) is state
    assert reduce(state, JoinRequested(str(uuid4()), USER)) is state


def test_reduce_does_not_mutate_state():
    original = event()
    before = loaded(original)
    reduce(before, JoinRequested(str(original.id), USER))
    assert before.get(str(original.id)).attendee_count == 0
    assert before.pending == {}


def test_saved_event_is_added_or_replaced():
    first = event(1)
    state = reduce(loaded(first), EventSaved(event(3, title="new")))
    assert [e.title for e in state.events] == ["new", "in 1"]

    renamed = first.model_copy(update={"title": "renamed"})
    state = reduce(state, EventSaved(renamed))
    assert [e.title for e in state.events] == ["new", "renamed"]


def test_removed_event():
    gone = event()
    state = reduce(loaded(gone, event(1), joined=[str(gone.id)]), EventRemoved(str(gone.id)))
    assert state.get(str(gone.id)) is None
    assert not state.is_joined(str(gone.id))
    assert len(state.events) == 1


def test_unknown_action():
    with pytest.raises(TypeError):
        reduce(EventsState(), object())


def test_store_notifies_subscribers_until_unsubscribed():
    store = EventStore()
    seen = []
    unsubscribe = store.subscribe(seen.append)

    store.dispatch(EventsLoaded((event(),)))
    unsubscribe()
    store.dispatch(LoadFailed("later"))

    assert len(seen) == 1
    assert seen[0].loaded
    assert store.state.error == "later"
