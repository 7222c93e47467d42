from adapters.api.handlers import auth, events

# Order matters: static event paths must be registered before /api/events/{event_id}
routes = [
    auth.routes,
    events.routes,
]

__all__ = ["routes"]
