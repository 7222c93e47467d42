#!/usr/bin/env python3
"""
EventHub command-line client.

Usage:
    eventhub signup --name "Ada" --email ada@example.com --photo-url https://...
    eventhub login --email ada@example.com
    eventhub events --search meetup --filter current-week --page 2
    eventhub join <event-id>
    eventhub my-events
"""

import argparse
import asyncio
import getpass
import logging
import sys
from datetime import date, datetime

from dotenv import load_dotenv

from config.settings import ClientSettings
from adapters.client.api_client import ApiError, EventHubClient, SessionExpiredError
from adapters.client.filters import DateFilter, EventFilters
from adapters.client.pages import (
    EventsPage,
    MyEventsPage,
    render_event_detail,
    render_event_line,
    render_page,
)
from adapters.client.session import AuthSession
from adapters.client.token_storage import FileTokenStorage


def _datetime_arg(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO date/time: {value!r}")
    # Naive input means local time
    return parsed if parsed.tzinfo else parsed.astimezone()


def _date_arg(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a YYYY-MM-DD date: {value!r}")


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="eventhub",
        description="Browse, create and join events",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    eventhub login --email ada@example.com
    eventhub events --filter today
    eventhub events --from 2026-11-01 --to 2026-11-30
    eventhub create --title "Pub quiz" --organizer "Ada" --date 2026-11-20T19:00 --location "The Crown" --description "Teams of four"
        """
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug logs")
    sub = parser.add_subparsers(dest="command", required=True)

    signup = sub.add_parser("signup", help="Create an account")
    signup.add_argument("--name", required=True)
    signup.add_argument("--email", required=True)
    signup.add_argument("--password", help="Prompted for when omitted")
    signup.add_argument("--photo-url", required=True)

    login = sub.add_parser("login", help="Sign in")
    login.add_argument("--email", required=True)
    login.add_argument("--password", help="Prompted for when omitted")

    sub.add_parser("logout", help="Forget the stored session")
    sub.add_parser("whoami", help="Show the signed-in user")
    sub.add_parser("home", help="Upcoming events")

    events = sub.add_parser("events", help="List events")
    events.add_argument("--search", "-s", default="", help="Match event titles")
    events.add_argument("--filter", "-f", choices=[f.value for f in DateFilter], help="Preset date range")
    events.add_argument("--from", dest="start", type=_date_arg, help="Custom range start (YYYY-MM-DD)")
    events.add_argument("--to", dest="end", type=_date_arg, help="Custom range end, inclusive")
    events.add_argument("--page", "-p", type=int, default=1)

    show = sub.add_parser("show", help="Event details")
    show.add_argument("event_id")

    join = sub.add_parser("join", help="Join an event")
    join.add_argument("event_id")

    sub.add_parser("my-events", help="Events you created")

    create = sub.add_parser("create", help="Create an event")
    create.add_argument("--title", required=True)
    create.add_argument("--organizer", required=True, help="Organizer display name")
    create.add_argument("--date", required=True, type=_datetime_arg, help="ISO date/time")
    create.add_argument("--location", required=True)
    create.add_argument("--description", required=True)
    create.add_argument("--image-url")

    edit = sub.add_parser("edit", help="Edit one of your events")
    edit.add_argument("event_id")
    edit.add_argument("--title")
    edit.add_argument("--organizer")
    edit.add_argument("--date", type=_datetime_arg)
    edit.add_argument("--location")
    edit.add_argument("--description")
    edit.add_argument("--image-url")

    delete = sub.add_parser("delete", help="Delete one of your events")
    delete.add_argument("event_id")

    args = parser.parse_args(argv)
    if (args.command == "events") and ((args.start is None) != (args.end is None)):
        parser.error("--from and --to must be used together")
    return args


def _password(args) -> str:
    return args.password or getpass.getpass("Password: ")


async def run(args: argparse.Namespace, settings: ClientSettings) -> None:
    storage = FileTokenStorage(settings.token_file)
    async with EventHubClient(settings.api_url, storage) as client:
        async with AuthSession(client, settings.refresh_interval_seconds) as session:
            await dispatch_command(args, client, session)


async def dispatch_command(args: argparse.Namespace, client: EventHubClient, session: AuthSession) -> None:
    command = args.command

    if command == "signup":
        user = await session.register(args.name, args.email, _password(args), args.photo_url)
        print(f"Welcome, {user.name}! You are signed in.")
        return

    if command == "login":
        user = await session.login(args.email, _password(args))
        print(f"Signed in as {user.name} <{user.email}>")
        return

    if command == "logout":
        session.logout()
        print("Signed out.")
        return

    if command == "home":
        events = await client.upcoming_events()
        if not events:
            print("No upcoming events.")
        for event in events:
            print(render_event_line(event))
        return

    # Everything below may use the stored session
    await session.restore()

    if command == "whoami":
        if not session.is_authenticated:
            raise SessionExpiredError(401, session.error or "Not signed in")
        user = session.user
        print(f"{user.name} <{user.email}>, joined {len(user.joined_events)} event(s)")
        return

    if command == "events":
        page = EventsPage(client, session)
        await page.load()
        filters = EventFilters(
            search=args.search,
            date_filter=DateFilter(args.filter) if args.filter else None,
            custom_start=args.start,
            custom_end=args.end,
        )
        print(render_page(page.view(filters, args.page), page.store.state.joined_ids))
        return

    if command == "show":
        event = await client.get_event(args.event_id)
        joined = bool(session.user and session.user.id in event.attendees)
        print(render_event_detail(event, joined))
        return

    if command == "join":
        page = EventsPage(client, session)
        await page.load()
        event = await page.join(args.event_id)
        print(f"Successfully joined! {event.attendee_count} attending.")
        return

    my_events = MyEventsPage(client)

    if command == "my-events":
        events = await my_events.load()
        if not events:
            print("You haven't created any events yet.")
        for event in events:
            print(render_event_line(event))
        return

    if command == "create":
        event = await my_events.create(
            title=args.title,
            name=args.organizer,
            date=args.date,
            location=args.location,
            description=args.description,
            image_url=args.image_url,
        )
        print(f"Event created: {event.id}")
        return

    if command == "edit":
        event = await my_events.update(
            args.event_id,
            title=args.title,
            name=args.organizer,
            date=args.date,
            location=args.location,
            description=args.description,
            image_url=args.image_url,
        )
        print(f"Event updated: {event.id}")
        return

    if command == "delete":
        await my_events.delete(args.event_id)
        print("Event deleted.")
        return

    raise ValueError(f"Unknown command: {command}")


def main(argv=None) -> int:
    load_dotenv()
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    try:
        asyncio.run(run(args, ClientSettings()))
    except SessionExpiredError as e:
        print(f"❌ {e.message}. Run `eventhub login` to sign in again.", file=sys.stderr)
        return 1
    except ApiError as e:
        print(f"❌ {e.describe()}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
