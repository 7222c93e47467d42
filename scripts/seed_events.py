#!/usr/bin/env python3
"""
Seed the database with a demo organizer and a spread of events.
Run: python scripts/seed_events.py [--email demo@example.com] [--count 12]
"""

import argparse
import asyncio
import sys
import os
from datetime import datetime, timedelta, timezone

# Add parent dir to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Load env
from dotenv import load_dotenv
load_dotenv()

from core.domain.errors import DuplicateEmailError
from core.domain.models import EventInput, LoginRequest, RegisterRequest
from adapters.api.loader import auth_service, event_service


SAMPLE_EVENTS = [
    ("Morning Run Club", "Riverside Park", "5k at an easy pace, coffee afterwards."),
    ("Python Meetup", "Hub Coworking, Room 2", "Lightning talks and pizza."),
    ("Board Game Night", "The Dice Tower Cafe", "Bring a friend or find a team here."),
    ("Photography Walk", "Old Town Square", "Golden hour shooting around the old town."),
    ("Startup Pitch Evening", "Innovation Center", "Five teams, five minutes each."),
    ("Community Garden Day", "Elm Street Garden", "Planting, weeding and a picnic lunch."),
]


async def get_organizer(email: str, password: str):
    """Register the demo organizer, or log in if it already exists"""
    try:
        _, user = await auth_service.register(RegisterRequest(
            name="EventHub Demo",
            email=email,
            password=password,
            photoURL="https://i.pravatar.cc/150?u=eventhub-demo",
        ))
        print(f"✅ Registered organizer {user.email}")
    except DuplicateEmailError:
        _, user = await auth_service.login(LoginRequest(email=email, password=password))
        print(f"✅ Logged in as existing organizer {user.email}")
    return user


async def seed(email: str, password: str, count: int):
    user = await get_organizer(email, password)
    now = datetime.now(timezone.utc).replace(minute=0, second=0, microsecond=0)

    # Half in the past, half ahead, so every date filter has something to show
    for i in range(count):
        title, location, description = SAMPLE_EVENTS[i % len(SAMPLE_EVENTS)]
        offset_days = (i - count // 2) * 3
        event = await event_service.create_event(user, EventInput(
            title=title,
            name=user.name,
            date=now + timedelta(days=offset_days, hours=18 - now.hour),
            location=location,
            description=description,
            attendeeCount=0,
        ))
        print(f"   📅 {event.date:%Y-%m-%d %H:%M}  {event.title}  ({event.id})")

    print(f"\n✅ Created {count} events")


def main():
    parser = argparse.ArgumentParser(description="Seed demo events")
    parser.add_argument("--email", default="demo@example.com", help="Organizer email")
    parser.add_argument("--password", default="demo-password", help="Organizer password")
    parser.add_argument("--count", type=int, default=12, help="Number of events")
    args = parser.parse_args()

    asyncio.run(seed(args.email, args.password, args.count))


if __name__ == "__main__":
    main()
