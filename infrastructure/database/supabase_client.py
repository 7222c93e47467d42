"""
Supabase client initialization.
Single point of database connection.
"""

from supabase import create_client, Client
from supabase.lib.client_options import ClientOptions
import asyncio
import concurrent.futures
import logging
from functools import wraps
from typing import Optional

from config.settings import settings

logger = logging.getLogger(__name__)

_client: Optional[Client] = None


def get_supabase() -> Client:
    """Create the client on first use so importing this module never needs credentials."""
    global _client
    if _client is not None:
        return _client

    key = settings.database_key
    if not settings.supabase_url or not key:
        logger.error(
            "Supabase credentials not configured! "
            f"SUPABASE_URL: {'set' if settings.supabase_url else 'MISSING'}, "
            f"SUPABASE_SERVICE_KEY/SUPABASE_KEY: {'set' if key else 'MISSING'}"
        )
        raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_KEY (or SUPABASE_KEY) are required")

    # Schema isolation: staging can point at its own schema
    if settings.db_schema != "public":
        _client = create_client(
            settings.supabase_url, key,
            options=ClientOptions(schema=settings.db_schema)
        )
    else:
        _client = create_client(settings.supabase_url, key)
    logger.info(f"Supabase client ready (schema={settings.db_schema})")
    return _client


# Dedicated bounded thread pool for DB operations; concurrent Supabase calls
# never exhaust the default executor.
_db_executor = concurrent.futures.ThreadPoolExecutor(
    max_workers=10,
    thread_name_prefix="supabase-db",
)


def run_sync(func):
    """
    Decorator to run synchronous Supabase operations in async context.
    Supabase Python SDK is synchronous, so we need this wrapper.
    Uses a dedicated bounded thread pool instead of the default executor.
    """
    @wraps(func)
    async def wrapper(*args, **kwargs):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(_db_executor, lambda: func(*args, **kwargs))
    return wrapper
