#!/usr/bin/env python3
"""
Console front-end for the ship booking freshness manager.

Usage (from project root):
    python scripts/run.py                # load (cache-aware)
    python scripts/run.py refresh        # bypass memo and fetch from the remote
    python scripts/run.py clear          # drop memo and durable cache
    python scripts/run.py status         # is the cached booking still fresh?

Environment variables (all optional):
    BOOKING_SOURCE            - "simulator" (default) or "http"
    BOOKING_API_URL           - base URL, required when BOOKING_SOURCE=http
    BOOKING_API_KEY           - sent as the Api-Key header
    BOOKING_API_TIMEOUT       - seconds (default: 10)
    BOOKING_STORE             - "sqlite" (default) or "memory"
    DB_PATH                   - SQLite database path (default: data/bookings.db)
    FRESHNESS_WINDOW_MINUTES  - default: 30
    REFRESH_ON_LOAD           - "true" (default) or "false"
"""

import asyncio
import logging
import os
import sys

# Make sure project root is on sys.path when run as a script
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.console_view import ConsoleStateView
from src.domain.errors import BookingError
from src.factory import create_manager

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-7s  %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
log = logging.getLogger(__name__)

COMMANDS = ("load", "refresh", "clear", "status")


async def main(command: str) -> int:
    manager = create_manager()
    unsubscribe = manager.subscribe(ConsoleStateView())
    try:
        if command == "load":
            await manager.load()
        elif command == "refresh":
            await manager.refresh()
        elif command == "clear":
            await manager.clear_all()
        elif command == "status":
            valid = await manager.is_cache_valid()
            print(f"Cache valid: {'yes' if valid else 'no'}")
        # Let queued state notifications reach the view
        await asyncio.sleep(0)
    except BookingError as exc:
        await asyncio.sleep(0)
        log.error("%s failed: %s", command, exc)
        return 1
    finally:
        unsubscribe()
    return 0


if __name__ == "__main__":
    cmd = sys.argv[1] if len(sys.argv) > 1 else "load"
    if cmd not in COMMANDS:
        print(f"Unknown command {cmd!r}. Expected one of: {', '.join(COMMANDS)}", file=sys.stderr)
        sys.exit(2)
    sys.exit(asyncio.run(main(cmd)))
