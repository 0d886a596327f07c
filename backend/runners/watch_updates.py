"""
Follow the admin updates channel from a terminal.

    python runners/watch_updates.py --url http://localhost:2400
"""

import argparse
import asyncio
import os
import sys

from loguru import logger

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.Core.Config.server import ServerConfig  # noqa: E402
from app.Domains.Realtime.Models.event import (  # noqa: E402
    AppointmentEvent,
    DeleteEvent,
    InitEvent,
)
from app.Infrastructure.Realtime.updates_client import AppointmentUpdatesClient  # noqa: E402


def describe(event: AppointmentEvent) -> str:
    if isinstance(event, InitEvent):
        return f"snapshot with {len(event.appointments)} appointment(s)"
    if isinstance(event, DeleteEvent):
        return f"cancelled {event.id}"
    a = event.appointment
    return f"{event.kind}: {a.name} ({a.phone}) {a.service} [{a.status}]"


async def main(args: argparse.Namespace) -> None:
    client = AppointmentUpdatesClient(
        args.url,
        reconnect_delay=args.reconnect_delay,
        poll_interval=args.poll_interval,
        on_event=lambda event: logger.info(describe(event)),
    )
    await client.run()


if __name__ == "__main__":
    config = ServerConfig()
    parser = argparse.ArgumentParser(description="Watch live appointment updates")
    parser.add_argument("--url", default=f"http://localhost:{config.port}", help="API base URL")
    parser.add_argument("--reconnect-delay", type=float, default=config.reconnect_delay)
    parser.add_argument("--poll-interval", type=float, default=15.0)

    try:
        asyncio.run(main(parser.parse_args()))
    except KeyboardInterrupt:
        pass
