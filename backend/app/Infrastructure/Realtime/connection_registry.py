from typing import Dict, List

from loguru import logger

from app.Domains.Realtime.Interfaces.event_broadcaster import EventBroadcaster
from app.Domains.Realtime.Interfaces.push_connection import PushConnection
from app.Domains.Realtime.Models.event import AppointmentEvent


class ConnectionRegistry(EventBroadcaster):
    """
    In-memory set of open admin push channels.

    Only touched from the event loop thread, so no locking. Sends are
    non-blocking; a connection that refuses an event is dropped.
    """

    def __init__(self) -> None:
        self._connections: Dict[str, PushConnection] = {}

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._connections

    def register(self, connection: PushConnection) -> None:
        self._connections[connection.connection_id] = connection
        logger.info(
            f"🔌 Admin channel {connection.connection_id} registered ({len(self)} open)"
        )

    def unregister(self, connection_id: str) -> None:
        if self._connections.pop(connection_id, None) is not None:
            logger.info(f"Admin channel {connection_id} unregistered ({len(self)} open)")

    def broadcast(self, event: AppointmentEvent) -> None:
        failed: List[PushConnection] = []
        # Snapshot so a failing send can unregister mid-iteration
        for connection in list(self._connections.values()):
            try:
                connection.send(event)
            except Exception as e:
                logger.debug(f"Send to {connection.connection_id} failed: {e!r}")
                failed.append(connection)

        for connection in failed:
            self.unregister(connection.connection_id)
            connection.close()

        if failed:
            logger.info(f"Dropped {len(failed)} unreachable admin channel(s)")

    def close_all(self) -> None:
        connections = list(self._connections.values())
        self._connections.clear()
        for connection in connections:
            connection.close()
        if connections:
            logger.info(f"Closed {len(connections)} admin channel(s)")
