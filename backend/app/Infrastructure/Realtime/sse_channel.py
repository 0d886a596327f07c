import asyncio
import uuid
from typing import AsyncIterator, Callable, List, Literal, Optional

from loguru import logger

from app.Domains.Appointment.Models.appointment import Appointment
from app.Domains.Realtime.Interfaces.push_connection import PushConnection
from app.Domains.Realtime.Models.event import (
    KEEPALIVE_FRAME,
    AppointmentEvent,
    InitEvent,
    retry_frame,
)
from app.Infrastructure.Realtime.connection_registry import ConnectionRegistry

ChannelState = Literal["connecting", "open", "closed"]


class ChannelClosedError(Exception):
    pass


class SSEChannel(PushConnection):
    """
    Server half of the admin updates channel.

    ``open()`` queues the reconnect hint and the ``init`` snapshot, then
    registers the channel, so no delta can reach the client before its
    baseline. ``stream()`` yields SSE frames until the channel closes; a
    keepalive comment is queued every ``heartbeat_interval`` seconds.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        heartbeat_interval: float = 15.0,
        reconnect_delay: float = 3.0,
        buffer_size: int = 100,
    ):
        self._id = uuid.uuid4().hex
        self.registry = registry
        self.heartbeat_interval = heartbeat_interval
        self.reconnect_delay = reconnect_delay
        self.state: ChannelState = "connecting"
        # None is the close sentinel
        self._queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue(maxsize=buffer_size)
        self._heartbeat_task: Optional[asyncio.Task] = None

    @property
    def connection_id(self) -> str:
        return self._id

    def open(self, load_snapshot: Callable[[], List[Appointment]]) -> None:
        if self.state != "connecting":
            raise ChannelClosedError(f"Channel {self._id} cannot be opened from {self.state}")
        try:
            appointments = load_snapshot()
        except Exception:
            self.close()
            raise

        self._enqueue(retry_frame(self.reconnect_delay))
        self._enqueue(InitEvent(appointments=appointments).encode())
        self.state = "open"
        self.registry.register(self)
        self._heartbeat_task = asyncio.create_task(self._heartbeat())
        logger.info(f"📡 Channel {self._id} open with {len(appointments)} appointment(s)")

    def send(self, event: AppointmentEvent) -> None:
        if self.state != "open":
            raise ChannelClosedError(f"Channel {self._id} is {self.state}")
        self._enqueue(event.encode())

    def close(self) -> None:
        if self.state == "closed":
            return
        self.state = "closed"

        task = self._heartbeat_task
        if task is not None and task is not asyncio.current_task():
            task.cancel()
        self._heartbeat_task = None

        self.registry.unregister(self._id)
        self._wake_reader()
        logger.info(f"Channel {self._id} closed")

    async def stream(self) -> AsyncIterator[str]:
        try:
            while True:
                frame = await self._queue.get()
                if frame is None:
                    break
                yield frame
        finally:
            # Client went away or the stream was cancelled
            self.close()

    def _enqueue(self, frame: str) -> None:
        # Raises asyncio.QueueFull when the client is not draining
        self._queue.put_nowait(frame)

    def _wake_reader(self) -> None:
        while True:
            try:
                self._queue.put_nowait(None)
                return
            except asyncio.QueueFull:
                self._queue.get_nowait()

    async def _heartbeat(self) -> None:
        while self.state == "open":
            await asyncio.sleep(self.heartbeat_interval)
            if self.state != "open":
                break
            try:
                self._enqueue(KEEPALIVE_FRAME)
            except asyncio.QueueFull:
                logger.warning(f"Channel {self._id} stalled, closing")
                self.close()
                break
            logger.debug(f"Keepalive queued for {self._id}")
