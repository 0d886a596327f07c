"""
Admin-side half of the updates channel.

``AppointmentUpdatesClient`` keeps an ``AppointmentBoard`` in sync with the
server: it opens ``/api/admin/updates``, applies events by id and, whenever
the stream fails or ends, marks itself disconnected, waits
``reconnect_delay`` seconds and reconnects (getting a fresh ``init``). While
disconnected it polls the listing endpoint every ``poll_interval`` seconds so
the board never goes silently stale.
"""

import asyncio
from typing import AsyncIterable, Callable, Dict, List, Literal, Optional, Tuple

import aiohttp
from loguru import logger

from app.Domains.Appointment.Models.appointment import Appointment
from app.Domains.Realtime.Models.event import (
    AppointmentEvent,
    DeleteEvent,
    InitEvent,
    NewEvent,
    UpdateEvent,
    decode_event,
)

ClientState = Literal["disconnected", "connecting", "open"]


class SSEDecoder:
    """Incremental text/event-stream parser: feed lines, get (event, data) pairs."""

    def __init__(self) -> None:
        self.retry_ms: Optional[int] = None
        self._event: Optional[str] = None
        self._data: List[str] = []

    def feed_line(self, line: str) -> Optional[Tuple[str, str]]:
        line = line.rstrip("\r\n")
        if not line:
            return self._dispatch()
        if line.startswith(":"):
            return None  # comment / keepalive

        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field == "event":
            self._event = value
        elif field == "data":
            self._data.append(value)
        elif field == "retry" and value.isdigit():
            self.retry_ms = int(value)
        return None

    def _dispatch(self) -> Optional[Tuple[str, str]]:
        event, data = self._event or "message", self._data
        self._event, self._data = None, []
        if not data:
            return None
        return event, "\n".join(data)


class AppointmentBoard:
    """Client-side view of the appointments, keyed by id."""

    def __init__(self) -> None:
        self._appointments: Dict[str, Appointment] = {}

    def __len__(self) -> int:
        return len(self._appointments)

    def __contains__(self, appointment_id: str) -> bool:
        return appointment_id in self._appointments

    def get(self, appointment_id: str) -> Optional[Appointment]:
        return self._appointments.get(appointment_id)

    @property
    def appointments(self) -> List[Appointment]:
        return sorted(self._appointments.values(), key=lambda a: a.created_at, reverse=True)

    def replace(self, appointments: List[Appointment]) -> None:
        self._appointments = {a.id: a for a in appointments}

    def apply(self, event: AppointmentEvent) -> None:
        # Upserts make a snapshot/delta overlap harmless
        if isinstance(event, InitEvent):
            self.replace(event.appointments)
        elif isinstance(event, (NewEvent, UpdateEvent)):
            self._appointments[event.appointment.id] = event.appointment
        elif isinstance(event, DeleteEvent):
            self._appointments.pop(event.id, None)


class AppointmentUpdatesClient:
    def __init__(
        self,
        base_url: str,
        reconnect_delay: float = 3.0,
        poll_interval: float = 15.0,
        read_timeout: float = 45.0,
        board: Optional[AppointmentBoard] = None,
        on_state_change: Optional[Callable[[ClientState], None]] = None,
        on_event: Optional[Callable[[AppointmentEvent], None]] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.reconnect_delay = reconnect_delay
        self.poll_interval = poll_interval
        self.read_timeout = read_timeout
        self.board = board or AppointmentBoard()
        self.on_state_change = on_state_change
        self.on_event = on_event
        self._session = session
        self._state: ClientState = "disconnected"
        self._running = False
        self._poll_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> ClientState:
        return self._state

    @property
    def updates_url(self) -> str:
        return f"{self.base_url}/api/admin/updates"

    @property
    def listing_url(self) -> str:
        return f"{self.base_url}/api/admin/appointments"

    def _set_state(self, state: ClientState) -> None:
        if state == self._state:
            return
        self._state = state
        logger.info(f"Updates channel {state}")
        if state == "open":
            self._stop_polling()
        if self.on_state_change:
            self._notify(self.on_state_change, state)

    @staticmethod
    def _notify(callback: Callable, value) -> None:
        try:
            callback(value)
        except Exception as e:
            logger.opt(exception=e).warning(f"Updates callback {callback!r} failed")

    async def run(self) -> None:
        """Connect, and keep reconnecting until ``stop()`` is called."""
        self._running = True
        owns_session = self._session is None
        session = self._session or aiohttp.ClientSession()
        try:
            while self._running:
                self._set_state("connecting")
                try:
                    await self._listen(session)
                    logger.warning("Updates stream ended by server")
                except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                    # ValueError covers oversized lines from the stream reader
                    logger.warning(f"Updates stream failed: {e!r}")
                except Exception as e:
                    logger.opt(exception=e).warning(f"Updates stream failed: {e!r}")
                self._set_state("disconnected")
                if not self._running:
                    break
                self._start_polling(session)
                await asyncio.sleep(self.reconnect_delay)
        finally:
            self._running = False
            self._stop_polling()
            self._set_state("disconnected")
            if owns_session:
                await session.close()

    def stop(self) -> None:
        self._running = False

    async def _listen(self, session: aiohttp.ClientSession) -> None:
        # No total timeout: the stream is long-lived, keepalives reset sock_read
        timeout = aiohttp.ClientTimeout(total=None, sock_read=self.read_timeout)
        async with session.get(
            self.updates_url, headers={"Accept": "text/event-stream"}, timeout=timeout
        ) as response:
            response.raise_for_status()
            await self._consume(response.content)

    async def _consume(self, lines: AsyncIterable[bytes]) -> None:
        self._set_state("open")
        decoder = SSEDecoder()
        async for raw in lines:
            if not self._running:
                return
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                logger.warning(f"Skipping undecodable stream line: {e}")
                continue
            frame = decoder.feed_line(line)
            if frame is None:
                continue
            kind, data = frame
            try:
                event = decode_event(kind, data)
            except ValueError as e:
                logger.warning(f"Ignoring malformed '{kind}' event: {e}")
                continue
            self.board.apply(event)
            if self.on_event:
                self._notify(self.on_event, event)

    def _start_polling(self, session: aiohttp.ClientSession) -> None:
        if self._poll_task is None or self._poll_task.done():
            self._poll_task = asyncio.create_task(self._poll_while_disconnected(session))

    def _stop_polling(self) -> None:
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None

    async def _poll_while_disconnected(self, session: aiohttp.ClientSession) -> None:
        while self._running and self._state != "open":
            await asyncio.sleep(self.poll_interval)
            if self._state == "open":
                break
            try:
                self.board.replace(await self._fetch_snapshot(session))
                logger.debug(f"Polled {len(self.board)} appointment(s) while disconnected")
            except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                logger.warning(f"Fallback poll failed: {e!r}")

    async def _fetch_snapshot(self, session: aiohttp.ClientSession) -> List[Appointment]:
        async with session.get(
            self.listing_url, timeout=aiohttp.ClientTimeout(total=10)
        ) as response:
            response.raise_for_status()
            payload = await response.json()
        if not isinstance(payload, dict) or not isinstance(payload.get("appointments"), list):
            raise ValueError("Unexpected appointments listing payload")
        return [Appointment.model_validate(item) for item in payload["appointments"]]
