"""
WebSocket transport module.

Carries text frames between the chat client and the server over one
websocket connection. Lifecycle events are reported through three handlers:
``on_open()``, ``on_message(frame)`` and ``on_close()``. ``on_close`` fires
exactly once per run, whatever ended the connection.

All methods must be called from the thread running the event loop.
"""

import asyncio
from typing import Callable, Optional

import websockets
from websockets.exceptions import WebSocketException

from client.utils.logger import logger
from common.constants import DEFAULT_OPEN_TIMEOUT
from common.exceptions import ConnectionClosed


class WebSocketTransport:
    """Asyncio websocket transport."""

    def __init__(self, open_timeout: float = DEFAULT_OPEN_TIMEOUT):
        self.open_timeout = open_timeout
        self.websocket = None
        self.on_open: Optional[Callable] = None
        self.on_message: Optional[Callable] = None
        self.on_close: Optional[Callable] = None
        self._task: Optional[asyncio.Task] = None
        self._pending = set()

    def set_handlers(self, on_open: Callable, on_message: Callable, on_close: Callable):
        """Set the lifecycle handlers."""
        self.on_open = on_open
        self.on_message = on_message
        self.on_close = on_close

    def connect(self, endpoint: str) -> asyncio.Task:
        """Start connecting to ``endpoint`` on the running event loop."""
        if self._task is not None:
            raise RuntimeError("Transport has already been started")
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self.run(endpoint))
        return self._task

    async def run(self, endpoint: str):
        """Connect, then feed frames to ``on_message`` until the connection ends."""
        try:
            async with websockets.connect(endpoint, open_timeout=self.open_timeout) as websocket:
                self.websocket = websocket
                self._emit(self.on_open)
                async for frame in websocket:
                    self._emit(self.on_message, frame)
        except (asyncio.TimeoutError, TimeoutError):
            logger.error(f"Connection timeout: could not open {endpoint} within {self.open_timeout}s")
        except ConnectionRefusedError:
            logger.error(f"Connection refused: {endpoint} is not accepting connections")
        except WebSocketException as e:
            logger.log_error("websocket", e)
        except OSError as e:
            logger.log_error("network", e)
        finally:
            self.websocket = None
            self._emit(self.on_close)

    def send(self, text: str):
        """Queue a text frame for sending."""
        websocket = self.websocket
        if websocket is None:
            raise ConnectionClosed("websocket is not open")

        task = asyncio.get_running_loop().create_task(self._send(websocket, text))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def close(self):
        """Close the connection, or abandon the attempt if still connecting."""
        if self.websocket is not None:
            task = asyncio.get_running_loop().create_task(self.websocket.close())
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        elif self._task is not None and not self._task.done():
            self._task.cancel()

    async def wait_closed(self):
        """Wait until the connection task has finished."""
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    async def _send(self, websocket, text: str):
        try:
            await websocket.send(text)
        except WebSocketException as e:
            logger.log_error("send", e)

    def _emit(self, handler: Optional[Callable], *args):
        if handler is None:
            return
        try:
            handler(*args)
        except Exception as e:
            logger.log_error("transport handler", e)
