"""HTTP and WebSocket server that receives controller input."""

from __future__ import annotations

import asyncio
import logging
import mimetypes
import os
import threading
from typing import Awaitable, Callable

from aiohttp import WSMsgType, web

from brokenithm.controller_state import ControllerState
from brokenithm.file_streamer import FileStreamer

logger = logging.getLogger(__name__)

BUTTON_MESSAGE_LENGTH = 5
BUTTON_COUNT = 4
MAX_PAYLOAD_LENGTH = 16 * 1024 * 1024
IDLE_TIMEOUT = 16.0
START_TIMEOUT = 10.0
DEFAULT_ROOT = "res/www/"

STATIC_ROUTES: dict[str, str] = {
    "/": "index.html",
    "/config.js": "config.js",
    "/app.js": "app.js",
    "/favicon.ico": "favicon.ico",
}

_Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def parse_button_message(message: str) -> tuple[int, ...] | None:
    """Return the pressed button indices of a ``bXXXX`` message.

    Returns ``None`` when ``message`` is not a button message.
    """
    if len(message) != BUTTON_MESSAGE_LENGTH or message[0] != "b":
        return None
    return tuple(i for i, flag in enumerate(message[1:]) if flag == "1")


class BrokenithmServer:
    """Serves the controller page and collects button presses over WebSocket.

    The server runs its own event loop in a background thread started by
    :meth:`start_server`; the latest button bitmask is available from
    :meth:`controller_state` at any time.
    """

    def __init__(
        self,
        port: int,
        root: str | os.PathLike[str] = DEFAULT_ROOT,
        host: str | None = None,
    ) -> None:
        self.port = port
        self.host = host
        root_str = os.fspath(root)
        if not root_str.endswith(("/", os.sep)):
            root_str += "/"
        self.root = root_str
        self._state = ControllerState()
        self._connections: dict[int, web.WebSocketResponse] = {}
        self._connection_counter = 0
        self._thread: threading.Thread | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._stop_event: asyncio.Event | None = None
        self._ready = threading.Event()
        self._running = False

    @property
    def running(self) -> bool:
        """Whether the server is currently listening."""
        return self._running

    def controller_state(self) -> int:
        """Return the most recently published button bitmask."""
        return self._state.button_state

    def handle_message(self, message: str) -> str | None:
        """Process one text message and return the reply to send, if any."""
        buttons = parse_button_message(message)
        if buttons is not None:
            self._state.start()
            for i in buttons:
                self._state.add_button(i)
            self._state.end()
            return None
        if message == "alive?":
            return "alive"
        return None

    def create_app(self) -> web.Application:
        """Build the web application with its static and WebSocket routes."""
        streamer = FileStreamer(self.root)
        app = web.Application()
        for path, name in STATIC_ROUTES.items():
            app.router.add_get(path, self._file_handler(streamer, name))
        app.router.add_get("/ws", self._websocket_handler)
        return app

    @staticmethod
    def _file_handler(streamer: FileStreamer, name: str) -> _Handler:
        content_type = mimetypes.guess_type(name)[0] or "application/octet-stream"

        async def handler(request: web.Request) -> web.StreamResponse:
            try:
                body = streamer.read(name)
            except FileNotFoundError:
                logger.warning("Did not find file: %s", name)
                raise web.HTTPNotFound()
            return web.Response(status=200, body=body, content_type=content_type)

        return handler

    async def _websocket_handler(self, request: web.Request) -> web.WebSocketResponse:
        ws = web.WebSocketResponse(
            max_msg_size=MAX_PAYLOAD_LENGTH,
            heartbeat=IDLE_TIMEOUT,
            compress=False,
        )
        await ws.prepare(request)

        uid = self._connection_counter
        self._connection_counter += 1
        self._connections[uid] = ws
        logger.info("Controller ID %d connected", uid)
        try:
            async for msg in ws:
                if msg.type == WSMsgType.TEXT:
                    reply = self.handle_message(msg.data)
                    if reply is not None:
                        await ws.send_str(reply)
        finally:
            self._connections.pop(uid, None)
            logger.info("Controller ID %d disconnected", uid)
        return ws

    async def _close_all_connections(self) -> None:
        for ws in list(self._connections.values()):
            await ws.close()

    async def _serve(self) -> None:
        try:
            self._loop = asyncio.get_running_loop()
            self._stop_event = asyncio.Event()
            runner = web.AppRunner(self.create_app())
            await runner.setup()
            try:
                site = web.TCPSite(runner, self.host, self.port)
                try:
                    await site.start()
                except OSError as exc:
                    logger.error("Could not listen at port %d: %s", self.port, exc)
                    return
                if self.port == 0 and runner.addresses:
                    self.port = runner.addresses[0][1]
                logger.info("Server listening at port %d", self.port)
                self._running = True
                self._ready.set()
                await self._stop_event.wait()
                await self._close_all_connections()
            finally:
                await runner.cleanup()
        except Exception:
            logger.exception("Server failed")
        finally:
            self._running = False
            self._ready.set()

    def start_server(self) -> bool:
        """Start serving in a background thread.

        Waits until the server listens or gives up, and returns whether it
        is running.
        """
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("server is already started")
        logger.info("Starting server...")
        self._ready.clear()
        self._thread = threading.Thread(target=lambda: asyncio.run(self._serve()), daemon=True)
        self._thread.start()
        self._ready.wait(START_TIMEOUT)
        return self._running

    def stop_server(self) -> None:
        """Close all connections, stop listening and wait for the thread."""
        logger.info("Stopping server...")
        loop, stop_event = self._loop, self._stop_event
        if loop is not None and stop_event is not None and not loop.is_closed():
            try:
                loop.call_soon_threadsafe(stop_event.set)
            except RuntimeError:
                pass
        if self._thread is not None and self._thread.is_alive():
            self._thread.join()
        self._thread = None
        self._loop = None
        self._stop_event = None
        self._running = False
        logger.info("Server stopped")

    def __enter__(self) -> BrokenithmServer:
        self.start_server()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop_server()