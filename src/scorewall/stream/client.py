"""
Competition Stream Reader

Reads JSON text frames from the competition websocket and feeds them to
the pipeline on a background thread. One connection per reader; if the
connection drops the reader stops (no reconnect).
"""

import json
import logging
import threading
from typing import Callable, Optional

from simple_websocket import Client, ConnectionClosed

from ..core.state import SystemState

logger = logging.getLogger(__name__)


def connect_websocket(url: str):
    """Open a websocket client connection."""
    return Client.connect(url)


class StreamReader:
    """
    Background websocket reader.

    The connection factory must return an object with
    receive(timeout) -> str | bytes | None and close().
    """

    def __init__(
        self,
        url: str,
        pipeline,
        system_state: Optional[SystemState] = None,
        receive_timeout: float = 0.5,
        connection_factory: Optional[Callable[[str], object]] = None,
    ):
        self.url = url
        self.receive_timeout = receive_timeout
        self._pipeline = pipeline
        self._state = system_state
        self._connection_factory = connection_factory or connect_websocket
        self._connection = None
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.frames_received = 0
        self.frames_undecodable = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start reading on a daemon thread."""
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run_loop, daemon=True)
        self._thread.start()
        logger.info(f"Stream reader thread started for {self.url}")

    def stop(self) -> None:
        """Stop the reader and close the connection."""
        self._stop_event.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=2.0)
            logger.info("Stream reader thread stopped")
        self._thread = None

    def handle_raw(self, data) -> None:
        """
        Decode one raw text frame and hand it to the pipeline.

        Undecodable frames are dropped.
        """
        self.frames_received += 1
        try:
            payload = json.loads(data)
        except (TypeError, ValueError) as e:
            self.frames_undecodable += 1
            logger.debug(f"Dropping undecodable frame: {e}")
            return
        self._pipeline.handle_frame(payload)

    def _set_connected(self, value: bool) -> None:
        if self._state is not None:
            self._state.stream_connected = value

    def _run_loop(self) -> None:
        try:
            self._connection = self._connection_factory(self.url)
        except OSError as e:
            logger.warning(f"Failed to connect to stream {self.url}: {e}")
            return

        logger.info(f"Connected to stream {self.url}")
        self._set_connected(True)

        try:
            while not self._stop_event.is_set():
                data = self._connection.receive(timeout=self.receive_timeout)
                if data is None:
                    continue
                self.handle_raw(data)
        except ConnectionClosed as e:
            logger.warning(f"Stream connection closed: {e}")
        except Exception as e:
            logger.error(f"Stream reader error: {e}")
        finally:
            try:
                self._connection.close()
            except ConnectionClosed:
                pass
            self._connection = None
            self._set_connected(False)
            logger.info("Stream reader stopped")
