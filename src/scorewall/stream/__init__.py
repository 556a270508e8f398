"""SCOREWALL Stream Transport"""

from .client import StreamReader, connect_websocket

__all__ = ["StreamReader", "connect_websocket"]
