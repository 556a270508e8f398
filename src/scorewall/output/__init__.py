"""SCOREWALL Output Modules"""

from .presenter import Presenter, LoggingPresenter, CompositePresenter, MockPresenter
from .socketio_presenter import SocketIOPresenter

__all__ = [
    "Presenter",
    "LoggingPresenter",
    "CompositePresenter",
    "MockPresenter",
    "SocketIOPresenter",
]
