from __future__ import annotations

import logging
from typing import Optional, Protocol

from flask_socketio import SocketIO

from ..common.http import to_jsonable
from .model import Event

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def publish(self, event: Event) -> None:
        """Fire-and-forget. Must never raise into the caller."""

        raise NotImplementedError


class SocketIONotifier(Notifier):
    """Pushes events to the rooms of their audience.

    The socket server is attached after the app is built; until then (and
    whenever nobody is connected) publishing is a no-op.
    """

    def __init__(self, socketio: Optional[SocketIO] = None):
        self._socketio = socketio

    def attach(self, socketio: SocketIO) -> None:
        self._socketio = socketio

    def publish(self, event: Event) -> None:
        if self._socketio is None:
            logger.debug("No socket server attached; dropping %s", event.name)
            return

        rooms = event.audience.rooms()
        if not rooms:
            # An empty target would broadcast to every connected socket.
            logger.debug("Empty audience; dropping %s", event.name)
            return

        # One emit for all rooms: a socket in several of them still gets the event once.
        try:
            self._socketio.emit(event.name, to_jsonable(event.payload), to=rooms)
        except Exception:
            logger.warning("Failed to emit %s to %s", event.name, ", ".join(rooms), exc_info=True)
            return
        logger.info("Emitted %s to %s", event.name, ", ".join(rooms))
