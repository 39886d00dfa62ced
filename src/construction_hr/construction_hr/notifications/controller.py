from __future__ import annotations

import logging
from typing import Optional

from flask import request
from flask_socketio import ConnectionRefusedError, SocketIO, join_room

from ..container import Container
from ..core.exceptions import AuthenticationError
from .model import role_room, user_room

logger = logging.getLogger(__name__)


def _socket_token(auth: Optional[dict]) -> Optional[str]:
    if isinstance(auth, dict) and auth.get("token"):
        return str(auth["token"])
    return request.args.get("token") or None


def register(socketio: SocketIO, container: Container) -> None:
    @socketio.on("connect")
    def on_connect(auth=None):
        token = _socket_token(auth)
        if not token:
            raise ConnectionRefusedError("Access token missing")
        try:
            user = container.auth_service.decode(token)
        except AuthenticationError as e:
            raise ConnectionRefusedError(str(e))

        join_room(user_room(user.user_id))
        join_room(role_room(user.role))
        logger.info("Socket connected: %s (%s)", user.username, user.role.value)

    @socketio.on("disconnect")
    def on_disconnect(*args):
        logger.debug("Socket disconnected: %s", request.sid)
