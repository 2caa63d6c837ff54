from typing import Dict, Optional

from flask import request
from flask_socketio import emit

from geoguess import socketio
from geoguess.gateway import SessionGateway
from geoguess.schemas import ClientEvent, ServerEvent


class SocketEvents:
    """Keeps one SessionGateway per connected sid and routes events to it."""

    def __init__(self, registry, lobby, transport, logger):
        self.registry = registry
        self.lobby = lobby
        self.transport = transport
        self.logger = logger
        self._gateways: Dict[str, SessionGateway] = {}

    def gateway(self, sid: str) -> Optional[SessionGateway]:
        return self._gateways.get(sid)

    def __len__(self) -> int:
        return len(self._gateways)

    def handle_connect(self, auth=None):
        self._gateways[request.sid] = SessionGateway(request.sid, self.registry, self.lobby, self.transport, self.logger)
        emit(ServerEvent.LOBBY_MESSAGES.value, self.lobby.history())

    def handle_disconnect(self, reason=None):
        gw = self._gateways.pop(request.sid, None)
        if gw is not None:
            gw.disconnect()

    def handler_for(self, kind: str):
        def _handler(data=None):
            gw = self._gateways.get(request.sid)
            if gw is None:
                self.logger.warning(f"[event-dropped] sid={request.sid} action={kind} reason=not connected")
                return
            gw.dispatch(kind, data)
        _handler.__name__ = f'handle_{kind}'
        return _handler


def register_socketio_handlers(registry, lobby, transport, logger) -> SocketEvents:
    """Register Socket.IO event handlers on ``transport.namespace``."""
    namespace = transport.namespace
    events = SocketEvents(registry, lobby, transport, logger)
    socketio.on_event('connect', events.handle_connect, namespace=namespace)
    socketio.on_event('disconnect', events.handle_disconnect, namespace=namespace)
    for kind in ClientEvent:
        socketio.on_event(kind.value, events.handler_for(kind.value), namespace=namespace)
    return events
