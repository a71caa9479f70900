"""Socket Manager — python-socketio AsyncServer wrapper for room channels and broadcasts.

Invariants:
    - Every connected sid is tracked from connect until disconnect
    - Room membership mirrors enter_room/leave_room calls made through this manager
    - A socket's own sid room is never counted as an active room
    - join/remove return False (not raise) for unknown sids
    - Broadcast helpers raise SocketNotReadyError before initialize()

Design Decisions:
    - Manager keeps its own membership map instead of reading sio.manager internals:
      stats stay stable across python-socketio versions and are testable with a fake server
    - Event handlers for the translation pipeline live in api/socket_events.py: this
      module owns transport only (ADR: infrastructure never imports services)
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

import socketio

logger = logging.getLogger(__name__)


class SocketNotReadyError(RuntimeError):
    """Raised when broadcasting before the Socket.IO server is attached."""


@dataclass
class ConnectedSocket:
    sid: str
    connected_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    username: str | None = None
    room_id: str | None = None
    is_creator: bool = False
    rooms: set[str] = field(default_factory=set)


class SocketManager:
    """Tracks sockets and room channels on top of a socketio.AsyncServer."""

    def __init__(self):
        self.sio: socketio.AsyncServer | None = None
        self._sockets: dict[str, ConnectedSocket] = {}
        self._rooms: dict[str, set[str]] = {}

    def initialize(self, sio: socketio.AsyncServer) -> socketio.AsyncServer:
        if self.sio is not None:
            logger.warning("Socket server already initialized")
            return self.sio
        self.sio = sio
        return sio

    def is_ready(self) -> bool:
        return self.sio is not None

    def _require(self) -> socketio.AsyncServer:
        if self.sio is None:
            raise SocketNotReadyError("Socket not ready")
        return self.sio

    # ─── connection bookkeeping ─────────────────────────────────

    def register_connection(self, sid: str) -> ConnectedSocket:
        sock = ConnectedSocket(sid=sid)
        self._sockets[sid] = sock
        return sock

    def unregister_connection(self, sid: str) -> None:
        sock = self._sockets.pop(sid, None)
        if sock is None:
            return
        for room_id in sock.rooms:
            members = self._rooms.get(room_id)
            if members is not None:
                members.discard(sid)
                if not members:
                    del self._rooms[room_id]

    def identify(
        self, sid: str, user_id: str, username: str | None,
        room_id: str | None = None, is_creator: bool = False,
    ) -> bool:
        sock = self._sockets.get(sid)
        if sock is None:
            return False
        sock.user_id = user_id
        sock.username = username
        sock.room_id = room_id or sock.room_id
        sock.is_creator = is_creator
        return True

    def get_socket(self, sid: str) -> ConnectedSocket | None:
        return self._sockets.get(sid)

    # ─── room membership ────────────────────────────────────────

    async def join_user_to_room(self, sid: str, room_id: str) -> bool:
        sio = self._require()
        sock = self._sockets.get(sid)
        if sock is None:
            return False
        await sio.enter_room(sid, room_id)
        sock.rooms.add(room_id)
        sock.room_id = room_id
        self._rooms.setdefault(room_id, set()).add(sid)
        return True

    async def remove_user_from_room(self, sid: str, room_id: str) -> bool:
        sio = self._require()
        sock = self._sockets.get(sid)
        if sock is None:
            return False
        await sio.leave_room(sid, room_id)
        sock.rooms.discard(room_id)
        if sock.room_id == room_id:
            sock.room_id = None
        members = self._rooms.get(room_id)
        if members is not None:
            members.discard(sid)
            if not members:
                del self._rooms[room_id]
        return True

    def sids_for_user(self, room_id: str, user_id: str) -> list[str]:
        return [
            sid for sid in self._rooms.get(room_id, set())
            if self._sockets[sid].user_id == user_id
        ]

    def room_members(self, room_id: str) -> set[str]:
        return set(self._rooms.get(room_id, set()))

    # ─── broadcasts ─────────────────────────────────────────────

    async def broadcast_to_all(self, event: str, data: dict) -> None:
        await self._require().emit(event, data)

    async def broadcast_to_room(self, room_id: str, event: str, data: dict) -> None:
        await self._require().emit(event, data, room=room_id)

    async def emit_to_sid(self, sid: str, event: str, data: dict) -> None:
        await self._require().emit(event, data, to=sid)

    # ─── introspection ──────────────────────────────────────────

    def get_stats(self) -> dict:
        if not self.is_ready():
            return {"error": "Socket not ready"}
        rooms = {r: m for r, m in self._rooms.items() if r not in self._sockets}
        return {
            "connectedSockets": len(self._sockets),
            "activeRooms": len(rooms),
            "totalParticipants": sum(len(m) for m in rooms.values()),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    def get_all_connected_users(self) -> list[dict]:
        if not self.is_ready():
            return []
        return [
            {
                "socketId": s.sid,
                "userId": s.user_id,
                "username": s.username,
                "roomId": s.room_id,
                "isCreator": s.is_creator,
                "connectedAt": s.connected_at.isoformat(),
            }
            for s in self._sockets.values() if s.user_id
        ]


def create_socket_server(cors_origins: list[str] | str) -> socketio.AsyncServer:
    return socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins=cors_origins,
        logger=False,
        engineio_logger=False,
    )


# Singleton — attached to an AsyncServer in main.py
socket_manager = SocketManager()


def get_socket_manager() -> SocketManager:
    """FastAPI dependency."""
    return socket_manager
