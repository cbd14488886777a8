import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Tuple

from drawguess.models import Player, Room


class RoomRegistry:
    """Owns every Room and hands them out locked.

    A registry-wide lock guards the room table; each Room carries its own
    re-entrant lock for its players and round fields. Rooms are created on
    first join and dropped once their last player leaves.
    """

    def __init__(self, logger=None):
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.Lock()
        self.logger = logger or logging.getLogger(__name__)

    def _acquire(self, room_id: str, create: bool) -> Optional[Room]:
        while True:
            with self._lock:
                room = self._rooms.get(room_id)
                if room is None:
                    if not create:
                        return None
                    room = Room(room_id)
                    self._rooms[room_id] = room
                    self.logger.info(f"[room-create] room={room_id}")
            room.lock.acquire()
            if not room.closed:
                return room
            # Collected while we waited for its lock; look it up again
            room.lock.release()

    @contextmanager
    def locked(self, room_id: str, create: bool = False) -> Iterator[Optional[Room]]:
        room = self._acquire(room_id, create)
        try:
            yield room
        finally:
            if room is not None:
                room.lock.release()

    def get_room(self, room_id: str) -> Optional[Room]:
        with self._lock:
            return self._rooms.get(room_id)

    def room_ids(self) -> List[str]:
        with self._lock:
            return list(self._rooms)

    def join(self, room_id: str, connection_id: str, display_name: str) -> Optional[List[dict]]:
        """Add a player with score 0; returns the new player list, or None for a duplicate join."""
        with self.locked(room_id, create=True) as room:
            if room.find_player(connection_id):
                self.logger.info(f"[join-dup] room={room_id} sid={connection_id}")
                return None
            room.players.append(Player(connection_id, display_name))
            self.logger.info(
                f"[join] room={room_id} sid={connection_id} name={display_name!r} players={len(room.players)}"
            )
            return room.player_list()

    def leave_room(self, room_id: str, connection_id: str, on_removed=None) -> Optional[List[dict]]:
        """Remove one connection from one room.

        ``on_removed(room, index, was_drawer)`` runs under the room lock before
        an emptied room is collected. Returns the remaining player list, or None
        if the connection was not in the room.
        """
        with self.locked(room_id) as room:
            if room is None:
                return None
            for index, player in enumerate(room.players):
                if player.connection_id == connection_id:
                    break
            else:
                return None
            was_drawer = index == room.drawer_index
            del room.players[index]
            self.logger.info(
                f"[leave] room={room_id} sid={connection_id} drawer={was_drawer} players={len(room.players)}"
            )
            if on_removed is not None:
                on_removed(room, index, was_drawer)
            players = room.player_list()
            if not room.players:
                self._discard(room)
            return players

    def leave(self, connection_id: str, on_removed=None) -> List[Tuple[str, List[dict]]]:
        """Remove a connection from every room it is in."""
        affected = []
        for room_id in self.room_ids():
            players = self.leave_room(room_id, connection_id, on_removed=on_removed)
            if players is not None:
                affected.append((room_id, players))
        return affected

    def _discard(self, room: Room) -> None:
        # Caller holds room.lock
        with self._lock:
            if self._rooms.get(room.room_id) is room:
                del self._rooms[room.room_id]
        room.closed = True
        self.logger.info(f"[room-gc] room={room.room_id}")
