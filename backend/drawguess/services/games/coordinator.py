import logging
from typing import List, Optional

from .broadcast import BroadcastGateway
from .registry import RoomRegistry
from .scheduler import TurnScheduler
from .scoring import GuessAdjudicator
from .timers import SocketIOTimer


class GameCoordinator:
    """Entry points used by the Socket.IO handlers and HTTP routes."""

    def __init__(self, registry, scheduler, adjudicator, gateway, logger=None):
        self.registry = registry
        self.scheduler = scheduler
        self.adjudicator = adjudicator
        self.gateway = gateway
        self.logger = logger or logging.getLogger(__name__)

    def join(self, room_id: str, connection_id: str, display_name: str) -> Optional[List[dict]]:
        with self.registry.locked(room_id, create=True) as room:
            players = self.registry.join(room_id, connection_id, display_name)
            if players is None:
                return None
            self.gateway.to_room(room_id, 'playerList', players)
            if len(room.players) == 1:
                self.scheduler.start_round(room_id)
            return players

    def _player_removed(self, room, index, was_drawer) -> None:
        self.gateway.to_room(room.room_id, 'playerList', room.player_list())
        self.scheduler.player_removed(room, index, was_drawer)

    def leave(self, connection_id: str):
        return self.registry.leave(connection_id, on_removed=self._player_removed)

    def leave_room(self, room_id: str, connection_id: str):
        return self.registry.leave_room(room_id, connection_id, on_removed=self._player_removed)

    def guess(self, room_id: str, connection_id: str, text: str, display_name: Optional[str] = None) -> bool:
        return self.adjudicator.submit_guess(room_id, connection_id, display_name, text)

    def draw(self, room_id: str, connection_id: str, stroke_data) -> bool:
        if self.registry.get_room(room_id) is None:
            self.logger.info(f"[drawing-ignored] room={room_id} sid={connection_id}")
            return False
        self.gateway.relay_drawing(room_id, connection_id, stroke_data)
        return True

    def rooms(self) -> List[dict]:
        summaries = []
        for room_id in self.registry.room_ids():
            with self.registry.locked(room_id) as room:
                if room is not None:
                    summaries.append(room.to_dict(include_players=False))
        return summaries

    def room_state(self, room_id: str) -> Optional[dict]:
        with self.registry.locked(room_id) as room:
            return room.to_dict() if room is not None else None


def build_coordinator(app, socketio, timer=None) -> GameCoordinator:
    """Wire one coordinator for a Flask app from its config."""
    cfg = app.config
    logger = app.logger
    gateway = BroadcastGateway(socketio, namespace=cfg.get('SOCKETIO_NAMESPACE', '/'))
    registry = RoomRegistry(logger=logger)
    scheduler = TurnScheduler(
        registry,
        gateway,
        timer or SocketIOTimer(socketio, logger=logger),
        round_duration=int(cfg.get('ROUND_DURATION_SEC', 60)),
        max_rounds=int(cfg.get('MAX_ROUNDS', 5)),
        end_round_on_drawer_leave=bool(cfg.get('END_ROUND_ON_DRAWER_LEAVE', True)),
        logger=logger,
    )
    adjudicator = GuessAdjudicator(
        registry,
        gateway,
        guess_points=int(cfg.get('GUESS_POINTS', 10)),
        drawer_points=int(cfg.get('DRAWER_POINTS', 5)),
        logger=logger,
    )
    return GameCoordinator(registry, scheduler, adjudicator, gateway, logger=logger)
