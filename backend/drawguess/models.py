import threading
from typing import List, Optional

# Round states
IDLE = 'idle'
COUNTING_DOWN = 'counting_down'
ROUND_OVER = 'round_over'
GAME_ENDED = 'game_ended'


class Player:
    def __init__(self, connection_id: str, display_name: str, score: int = 0):
        self.connection_id = connection_id
        self.display_name = display_name
        self.score = score

    def to_dict(self):
        return {
            'id': self.connection_id,
            'username': self.display_name,
            'score': self.score,
        }

    def __repr__(self):
        return f"<Player {self.display_name!r} sid={self.connection_id} score={self.score}>"


class Room:
    """Round state for one game room.

    Only touched while ``lock`` is held; the registry hands out locked rooms.
    ``closed`` is set once the registry has dropped the room from its table.
    """

    def __init__(self, room_id: str):
        self.room_id = room_id
        self.players: List[Player] = []
        self.drawer_index = -1
        self.current_word = ''
        self.round_number = 0
        self.guessed_this_round = False
        self.timer = None
        self.time_left = 0
        self.state = IDLE
        self.lock = threading.RLock()
        self.closed = False

    def find_player(self, connection_id: str) -> Optional[Player]:
        for p in self.players:
            if p.connection_id == connection_id:
                return p
        return None

    @property
    def drawer(self) -> Optional[Player]:
        if 0 <= self.drawer_index < len(self.players):
            return self.players[self.drawer_index]
        return None

    def player_list(self):
        return [p.to_dict() for p in self.players]

    def leaderboard(self):
        # sorted() is stable, so ties keep join order
        ranked = sorted(self.players, key=lambda p: p.score, reverse=True)
        return [p.to_dict() for p in ranked]

    def to_dict(self, include_players=True):
        # No drawer while the word is withdrawn after the drawer left
        drawer = self.drawer if self.state == COUNTING_DOWN and self.current_word else None
        data = {
            'roomId': self.room_id,
            'state': self.state,
            'round': self.round_number,
            'drawerId': drawer.connection_id if drawer else None,
            'drawerName': drawer.display_name if drawer else None,
            'timeLeft': self.time_left if self.state == COUNTING_DOWN else 0,
            'guessed': self.guessed_this_round,
            'playerCount': len(self.players),
        }
        if include_players:
            data['players'] = self.player_list()
        return data
