import logging
from functools import partial
from typing import Optional

from drawguess.models import COUNTING_DOWN, GAME_ENDED, IDLE, ROUND_OVER, Player, Room
from .words import WORD_POOL, pick_word


class TurnScheduler:
    """Drives rounds for every room: drawer rotation, word choice and the countdown.

    Per room the rounds run as a small state machine:

        idle -> counting_down -> round_over -> counting_down | game_ended

    Each round owns exactly one timer handle. Starting a round cancels the
    previous handle first, and ticks arriving from a handle that is no longer
    the room's current one are dropped.
    """

    def __init__(
        self,
        registry,
        gateway,
        timer,
        words=WORD_POOL,
        round_duration: int = 60,
        max_rounds: int = 5,
        end_round_on_drawer_leave: bool = True,
        rng=None,
        logger=None,
    ):
        self.registry = registry
        self.gateway = gateway
        self.timer = timer
        self.words = tuple(words)
        self.round_duration = round_duration
        self.max_rounds = max_rounds
        self.end_round_on_drawer_leave = end_round_on_drawer_leave
        self.rng = rng
        self.logger = logger or logging.getLogger(__name__)

    def advance_drawer(self, room: Room) -> Optional[Player]:
        if not room.players:
            return None
        room.drawer_index = (room.drawer_index + 1) % len(room.players)
        return room.players[room.drawer_index]

    def start_round(self, room_id: str) -> None:
        with self.registry.locked(room_id) as room:
            if room is None:
                return
            self._start_round(room)

    def _start_round(self, room: Room) -> None:
        # Caller holds room.lock
        self.cancel_countdown(room)

        if not room.players:
            room.state = IDLE
            room.current_word = ''
            return

        if room.round_number >= self.max_rounds:
            room.state = GAME_ENDED
            room.current_word = ''
            leaderboard = room.leaderboard()
            self.logger.info(
                f"[game-over] room={room.room_id} rounds={room.round_number} "
                f"leader={leaderboard[0]['username']!r}"
            )
            self.gateway.to_room(room.room_id, 'gameOver', {'leaderboard': leaderboard})
            return

        room.round_number += 1
        drawer = self.advance_drawer(room)
        room.current_word = pick_word(self.words, self.rng)
        room.guessed_this_round = False
        room.time_left = self.round_duration
        room.state = COUNTING_DOWN
        self.logger.info(
            f"[round-start] room={room.room_id} round={room.round_number} drawer={drawer.display_name!r}"
        )

        self.gateway.to_room(room.room_id, 'startRound', {
            'drawerId': drawer.connection_id,
            'drawerName': drawer.display_name,
            'round': room.round_number,
            'time': self.round_duration,
        })
        self.gateway.to_connection(drawer.connection_id, 'wordToDraw', room.current_word)

        room.timer = self.timer.start(partial(self._tick, room.room_id))

    def cancel_countdown(self, room: Room) -> None:
        if room.timer is not None:
            room.timer.cancel()
            room.timer = None
            self.logger.debug(f"[timer-cancel] room={room.room_id} round={room.round_number}")

    def _tick(self, room_id: str, handle) -> None:
        with self.registry.locked(room_id) as room:
            if room is None or room.timer is not handle:
                handle.cancel()
                return
            room.time_left -= 1
            self.gateway.to_room(room_id, 'timer', room.time_left)
            if room.time_left <= 0 or room.guessed_this_round:
                self._end_round(room)

    def _end_round(self, room: Room) -> None:
        self.cancel_countdown(room)
        room.state = ROUND_OVER
        self.logger.info(
            f"[round-end] room={room.room_id} round={room.round_number} "
            f"guessed={room.guessed_this_round} remaining={room.time_left}"
        )
        self._start_round(room)

    def player_removed(self, room: Room, index: int, was_drawer: bool) -> None:
        """Keep the rotation consistent after ``room.players[index]`` was removed.

        Runs under the room lock, from the registry's removal callback.
        """
        if not room.players:
            self.cancel_countdown(room)
            room.state = IDLE
            room.current_word = ''
            return

        if was_drawer:
            # Point at the previous player so the next rotation reaches whoever followed the drawer
            room.drawer_index = (index - 1) % len(room.players)
            if room.state == COUNTING_DOWN:
                if self.end_round_on_drawer_leave:
                    self.logger.info(f"[drawer-left] room={room.room_id} round={room.round_number} aborting")
                    self._end_round(room)
                else:
                    # Round runs out its clock with nothing left to guess
                    room.current_word = ''
            return

        if index < room.drawer_index:
            room.drawer_index -= 1
        if room.drawer_index >= len(room.players):
            room.drawer_index = len(room.players) - 1
