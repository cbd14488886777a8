import logging
from typing import Optional

from drawguess.models import COUNTING_DOWN


class GuessAdjudicator:
    def __init__(self, registry, gateway, guess_points: int = 10, drawer_points: int = 5, logger=None):
        self.registry = registry
        self.gateway = gateway
        self.guess_points = guess_points
        self.drawer_points = drawer_points
        self.logger = logger or logging.getLogger(__name__)

    def submit_guess(self, room_id: str, connection_id: str, display_name: Optional[str], text: str) -> bool:
        """Broadcast a guess and score it if it wins the round.

        Every guess is echoed to the room as ``newGuess``. Without a
        ``display_name`` the guesser's registered name is used; a guess with
        no name at all is dropped. The first guess matching the word
        (case-insensitive, untrimmed) wins the round: the drawer earns
        ``drawer_points`` and the guesser, if seated in the room,
        ``guess_points``. The countdown ends the round on its next tick.
        Returns True when the guess won.
        """
        with self.registry.locked(room_id) as room:
            if room is None:
                self.logger.info(f"[guess-ignored] room={room_id} sid={connection_id} reason=no-room")
                return False

            guesser = room.find_player(connection_id)
            if not display_name:
                display_name = guesser.display_name if guesser else None
            if display_name is None:
                self.logger.info(f"[guess-ignored] room={room_id} sid={connection_id} reason=no-username")
                return False

            self.gateway.to_room(room_id, 'newGuess', {'guess': text, 'username': display_name})

            if room.guessed_this_round or room.state != COUNTING_DOWN or not room.current_word:
                return False
            if text.lower() != room.current_word.lower():
                return False

            room.guessed_this_round = True
            if guesser is not None:
                guesser.score += self.guess_points
            else:
                self.logger.info(f"[guess-outsider] room={room_id} sid={connection_id} no guesser points")
            drawer = room.drawer
            drawer_name = None
            if drawer is not None:
                drawer.score += self.drawer_points
                drawer_name = drawer.display_name
            self.logger.info(
                f"[correct-guess] room={room_id} round={room.round_number} "
                f"guesser={display_name!r} drawer={drawer_name!r}"
            )
            self.gateway.to_room(room_id, 'correctGuess', {'username': display_name, 'word': room.current_word})
            return True
