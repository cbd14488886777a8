"""Game domain services: rooms, rounds, guesses and fan-out.

This package holds the round state machine and its collaborators. Socket
handlers and HTTP routes go through ``GameCoordinator`` and never touch
rooms directly, keeping transport concerns apart from game mechanics.
"""

from .coordinator import GameCoordinator, build_coordinator  # noqa: F401
