import random

WORD_POOL = (
    'apple',
    'car',
    'house',
    'tree',
    'dog',
    'computer',
    'banana',
    'rocket',
    'guitar',
    'pizza',
)


def pick_word(words=WORD_POOL, rng=None) -> str:
    """Pick one word uniformly at random."""
    return (rng or random).choice(words)
