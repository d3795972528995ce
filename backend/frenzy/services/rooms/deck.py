import random
from typing import List

from .state import Card

FLASHCARD_DECK = (
    Card('1', 'What is 2 + 2?', '4'),
    Card('2', 'What is the capital of France?', 'Paris'),
    Card('3', 'What element does "O" represent?', 'Oxygen'),
    Card('4', 'Who wrote "Hamlet"?', 'William Shakespeare'),
    Card('5', 'What is the largest planet in our solar system?', 'Jupiter'),
    Card('6', 'What year did the Titanic sink?', '1912'),
)


def build_deck(shuffle: bool = True) -> List[Card]:
    """Return a fresh copy of the deck, shuffled once for a new room."""
    if shuffle:
        return random.sample(FLASHCARD_DECK, len(FLASHCARD_DECK))
    return list(FLASHCARD_DECK)
