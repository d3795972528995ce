from typing import Optional, Sequence

from .state import Card, Player


def is_correct_answer(card: Card, answer) -> bool:
    """Case-insensitive exact match after trimming; no partial credit."""
    if answer is None:
        return False
    return str(answer).strip().lower() == card.answer.strip().lower()


def determine_winner(players: Sequence[Player]) -> Optional[Player]:
    """Highest scorer wins; a tie for first place is a draw (None)."""
    if not players:
        return None
    ranked = sorted(players, key=lambda p: p.score, reverse=True)
    if len(ranked) > 1 and ranked[0].score == ranked[1].score:
        return None
    return ranked[0]
