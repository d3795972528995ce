from dataclasses import dataclass, field
from typing import List, Optional, Set

LOBBY = 'lobby'
IN_PROGRESS = 'in_progress'
FINISHED = 'finished'


@dataclass(frozen=True)
class Card:
    id: str
    question: str
    answer: str

    def to_dict(self):
        return {'id': self.id, 'question': self.question, 'answer': self.answer}


@dataclass
class Player:
    id: str  # socket session id
    username: str
    score: int = 0

    def to_dict(self):
        return {'id': self.id, 'username': self.username, 'score': self.score}


@dataclass
class Room:
    room_id: str
    players: List[Player] = field(default_factory=list)
    deck: List[Card] = field(default_factory=list)
    current_card_index: int = 0
    game_started: bool = False
    game_over: bool = False
    # Per-card answer window; reset whenever the deck advances
    answered_by: Set[str] = field(default_factory=set)
    advance_scheduled: bool = False

    @property
    def status(self) -> str:
        if self.game_over:
            return FINISHED
        if self.game_started:
            return IN_PROGRESS
        return LOBBY

    @property
    def host(self) -> Optional[Player]:
        return self.players[0] if self.players else None

    @property
    def current_card(self) -> Optional[Card]:
        if 0 <= self.current_card_index < len(self.deck):
            return self.deck[self.current_card_index]
        return None

    @property
    def on_last_card(self) -> bool:
        return self.current_card_index >= len(self.deck) - 1

    def find_player(self, player_id: str) -> Optional[Player]:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def to_dict(self):
        return {
            'roomId': self.room_id,
            'players': [p.to_dict() for p in self.players],
            'deck': [c.to_dict() for c in self.deck],
            'currentCardIndex': self.current_card_index,
            'gameStarted': self.game_started,
            'gameOver': self.game_over,
        }
