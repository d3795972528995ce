from frenzy import db
from datetime import datetime, timezone
import json


def _utcnow():
    return datetime.now(timezone.utc)


class GameResult(db.Model):
    """Durable, append-only record of one finished room."""
    __tablename__ = 'game_result'
    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.String(16), unique=True, nullable=False, index=True)
    winner = db.Column(db.Text, nullable=True)  # JSON-encoded player, NULL on a draw
    players = db.Column(db.Text, nullable=False)  # JSON-encoded list of players
    deck = db.Column(db.Text, nullable=False)  # JSON-encoded list of cards
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'roomId': self.room_id,
            'winner': json.loads(self.winner) if self.winner else None,
            'players': json.loads(self.players) if self.players else [],
            'deck': json.loads(self.deck) if self.deck else [],
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
