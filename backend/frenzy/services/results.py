import json
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from frenzy import db
from frenzy.errors import PersistenceFailure
from frenzy.models import GameResult


def save_result(room_id: str, winner, players: Sequence, deck: Sequence) -> GameResult:
    """Persist a finished room. ``winner``/``players``/``deck`` are wire dicts.

    Raises PersistenceFailure (after rolling back) if the write fails.
    """
    result = GameResult(
        room_id=room_id,
        winner=json.dumps(winner) if winner else None,
        players=json.dumps(list(players)),
        deck=json.dumps(list(deck)),
    )
    try:
        db.session.add(result)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise PersistenceFailure(f'Failed to save result for room {room_id}: {exc}') from exc
    return result


def get_all_results() -> List[GameResult]:
    return GameResult.query.order_by(GameResult.id).all()


def get_result_by_room_id(room_id: str) -> Optional[GameResult]:
    return GameResult.query.filter_by(room_id=room_id).first()


def room_id_has_result(room_id: str) -> bool:
    return db.session.query(GameResult.id).filter_by(room_id=room_id).first() is not None
