import json
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from frenzy import db
from frenzy.errors import PersistenceFailure, RoomFull, RoomNotFound, Unauthorized
from frenzy.services.results import room_id_has_result, save_result
from .deck import build_deck
from .scheduler import AdvanceTimers
from .scoring import determine_winner, is_correct_answer
from .state import IN_PROGRESS, LOBBY, Player, Room
from .store import RoomStore


class RoomCoordinator:
    """Drives each room through lobby -> in_progress -> finished.

    Every mutation happens inside ``store.checkout`` so concurrent events
    for one room are serialized, and every broadcast for a room is issued
    while its lock is held so clients see states in order.
    """

    def __init__(self):
        self.app = None
        self.socketio = None
        self.namespace = '/'
        self.store = RoomStore()
        self.timers = AdvanceTimers()

    def init_app(self, app, socketio, namespace: str = '/') -> None:
        self.app = app
        self.socketio = socketio
        self.namespace = namespace
        self.store = RoomStore(id_length=int(app.config.get('ROOM_ID_LENGTH', 6)))
        self.timers.init_app(app, socketio)

    @property
    def max_players(self) -> int:
        return int(self.app.config.get('MAX_PLAYERS', 2))

    def _emit(self, event: str, *args, room_id: str, skip_sid=None) -> None:
        self.socketio.emit(event, *args, to=room_id, namespace=self.namespace, skip_sid=skip_sid)

    def _id_taken(self, room_id: str) -> bool:
        # Ids of finished games stay reserved so result lookups by room id are exact
        try:
            return room_id_has_result(room_id)
        except SQLAlchemyError as exc:
            db.session.rollback()
            self.app.logger.warning(f"[room-id-check] room={room_id} could not query results: {exc}")
            return False

    # ---- lobby ----

    def create_room(self, host_id: str, username: str,
                    on_admit: Optional[Callable[[str], None]] = None) -> Room:
        shuffle = bool(self.app.config.get('SHUFFLE_DECK', True))

        def _factory(room_id: str) -> Room:
            return Room(room_id=room_id, players=[Player(id=host_id, username=username)], deck=build_deck(shuffle))

        room_id, _ = self.store.create(_factory, is_taken=self._id_taken)
        with self.store.checkout(room_id) as room:
            self.app.logger.info(f"[room-created] room={room_id} host={host_id} username={username!r}")
            if on_admit:
                on_admit(room_id)
            self._emit('update-game-state', room.to_dict(), room_id=room_id)
            return room

    def join_room(self, room_id: str, player_id: str, username: str,
                  on_admit: Optional[Callable[[str], None]] = None) -> Room:
        with self.store.checkout(room_id) as room:
            if room.find_player(player_id):
                self._emit('update-game-state', room.to_dict(), room_id=room_id)
                return room
            if room.status != LOBBY or len(room.players) >= self.max_players:
                self.app.logger.info(f"[join-rejected] room={room_id} player={player_id} status={room.status} players={len(room.players)}")
                raise RoomFull()
            room.players.append(Player(id=player_id, username=username))
            self.app.logger.info(f"[room-joined] room={room_id} player={player_id} username={username!r}")
            if on_admit:
                on_admit(room_id)
            self._emit('update-game-state', room.to_dict(), room_id=room_id)
            return room

    def start_game(self, room_id: str, requester_id: str) -> Room:
        with self.store.checkout(room_id) as room:
            host = room.host
            if (room.status != LOBBY or host is None or host.id != requester_id
                    or len(room.players) != self.max_players):
                self.app.logger.info(f"[start-rejected] room={room_id} requester={requester_id} status={room.status} players={len(room.players)}")
                raise Unauthorized()
            room.game_started = True
            self.app.logger.info(f"[game-started] room={room_id}")
            self._emit('game-started', room_id=room_id)
            self._emit('update-game-state', room.to_dict(), room_id=room_id)
            return room

    # ---- turns ----

    def submit_answer(self, room_id: str, player_id: str, answer) -> bool:
        """Score an answer for the current card. Returns False when ignored."""
        with self.store.checkout(room_id) as room:
            if room.status != IN_PROGRESS:
                return False
            player = room.find_player(player_id)
            card = room.current_card
            if not player or not card:
                return False
            if player_id in room.answered_by:
                self.app.logger.info(f"[answer-skip] room={room_id} player={player_id} card={room.current_card_index} already answered")
                return False
            room.answered_by.add(player_id)

            correct = is_correct_answer(card, answer)
            if correct:
                player.score += int(self.app.config.get('POINTS_PER_CORRECT_ANSWER', 10))
            self._emit('answer-result', {
                'playerId': player_id,
                'answer': answer,
                'isCorrect': correct,
                'correctAnswer': card.answer,
            }, room_id=room_id)

            # Only the first answer for a card schedules the advance
            if not room.advance_scheduled:
                room.advance_scheduled = True
                delay = float(self.app.config.get('ANSWER_REVEAL_DELAY_SEC', 3))
                self.timers.schedule(room_id, room.current_card_index, delay, self.advance)
            return True

    def advance(self, room_id: str, card_index: int) -> None:
        """Deferred step after an answer reveal: next card, or finish on the last one."""
        try:
            with self.store.checkout(room_id) as room:
                if room.game_over or room.current_card_index != card_index:
                    self.app.logger.info(f"[timer-abort] room={room_id} expected_card={card_index} actual_card={room.current_card_index}")
                    return
                self.app.logger.info(f"[timer-fire] room={room_id} card={card_index}")
                room.advance_scheduled = False
                room.answered_by.clear()
                if not room.on_last_card:
                    room.current_card_index += 1
                    self._emit('update-game-state', room.to_dict(), room_id=room_id)
                    return
                self._finish(room)
        except RoomNotFound:
            self.app.logger.info(f"[timer-abort] room={room_id} no longer exists")

    def _finish(self, room: Room) -> None:
        # Caller holds the room lock
        room.game_over = True
        winner = determine_winner(room.players)
        winner_payload = winner.to_dict() if winner else None
        final_state = room.to_dict()

        # Clients learn the outcome before any database round trip
        self._emit('game-over', {
            'roomId': room.room_id,
            'winner': winner_payload,
            'finalState': final_state,
        }, room_id=room.room_id)

        self._persist_result(room.room_id, winner_payload, final_state)
        self.store.delete(room.room_id)
        self.timers.cancel(room.room_id)
        self.app.logger.info(
            f"[game-over] room={room.room_id} winner={winner.username if winner else 'draw'} "
            f"scores={[(p.username, p.score) for p in room.players]}"
        )

    def _persist_result(self, room_id: str, winner, final_state) -> bool:
        attempts = max(1, int(self.app.config.get('RESULT_SAVE_ATTEMPTS', 3)))
        backoff = float(self.app.config.get('RESULT_SAVE_BACKOFF_SEC', 0.2))
        for attempt in range(1, attempts + 1):
            try:
                save_result(room_id, winner, final_state['players'], final_state['deck'])
                self.app.logger.info(f"[result-saved] room={room_id} attempt={attempt}")
                return True
            except PersistenceFailure as exc:
                self.app.logger.warning(f"[result-save-failed] room={room_id} attempt={attempt}/{attempts}: {exc.message}")
                if attempt < attempts and backoff > 0:
                    self.socketio.sleep(backoff)
        self.app.logger.error(
            f"[result-lost] room={room_id} giving up after {attempts} attempts; result="
            f"{json.dumps({'roomId': room_id, 'winner': winner, 'players': final_state['players']})}"
        )
        return False

    # ---- membership ----

    def remove_player(self, player_id: str, room_id: Optional[str] = None) -> Optional[str]:
        """Drop a player from ``room_id``, or from whichever room holds them.

        Returns the room id the player was removed from.
        """
        if room_id is None:
            room_id = self.store.find_room_of(player_id)
        if not room_id:
            return None
        try:
            with self.store.checkout(room_id) as room:
                player = room.find_player(player_id)
                if not player:
                    return None
                room.players.remove(player)
                room.answered_by.discard(player_id)
                self.app.logger.info(f"[player-left] room={room_id} player={player_id} remaining={len(room.players)}")
                if not room.players:
                    self.store.delete(room_id)
                    self.timers.cancel(room_id)
                    self.app.logger.info(f"[room-closed] room={room_id} empty")
                else:
                    self._emit('player-left', room_id=room_id, skip_sid=player_id)
                    self._emit('update-game-state', room.to_dict(), room_id=room_id, skip_sid=player_id)
        except RoomNotFound:
            return None
        return room_id
