import itertools
import threading
from typing import Callable, Dict, Optional, Tuple


class AdvanceTimers:
    """Deferred card advances, at most one pending per room.

    - Keyed by room id; each entry remembers the card index it was set for
    - ``cancel`` drops the pending entry so a late wake-up does nothing
    - In TESTING mode (unless ENABLE_SCHEDULER_IN_TESTS) entries are
      registered but no background task is started; call ``fire`` instead
    """

    def __init__(self):
        self.app = None
        self.socketio = None
        self._pending: Dict[str, Tuple[int, int, Callable[[str, int], None]]] = {}
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()

    def init_app(self, app, socketio) -> None:
        self.app = app
        self.socketio = socketio
        with self._lock:
            self._pending.clear()

    @property
    def autostart(self) -> bool:
        cfg = self.app.config
        return not (cfg.get('TESTING') and not cfg.get('ENABLE_SCHEDULER_IN_TESTS'))

    def schedule(self, room_id: str, card_index: int, delay: float,
                 callback: Callable[[str, int], None]) -> bool:
        with self._lock:
            current = self._pending.get(room_id)
            if current and current[0] == card_index:
                self.app.logger.info(f"[timer-skip] room={room_id} card={card_index} already scheduled")
                return False
            token = next(self._tokens)
            self._pending[room_id] = (card_index, token, callback)
        self.app.logger.info(f"[timer-set] room={room_id} card={card_index} delay={delay}s")
        if self.autostart:
            self.socketio.start_background_task(self._worker, room_id, token, delay)
        return True

    def _worker(self, room_id: str, token: int, delay: float) -> None:
        self.socketio.sleep(delay)
        with self._lock:
            entry = self._pending.get(room_id)
            if not entry or entry[1] != token:
                self.app.logger.info(f"[timer-abort] room={room_id} cancelled or superseded")
                return
            del self._pending[room_id]
        card_index, _, callback = entry
        with self.app.app_context():
            callback(room_id, card_index)

    def fire(self, room_id: str) -> bool:
        """Run the pending advance for ``room_id`` now. False if none is pending."""
        with self._lock:
            entry = self._pending.pop(room_id, None)
        if not entry:
            return False
        card_index, _, callback = entry
        callback(room_id, card_index)
        return True

    def cancel(self, room_id: str) -> None:
        with self._lock:
            entry = self._pending.pop(room_id, None)
        if entry:
            self.app.logger.info(f"[timer-cancel] room={room_id} card={entry[0]}")

    def pending_card(self, room_id: str) -> Optional[int]:
        with self._lock:
            entry = self._pending.get(room_id)
        return entry[0] if entry else None
