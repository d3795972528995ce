import random
import string
import threading
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Optional, Tuple

from frenzy.errors import RoomNotFound
from .state import Room

ROOM_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_room_id(length: int = 6) -> str:
    """Random base-36 token used as a room code."""
    return ''.join(random.choices(ROOM_ID_ALPHABET, k=length))


class RoomStore:
    """Owns every live room.

    Reads and writes of the room map go through a short-lived guard lock.
    Each room also gets its own re-entrant lock; callers mutate a room only
    inside ``checkout`` so work on one room never blocks another.
    """

    def __init__(self, id_length: int = 6):
        self.id_length = id_length
        self._rooms: Dict[str, Room] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    def create(self, factory: Callable[[str], Room],
               is_taken: Optional[Callable[[str], bool]] = None) -> Tuple[str, Room]:
        """Generate an unused room id, build the room with ``factory`` and insert it."""
        while True:
            room_id = generate_room_id(self.id_length)
            # Checked outside the guard since it may hit the database
            if is_taken is not None and is_taken(room_id):
                continue
            with self._guard:
                if room_id in self._rooms:
                    continue
                room = factory(room_id)
                self._rooms[room_id] = room
                self._locks[room_id] = threading.RLock()
                return room_id, room

    def get(self, room_id: str) -> Optional[Room]:
        with self._guard:
            return self._rooms.get(room_id)

    def exists(self, room_id: str) -> bool:
        with self._guard:
            return room_id in self._rooms

    def delete(self, room_id: str) -> bool:
        with self._guard:
            self._locks.pop(room_id, None)
            return self._rooms.pop(room_id, None) is not None

    def find_room_of(self, player_id: str) -> Optional[str]:
        """Room id of the live room that has ``player_id`` on its roster."""
        with self._guard:
            for room_id, room in self._rooms.items():
                if room.find_player(player_id):
                    return room_id
        return None

    def __len__(self):
        with self._guard:
            return len(self._rooms)

    @contextmanager
    def checkout(self, room_id: str) -> Iterator[Room]:
        """Hold the room's lock for one read-modify-write sequence.

        Raises RoomNotFound if the room is absent, or was deleted while the
        caller was waiting for the lock.
        """
        with self._guard:
            room = self._rooms.get(room_id)
            lock = self._locks.get(room_id)
        if room is None or lock is None:
            raise RoomNotFound()
        with lock:
            if self.get(room_id) is not room:
                raise RoomNotFound()
            yield room
