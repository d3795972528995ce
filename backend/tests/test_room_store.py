import pytest

from frenzy.errors import RoomNotFound
from frenzy.services.rooms import store as store_module
from frenzy.services.rooms.deck import FLASHCARD_DECK, build_deck
from frenzy.services.rooms.state import Player, Room
from frenzy.services.rooms.store import ROOM_ID_ALPHABET, RoomStore, generate_room_id


def _room(room_id):
    return Room(room_id=room_id, players=[Player(id='sid-a', username='Alice')], deck=build_deck(False))


def test_generated_ids_are_base36():
    room_id = generate_room_id(6)
    assert len(room_id) == 6
    assert all(ch in ROOM_ID_ALPHABET for ch in room_id)


def test_create_get_delete():
    store = RoomStore()
    room_id, room = store.create(_room)
    assert store.get(room_id) is room
    assert room.room_id == room_id
    assert store.exists(room_id)
    assert store.delete(room_id) is True
    assert store.get(room_id) is None
    assert store.delete(room_id) is False


def test_create_regenerates_on_live_collision(monkeypatch):
    ids = iter(['aaaaaa', 'aaaaaa', 'bbbbbb'])
    monkeypatch.setattr(store_module, 'generate_room_id', lambda length=6: next(ids))
    store = RoomStore()
    first, _ = store.create(_room)
    second, _ = store.create(_room)
    assert first == 'aaaaaa'
    assert second == 'bbbbbb'
    assert len(store) == 2


def test_create_skips_ids_reported_taken(monkeypatch):
    ids = iter(['oldone', 'newone'])
    monkeypatch.setattr(store_module, 'generate_room_id', lambda length=6: next(ids))
    store = RoomStore()
    room_id, _ = store.create(_room, is_taken=lambda rid: rid == 'oldone')
    assert room_id == 'newone'


def test_checkout_missing_room_raises():
    store = RoomStore()
    with pytest.raises(RoomNotFound):
        with store.checkout('nope00'):
            pass


def test_checkout_after_delete_raises():
    store = RoomStore()
    room_id, _ = store.create(_room)
    with store.checkout(room_id) as room:
        room.players.append(Player(id='sid-b', username='Bob'))
    store.delete(room_id)
    with pytest.raises(RoomNotFound):
        with store.checkout(room_id):
            pass


def test_checkout_is_reentrant_for_same_room():
    store = RoomStore()
    room_id, _ = store.create(_room)
    with store.checkout(room_id) as outer:
        with store.checkout(room_id) as inner:
            assert inner is outer


def test_find_room_of_player():
    store = RoomStore()
    room_id, _ = store.create(_room)
    assert store.find_room_of('sid-a') == room_id
    assert store.find_room_of('sid-z') is None


def test_build_deck_is_a_fresh_permutation():
    shuffled = build_deck(True)
    assert sorted(c.id for c in shuffled) == sorted(c.id for c in FLASHCARD_DECK)
    assert build_deck(False) == list(FLASHCARD_DECK)
