import pytest

from frenzy.errors import PersistenceFailure
from frenzy.models import GameResult
from frenzy.services.results import save_result, get_result_by_room_id


def _players():
    return [
        {'id': 'sid-a', 'username': 'Alice', 'score': 30},
        {'id': 'sid-b', 'username': 'Bob', 'score': 20},
    ]


def _deck():
    return [{'id': '1', 'question': 'What is 2 + 2?', 'answer': '4'}]


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_results_empty(client):
    res = client.get('/api/results')
    assert res.status_code == 200
    assert res.get_json() == []


def test_result_not_found(client):
    res = client.get('/api/results/nope42')
    assert res.status_code == 404
    assert res.get_json()['message'] == 'Game result not found'


def test_saved_result_is_listed_and_found_by_room(client):
    players = _players()
    save_result('abc123', players[0], players, _deck())
    save_result('zzz999', None, players, _deck())

    listed = client.get('/api/results').get_json()
    assert [r['roomId'] for r in listed] == ['abc123', 'zzz999']

    res = client.get('/api/results/abc123')
    assert res.status_code == 200
    body = res.get_json()
    assert body['roomId'] == 'abc123'
    assert body['winner']['username'] == 'Alice'
    assert len(body['players']) == 2
    assert body['deck'][0]['answer'] == '4'
    assert body['id'] is not None
    assert body['createdAt']


def test_draw_result_has_null_winner(client):
    save_result('draw01', None, _players(), _deck())
    body = client.get('/api/results/draw01').get_json()
    assert body['winner'] is None


def test_room_lookup_is_exact_match(client):
    save_result('abc123', None, _players(), _deck())
    assert client.get('/api/results/ABC123').status_code == 404
    assert client.get('/api/results/abc12').status_code == 404
    assert get_result_by_room_id('abc123') is not None


def test_duplicate_room_result_is_rejected(flask_app):
    save_result('dup001', None, _players(), _deck())
    with pytest.raises(PersistenceFailure):
        save_result('dup001', None, _players(), _deck())
    assert GameResult.query.filter_by(room_id='dup001').count() == 1
