from frenzy.services.rooms.scoring import determine_winner, is_correct_answer
from frenzy.services.rooms.state import Card, Player

PARIS = Card('2', 'What is the capital of France?', 'Paris')


def test_answer_match_ignores_case():
    assert is_correct_answer(PARIS, 'PARIS')
    assert is_correct_answer(PARIS, 'paris')


def test_answer_match_trims_whitespace():
    assert is_correct_answer(PARIS, ' Paris ')
    assert is_correct_answer(PARIS, '\tparis\n')


def test_answer_match_is_exact():
    assert not is_correct_answer(PARIS, 'Pari')
    assert not is_correct_answer(PARIS, 'Paris, France')
    assert not is_correct_answer(PARIS, '')
    assert not is_correct_answer(PARIS, None)


def test_higher_score_wins():
    alice = Player('a', 'Alice', 60)
    bob = Player('b', 'Bob', 50)
    assert determine_winner([bob, alice]) is alice


def test_equal_scores_are_a_draw():
    assert determine_winner([Player('a', 'Alice', 60), Player('b', 'Bob', 60)]) is None
    assert determine_winner([Player('a', 'Alice', 0), Player('b', 'Bob', 0)]) is None


def test_single_player_wins_by_default():
    solo = Player('a', 'Alice', 0)
    assert determine_winner([solo]) is solo


def test_no_players_no_winner():
    assert determine_winner([]) is None
