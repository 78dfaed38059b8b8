import random

import pytest

from deck import parse_cards
from errors import DuplicateCard, InsufficientPlayers, InvalidHandSize
from simulation.equity import run_trials, simulate, validate_hands, winners_of


def test_aces_dominate_kings_preflop():
    equities = simulate(["AhAs", "KcKd"], [], trials=20_000, rng=random.Random(2024))
    aces, kings = equities
    assert 79.5 <= aces <= 83.5
    assert 16.5 <= kings <= 20.5
    assert sum(equities) == pytest.approx(100.0)


def test_kings_flop_a_set_against_aces():
    # Aces win on 86 of the 990 turn/river runouts (an ace without the last king,
    # or both remaining fours).
    equities = simulate(
        ["AhAs", "KcKs"], ["Kd", "4d", "4c"], trials=20_000, rng=random.Random(99)
    )
    aces, kings = equities
    assert 7.0 <= aces <= 10.5
    assert 89.5 <= kings <= 93.0
    assert sum(equities) == pytest.approx(100.0)


def test_kings_set_on_the_turn_leaves_aces_two_outs():
    equities = simulate(
        ["AhAs", "KcKs"], ["Kd", "4d", "4c", "2h"], trials=20_000, rng=random.Random(99)
    )
    aces, kings = equities
    assert 95.0 <= kings <= 97.0
    assert 3.0 <= aces <= 5.0
    assert sum(equities) == pytest.approx(100.0)


def test_complete_board_is_decided_every_trial():
    equities = simulate(["AhAs", "KcKd"], "2c7d9hJc3s", trials=200, rng=random.Random(1))
    assert equities == [100.0, 0.0]


def test_board_royal_flush_splits_the_pot():
    equities = simulate(["2h3h", "4c5c", "6d7d"], "AsKsQsJsTs", trials=100, rng=random.Random(1))
    assert equities == pytest.approx([100 / 3] * 3)


def test_lone_player_wins_every_trial():
    assert simulate(["7c2d"], [], trials=50, rng=random.Random(0)) == [100.0]


def test_results_follow_player_order():
    forward = simulate(["AhAs", "7c2d"], "Ad8s9s", trials=500, rng=random.Random(8))
    backward = simulate(["7c2d", "AhAs"], "Ad8s9s", trials=500, rng=random.Random(8))
    assert forward[0] > 90.0
    assert backward[1] > 90.0


def test_seeded_runs_are_reproducible():
    first = simulate(["AhKh", "QcQd", "9s8s"], "Th7h2c", trials=1_000, rng=random.Random(17))
    second = simulate(["AhKh", "QcQd", "9s8s"], "Th7h2c", trials=1_000, rng=random.Random(17))
    assert first == second


def test_every_trial_hands_out_exactly_one_unit_of_credit():
    players, board, dead = validate_hands(["AhKh", "AdKd", "AcKc"], [])
    stats = run_trials(players, board, 2_000, random.Random(4), dead)
    assert stats.trials == 2_000
    assert sum(stats.credits) == pytest.approx(2_000)
    assert all(0.0 <= credit <= 2_000 for credit in stats.credits)
    assert sum(stats.ties) > 0


def test_dead_cards_never_reach_the_board():
    # Every spade outside the first hand is dead, so no flush can come.
    dead = parse_cards("2s3s4s5s6s7s8s9sTsJsQs")
    equities = simulate(["AsKs", "AhAd"], "", trials=300, rng=random.Random(5), dead_cards=dead)
    assert equities[0] < 20.0


def test_winners_of_detects_exact_ties():
    assert winners_of([(1, (5,)), (1, (5,)), (0, (14,))]) == [0, 1]
    assert winners_of([(3, (2,)), (4, (2,))]) == [1]


def test_no_players_raises_insufficient_players():
    with pytest.raises(InsufficientPlayers):
        simulate([], [], trials=10)


def test_player_with_one_card_raises_invalid_hand_size():
    with pytest.raises(InvalidHandSize):
        simulate(["Ah", "KcKd"], [], trials=10)


def test_six_board_cards_raise_invalid_hand_size():
    with pytest.raises(InvalidHandSize):
        simulate(["AhAs", "KcKd"], "2c3c4c5c6c7c", trials=10)


def test_card_shared_between_player_and_board_is_rejected():
    with pytest.raises(DuplicateCard) as excinfo:
        simulate(["AhAs", "KcKd"], "Ah2c3c", trials=10)
    assert str(excinfo.value.card) == "Ah"


def test_card_shared_between_players_is_rejected():
    with pytest.raises(DuplicateCard):
        simulate(["AhAs", "AsKd"], [], trials=10)


@pytest.mark.parametrize("trials", [0, -5, 2.5, True])
def test_trials_must_be_a_positive_integer(trials):
    with pytest.raises(ValueError):
        simulate(["AhAs", "KcKd"], [], trials=trials)
