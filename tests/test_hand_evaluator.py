import random
from itertools import combinations

import pytest
from treys import Card as TreysCard
from treys import Evaluator as TreysEvaluator

from deck import full_deck, parse_cards
from errors import DuplicateCard, InvalidHandSize
from hand_evaluator import (
    CATEGORY_BAND,
    HandCategory,
    HandScore,
    best_hand,
    evaluate,
    evaluate_five,
    hand_class,
)


@pytest.mark.parametrize(
    "cards, category, kickers",
    [
        ("AsKsQsJsTs", HandCategory.ROYAL_FLUSH, (14,)),
        ("9h8h7h6h5h", HandCategory.STRAIGHT_FLUSH, (9,)),
        ("5d4d3d2dAd", HandCategory.STRAIGHT_FLUSH, (5,)),
        ("QcQdQhQs2c", HandCategory.FOUR_OF_A_KIND, (12, 2)),
        ("KhKdKc4s4h", HandCategory.FULL_HOUSE, (13, 4)),
        ("Ah9h7h4h2h", HandCategory.FLUSH, (14, 9, 7, 4, 2)),
        ("Tc9d8h7s6c", HandCategory.STRAIGHT, (10,)),
        ("5c4d3h2sAc", HandCategory.STRAIGHT, (5,)),
        ("7c7d7hKs2c", HandCategory.THREE_OF_A_KIND, (7, 13, 2)),
        ("JcJd4h4s9c", HandCategory.TWO_PAIR, (11, 4, 9)),
        ("AcAdKh7s2c", HandCategory.PAIR, (14, 13, 7, 2)),
        ("AcKdQhJs9c", HandCategory.HIGH_CARD, (14, 13, 12, 11, 9)),
    ],
)
def test_five_card_reference_table(cards, category, kickers):
    score = evaluate(parse_cards(cards))
    assert score.category == category
    assert score.kickers == kickers


def test_category_order_is_total():
    categories = list(HandCategory)
    assert categories == sorted(categories)
    assert hand_class(evaluate(parse_cards("AsKsQsJsTs"))) == "Royal Flush"
    assert hand_class(evaluate(parse_cards("AcKdQhJs9c"))) == "High Card"


def test_wheel_sits_between_six_high_straight_and_ace_high():
    wheel = evaluate(parse_cards("Ac2d3h4s5c"))
    six_high = evaluate(parse_cards("2c3d4h5s6c"))
    ace_high = evaluate(parse_cards("AcKdQhJs9c"))
    assert ace_high < wheel < six_high


def test_steel_wheel_is_lowest_straight_flush():
    steel_wheel = evaluate(parse_cards("Ad2d3d4d5d"))
    six_high = evaluate(parse_cards("2h3h4h5h6h"))
    quads = evaluate(parse_cards("AcAdAhAsKc"))
    assert quads < steel_wheel < six_high


def test_suit_relabelling_keeps_score():
    first = evaluate(parse_cards("KhKdKc4s4h"))
    second = evaluate(parse_cards("KsKcKh4d4c"))
    assert first == second

    flush_a = evaluate(parse_cards("Ah9h7h4h2h"))
    flush_b = evaluate(parse_cards("As9s7s4s2s"))
    assert flush_a == flush_b


def test_kickers_break_ties():
    assert evaluate(parse_cards("AcAdKh7s2c")) > evaluate(parse_cards("AhAsQh7d2d"))
    assert evaluate(parse_cards("JcJd4h4s9c")) > evaluate(parse_cards("JhJs4c4d8c"))
    assert evaluate(parse_cards("JcJd4h4s9c")) < evaluate(parse_cards("JhJs5c5d2c"))
    assert evaluate(parse_cards("KhKdKc4s4h")) < evaluate(parse_cards("AhAdAc2s2h"))


def test_royal_flush_is_maximum_score():
    royal = evaluate(parse_cards("AsKsQsJsTs"))
    rng = random.Random(3)
    deck = full_deck()
    for _ in range(300):
        assert evaluate(rng.sample(deck, 7)) <= royal


def test_packed_score_keeps_category_bands_disjoint():
    best_full_house = evaluate(parse_cards("AhAdAcKsKh"))
    worst_quads = evaluate(parse_cards("2h2d2c2s3h"))
    assert best_full_house.packed < worst_quads.packed
    assert best_full_house.packed < int(HandCategory.FOUR_OF_A_KIND) * CATEGORY_BAND
    assert worst_quads.packed >= int(HandCategory.FOUR_OF_A_KIND) * CATEGORY_BAND


def test_packed_score_follows_tuple_order():
    rng = random.Random(11)
    deck = full_deck()
    for _ in range(300):
        a = evaluate(rng.sample(deck, 5))
        b = evaluate(rng.sample(deck, 5))
        assert (a < b) == (a.packed < b.packed)
        assert (a == b) == (a.packed == b.packed)


def test_seven_cards_score_at_least_every_subset():
    rng = random.Random(7)
    deck = full_deck()
    for _ in range(50):
        cards = rng.sample(deck, 7)
        best = evaluate(cards)
        subset_scores = [evaluate_five(combo) for combo in combinations(cards, 5)]
        assert best == max(subset_scores)
        assert all(best >= score for score in subset_scores)


def test_seven_cards_prefer_flush_over_straight():
    score = evaluate(parse_cards("9s8h7s6s5d2sAs"))
    assert score.category == HandCategory.FLUSH
    assert score.kickers == (14, 9, 7, 6, 2)


def test_six_cards_are_supported():
    score = evaluate(parse_cards("AhAdAcKsKh2c"))
    assert score == HandScore(HandCategory.FULL_HOUSE, (14, 13))


def test_best_hand_returns_the_winning_five_cards():
    cards = parse_cards("AhAs Kd4d4c 9c2h")
    score, five = best_hand(cards)
    assert score.category == HandCategory.TWO_PAIR
    assert len(five) == 5
    assert evaluate(five) == score
    assert set(five) <= set(cards)


def test_four_cards_raise_invalid_hand_size():
    with pytest.raises(InvalidHandSize):
        evaluate(parse_cards("AsKsQsJs"))


def test_eight_cards_raise_invalid_hand_size():
    with pytest.raises(InvalidHandSize):
        evaluate(parse_cards("AsKsQsJsTs9s8s7s"))


def test_repeated_card_raises_duplicate():
    with pytest.raises(DuplicateCard):
        evaluate(parse_cards("AsAsQsJsTs"))


TREYS = TreysEvaluator()


def _treys_score(cards):
    converted = [TreysCard.new(str(card)) for card in cards]
    return TREYS.evaluate(converted[:2], converted[2:])


@pytest.mark.parametrize("size", [5, 6, 7])
def test_ordering_matches_treys(size):
    rng = random.Random(size)
    deck = full_deck()
    for _ in range(200):
        first = rng.sample(deck, size)
        second = rng.sample(deck, size)
        ours_first, ours_second = evaluate(first), evaluate(second)
        # treys: lower = better
        theirs_first, theirs_second = _treys_score(first), _treys_score(second)
        assert (ours_first > ours_second) == (theirs_first < theirs_second)
        assert (ours_first == ours_second) == (theirs_first == theirs_second)
