"""Exact five-to-seven card Hold'em hand evaluation."""
from __future__ import annotations

from enum import IntEnum
from itertools import combinations
from typing import List, NamedTuple, Sequence, Tuple

from deck import Card
from errors import DuplicateCard, InvalidHandSize

CATEGORY_BAND = 1_000_000
KICKER_BASE = 15
WHEEL = (14, 5, 4, 3, 2)


class HandCategory(IntEnum):
    HIGH_CARD = 0
    PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8
    ROYAL_FLUSH = 9


CATEGORY_LABELS = {
    HandCategory.HIGH_CARD: "High Card",
    HandCategory.PAIR: "Pair",
    HandCategory.TWO_PAIR: "Two Pair",
    HandCategory.THREE_OF_A_KIND: "Three of a Kind",
    HandCategory.STRAIGHT: "Straight",
    HandCategory.FLUSH: "Flush",
    HandCategory.FULL_HOUSE: "Full House",
    HandCategory.FOUR_OF_A_KIND: "Four of a Kind",
    HandCategory.STRAIGHT_FLUSH: "Straight Flush",
    HandCategory.ROYAL_FLUSH: "Royal Flush",
}


class HandScore(NamedTuple):
    """Comparable hand strength: category first, then kickers most significant first."""

    category: HandCategory
    kickers: Tuple[int, ...]

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self.category]

    @property
    def packed(self) -> int:
        """Single integer with a disjoint band per category.

        Up to five kickers (each <= 14) are packed in base 15, which stays
        below ``CATEGORY_BAND``.
        """

        value = 0
        for kicker in self.kickers:
            value = value * KICKER_BASE + kicker
        value *= KICKER_BASE ** (5 - len(self.kickers))
        return int(self.category) * CATEGORY_BAND + value


def _straight_high(distinct: Tuple[int, ...]) -> int:
    """High card of a straight over five distinct descending ranks, else 0."""
    if len(distinct) != 5:
        return 0
    if distinct[0] - distinct[4] == 4:
        return distinct[0]
    if distinct == WHEEL:
        return 5
    return 0


def evaluate_five(cards: Sequence[Card]) -> HandScore:
    counts = {}
    for card in cards:
        counts[card.rank] = counts.get(card.rank, 0) + 1

    # Distinct ranks ordered by (frequency, rank), both descending.
    groups = sorted(counts.items(), key=lambda item: (item[1], item[0]), reverse=True)
    by_frequency = tuple(rank for rank, _ in groups)
    shape = tuple(count for _, count in groups)

    first_suit = cards[0].suit
    is_flush = all(card.suit is first_suit for card in cards)
    straight_high = _straight_high(by_frequency)

    if is_flush and straight_high:
        if straight_high == 14:
            return HandScore(HandCategory.ROYAL_FLUSH, (14,))
        return HandScore(HandCategory.STRAIGHT_FLUSH, (straight_high,))
    if shape[0] == 4:
        return HandScore(HandCategory.FOUR_OF_A_KIND, by_frequency)
    if shape == (3, 2):
        return HandScore(HandCategory.FULL_HOUSE, by_frequency)
    if is_flush:
        return HandScore(HandCategory.FLUSH, by_frequency)
    if straight_high:
        return HandScore(HandCategory.STRAIGHT, (straight_high,))
    if shape[0] == 3:
        return HandScore(HandCategory.THREE_OF_A_KIND, by_frequency)
    if shape == (2, 2, 1):
        return HandScore(HandCategory.TWO_PAIR, by_frequency)
    if shape[0] == 2:
        return HandScore(HandCategory.PAIR, by_frequency)
    return HandScore(HandCategory.HIGH_CARD, by_frequency)


def best_score(cards: Sequence[Card]) -> HandScore:
    """Unchecked maximum over every five-card subset."""
    if len(cards) == 5:
        return evaluate_five(cards)
    return max(evaluate_five(combo) for combo in combinations(cards, 5))


def _check_hand(cards: Sequence[Card]) -> None:
    if not 5 <= len(cards) <= 7:
        raise InvalidHandSize(f"Hands are evaluated from 5 to 7 cards, got {len(cards)}")
    seen = set()
    for card in cards:
        if card in seen:
            raise DuplicateCard(card)
        seen.add(card)


def evaluate(cards: Sequence[Card]) -> HandScore:
    """
    Returns the HandScore of the best five cards: higher = better.
    """
    cards = list(cards)
    _check_hand(cards)
    return best_score(cards)


def best_hand(cards: Sequence[Card]) -> Tuple[HandScore, List[Card]]:
    """Return the best score together with the five cards that make it."""
    cards = list(cards)
    _check_hand(cards)
    best = max(combinations(cards, 5), key=evaluate_five)
    return evaluate_five(best), list(best)


def hand_class(score: HandScore) -> str:
    return score.label
