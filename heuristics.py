"""Lookup-table win estimates for when a full simulation is too slow.

These numbers are rough rules of thumb, not sampled equity. They never feed
into ``simulation.equity.simulate``.
"""
from __future__ import annotations

from typing import Iterable, Optional, Sequence

from deck import Card, excluding, full_deck
from errors import DuplicateCard, InvalidHandSize
from hand_evaluator import HandCategory, best_score

PREFLOP_OPPONENT_FACTOR = 0.85
POSTFLOP_OPPONENT_FACTOR = 0.88
UNCERTAINTY_PER_CARD = 0.08

MADE_HAND_PROBABILITY = {
    HandCategory.ROYAL_FLUSH: 98,
    HandCategory.STRAIGHT_FLUSH: 95,
    HandCategory.FOUR_OF_A_KIND: 90,
    HandCategory.FULL_HOUSE: 85,
    HandCategory.FLUSH: 75,
    HandCategory.STRAIGHT: 65,
    HandCategory.THREE_OF_A_KIND: 55,
    HandCategory.TWO_PAIR: 40,
    HandCategory.PAIR: 30,
    HandCategory.HIGH_CARD: 20,
}


def _check_inputs(hole: Sequence[Card], board: Sequence[Card], num_players: int) -> None:
    if len(hole) != 2:
        raise InvalidHandSize(f"Expected two hole cards, got {len(hole)}")
    if len(board) > 5:
        raise InvalidHandSize(f"The board holds at most 5 cards, got {len(board)}")
    if num_players < 1:
        raise ValueError("num_players must be at least 1")
    seen = set()
    for card in list(hole) + list(board):
        if card in seen:
            raise DuplicateCard(card)
        seen.add(card)


def _preflop_base(high: Card, low: Card) -> int:
    if high.rank == low.rank:
        if high.rank >= 13:
            return 85
        if high.rank >= 11:
            return 80
        if high.rank >= 9:
            return 70
        if high.rank >= 7:
            return 60
        return 45

    if high.suit is low.suit:
        if high.rank == 14 and low.rank >= 10:
            return 75
        if low.rank >= 10:
            return 65
        if high.rank - low.rank <= 3 and low.rank >= 7:
            return 55
        if high.rank + low.rank >= 18:
            return 50
        return 40

    if high.rank == 14 and low.rank >= 12:
        return 70
    if high.rank == 14 and low.rank >= 10:
        return 60
    if low.rank >= 12:
        return 65
    if low.rank >= 10:
        return 55
    if high.rank + low.rank >= 20:
        return 40
    return 30


def preflop_win_probability(hole: Sequence[Card], num_players: int) -> float:
    """Tiered pre-flop table scaled down for each extra player, in percent."""

    _check_inputs(hole, (), num_players)
    high, low = sorted(hole, key=lambda card: card.rank, reverse=True)
    probability = _preflop_base(high, low) * PREFLOP_OPPONENT_FACTOR ** (num_players - 1)
    return max(5.0, min(90.0, probability))


def _pair_rank(cards: Iterable[Card]) -> int:
    counts = {}
    for card in cards:
        counts[card.rank] = counts.get(card.rank, 0) + 1
    pairs = [rank for rank, count in counts.items() if count >= 2]
    return max(pairs) if pairs else 0


def _partial_category(cards: Sequence[Card]) -> HandCategory:
    """Category of fewer than five cards, from rank counts alone."""
    counts = {}
    for card in cards:
        counts[card.rank] = counts.get(card.rank, 0) + 1
    shape = sorted(counts.values(), reverse=True)
    if shape[0] >= 4:
        return HandCategory.FOUR_OF_A_KIND
    if shape[0] == 3:
        return HandCategory.THREE_OF_A_KIND
    if shape[:2] == [2, 2]:
        return HandCategory.TWO_PAIR
    if shape[0] == 2:
        return HandCategory.PAIR
    return HandCategory.HIGH_CARD


def made_hand_win_probability(
    hole: Sequence[Card],
    board: Sequence[Card],
    num_players: int,
) -> float:
    """Estimate from the hand already made, in percent.

    Falls back to :func:`preflop_win_probability` while the board is empty.
    """

    _check_inputs(hole, board, num_players)
    if not board:
        return preflop_win_probability(hole, num_players)

    cards = list(hole) + list(board)
    if len(cards) < 5:
        # Only a flop can be missing here, so rank what the player holds.
        category = _partial_category(cards)
    else:
        category = best_score(cards).category

    probability = MADE_HAND_PROBABILITY[category]
    probability *= POSTFLOP_OPPONENT_FACTOR ** (num_players - 1)
    probability *= 1 - (5 - len(board)) * UNCERTAINTY_PER_CARD

    if category == HandCategory.PAIR:
        pair = _pair_rank(cards)
        if pair >= 13:
            probability *= 1.2
        elif pair <= 8:
            probability *= 0.8

    return max(2.0, min(95.0, probability))


def count_outs(
    hole: Sequence[Card],
    board: Sequence[Card],
    dead: Sequence[Card] = (),
) -> Optional[int]:
    """Count unseen cards that would raise the hand category on the next street.

    Returns ``None`` pre-flop and on a complete board.
    """

    _check_inputs(hole, board, 1)
    if len(board) < 3 or len(board) >= 5:
        return None

    cards = list(hole) + list(board)
    current = best_score(cards).category
    unseen = excluding(full_deck(), cards + list(dead))
    return sum(1 for card in unseen if best_score(cards + [card]).category > current)
