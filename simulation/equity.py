"""Monte Carlo showdown equity for Hold'em hands with a partial board."""
from __future__ import annotations

import random
from typing import List, Optional, Sequence

from deck import Card, CardLike, excluding, full_deck, parse_cards, shuffled_copy
from errors import DuplicateCard, InsufficientPlayers, InvalidHandSize
from hand_evaluator import best_score
from metrics.equity import EquityAccumulator

BOARD_SIZE = 5
HOLE_SIZE = 2


def validate_hands(
    player_hole_cards: Sequence[Sequence[CardLike]],
    community_cards: Sequence[CardLike] = (),
    dead_cards: Sequence[CardLike] = (),
):
    """Parse and check the inputs of a simulation.

    Returns ``(players, board, dead)`` as lists of :class:`Card`. Raises
    ``InsufficientPlayers`` for an empty table, ``InvalidHandSize`` when a
    player does not hold exactly two cards or the board exceeds five, and
    ``DuplicateCard`` when any card is assigned twice.
    """

    players = [parse_cards(hole) for hole in player_hole_cards]
    board = parse_cards(community_cards)
    dead = parse_cards(dead_cards)

    if not players:
        raise InsufficientPlayers("At least one player with hole cards is required")
    for seat, hole in enumerate(players):
        if len(hole) != HOLE_SIZE:
            raise InvalidHandSize(
                f"Player {seat} must hold exactly {HOLE_SIZE} cards, got {len(hole)}"
            )
    if len(board) > BOARD_SIZE:
        raise InvalidHandSize(f"The board holds at most {BOARD_SIZE} cards, got {len(board)}")

    seen = set()
    for card in [card for hole in players for card in hole] + board + dead:
        if card in seen:
            raise DuplicateCard(card)
        seen.add(card)

    return players, board, dead


def winners_of(scores: Sequence) -> List[int]:
    best = max(scores)
    return [index for index, score in enumerate(scores) if score == best]


def run_trials(
    players: Sequence[Sequence[Card]],
    board: Sequence[Card],
    trials: int,
    rng: random.Random,
    dead: Sequence[Card] = (),
) -> EquityAccumulator:
    """Run ``trials`` showdowns over already validated inputs.

    ``dead`` cards are removed from the deck without belonging to anyone.
    """

    known = [card for hole in players for card in hole] + list(board) + list(dead)
    available = excluding(full_deck(), known)
    missing = BOARD_SIZE - len(board)
    board = list(board)
    holes = [list(hole) for hole in players]

    stats = EquityAccumulator(len(holes))
    for _ in range(trials):
        shuffled = shuffled_copy(available, rng)
        completed = board + shuffled[:missing]
        scores = [best_score(hole + completed) for hole in holes]
        stats.record_trial(winners_of(scores))
    return stats


def check_trials(trials) -> None:
    if isinstance(trials, bool) or not isinstance(trials, int) or trials <= 0:
        raise ValueError("trials must be a positive integer")


def simulate(
    player_hole_cards: Sequence[Sequence[CardLike]],
    community_cards: Sequence[CardLike] = (),
    trials: int = 10_000,
    rng: Optional[random.Random] = None,
    dead_cards: Sequence[CardLike] = (),
) -> List[float]:
    """Estimate each player's showdown equity in percent.

    The result is index-aligned with ``player_hole_cards``. Ties split the
    trial's credit evenly. Pass a seeded ``random.Random`` for reproducible
    output.
    """

    check_trials(trials)
    players, board, dead = validate_hands(player_hole_cards, community_cards, dead_cards)
    rng = rng or random.Random()
    return run_trials(players, board, trials, rng, dead).as_result().percentages
