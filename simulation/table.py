"""Seat-level helpers for tables where some seats are still being filled in."""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional

from deck import Card, Deck
from errors import DuplicateCard, InvalidHandSize
from simulation.equity import BOARD_SIZE, HOLE_SIZE, simulate


@dataclass(frozen=True)
class TableSnapshot:
    """Cards currently assigned to each seat and to the board.

    A seat may hold zero, one or two cards; only seats with two cards take
    part in a simulation.
    """

    seats: List[List[Card]]
    board: List[Card] = field(default_factory=list)

    def __post_init__(self) -> None:
        for seat, cards in enumerate(self.seats):
            if len(cards) > HOLE_SIZE:
                raise InvalidHandSize(f"Seat {seat} holds {len(cards)} cards")
        if len(self.board) > BOARD_SIZE:
            raise InvalidHandSize(f"The board holds at most {BOARD_SIZE} cards")
        seen = set()
        for card in self.cards_in_use():
            if card in seen:
                raise DuplicateCard(card)
            seen.add(card)

    def active_seats(self) -> List[int]:
        return [seat for seat, cards in enumerate(self.seats) if len(cards) == HOLE_SIZE]

    def cards_in_use(self) -> List[Card]:
        return [card for cards in self.seats for card in cards] + list(self.board)

    def is_card_available(self, card: Card) -> bool:
        return card not in self.cards_in_use()


def simulate_table(
    snapshot: TableSnapshot,
    trials: int = 10_000,
    rng: Optional[random.Random] = None,
) -> List[Optional[float]]:
    """Return equity per seat, ``None`` for seats without two hole cards.

    A lone card on an incomplete seat is dead: it cannot reappear on the
    simulated board.
    """

    active = snapshot.active_seats()
    results: List[Optional[float]] = [None] * len(snapshot.seats)
    if not active:
        return results

    dead = [
        card
        for seat, cards in enumerate(snapshot.seats)
        if seat not in active
        for card in cards
    ]
    equities = simulate(
        [snapshot.seats[seat] for seat in active],
        snapshot.board,
        trials,
        rng,
        dead_cards=dead,
    )
    for seat, equity in zip(active, equities):
        results[seat] = equity
    return results


def deal_random(
    num_seats: int,
    board_size: int = 0,
    rng: Optional[random.Random] = None,
) -> TableSnapshot:
    """Deal two cards to every seat and ``board_size`` community cards."""

    if not 1 <= num_seats <= 9:
        raise ValueError("Texas Hold'em tables must have between 1 and 9 seats")
    if not 0 <= board_size <= BOARD_SIZE:
        raise ValueError(f"The board holds between 0 and {BOARD_SIZE} cards")

    deck = Deck(rng=rng)
    seats = [deck.deal(HOLE_SIZE) for _ in range(num_seats)]
    board = [deck.deal(1) for _ in range(board_size)]
    return TableSnapshot(seats=seats, board=board)
