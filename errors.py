"""Caller-input errors raised by the evaluator and the equity simulator."""
from __future__ import annotations


class EquityError(ValueError):
    """Base class for every invalid-input condition."""


class InvalidCard(EquityError):
    pass


class InvalidHandSize(EquityError):
    pass


class DuplicateCard(EquityError):
    def __init__(self, card) -> None:
        super().__init__(f"Card {card} is assigned more than once")
        self.card = card


class InsufficientPlayers(EquityError):
    pass


class SimulationCancelled(RuntimeError):
    """Raised when a running simulation observes its cancel event."""
