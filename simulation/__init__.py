"""Monte Carlo equity simulation and the helpers that orchestrate it."""

from .equity import run_trials, simulate, validate_hands
from .table import TableSnapshot, deal_random, simulate_table

__all__ = [
    "TableSnapshot",
    "deal_random",
    "run_trials",
    "simulate",
    "simulate_table",
    "validate_hands",
]
