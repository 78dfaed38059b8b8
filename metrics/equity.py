"""Win/tie accumulation and percentage conversion for equity simulations."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence

import numpy as np


def to_percentages(credits: Sequence[float], trials: int) -> List[float]:
    """Convert summed per-player credit into percentages of ``trials``."""

    if trials <= 0:
        raise ValueError("trials must be positive")
    values = np.asarray(credits, dtype=np.float64)
    return (values / trials * 100.0).tolist()


@dataclass(frozen=True)
class EquityResult:
    """Per-player equity, index-aligned with the players that were simulated."""

    percentages: List[float]
    wins: List[int]
    ties: List[int]
    trials: int

    def as_dict(self) -> Dict:
        return {
            "trials": self.trials,
            "players": [
                {
                    "index": index,
                    "equity": equity,
                    "wins": wins,
                    "ties": ties,
                }
                for index, (equity, wins, ties) in enumerate(
                    zip(self.percentages, self.wins, self.ties)
                )
            ],
        }


class EquityAccumulator:
    """Track fractional win credit for a fixed set of players."""

    def __init__(self, num_players: int) -> None:
        self.num_players = num_players
        self.credits: List[float] = [0.0] * num_players
        self.wins: List[int] = [0] * num_players
        self.ties: List[int] = [0] * num_players
        self.trials: int = 0

    def record_trial(self, winners: Sequence[int]) -> None:
        """Split one trial's unit of credit evenly between ``winners``."""

        if not winners:
            raise ValueError("Every trial must have at least one winner")
        share = 1.0 / len(winners)
        outright = len(winners) == 1
        for index in winners:
            self.credits[index] += share
            if outright:
                self.wins[index] += 1
            else:
                self.ties[index] += 1
        self.trials += 1

    def merge(self, other: "EquityAccumulator") -> None:
        if other.num_players != self.num_players:
            raise ValueError("Cannot merge accumulators for different player counts")
        self.credits = [a + b for a, b in zip(self.credits, other.credits)]
        self.wins = [a + b for a, b in zip(self.wins, other.wins)]
        self.ties = [a + b for a, b in zip(self.ties, other.ties)]
        self.trials += other.trials

    def as_result(self) -> EquityResult:
        return EquityResult(
            percentages=to_percentages(self.credits, self.trials),
            wins=list(self.wins),
            ties=list(self.ties),
            trials=self.trials,
        )

    def as_dict(self) -> Dict:
        return {
            "trials": self.trials,
            "credits": list(self.credits),
            "wins": list(self.wins),
            "ties": list(self.ties),
        }
