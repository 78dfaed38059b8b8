"""Batched, optionally parallel equity simulation harness with CLI support."""
from __future__ import annotations

import argparse
import json
import random
import threading
import uuid
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

from deck import Card, parse_cards
from errors import EquityError, SimulationCancelled
from event_log.equity_logger import EquityLogger, create_logger
from heuristics import count_outs, made_hand_win_probability
from metrics.equity import EquityAccumulator, EquityResult
from simulation.equity import check_trials, run_trials, validate_hands


# ---------------------------------------------------------------------------
# Configuration structures
# ---------------------------------------------------------------------------


@dataclass
class EquityRequest:
    players: List[List[Card]]
    board: List[Card] = field(default_factory=list)
    dead: List[Card] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict) -> "EquityRequest":
        return cls(
            players=[parse_cards(hole) for hole in data.get("players", [])],
            board=parse_cards(data.get("board", [])),
            dead=parse_cards(data.get("dead", [])),
        )

    def as_dict(self) -> Dict:
        return {
            "players": [[str(card) for card in hole] for hole in self.players],
            "board": [str(card) for card in self.board],
            "dead": [str(card) for card in self.dead],
        }


@dataclass
class SimulationConfig:
    trials: int = 25_000
    concurrency: int = 1
    batch_size: int = 2_500
    seed: Optional[int] = None
    event_log_mode: Optional[str] = None
    event_log_path: Optional[Path] = None
    output_path: Optional[Path] = None

    def validate(self) -> None:
        check_trials(self.trials)
        if self.batch_size <= 0:
            raise ValueError("batch_size must be a positive integer")
        if self.concurrency < 1:
            raise ValueError("concurrency must be at least 1")


@dataclass
class BatchTask:
    batch_index: int
    players: List[List[Card]]
    board: List[Card]
    dead: List[Card]
    trials: int
    seed: Optional[int]


# ---------------------------------------------------------------------------
# Hooks
# ---------------------------------------------------------------------------


class BatchEventPublisher:
    def __init__(self) -> None:
        self._subscribers: List[Callable[[Dict], None]] = []

    def subscribe(self, callback: Callable[[Dict], None]) -> None:
        self._subscribers.append(callback)

    def publish(self, payload: Dict) -> None:
        for callback in list(self._subscribers):
            callback(payload)


# ---------------------------------------------------------------------------
# Core simulation logic
# ---------------------------------------------------------------------------


def _run_batch(task: BatchTask) -> EquityAccumulator:
    rng = random.Random(task.seed)
    return run_trials(task.players, task.board, task.trials, rng, task.dead)


class EquityRunner:
    def __init__(self, config: SimulationConfig):
        config.validate()
        self.config = config
        self.publisher = BatchEventPublisher()

    def subscribe(self, callback: Callable[[Dict], None]) -> None:
        self.publisher.subscribe(callback)

    def _tasks_for_request(self, request: EquityRequest) -> List[BatchTask]:
        tasks: List[BatchTask] = []
        remaining = self.config.trials
        batch_index = 0
        while remaining > 0:
            size = min(self.config.batch_size, remaining)
            if self.config.seed is not None:
                seed = self.config.seed + batch_index
            else:
                seed = None
            tasks.append(
                BatchTask(
                    batch_index=batch_index,
                    players=request.players,
                    board=request.board,
                    dead=request.dead,
                    trials=size,
                    seed=seed,
                )
            )
            remaining -= size
            batch_index += 1
        return tasks

    def _open_logger(self, request_id: str) -> Optional[EquityLogger]:
        if not self.config.event_log_mode:
            return None
        destination = self.config.event_log_path
        if destination:
            destination = Path(destination).expanduser()
        return create_logger(
            self.config.event_log_mode,
            destination=destination,
            request_id=request_id,
        )

    def _handle_batch(
        self,
        total: EquityAccumulator,
        task: BatchTask,
        batch: EquityAccumulator,
        logger: Optional[EquityLogger],
    ) -> None:
        total.merge(batch)
        payload = {
            "batch_index": task.batch_index,
            "batch_trials": batch.trials,
            "trials_completed": total.trials,
            "equities": total.as_result().percentages,
        }
        self.publisher.publish(payload)
        if logger is not None:
            logger.log_batch(payload)

    def _write_output(self, request: EquityRequest, result: EquityResult) -> None:
        if not self.config.output_path:
            return
        output_path = Path(self.config.output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        data = {"request": request.as_dict(), "result": result.as_dict()}
        output_path.write_text(json.dumps(data, indent=2))

    def run(
        self,
        request: EquityRequest,
        cancel_event: Optional[threading.Event] = None,
    ) -> EquityResult:
        """Simulate ``request``; raises ``SimulationCancelled`` between batches."""

        players, board, dead = validate_hands(request.players, request.board, request.dead)
        request = EquityRequest(players=players, board=board, dead=dead)
        tasks = self._tasks_for_request(request)
        total = EquityAccumulator(len(players))

        logger = self._open_logger(uuid.uuid4().hex)
        try:
            if logger is not None:
                logger.log_request(
                    players=request.as_dict()["players"],
                    board=request.as_dict()["board"],
                    trials=self.config.trials,
                    seed=self.config.seed,
                    concurrency=self.config.concurrency,
                )

            if self.config.concurrency > 1:
                with ProcessPoolExecutor(max_workers=self.config.concurrency) as pool:
                    futures = [pool.submit(_run_batch, task) for task in tasks]
                    for task, future in zip(tasks, futures):
                        if cancel_event is not None and cancel_event.is_set():
                            for pending in futures:
                                pending.cancel()
                            raise SimulationCancelled(
                                f"Cancelled after {total.trials} of {self.config.trials} trials"
                            )
                        self._handle_batch(total, task, future.result(), logger)
            else:
                for task in tasks:
                    if cancel_event is not None and cancel_event.is_set():
                        raise SimulationCancelled(
                            f"Cancelled after {total.trials} of {self.config.trials} trials"
                        )
                    self._handle_batch(total, task, _run_batch(task), logger)

            result = total.as_result()
            if logger is not None:
                logger.log_result(result)
        finally:
            if logger is not None:
                logger.close()

        self._write_output(request, result)
        return result


def submit_equity(
    request: EquityRequest,
    config: Optional[SimulationConfig] = None,
    *,
    executor: Optional[Executor] = None,
    cancel_event: Optional[threading.Event] = None,
) -> "Future[EquityResult]":
    """Run a request in the background and return a future for its result."""

    runner = EquityRunner(config or SimulationConfig())
    if executor is not None:
        return executor.submit(runner.run, request, cancel_event)

    pool = ThreadPoolExecutor(max_workers=1)
    try:
        return pool.submit(runner.run, request, cancel_event)
    finally:
        pool.shutdown(wait=False)


def approximate_equities(request: EquityRequest) -> List[Dict]:
    """Lookup-table estimate and outs for every player, without sampling."""

    players, board, dead = validate_hands(request.players, request.board, request.dead)
    known = [card for hole in players for card in hole] + dead
    estimates = []
    for index, hole in enumerate(players):
        others = [card for card in known if card not in hole]
        estimates.append(
            {
                "index": index,
                "estimate": made_hand_win_probability(hole, board, len(players)),
                "outs": count_outs(hole, board, dead=others),
            }
        )
    return estimates


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Hold'em Monte Carlo equity calculator")
    parser.add_argument("--config", type=Path, help="Optional JSON config file", default=None)
    parser.add_argument(
        "--player",
        action="append",
        help="Hole cards for one player, e.g. AhAs (repeat per player)",
        default=None,
    )
    parser.add_argument("--board", help="Community cards, e.g. Kd4d4c", default=None)
    parser.add_argument("--dead", help="Cards removed from the deck", default=None)
    parser.add_argument("--trials", type=int, help="Number of Monte Carlo trials", default=None)
    parser.add_argument("--batch-size", type=int, help="Trials per batch", default=None)
    parser.add_argument("--concurrency", type=int, help="Process pool size", default=None)
    parser.add_argument("--seed", type=int, help="Base RNG seed", default=None)
    parser.add_argument("--output", type=Path, help="Where to write the result JSON", default=None)
    parser.add_argument("--verbose", action="store_true", help="Stream per-batch progress")
    parser.add_argument(
        "--approximate",
        action="store_true",
        help="Print lookup-table estimates and outs instead of sampling",
    )
    parser.add_argument(
        "--event-log-mode",
        choices=["stdout", "jsonl", "parquet"],
        help="Where to stream structured simulation events",
        default=None,
    )
    parser.add_argument(
        "--event-log-path",
        type=Path,
        help="Destination file for JSONL or Parquet logs",
        default=None,
    )
    return parser


def _load_config_from_file(config_path: Optional[Path]) -> Dict:
    if not config_path:
        return {}
    return json.loads(config_path.read_text())


def _build_request(args: argparse.Namespace, config_data: Dict) -> EquityRequest:
    request_data = dict(config_data.get("request", {}))
    if args.player:
        request_data["players"] = args.player
    if args.board is not None:
        request_data["board"] = args.board
    if args.dead is not None:
        request_data["dead"] = args.dead
    return EquityRequest.from_dict(request_data)


def _first_set(*values):
    for value in values:
        if value is not None:
            return value
    return None


def _build_simulation_config(args: argparse.Namespace, config_data: Dict) -> SimulationConfig:
    trials = _first_set(args.trials, config_data.get("trials"), 25_000)
    batch_size = _first_set(args.batch_size, config_data.get("batch_size"), 2_500)
    concurrency = _first_set(args.concurrency, config_data.get("concurrency"), 1)
    seed = args.seed if args.seed is not None else config_data.get("seed")
    output_path = args.output or config_data.get("output_path")
    event_log_config = config_data.get("event_log", {})
    event_log_mode = args.event_log_mode or event_log_config.get("mode")
    event_log_path_value = args.event_log_path or event_log_config.get("path")

    return SimulationConfig(
        trials=trials,
        concurrency=max(1, concurrency),
        batch_size=batch_size,
        seed=seed,
        event_log_mode=event_log_mode,
        event_log_path=Path(event_log_path_value) if event_log_path_value else None,
        output_path=Path(output_path) if output_path else None,
    )


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    config_data = _load_config_from_file(args.config)
    try:
        request = _build_request(args, config_data)
    except EquityError as err:
        parser.error(str(err))

    if args.approximate:
        print(json.dumps({"estimates": approximate_equities(request)}, indent=2))
        return

    config = _build_simulation_config(args, config_data)
    try:
        runner = EquityRunner(config)
    except ValueError as err:
        parser.error(str(err))

    if args.verbose:
        runner.subscribe(
            lambda payload: print(
                f"batch={payload['batch_index']} trials={payload['trials_completed']} "
                f"equities={[round(e, 2) for e in payload['equities']]}"
            )
        )

    result = runner.run(request)
    print(json.dumps(result.as_dict(), indent=2))


if __name__ == "__main__":
    main()
