"""Structured event logging for equity simulations."""
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

try:  # Optional dependency for Parquet output
    import pyarrow as pa  # type: ignore
    import pyarrow.parquet as pq  # type: ignore
except Exception:  # pragma: no cover - pyarrow is optional
    pa = None  # type: ignore
    pq = None  # type: ignore


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class RequestEvent:
    """Inputs of a simulation, emitted before any trial runs."""

    timestamp: str
    request_id: str
    event: str
    players: List[List[str]]
    board: List[str]
    trials: int
    seed: Optional[int] = None
    concurrency: Optional[int] = None

    def as_dict(self) -> Dict:
        return {
            "timestamp": self.timestamp,
            "request_id": self.request_id,
            "event": self.event,
            "players": self.players,
            "board": self.board,
            "trials": self.trials,
            "seed": self.seed,
            "concurrency": self.concurrency,
        }


@dataclass
class BatchEvent:
    """Progress snapshot after one batch of trials has been merged."""

    timestamp: str
    request_id: str
    event: str
    batch_index: int
    batch_trials: int
    trials_completed: int
    equities: List[float]

    def as_dict(self) -> Dict:
        return {
            "timestamp": self.timestamp,
            "request_id": self.request_id,
            "event": self.event,
            "batch_index": self.batch_index,
            "batch_trials": self.batch_trials,
            "trials_completed": self.trials_completed,
            "equities": self.equities,
        }


@dataclass
class ResultEvent:
    """Final equities of a completed simulation."""

    timestamp: str
    request_id: str
    event: str
    trials: int
    equities: List[float]
    wins: List[int]
    ties: List[int]

    def as_dict(self) -> Dict:
        return {
            "timestamp": self.timestamp,
            "request_id": self.request_id,
            "event": self.event,
            "trials": self.trials,
            "equities": self.equities,
            "wins": self.wins,
            "ties": self.ties,
        }


class _BaseWriter:
    def append(self, event: Dict[str, Any]) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def close(self) -> None:  # pragma: no cover - interface
        return None


class StdoutWriter(_BaseWriter):
    def append(self, event: Dict[str, Any]) -> None:
        print(json.dumps(event, separators=(",", ":")))


class JSONLWriter(_BaseWriter):
    def __init__(self, path: Path) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = self.path.open("a", encoding="utf-8")

    def append(self, event: Dict[str, Any]) -> None:
        self._handle.write(json.dumps(event) + "\n")
        self._handle.flush()

    def close(self) -> None:
        self._handle.close()


class ParquetWriter(_BaseWriter):
    """Write events as JSON-encoded rows; event kinds have different shapes."""

    def __init__(self, path: Path) -> None:
        if pq is None or pa is None:  # pragma: no cover - import-time guard
            raise RuntimeError("pyarrow is required for Parquet logging but is not installed")
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._writer: Optional["pq.ParquetWriter"] = None

    def append(self, event: Dict[str, Any]) -> None:
        row = {
            "timestamp": event.get("timestamp"),
            "request_id": event.get("request_id"),
            "event": event.get("event"),
            "payload": json.dumps(event),
        }
        table = pa.Table.from_pylist([row])
        if self._writer is None:
            self._writer = pq.ParquetWriter(self.path, table.schema)
        self._writer.write_table(table)

    def close(self) -> None:
        if self._writer is not None:
            self._writer.close()
            self._writer = None


class EquityLogger:
    """Facade that turns simulation milestones into append-only events."""

    def __init__(self, writer: _BaseWriter, request_id: str) -> None:
        self._writer = writer
        self.request_id = request_id

    def log_request(
        self,
        *,
        players: List[List[str]],
        board: List[str],
        trials: int,
        seed: Optional[int] = None,
        concurrency: Optional[int] = None,
    ) -> None:
        event = RequestEvent(
            timestamp=_now(),
            request_id=self.request_id,
            event="request",
            players=players,
            board=board,
            trials=trials,
            seed=seed,
            concurrency=concurrency,
        )
        self._writer.append(event.as_dict())

    def log_batch(self, payload: Dict[str, Any]) -> None:
        event = BatchEvent(
            timestamp=_now(),
            request_id=self.request_id,
            event="batch",
            batch_index=payload["batch_index"],
            batch_trials=payload["batch_trials"],
            trials_completed=payload["trials_completed"],
            equities=payload["equities"],
        )
        self._writer.append(event.as_dict())

    def log_result(self, result) -> None:
        event = ResultEvent(
            timestamp=_now(),
            request_id=self.request_id,
            event="result",
            trials=result.trials,
            equities=list(result.percentages),
            wins=list(result.wins),
            ties=list(result.ties),
        )
        self._writer.append(event.as_dict())

    def close(self) -> None:
        self._writer.close()


def create_logger(mode: str, *, destination: Optional[Path], request_id: str) -> EquityLogger:
    """Factory that builds a logger for the requested mode."""

    normalized = mode.lower()
    if normalized == "stdout":
        writer = StdoutWriter()
    elif normalized == "jsonl":
        if not destination:
            raise ValueError("JSONL logging requires a destination path")
        writer = JSONLWriter(destination)
    elif normalized == "parquet":
        if not destination:
            raise ValueError("Parquet logging requires a destination path")
        writer = ParquetWriter(destination)
    else:
        raise ValueError(f"Unknown event log mode: {mode}")

    return EquityLogger(writer, request_id=request_id)
