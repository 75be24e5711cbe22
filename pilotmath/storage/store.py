from __future__ import annotations

"""Parquet-backed attempt store using pandas + pyarrow.

Two append-only logs (graded answers and session summaries) plus a tiny
JSON file for the streak state. Only the newest `max_results` /
`max_sessions` rows are kept.
"""

import json
import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Protocol

import pandas as pd
from pydantic import ValidationError

from .errors import StoreWriteError
from .schema import (
    RESULT_DTYPES,
    SESSION_DTYPES,
    ProblemResult,
    SessionStats,
    StreakState,
    empty_frame,
)

logger = logging.getLogger(__name__)

RESULTS_FILE = "results.parquet"
SESSIONS_FILE = "sessions.parquet"
STREAK_FILE = "streak.json"

MAX_RESULTS = 1000
MAX_SESSIONS = 100


class AttemptStore(Protocol):
    """Persistence contract shared by the local and remote backends."""

    def append_result(self, result: ProblemResult) -> None: ...

    def append_session(self, session: SessionStats) -> None: ...

    def list_results(self) -> List[ProblemResult]: ...

    def list_sessions(self) -> List[SessionStats]: ...

    def get_streak_state(self) -> StreakState: ...

    def set_streak_state(self, state: StreakState) -> None: ...

    def clear(self) -> None: ...


def _fix_dtypes(df: pd.DataFrame, dtypes: Dict[str, Any]) -> pd.DataFrame:
    for col, dt in dtypes.items():
        if col not in df.columns:
            df[col] = pd.NA
        df[col] = df[col].astype(dt)
    return df[list(dtypes.keys())]


def _py(value: Any) -> Any:
    if value is None or value is pd.NA:
        return None
    # numpy scalars -> builtins
    if hasattr(value, "item"):
        return value.item()
    return value


def _records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Rows as plain dicts of builtins, NA mapped to None."""
    if df.empty:
        return []
    obj = df.astype(object)
    obj = obj.where(obj.notna(), None)
    return [{k: _py(v) for k, v in row.items()} for row in obj.to_dict("records")]


def result_row(result: ProblemResult) -> Dict[str, Any]:
    return result.model_dump()


def session_row(session: SessionStats) -> Dict[str, Any]:
    row = session.model_dump()
    row["category_breakdown"] = json.dumps(row["category_breakdown"], sort_keys=True)
    return row


def _row_to_result(row: Dict[str, Any]) -> ProblemResult:
    return ProblemResult.model_validate(row)


def _row_to_session(row: Dict[str, Any]) -> SessionStats:
    data = dict(row)
    raw = data.get("category_breakdown")
    data["category_breakdown"] = json.loads(raw) if raw else {}
    return SessionStats.model_validate(data)


class LocalAttemptStore:
    """Attempt store in a local data directory."""

    def __init__(self, data_dir: str | Path, max_results: int = MAX_RESULTS, max_sessions: int = MAX_SESSIONS) -> None:
        self.data_dir = Path(data_dir).expanduser()
        self.max_results = int(max_results)
        self.max_sessions = int(max_sessions)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def results_path(self) -> Path:
        return self.data_dir / RESULTS_FILE

    @property
    def sessions_path(self) -> Path:
        return self.data_dir / SESSIONS_FILE

    @property
    def streak_path(self) -> Path:
        return self.data_dir / STREAK_FILE

    # --- frames ---

    def _read_frame(self, path: Path, dtypes: Dict[str, Any]) -> pd.DataFrame:
        if not path.exists():
            return empty_frame(dtypes)
        try:
            df = pd.read_parquet(path, engine="pyarrow")
            return _fix_dtypes(df, dtypes)
        except Exception as e:
            logger.warning("Unreadable %s, treating as empty: %s", path.name, e)
            return empty_frame(dtypes)

    def _write_frame(self, df: pd.DataFrame, path: Path) -> None:
        try:
            df.to_parquet(path, engine="pyarrow", compression="zstd", index=False)
        except Exception as e:
            raise StoreWriteError(f"Failed to write {path.name}: {e}") from e

    def _append_rows(self, rows: List[Dict[str, Any]], path: Path, dtypes: Dict[str, Any], cap: int) -> None:
        df_old = self._read_frame(path, dtypes)
        df_new = _fix_dtypes(pd.DataFrame(rows), dtypes)
        combined = df_new if df_old.empty else pd.concat([df_old, df_new], ignore_index=True)
        combined = _fix_dtypes(combined, dtypes)
        # oldest rows drop off first
        if len(combined) > cap:
            combined = combined.iloc[len(combined) - cap:].reset_index(drop=True)
        self._write_frame(combined, path)

    def results_frame(self) -> pd.DataFrame:
        return self._read_frame(self.results_path, RESULT_DTYPES)

    def sessions_frame(self) -> pd.DataFrame:
        return self._read_frame(self.sessions_path, SESSION_DTYPES)

    # --- AttemptStore ---

    def append_result(self, result: ProblemResult) -> None:
        self.append_results([result])

    def append_results(self, results: Iterable[ProblemResult]) -> None:
        rows = [result_row(r) for r in results]
        if rows:
            self._append_rows(rows, self.results_path, RESULT_DTYPES, self.max_results)

    def append_session(self, session: SessionStats) -> None:
        self.append_sessions([session])

    def append_sessions(self, sessions: Iterable[SessionStats]) -> None:
        rows = [session_row(s) for s in sessions]
        if rows:
            self._append_rows(rows, self.sessions_path, SESSION_DTYPES, self.max_sessions)

    def list_results(self) -> List[ProblemResult]:
        out: List[ProblemResult] = []
        for row in _records(self.results_frame()):
            try:
                out.append(_row_to_result(row))
            except ValidationError as e:
                logger.warning("Skipping malformed result row: %s", e)
        return out

    def list_sessions(self) -> List[SessionStats]:
        out: List[SessionStats] = []
        for row in _records(self.sessions_frame()):
            try:
                out.append(_row_to_session(row))
            except (ValidationError, ValueError) as e:
                logger.warning("Skipping malformed session row: %s", e)
        return out

    def get_streak_state(self) -> StreakState:
        p = self.streak_path
        if not p.exists():
            return StreakState()
        try:
            with p.open("r", encoding="utf-8") as f:
                data = json.load(f)
            return StreakState.model_validate(data)
        except (OSError, ValueError, ValidationError) as e:
            logger.warning("Unreadable %s, resetting streak: %s", p.name, e)
            return StreakState()

    def set_streak_state(self, state: StreakState) -> None:
        try:
            with self.streak_path.open("w", encoding="utf-8") as f:
                f.write(state.model_dump_json())
        except OSError as e:
            raise StoreWriteError(f"Failed to write {STREAK_FILE}: {e}") from e

    def clear(self) -> None:
        for p in (self.results_path, self.sessions_path, self.streak_path):
            p.unlink(missing_ok=True)

    def is_empty(self) -> bool:
        return self.results_frame().empty and self.sessions_frame().empty

    # --- export / import ---

    def export_data(self) -> str:
        """JSON snapshot of everything in the store."""
        streak = self.get_streak_state()
        doc = {
            "sessions": [s.model_dump() for s in self.list_sessions()],
            "results": [r.model_dump() for r in self.list_results()],
            "streak": streak.model_dump(mode="json"),
            "exported_at": datetime.now(timezone.utc).isoformat(),
        }
        return json.dumps(doc, indent=2)

    def import_data(self, text: str) -> bool:
        """Replace the sections present in an exported document.

        Returns False (and changes nothing) when the document does not parse.
        """
        try:
            data = json.loads(text)
            if not isinstance(data, dict):
                raise ValueError("export document must be an object")
            sessions = [SessionStats.model_validate(s) for s in data.get("sessions") or []]
            results = [ProblemResult.model_validate(r) for r in data.get("results") or []]
            streak = StreakState.model_validate(data["streak"]) if data.get("streak") else None
        except (ValueError, TypeError, ValidationError) as e:
            logger.warning("Import rejected: %s", e)
            return False

        if "sessions" in data:
            self.sessions_path.unlink(missing_ok=True)
            self.append_sessions(sessions)
        if "results" in data:
            self.results_path.unlink(missing_ok=True)
            self.append_results(results)
        if streak is not None:
            self.set_streak_state(streak)
        logger.info("Imported %d sessions, %d results", len(sessions), len(results))
        return True


def today_local() -> date:
    return datetime.now().astimezone().date()
