from __future__ import annotations

"""Session Manager: drives one timed practice session.

Serves problems, grades typed answers, appends each result to the attempt
store and writes one `SessionStats` summary at the end. Front-end agnostic:
the CLI (or any other driver) calls `tick()` once per second and `submit()`
with whatever the user typed.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional
from uuid import uuid4

from ..problems.base import round_half_up
from ..problems.evaluator import is_correct, parse_answer
from ..problems.registry import generate_problem
from ..problems.schema import Problem, ProblemCategory
from ..stats.streak import record_practice
from ..storage.errors import StoreError
from ..storage.schema import CategoryTally, ProblemResult, SessionStats
from ..storage.store import AttemptStore
from ..util.randomness import Randomness
from .explain import trace as xtrace

logger = logging.getLogger(__name__)


def _now_local() -> datetime:
    return datetime.now().astimezone()


@dataclass(frozen=True)
class SessionContext:
    session_id: str
    started_at: datetime
    duration_s: int
    category: Optional[ProblemCategory]


@dataclass
class RuntimeState:
    remaining_s: int = 0
    problem: Optional[Problem] = None
    problem_started: float = 0.0
    results: List[ProblemResult] = field(default_factory=list)
    ended: bool = False
    summary: Optional[SessionStats] = None
    # store writes that failed; the records stay in memory
    save_errors: int = 0


def build_session_stats(
    results: List[ProblemResult],
    *,
    session_id: str,
    ended_at: datetime,
    duration_s: int,
) -> Optional[SessionStats]:
    """Summarize answered problems; None when nothing was answered."""
    if not results:
        return None
    attempted = len(results)
    correct = sum(1 for r in results if r.is_correct)
    total_time = sum(r.time_spent for r in results)

    tallies: Dict[str, Dict[str, int]] = {}
    for r in results:
        t = tallies.setdefault(str(r.category), {"attempted": 0, "correct": 0})
        t["attempted"] += 1
        t["correct"] += 1 if r.is_correct else 0

    return SessionStats(
        id=session_id,
        date=ended_at.isoformat(),
        duration=max(0, int(duration_s)),
        problems_attempted=attempted,
        problems_correct=correct,
        accuracy=round_half_up(correct / attempted * 100),
        average_time=round_half_up(total_time / attempted),
        category_breakdown={k: CategoryTally(**v) for k, v in tallies.items()},
    )


class PracticeSession:
    """One timed session against an attempt store.

    `clock` measures per-problem answer time (seconds, monotonic); `now`
    stamps results and the session date. Both are injectable for tests.
    """

    def __init__(
        self,
        store: AttemptStore,
        *,
        duration_minutes: int = 15,
        category: ProblemCategory | str | None = None,
        rng: Optional[Randomness] = None,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = _now_local,
    ) -> None:
        self.store = store
        self.rng = rng
        self.clock = clock
        self.now = now
        cat = None if category in (None, "all") else ProblemCategory(category)
        self.ctx = SessionContext(
            session_id=uuid4().hex,
            started_at=now(),
            duration_s=int(duration_minutes) * 60,
            category=cat,
        )
        self.state = RuntimeState(remaining_s=self.ctx.duration_s)
        self._lock = threading.Lock()

    # --- problem flow ---

    @property
    def ended(self) -> bool:
        return self.state.ended

    @property
    def remaining(self) -> int:
        return self.state.remaining_s

    @property
    def results(self) -> List[ProblemResult]:
        return list(self.state.results)

    @property
    def current_problem(self) -> Optional[Problem]:
        return self.state.problem

    def next_problem(self) -> Problem:
        problem = generate_problem(self.ctx.category, self.rng)
        self.state.problem = problem
        self.state.problem_started = self.clock()
        xtrace("problem_created", {"id": problem.id, "category": problem.category.value, "question": problem.question})
        return problem

    def submit(self, text: str) -> Optional[ProblemResult]:
        """Grade `text` against the current problem.

        Unparseable input, a finished session or no open problem return
        None and record nothing. A failed store write is logged and the
        result still counts toward the session summary.
        """
        answer = parse_answer(text)
        if answer is None:
            return None

        with self._lock:
            problem = self.state.problem
            if self.state.ended or problem is None:
                return None
            result = ProblemResult(
                problem_id=problem.id,
                category=problem.category,
                user_answer=answer,
                correct_answer=problem.correct_answer,
                is_correct=is_correct(problem, answer),
                time_spent=max(0, round_half_up(self.clock() - self.state.problem_started)),
                timestamp=int(self.now().timestamp() * 1000),
            )
            self.state.results.append(result)
            self.state.problem = None

        xtrace("answer_graded", {"id": problem.id, "answer": answer, "correct": result.is_correct, "t": result.time_spent})
        self._save("result", self.store.append_result, result)
        return result

    def _save(self, what: str, write: Callable, *args):
        try:
            return write(*args)
        except StoreError as e:
            logger.error("Session %s: saving %s failed: %s", self.ctx.session_id, what, e)
            self.state.save_errors += 1
            return None

    # --- timer ---

    def tick(self) -> Optional[SessionStats]:
        """Advance the countdown by one second; ends the session at zero."""
        if self.state.ended:
            return None
        self.state.remaining_s = max(0, self.state.remaining_s - 1)
        if self.state.remaining_s == 0:
            return self.end_session()
        return None

    def end_session(self) -> Optional[SessionStats]:
        """Finish the session once; later or concurrent calls return None.

        A session with no answered problems writes nothing. The summary is
        returned (and kept on `state.summary`) even when saving it fails.
        """
        with self._lock:
            if self.state.ended:
                return None
            self.state.ended = True
            self.state.problem = None
            results = list(self.state.results)

        ended_at = self.now()
        summary = build_session_stats(
            results,
            session_id=self.ctx.session_id,
            ended_at=ended_at,
            duration_s=self.ctx.duration_s - self.state.remaining_s,
        )
        if summary is None:
            logger.info("Session %s ended with no answers; nothing saved", self.ctx.session_id)
            xtrace("session_ended", {"id": self.ctx.session_id, "attempted": 0})
            return None

        self.state.summary = summary
        self._save("session", self.store.append_session, summary)
        streak = self._save("streak", record_practice, self.store, ended_at.date())
        xtrace(
            "session_ended",
            {
                "id": summary.id,
                "attempted": summary.problems_attempted,
                "correct": summary.problems_correct,
                "accuracy": summary.accuracy,
                "streak": streak.current_streak if streak is not None else None,
            },
        )
        return summary
