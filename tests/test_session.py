import tempfile
import threading
import unittest
from datetime import date

from pilotmath.app.session_manager import PracticeSession, build_session_stats
from pilotmath.storage.errors import StoreWriteError
from pilotmath.storage.store import LocalAttemptStore
from pilotmath.util.randomness import RandomSource

from fakes import FakeClock, fixed_now, make_result


class SessionTestBase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.store = LocalAttemptStore(self._tmp.name)
        self.clock = FakeClock(100.0)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def new_session(self, minutes: int = 5, category=None) -> PracticeSession:
        return PracticeSession(
            self.store,
            duration_minutes=minutes,
            category=category,
            rng=RandomSource(1),
            clock=self.clock,
            now=fixed_now(),
        )


class EmptySessionTests(SessionTestBase):
    def test_nothing_saved_without_answers(self) -> None:
        s = self.new_session()
        s.next_problem()
        self.assertIsNone(s.end_session())
        self.assertTrue(s.ended)
        self.assertEqual(self.store.list_sessions(), [])
        self.assertEqual(self.store.get_streak_state().current_streak, 0)

    def test_invalid_input_records_nothing(self) -> None:
        s = self.new_session()
        s.next_problem()
        self.assertIsNone(s.submit(""))
        self.assertIsNone(s.submit("abc"))
        self.assertEqual(s.results, [])
        self.assertIsNotNone(s.current_problem)

    def test_submit_without_problem(self) -> None:
        s = self.new_session()
        self.assertIsNone(s.submit("12"))


class AnsweredSessionTests(SessionTestBase):
    def test_answer_graded_and_stored(self) -> None:
        s = self.new_session(category="reciprocal-heading")
        p = s.next_problem()
        self.clock.advance(6.4)
        r = s.submit(str(p.correct_answer))
        self.assertTrue(r.is_correct)
        self.assertEqual(r.time_spent, 6)
        self.assertEqual(r.category, "reciprocal-heading")
        self.assertIsNone(s.current_problem)
        self.assertEqual(len(self.store.list_results()), 1)

    def test_end_session_summarizes_once(self) -> None:
        s = self.new_session(category="reciprocal-heading")
        p = s.next_problem()
        self.clock.advance(3)
        s.submit(str(p.correct_answer))
        s.next_problem()
        self.clock.advance(5)
        s.submit("0")

        summary = s.end_session()
        self.assertEqual(summary.problems_attempted, 2)
        self.assertEqual(summary.problems_correct, 1)
        self.assertEqual(summary.accuracy, 50)
        self.assertEqual(summary.average_time, 4)
        self.assertEqual(summary.category_breakdown["reciprocal-heading"].attempted, 2)
        self.assertTrue(summary.date.startswith("2026-10-18T09:00:00"))

        self.assertIsNone(s.end_session())
        self.assertEqual(len(self.store.list_sessions()), 1)
        streak = self.store.get_streak_state()
        self.assertEqual(streak.current_streak, 1)
        self.assertEqual(streak.last_practice_date, date(2026, 10, 18))

    def test_submit_after_end_is_ignored(self) -> None:
        s = self.new_session()
        s.next_problem()
        s.end_session()
        self.assertIsNone(s.submit("1"))

    def test_concurrent_end_persists_one_summary(self) -> None:
        s = self.new_session()
        p = s.next_problem()
        s.submit(str(p.correct_answer))
        threads = [threading.Thread(target=s.end_session) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(len(self.store.list_sessions()), 1)


class FlakyStore(LocalAttemptStore):
    """Local store whose first write of each named kind fails."""

    def __init__(self, data_dir, fail=()):
        super().__init__(data_dir)
        self.fail = set(fail)

    def _maybe_fail(self, op: str) -> None:
        if op in self.fail:
            self.fail.discard(op)
            raise StoreWriteError("disk full")

    def append_result(self, result) -> None:
        self._maybe_fail("append_result")
        super().append_result(result)

    def append_session(self, session) -> None:
        self._maybe_fail("append_session")
        super().append_session(session)


class SaveFailureTests(SessionTestBase):
    def session_on(self, store) -> PracticeSession:
        return PracticeSession(
            store,
            duration_minutes=5,
            category="reciprocal-heading",
            rng=RandomSource(1),
            clock=self.clock,
            now=fixed_now(),
        )

    def test_failed_session_write_keeps_summary(self) -> None:
        store = FlakyStore(self._tmp.name, fail={"append_session"})
        s = self.session_on(store)
        p = s.next_problem()
        s.submit(str(p.correct_answer))
        with self.assertLogs("pilotmath.app.session_manager", level="ERROR"):
            summary = s.end_session()
        self.assertIsNotNone(summary)
        self.assertEqual(summary.problems_attempted, 1)
        self.assertIs(s.state.summary, summary)
        self.assertEqual(s.state.save_errors, 1)
        self.assertEqual(store.list_sessions(), [])
        self.assertEqual(store.get_streak_state().current_streak, 1)
        self.assertIsNone(s.end_session())

    def test_failed_result_write_still_counts(self) -> None:
        store = FlakyStore(self._tmp.name, fail={"append_result"})
        s = self.session_on(store)
        p = s.next_problem()
        with self.assertLogs("pilotmath.app.session_manager", level="ERROR"):
            r = s.submit(str(p.correct_answer))
        self.assertTrue(r.is_correct)
        self.assertEqual(len(s.results), 1)
        self.assertEqual(store.list_results(), [])
        self.assertEqual(s.end_session().problems_attempted, 1)
        self.assertEqual(s.state.save_errors, 1)

    def test_result_counted_when_session_ends_during_write(self) -> None:
        class EndingStore(LocalAttemptStore):
            session = None

            def append_result(self, result) -> None:
                super().append_result(result)
                self.session.end_session()

        store = EndingStore(self._tmp.name)
        s = self.session_on(store)
        store.session = s
        p = s.next_problem()
        self.assertIsNotNone(s.submit(str(p.correct_answer)))
        self.assertTrue(s.ended)
        self.assertEqual(s.state.summary.problems_attempted, 1)
        self.assertEqual(store.list_sessions()[0].problems_attempted, 1)


class TimerTests(SessionTestBase):
    def test_countdown_ends_session(self) -> None:
        s = self.new_session(minutes=1)
        p = s.next_problem()
        s.submit(str(p.correct_answer))
        for _ in range(59):
            self.assertIsNone(s.tick())
        self.assertEqual(s.remaining, 1)
        self.assertFalse(s.ended)
        summary = s.tick()
        self.assertTrue(s.ended)
        self.assertEqual(summary.duration, 60)
        self.assertIsNone(s.tick())
        self.assertEqual(s.remaining, 0)


class BuildSessionStatsTests(unittest.TestCase):
    def test_none_for_no_results(self) -> None:
        self.assertIsNone(build_session_stats([], session_id="x", ended_at=fixed_now()(), duration_s=10))

    def test_half_up_averages(self) -> None:
        results = [make_result("crosswind", True, 3), make_result("cloud-base", False, 4)]
        summary = build_session_stats(results, session_id="x", ended_at=fixed_now()(), duration_s=10)
        self.assertEqual(summary.average_time, 4)
        self.assertEqual(summary.accuracy, 50)
        self.assertEqual(set(summary.category_breakdown), {"crosswind", "cloud-base"})


if __name__ == "__main__":
    unittest.main()
