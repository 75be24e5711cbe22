import os
import tempfile
import unittest
from datetime import date
from unittest.mock import patch

from pilotmath.stats.streak import record_practice
from pilotmath.storage.errors import StoreError, StoreReadError, StoreWriteError
from pilotmath.storage.fallback import FallbackWriter, transfer_local_to_remote
from pilotmath.storage.remote import SupabaseAttemptStore, session_to_row
from pilotmath.storage.schema import StreakState
from pilotmath.storage.store import LocalAttemptStore

from fakes import FakeSupabaseClient, make_result, make_session


class SupabaseStoreTests(unittest.TestCase):
    def test_insert_tags_user(self) -> None:
        client = FakeSupabaseClient()
        store = SupabaseAttemptStore(client, "u1")
        store.append_result(make_result("crosswind", True, pid="r1"))
        table, op, row = client.log[0]
        self.assertEqual((table, op), ("results", "insert"))
        self.assertEqual(row["user_id"], "u1")
        self.assertEqual(row["category"], "crosswind")

    def test_session_row_drops_local_id(self) -> None:
        row = session_to_row("u1", make_session("local-id", "2026-10-18T10:00:00+02:00", 2, 1))
        self.assertNotIn("id", row)
        self.assertEqual(row["user_id"], "u1")

    def test_write_failure_raises(self) -> None:
        store = SupabaseAttemptStore(FakeSupabaseClient(fail=True), "u1")
        with self.assertRaises(StoreWriteError):
            store.append_result(make_result("crosswind", True))
        with self.assertRaises(StoreWriteError):
            store.set_streak_state(StreakState())

    def test_read_failure_degrades(self) -> None:
        store = SupabaseAttemptStore(FakeSupabaseClient(fail=True), "u1")
        self.assertEqual(store.list_results(), [])
        self.assertEqual(store.list_sessions(), [])

    def test_streak_read_failure_raises(self) -> None:
        store = SupabaseAttemptStore(FakeSupabaseClient(fail=True), "u1")
        with self.assertRaises(StoreReadError):
            store.get_streak_state()

    def test_missing_streak_row_is_default(self) -> None:
        store = SupabaseAttemptStore(FakeSupabaseClient(), "u1")
        self.assertEqual(store.get_streak_state(), StreakState())

    def test_reads_parse_rows(self) -> None:
        tables = {
            "sessions": [
                {
                    "id": 42,
                    "user_id": "u1",
                    "date": "2026-10-18T10:00:00+02:00",
                    "duration": 300,
                    "problems_attempted": 4,
                    "problems_correct": 3,
                    "accuracy": 75,
                    "average_time": 9,
                    "category_breakdown": {"crosswind": {"attempted": 4, "correct": 3}},
                },
                {"id": 43, "date": "bad", "problems_attempted": 1, "problems_correct": 5},
            ],
            "streaks": [{"current_streak": 4, "longest_streak": 6, "last_practice_date": "2026-10-17"}],
        }
        store = SupabaseAttemptStore(FakeSupabaseClient(tables=tables), "u1")
        sessions = store.list_sessions()
        self.assertEqual(len(sessions), 1)
        self.assertEqual(sessions[0].id, "42")
        self.assertEqual(sessions[0].category_breakdown["crosswind"].attempted, 4)
        streak = store.get_streak_state()
        self.assertEqual(streak.current_streak, 4)
        self.assertEqual(streak.last_practice_date, date(2026, 10, 17))

    @patch("pilotmath.storage.remote.load_dotenv")
    def test_from_env_requires_credentials(self, _load) -> None:
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(ValueError):
                SupabaseAttemptStore.from_env()
        with patch.dict(os.environ, {"SUPABASE_URL": "http://x", "SUPABASE_KEY": "k"}, clear=True):
            with self.assertRaisesRegex(ValueError, "user id"):
                SupabaseAttemptStore.from_env()


class FallbackTestBase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.local = LocalAttemptStore(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()


class FallbackWriterTests(FallbackTestBase):
    def test_primary_success_skips_local(self) -> None:
        client = FakeSupabaseClient()
        writer = FallbackWriter(SupabaseAttemptStore(client, "u1"), self.local)
        writer.append_result(make_result("crosswind", True))
        writer.append_session(make_session("s", "2026-10-18T10:00:00+02:00", 1, 1))
        self.assertEqual(len(client.ops("insert")), 2)
        self.assertTrue(self.local.is_empty())
        self.assertEqual(writer.fallback_writes, 0)

    def test_primary_failure_writes_locally(self) -> None:
        writer = FallbackWriter(SupabaseAttemptStore(FakeSupabaseClient(fail=True), "u1"), self.local)
        with self.assertLogs("pilotmath.storage.fallback", level="ERROR"):
            writer.append_result(make_result("crosswind", True))
            writer.set_streak_state(StreakState(current_streak=1, longest_streak=1))
        self.assertEqual(len(self.local.list_results()), 1)
        self.assertEqual(self.local.get_streak_state().current_streak, 1)
        self.assertEqual(writer.fallback_writes, 2)

    def test_unexpected_errors_propagate(self) -> None:
        class Broken:
            def append_result(self, result):
                raise RuntimeError("bug")

        writer = FallbackWriter(Broken(), self.local)
        with self.assertRaises(RuntimeError):
            writer.append_result(make_result("crosswind", True))
        self.assertTrue(self.local.is_empty())

    def test_store_error_hierarchy(self) -> None:
        self.assertTrue(issubclass(StoreWriteError, StoreError))


class TransferTests(FallbackTestBase):
    def _fill(self, n_results: int) -> None:
        self.local.append_sessions(
            [make_session(f"s{i}", f"2026-10-1{i}T10:00:00+02:00", 2, 1) for i in range(2)]
        )
        self.local.append_results([make_result("crosswind", True, pid=f"r{i}") for i in range(n_results)])

    def test_everything_moves_in_batches(self) -> None:
        self._fill(250)
        client = FakeSupabaseClient()
        moved = transfer_local_to_remote(self.local, SupabaseAttemptStore(client, "u1"))
        self.assertEqual(moved, {"sessions": 2, "results": 250})
        inserts = client.ops("insert")
        self.assertEqual([t for t, _, _ in inserts], ["sessions", "results", "results", "results"])
        self.assertEqual([len(rows) for _, _, rows in inserts[1:]], [100, 100, 50])
        self.assertTrue(self.local.is_empty())

    def test_failed_batch_is_skipped(self) -> None:
        self._fill(200)
        # call 1 = sessions, call 2 = first result batch
        client = FakeSupabaseClient(fail_calls=[2])
        with self.assertLogs("pilotmath.storage.fallback", level="ERROR"):
            moved = transfer_local_to_remote(self.local, SupabaseAttemptStore(client, "u1"))
        self.assertEqual(moved, {"sessions": 2, "results": 100})
        self.assertTrue(self.local.is_empty())

    def test_nothing_moved_keeps_local(self) -> None:
        self._fill(5)
        with self.assertLogs("pilotmath.storage.fallback", level="ERROR"):
            moved = transfer_local_to_remote(self.local, SupabaseAttemptStore(FakeSupabaseClient(fail=True), "u1"))
        self.assertEqual(moved, {"sessions": 0, "results": 0})
        self.assertEqual(len(self.local.list_results()), 5)

    def test_empty_local_is_a_no_op(self) -> None:
        client = FakeSupabaseClient()
        self.assertEqual(transfer_local_to_remote(self.local, SupabaseAttemptStore(client, "u1")), {"sessions": 0, "results": 0})
        self.assertEqual(client.log, [])


STORED_STREAK = {"current_streak": 10, "longest_streak": 10, "last_practice_date": "2026-10-17"}


class StreakFallbackTests(FallbackTestBase):
    def test_failed_read_leaves_stored_streak_alone(self) -> None:
        # call 1 = streak select
        client = FakeSupabaseClient(fail_calls=[1], tables={"streaks": [dict(STORED_STREAK)]})
        writer = FallbackWriter(SupabaseAttemptStore(client, "u1"), self.local)
        with self.assertLogs("pilotmath.stats.streak", level="ERROR"):
            self.assertIsNone(record_practice(writer, date(2026, 10, 18)))
        self.assertEqual(client.ops("upsert"), [])
        self.assertEqual(self.local.get_streak_state(), StreakState())

        state = record_practice(writer, date(2026, 10, 18))
        self.assertEqual((state.current_streak, state.longest_streak), (11, 11))
        _, _, payload = client.ops("upsert")[0]
        self.assertEqual(payload["current_streak"], 11)
        self.assertEqual(payload["last_practice_date"], "2026-10-18")

    def test_locally_written_streak_stays_visible(self) -> None:
        # call 1 = streak upsert
        client = FakeSupabaseClient(fail_calls=[1], tables={"streaks": [dict(STORED_STREAK)]})
        writer = FallbackWriter(SupabaseAttemptStore(client, "u1"), self.local)
        newer = StreakState(current_streak=11, longest_streak=11, last_practice_date=date(2026, 10, 18))
        with self.assertLogs("pilotmath.storage.fallback", level="ERROR"):
            writer.set_streak_state(newer)
        self.assertEqual(writer.get_streak_state(), newer)

    def test_older_local_streak_does_not_hide_remote(self) -> None:
        self.local.set_streak_state(StreakState(current_streak=2, longest_streak=2, last_practice_date=date(2026, 10, 1)))
        client = FakeSupabaseClient(tables={"streaks": [dict(STORED_STREAK)]})
        writer = FallbackWriter(SupabaseAttemptStore(client, "u1"), self.local)
        self.assertEqual(writer.get_streak_state().current_streak, 10)


class StreakTransferTests(FallbackTestBase):
    LOCAL = StreakState(current_streak=3, longest_streak=5, last_practice_date=date(2026, 10, 18))

    def test_newer_local_streak_moves(self) -> None:
        self.local.set_streak_state(self.LOCAL)
        client = FakeSupabaseClient(tables={"streaks": [dict(STORED_STREAK)]})
        moved = transfer_local_to_remote(self.local, SupabaseAttemptStore(client, "u1"))
        self.assertEqual(moved, {"sessions": 0, "results": 0})
        _, _, payload = client.ops("upsert")[0]
        self.assertEqual(payload["current_streak"], 3)
        self.assertEqual(self.local.get_streak_state(), StreakState())

    def test_older_local_streak_is_dropped(self) -> None:
        self.local.set_streak_state(
            StreakState(current_streak=1, longest_streak=1, last_practice_date=date(2026, 9, 1))
        )
        client = FakeSupabaseClient(tables={"streaks": [dict(STORED_STREAK)]})
        transfer_local_to_remote(self.local, SupabaseAttemptStore(client, "u1"))
        self.assertEqual(client.ops("upsert"), [])
        self.assertEqual(self.local.get_streak_state(), StreakState())

    def test_unmoved_streak_is_kept_locally(self) -> None:
        self.local.append_results([make_result("crosswind", True, pid=f"r{i}") for i in range(5)])
        self.local.set_streak_state(self.LOCAL)
        # call 1 = result batch, call 2 = streak select
        client = FakeSupabaseClient(fail_calls=[2])
        with self.assertLogs("pilotmath.storage.fallback", level="ERROR"):
            moved = transfer_local_to_remote(self.local, SupabaseAttemptStore(client, "u1"))
        self.assertEqual(moved, {"sessions": 0, "results": 5})
        self.assertEqual(self.local.list_results(), [])
        self.assertEqual(self.local.get_streak_state(), self.LOCAL)


if __name__ == "__main__":
    unittest.main()
