from __future__ import annotations

"""CLI for pilotmath: drills, progress stats and store maintenance."""

import argparse
import logging
import sys
import threading
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional

from ..config.config import load_config, validate_config
from ..problems.catalog import CATEGORY_INFO, get_category_info
from ..problems.registry import get_all_categories
from ..stats import stats as st
from ..storage.errors import StoreError
from ..storage.fallback import FallbackWriter, transfer_local_to_remote
from ..storage.remote import SupabaseAttemptStore
from ..storage.store import AttemptStore, LocalAttemptStore
from ..util.randomness import default_source
from .explain import enable as explain_enable
from .session_manager import PracticeSession

logger = logging.getLogger(__name__)


def _local_store(cfg: Dict[str, Any]) -> LocalAttemptStore:
    storage = cfg["storage"]
    return LocalAttemptStore(
        storage["data_dir"],
        max_results=storage["max_results"],
        max_sessions=storage["max_sessions"],
    )


def build_store(cfg: Dict[str, Any]) -> AttemptStore:
    """Local store, or remote with local fallback when configured."""
    local = _local_store(cfg)
    if cfg["storage"]["backend"] != "remote":
        return local
    try:
        remote = SupabaseAttemptStore.from_env()
    except ValueError as e:
        logger.warning("Remote store unavailable (%s); using local store", e)
        return local
    return FallbackWriter(remote, local)


def _print_problem(n: int, problem) -> None:
    print(f"\n[{n}] {problem.question} ({problem.unit})")


def _start_ticker(session: PracticeSession, stop: threading.Event) -> threading.Thread:
    def run() -> None:
        while not stop.wait(1.0):
            session.tick()
            if session.ended:
                print("\nTime is up. Press Enter to see your summary.")
                return

    t = threading.Thread(target=run, name="pilotmath-timer", daemon=True)
    t.start()
    return t


def run_practice(
    store: AttemptStore,
    *,
    minutes: int,
    category: Optional[str],
    questions: Optional[int],
    ask=input,
) -> int:
    session = PracticeSession(store, duration_minutes=minutes, category=category, rng=default_source())
    stop = threading.Event()
    _start_ticker(session, stop)
    print(f"Practice: {minutes} min, category: {category or 'all'}. Type 'q' to stop, 'h' for a hint.")

    answered = 0
    try:
        while not session.ended:
            problem = session.next_problem()
            _print_problem(answered + 1, problem)
            result = None
            while result is None and not session.ended:
                try:
                    text = ask("> ")
                except EOFError:
                    text = "q"
                if session.ended:
                    break
                cmd = text.strip().lower()
                if cmd == "q":
                    session.end_session()
                    break
                if cmd == "h":
                    print(f"Hint: {problem.hint or 'none'}")
                    continue
                result = session.submit(text)
            if result is None:
                break
            answered += 1
            if result.is_correct:
                print(f"Correct. {problem.explanation}")
            else:
                print(f"Not quite: {problem.correct_answer:g} {problem.unit}. {problem.explanation}")
            if questions is not None and answered >= questions:
                session.end_session()
    finally:
        stop.set()

    summary = session.state.summary
    print("\nSession Summary:")
    if summary is None:
        print("No problems answered; nothing saved.")
        return 0
    print(f"Score: {summary.problems_correct}/{summary.problems_attempted} ({summary.accuracy}%)")
    print(f"Average time: {summary.average_time}s")
    for cat, tally in summary.category_breakdown.items():
        print(f"  {cat}: {tally.correct}/{tally.attempted}")
    if session.state.save_errors:
        print(f"WARNING: {session.state.save_errors} record(s) could not be saved", file=sys.stderr)
        return 1
    return 0


def print_stats(store: AttemptStore, cfg: Dict[str, Any], days: int, today: Optional[date] = None) -> None:
    scfg = cfg["stats"]
    results = store.list_results()
    sessions = store.list_sessions()

    overall = st.overall_stats(results)
    print(
        f"Overall: {overall['total_correct']}/{overall['total_problems']} correct "
        f"({overall['accuracy']}%), avg {overall['avg_time']}s"
    )

    try:
        streak = store.get_streak_state()
        print(f"Streak: {streak.current_streak} day(s), longest {streak.longest_streak}")
    except StoreError as e:
        logger.warning("Streak unavailable: %s", e)
        print("Streak: unavailable")
    print(f"Days practiced: {st.total_days_practiced(sessions)}")

    weak = st.weak_categories(results, min_attempts=scfg["weak_min_attempts"], limit=scfg["weak_limit"])
    if weak:
        print("Weak categories: " + ", ".join(weak))

    missed = st.missed_problem_ranking(results, min_total=scfg["missed_min_total"])
    if missed:
        print("Most missed:")
        for row in missed:
            print(f"  {row['category']}: {row['missed']}/{row['total']} missed ({row['rate']}%)")

    timing = st.timing_stats(results)
    if timing:
        print("Timing (avg / fastest / slowest):")
        for cat, t in sorted(timing.items(), key=lambda kv: -kv[1]["total_attempts"]):
            print(f"  {cat}: {t['avg_time']}s / {t['fastest']}s / {t['slowest']}s over {t['total_attempts']}")

    calendar = st.practice_calendar(sessions, days, today=today)
    active = [d for d in calendar if d.sessions_count > 0]
    print(f"Last {days} days: practiced on {len(active)}")
    for d in calendar[:7]:
        mark = f"{d.problems_attempted} problems, {d.accuracy}%" if d.sessions_count else "-"
        print(f"  {d.date}: {mark}")


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="pilotmath")
    p.add_argument("--config", default=None, help="Path to YAML config")
    p.add_argument("--verbose", "-v", action="store_true")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("list-categories")

    sf = sub.add_parser("show-formula")
    sf.add_argument("--category", required=True)

    pp = sub.add_parser("practice")
    pp.add_argument("--category", default=None)
    pp.add_argument("--minutes", type=int, default=None)
    pp.add_argument("--questions", type=int, default=None)
    pp.add_argument("--explain", action="store_true")

    sp = sub.add_parser("stats")
    sp.add_argument("--days", type=int, default=None)

    ep = sub.add_parser("export")
    ep.add_argument("path")

    ip = sub.add_parser("import")
    ip.add_argument("path")

    sub.add_parser("migrate")

    args = p.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "list-categories":
        for cat in get_all_categories():
            info = CATEGORY_INFO[cat]
            print(f"{cat.value}: {info.name} - {info.formula}")
        return 0

    if args.cmd == "show-formula":
        try:
            info = get_category_info(args.category)
        except ValueError:
            print(f"Unknown category: {args.category}", file=sys.stderr)
            return 2
        print(f"{info.name}: {info.description}")
        print(f"Formula: {info.formula}")
        print(f"\nExample: {info.example.problem}")
        for i, s in enumerate(info.example.steps, 1):
            print(f"  {i}. {s.step}  ({s.explanation})")
        print(f"Answer: {info.example.answer}")
        if info.example.tip:
            print(f"Tip: {info.example.tip}")
        return 0

    cfg = validate_config(load_config(args.config))

    if args.cmd == "practice":
        if args.explain:
            explain_enable(True)
        minutes = args.minutes or cfg["session"]["duration_minutes"]
        category = args.category or cfg["session"]["category"]
        if category == "all":
            category = None
        try:
            store = build_store(cfg)
            return run_practice(store, minutes=minutes, category=category, questions=args.questions)
        except ValueError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 2
        except StoreError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

    if args.cmd == "stats":
        print_stats(build_store(cfg), cfg, args.days or cfg["stats"]["calendar_days"])
        return 0

    if args.cmd == "export":
        text = _local_store(cfg).export_data()
        Path(args.path).write_text(text, encoding="utf-8")
        print(f"Exported to {args.path}")
        return 0

    if args.cmd == "import":
        text = Path(args.path).read_text(encoding="utf-8")
        if not _local_store(cfg).import_data(text):
            print(f"ERROR: {args.path} is not a valid export", file=sys.stderr)
            return 1
        print(f"Imported {args.path}")
        return 0

    if args.cmd == "migrate":
        local = _local_store(cfg)
        try:
            remote = SupabaseAttemptStore.from_env()
        except ValueError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 2
        try:
            moved = transfer_local_to_remote(local, remote)
        except StoreError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1
        print(f"Transferred {moved['sessions']} sessions and {moved['results']} results")
        return 0

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
