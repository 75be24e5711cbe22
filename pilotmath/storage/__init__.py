from .errors import StoreError, StoreReadError, StoreWriteError
from .fallback import FallbackWriter, transfer_local_to_remote
from .remote import SupabaseAttemptStore
from .schema import CategoryTally, ProblemResult, SessionStats, StreakState
from .store import AttemptStore, LocalAttemptStore

__all__ = [
    "AttemptStore",
    "CategoryTally",
    "FallbackWriter",
    "LocalAttemptStore",
    "ProblemResult",
    "SessionStats",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "StreakState",
    "SupabaseAttemptStore",
    "transfer_local_to_remote",
]
