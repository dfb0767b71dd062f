"""Small shared helpers (time, identifiers)."""

from finance_tracker.utils.ids import generate_id
from finance_tracker.utils.time import end_of_month, start_of_month, utc_now

__all__ = [
    "end_of_month",
    "generate_id",
    "start_of_month",
    "utc_now",
]
