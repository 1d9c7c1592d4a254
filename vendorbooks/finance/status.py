from collections import Counter
from datetime import datetime, time
from typing import Dict, Iterable, Optional

from vendorbooks.finance.records import Booking, parse_date
from vendorbooks.finance.types import DerivedStatus, ExplicitStatus


def parse_time_of_day(value) -> Optional[time]:
    """Parse "HH:MM" / "HH:MM:SS" (or pass a time through); None when malformed."""
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        return None
    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        return None
    try:
        hour, minute = int(parts[0]), int(parts[1])
        second = int(parts[2]) if len(parts) == 3 else 0
        return time(hour, minute, second)
    except ValueError:
        return None


def derive_status(booking: Booking, now: Optional[datetime] = None) -> DerivedStatus:
    """
    Compute a booking's lifecycle state from its explicit flag and the clock.

    The result is never stored: a booking flips from ``confirmed`` to
    ``completed`` as soon as its end passes, without any write. Rules:

      - an explicit cancellation wins over every time-based rule
      - a missing or malformed event date is ``confirmed``
      - an event date after today is ``confirmed``
      - an event date today or earlier without an end time is ``completed``
      - with an end time, ``completed`` once ``now`` reaches
        event_date + to_time, ``confirmed`` before that (or if the end time
        cannot be parsed)
    """
    if now is None:
        now = datetime.now()

    if getattr(booking, "status", None) == ExplicitStatus.CANCELLED:
        return DerivedStatus.CANCELLED

    event_date = parse_date(getattr(booking, "event_date", None))
    if event_date is None:
        return DerivedStatus.CONFIRMED

    if event_date > now.date():
        return DerivedStatus.CONFIRMED

    raw_to_time = getattr(booking, "to_time", None)
    if raw_to_time is None or raw_to_time == "":
        return DerivedStatus.COMPLETED

    to_time = parse_time_of_day(raw_to_time)
    if to_time is None:
        return DerivedStatus.CONFIRMED

    end = datetime.combine(event_date, to_time, tzinfo=now.tzinfo)
    if now >= end:
        return DerivedStatus.COMPLETED
    return DerivedStatus.CONFIRMED


def status_counts(
    bookings: Iterable[Booking], now: Optional[datetime] = None
) -> Dict[DerivedStatus, int]:
    """Number of bookings per derived status; every status is present."""
    if now is None:
        now = datetime.now()
    counts = Counter(derive_status(b, now) for b in bookings)
    return {s: counts.get(s, 0) for s in DerivedStatus}
