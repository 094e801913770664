"""Wall-clock deadlines for moves and searches."""

import time


def deadline_after(seconds):
    """Absolute deadline `seconds` from now; None or 0 means no limit."""
    if not seconds:
        return None
    return time.time() + seconds


def time_remaining(deadline):
    return None if deadline is None else deadline - time.time()


def expired(deadline):
    return deadline is not None and time.time() > deadline
