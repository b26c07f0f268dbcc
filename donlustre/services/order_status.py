"""Order status progression: received -> processing -> ready -> enroute -> delivered."""

from __future__ import annotations

STATUSES: tuple[str, ...] = ("received", "processing", "ready", "enroute", "delivered")
TERMINAL_STATUS = STATUSES[-1]


def next_status(status: str) -> str:
    """Return the status after ``status``, clamped at the terminal state.

    Unrecognised values restart at the first status.
    """
    try:
        idx = STATUSES.index(status)
    except ValueError:
        return STATUSES[0]
    return STATUSES[min(idx + 1, len(STATUSES) - 1)]


def advance_to(current: str, target: str) -> str:
    """Return the later of ``current`` and ``target``; status never moves backwards."""
    if target not in STATUSES:
        raise ValueError(f"Unknown status: {target}")
    if current not in STATUSES:
        return target
    return STATUSES[max(STATUSES.index(current), STATUSES.index(target))]
