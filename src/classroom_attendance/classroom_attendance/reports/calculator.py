from __future__ import annotations


def attendance_percentage(attended: int, expected: int) -> float:
    """attended / expected * 100, or 0.0 when nothing was expected."""

    if expected <= 0:
        return 0.0
    return (float(attended) / float(expected)) * 100.0
