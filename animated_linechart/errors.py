from __future__ import annotations


class ChartDataError(ValueError):
    """Raw series input that cannot be turned into numeric points."""


class PreconditionViolation(ValueError):
    """Caller broke a contract of the layout engine (e.g. mismatched list lengths)."""


def require_same_length(label: str, expected: int, actual: int) -> None:
    if expected != actual:
        raise PreconditionViolation(f"{label} length mismatch: expected {expected}, got {actual}")
