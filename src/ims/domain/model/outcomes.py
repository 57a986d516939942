"""Analytics outcomes.

Analytics never fake a number when history is missing. They return
``NoData`` instead, so callers can tell "no history" apart from a
measured zero.
"""

from __future__ import annotations

from dataclasses import dataclass

INSUFFICIENT_DATA = "insufficient data"


@dataclass(frozen=True)
class NoData:
    """An explicit "nothing to measure" outcome."""

    reason: str = "no data"

    def __str__(self) -> str:
        return self.reason


def is_no_data(value: object) -> bool:
    return isinstance(value, NoData)
