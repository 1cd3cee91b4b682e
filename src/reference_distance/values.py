from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, Tuple

import numpy as np


class SupportsDifference(Protocol):
    """Anything the distance engine can ask for a reference/current difference."""

    def difference(self, reference: float, current: float) -> float: ...


@dataclass(frozen=True)
class Argument:
    """A named scalar argument, optionally periodic on [lo, hi)."""

    name: str
    period: Optional[Tuple[float, float]] = None

    def __post_init__(self):
        if self.period is not None:
            lo, hi = self.period
            if not (math.isfinite(lo) and math.isfinite(hi) and lo < hi):
                raise ValueError(
                    f"Period for {self.name!r} must be finite with lo < hi."
                )

    @staticmethod
    def angle(name: str) -> "Argument":
        """Argument periodic on (-pi, pi)."""
        return Argument(name=name, period=(-math.pi, math.pi))

    @property
    def periodic(self) -> bool:
        return self.period is not None

    def difference(self, reference: float, current: float) -> float:
        """Return current - reference, wrapped to the minimum image if periodic."""
        d = float(current) - float(reference)
        if self.period is None:
            return d
        lo, hi = self.period
        width = hi - lo
        s = d / width
        # half-open (-1/2, 1/2]: exactly half a period maps to +width/2
        s -= math.ceil(s - 0.5)
        return s * width


def arguments_for(
    names: Sequence[str],
    periods: Optional[dict] = None,
) -> list[Argument]:
    """Build Argument objects in runtime order; `periods` maps name -> (lo, hi)."""
    periods = dict(periods or {})
    unknown = set(periods) - set(names)
    if unknown:
        raise ValueError(
            f"Periods given for unknown arguments {sorted(unknown)}. Available: {tuple(names)}"
        )
    return [Argument(name=n, period=periods.get(n)) for n in names]


def differences(
    arguments: Sequence[SupportsDifference],
    reference: np.ndarray,
    current: Sequence[float],
    der_index: np.ndarray,
) -> np.ndarray:
    """Per-argument differences for a frame, read through `der_index`."""
    out = np.empty(len(der_index), dtype=float)
    for i, ik in enumerate(der_index):
        out[i] = arguments[ik].difference(reference[i], current[ik])
    return out
