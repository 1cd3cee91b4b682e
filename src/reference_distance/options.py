"""Distance-type options + registry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from .errors import ConflictingWeightSpecification


@dataclass(frozen=True)
class ReferenceOptions:
    """Which distance model a reference frame uses.

    weighted -> one sigma_<name> per argument
    metric   -> one sigma_<name_i>_<name_j> per pair i <= j
    neither  -> unit weights (plain Euclidean)
    """

    weighted: bool = False
    metric: bool = False

    def __post_init__(self):
        if self.weighted and self.metric:
            raise ConflictingWeightSpecification(
                "Per-argument weights and a full metric are mutually exclusive."
            )

    @property
    def kind(self) -> str:
        if self.metric:
            return "metric"
        if self.weighted:
            return "weights"
        return "identity"


_TYPES: Dict[str, ReferenceOptions] = {
    "EUCLIDEAN": ReferenceOptions(),
    "NORM-EUCLIDEAN": ReferenceOptions(weighted=True),
    "MAHALANOBIS": ReferenceOptions(metric=True),
}


def get_options(name: str) -> ReferenceOptions:
    """Return the options for a named distance type (case-insensitive)."""
    try:
        return _TYPES[str(name).strip().upper()]
    except KeyError as e:
        raise ValueError(
            f"Unknown distance type {name!r}. Available: {tuple(_TYPES.keys())}"
        ) from e


AVAILABLE_TYPES = tuple(_TYPES.keys())
