from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Tuple, Union

import numpy as np

from .errors import ConfigurationError, MalformedParameterVector


__all__ = ["Diagonal", "Metric", "DistanceModel", "triangle_length"]


def triangle_length(n: int) -> int:
    """Number of (i, j>=i) pairs for n arguments."""
    n = int(n)
    return n * (n + 1) // 2


def _as_vector(values: Any, expected: int, what: str) -> np.ndarray:
    arr = np.array(values, dtype=float).reshape(-1)
    if arr.shape[0] != expected:
        raise MalformedParameterVector(
            f"{what} has {arr.shape[0]} entries; expected {expected}."
        )
    return arr


@dataclass(frozen=True, eq=False)
class Diagonal:
    """One independent weight per argument: r = sum_i w_i d_i^2."""

    weights: np.ndarray

    def __post_init__(self):
        w = np.array(self.weights, dtype=float).reshape(-1)
        w.flags.writeable = False
        object.__setattr__(self, "weights", w)

    @staticmethod
    def identity(n: int) -> "Diagonal":
        return Diagonal(weights=np.ones(int(n), dtype=float))

    @property
    def size(self) -> int:
        return int(self.weights.shape[0])

    @staticmethod
    def packed_length(n: int) -> int:
        return int(n)

    def packed(self) -> np.ndarray:
        """Weights, verbatim."""
        return self.weights

    def from_packed(self, n: int, sigma: Any) -> "Diagonal":
        return Diagonal(weights=_as_vector(sigma, self.packed_length(n), "Weight vector"))

    def distance(self, d: np.ndarray) -> Tuple[float, np.ndarray]:
        """Return (r, dr/dd) for a difference vector ordered like the weights."""
        d = np.asarray(d, dtype=float)
        r = float(np.sum(self.weights * d * d))
        return r, 2.0 * self.weights * d

    def scale(self, d: np.ndarray) -> float:
        """Sum of the absolute terms of the form; bounds its rounding error."""
        d = np.asarray(d, dtype=float)
        return float(np.sum(np.abs(self.weights) * d * d))


@dataclass(frozen=True, eq=False)
class Metric:
    """Full symmetric matrix stored as its packed upper triangle.

    `packed_values` holds matrix(i, j) for i <= j in row-major order, so the
    layout of the flat parameter vector and the storage coincide.
    """

    packed_values: np.ndarray
    n: int
    _dense: np.ndarray = field(init=False, repr=False)

    def __post_init__(self):
        n = int(self.n)
        p = _as_vector(self.packed_values, triangle_length(n), "Metric vector")
        p.flags.writeable = False
        object.__setattr__(self, "n", n)
        object.__setattr__(self, "packed_values", p)
        m = np.zeros((n, n), dtype=float)
        iu = np.triu_indices(n)
        m[iu] = p
        m[(iu[1], iu[0])] = p
        m.flags.writeable = False
        object.__setattr__(self, "_dense", m)

    @staticmethod
    def identity(n: int) -> "Metric":
        return Metric.from_dense(np.eye(int(n)))

    @staticmethod
    def from_dense(matrix: Any, *, atol: float = 1e-12) -> "Metric":
        """Build from a full matrix, which must be square and symmetric."""
        m = np.asarray(matrix, dtype=float)
        if m.ndim != 2 or m.shape[0] != m.shape[1]:
            raise ConfigurationError(f"Metric must be a square matrix; got shape {m.shape}.")
        if not np.allclose(m, m.T, rtol=0.0, atol=atol):
            raise ConfigurationError("Metric matrix must be symmetric.")
        iu = np.triu_indices(m.shape[0])
        return Metric(packed_values=m[iu], n=m.shape[0])

    @property
    def size(self) -> int:
        return self.n

    @staticmethod
    def packed_length(n: int) -> int:
        return triangle_length(n)

    def packed(self) -> np.ndarray:
        """Upper triangle in (i, j>=i) order; this is the storage itself."""
        return self.packed_values

    def from_packed(self, n: int, sigma: Any) -> "Metric":
        return Metric(
            packed_values=_as_vector(sigma, self.packed_length(n), "Metric vector"),
            n=n,
        )

    def _index(self, i: int, j: int) -> int:
        if i > j:
            i, j = j, i
        if i < 0 or j >= self.n:
            raise IndexError((i, j))
        return i * self.n - i * (i - 1) // 2 + (j - i)

    def get(self, i: int, j: int) -> float:
        """Symmetric accessor: get(i, j) == get(j, i)."""
        return float(self.packed_values[self._index(int(i), int(j))])

    def dense(self) -> np.ndarray:
        """Full symmetric matrix (read-only, built once)."""
        return self._dense

    def distance(self, d: np.ndarray) -> Tuple[float, np.ndarray]:
        """Return (d.M.d, M.d).

        Unlike Diagonal.distance, the gradient carries no factor of two.
        """
        d = np.asarray(d, dtype=float)
        md = self._dense @ d
        return float(d @ md), md

    def scale(self, d: np.ndarray) -> float:
        """Sum of the absolute terms of the form; bounds its rounding error."""
        a = np.abs(np.asarray(d, dtype=float))
        return float(a @ np.abs(self._dense) @ a)


DistanceModel = Union[Diagonal, Metric]
