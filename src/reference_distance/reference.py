from __future__ import annotations

import math
from typing import Any, List, Mapping, MutableSequence, Optional, Sequence, Tuple, Union
from warnings import warn

import numpy as np

from .arguments import ArgumentTable
from .errors import ConfigurationError, MalformedParameterVector, MismatchedArguments, MissingParameter
from .metric import Diagonal, DistanceModel, Metric
from .options import ReferenceOptions, get_options
from .output import format_arguments
from .values import SupportsDifference, differences


# |r| below this multiple of eps * sum|terms| is rounding noise around zero
_ROUNDING_ULPS = 64.0


def _parse_names(raw: Any) -> Tuple[str, ...]:
    if isinstance(raw, str):
        parts = [p.strip() for p in raw.split(",")]
        return tuple(p for p in parts if p)
    return tuple(str(p) for p in raw)


def _require(record: Mapping[str, Any], key: str) -> float:
    try:
        raw = record[key]
    except KeyError as e:
        raise MissingParameter(key) from e
    try:
        return float(raw)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Parameter {key!r} is not a number: {raw!r}") from e


class ReferenceArguments:
    """A reference frame made of named scalar arguments.

    Holds the reference values, the mapping of each argument onto the
    runtime argument vector, and one distance model: unit weights,
    per-argument weights (Diagonal), or a full symmetric matrix (Metric).

    Typical use:
        ref = ReferenceArguments("MAHALANOBIS")
        ref.read_arguments(record)
        ref.align_against(runtime_names)
        r, grad = ref.evaluate(current, arguments)
    """

    def __init__(
        self,
        options: Union[ReferenceOptions, str, None] = None,
        *,
        weighted: bool = False,
        metric: bool = False,
    ):
        if options is None:
            options = ReferenceOptions(weighted=weighted, metric=metric)
        elif weighted or metric:
            raise TypeError("Pass either options or weighted=/metric= flags, not both.")
        elif isinstance(options, str):
            options = get_options(options)

        self.options: ReferenceOptions = options
        self._table = ArgumentTable()
        self._model: DistanceModel = Metric.identity(0) if options.metric else Diagonal.identity(0)
        self._packed: Optional[np.ndarray] = None
        self._dirty = True

    @staticmethod
    def from_record(
        record: Mapping[str, Any],
        options: Union[ReferenceOptions, str, None] = None,
        **flags: bool,
    ) -> "ReferenceArguments":
        """Construct a frame and configure it from `record` in one go."""
        ref = ReferenceArguments(options, **flags)
        ref.read_arguments(record)
        return ref

    # ---- read-only views ----
    @property
    def names(self) -> Tuple[str, ...]:
        return self._table.names

    @property
    def n_args(self) -> int:
        return len(self._table)

    @property
    def reference_values(self) -> np.ndarray:
        v = self._table.values.view()
        v.flags.writeable = False
        return v

    @property
    def der_index(self) -> np.ndarray:
        v = self._table.der_index.view()
        v.flags.writeable = False
        return v

    @property
    def model(self) -> DistanceModel:
        return self._model

    def _set_model(self, model: DistanceModel) -> None:
        self._model = model
        self._dirty = True

    # ---- configuration ----
    def read_arguments(self, record: Mapping[str, Any]) -> None:
        """Configure names, reference values and the model from a record.

        Keys: ARG (comma-separated or a sequence), one key per name for the
        reference value, then sigma_<name> (weights) or sigma_<a>_<b> for
        every pair a <= b in ARG order (metric).
        """
        try:
            names = _parse_names(record["ARG"])
        except KeyError as e:
            raise MissingParameter("ARG") from e

        values = [_require(record, n) for n in names]
        n = len(names)
        kind = self.options.kind
        if kind == "weights":
            model: DistanceModel = Diagonal(
                weights=[_require(record, "sigma_" + name) for name in names]
            )
        elif kind == "metric":
            packed = [
                _require(record, "sigma_" + names[i] + "_" + names[j])
                for i in range(n)
                for j in range(i, n)
            ]
            model = Metric(packed_values=packed, n=n)
        else:
            model = Diagonal.identity(n)

        self._table.reset(names)
        self._table.set_values(values)
        self._set_model(model)

    def set_argument_names(self, names: Sequence[str]) -> None:
        """Replace the argument list; values zeroed, model reset to identity."""
        self._table.reset(names)
        self._set_model(type(self._model).identity(len(self._table)))

    def set_reference_arguments(self, values: Sequence[float], sigma: Sequence[float]) -> None:
        """Overwrite reference values and rebuild the model from a flat vector.

        `sigma` uses the layout returned by `packed_view`.
        """
        n = self.n_args
        vals = np.array(values, dtype=float).reshape(-1)
        if vals.shape[0] != n:
            raise MalformedParameterVector(
                f"Reference value vector has {vals.shape[0]} entries; expected {n}."
            )
        model = self._model.from_packed(n, sigma)
        self._table.set_values(vals)
        self._set_model(model)

    def align_against(self, runtime_names: List[str], allow_reorder: bool = False) -> None:
        """Resolve where each argument sits in the shared runtime vector."""
        self._table.align_against(runtime_names, allow_reorder=allow_reorder)

    # ---- evaluation ----
    def evaluate(
        self,
        current: Sequence[float],
        arguments: Sequence[SupportsDifference],
        squared: bool = False,
        out: Optional[MutableSequence[float]] = None,
    ) -> Tuple[float, Any]:
        """Distance from the reference and its gradient w.r.t. runtime arguments.

        Parameters
        ----------
        current:
            Runtime argument values, indexed like the aligned runtime names.
        arguments:
            One object per runtime argument with `difference(reference, current)`.
        squared:
            If False, return sqrt(r) and rescale the gradient by 1/(2 sqrt(r)).
            A zero distance (including rounding noise around zero) gives a
            zero gradient. A negative form (indefinite metric, negative
            weight) gives NaN for the distance and the frame's gradient
            slots, with a RuntimeWarning.
        out:
            Optional gradient buffer: a float ndarray or any mutable sequence
            of floats (e.g. a list), written in place. Only slots in
            `der_index` are written. Integer or other non-float arrays raise
            TypeError.

        Returns
        -------
        (distance, gradient)
        """
        current = np.asarray(current, dtype=float).reshape(-1)
        idx = self._table.der_index
        if idx.size:
            top = int(idx.max())
            if top >= current.shape[0] or top >= len(arguments):
                raise MismatchedArguments(
                    f"Runtime vector has {current.shape[0]} values and "
                    f"{len(arguments)} arguments; frame needs position {top}."
                )

        if out is None:
            out = np.zeros(current.shape[0], dtype=float)
        else:
            if isinstance(out, np.ndarray) and not np.issubdtype(out.dtype, np.floating):
                raise TypeError(
                    f"Gradient buffer must have a float dtype; got {out.dtype}."
                )
            if not hasattr(out, "__setitem__"):
                raise TypeError(
                    f"Gradient buffer must be a mutable sequence; got {type(out).__name__}."
                )
            if idx.size and int(idx.max()) >= len(out):
                raise ValueError(
                    f"Gradient buffer of length {len(out)} is too short for this frame."
                )

        d = differences(arguments, self._table.values, current, idx)
        r, grad = self._model.distance(d)

        if not squared:
            tol = _ROUNDING_ULPS * np.finfo(float).eps * self._model.scale(d)
            if abs(r) <= tol:
                r = 0.0
            if r < 0.0:
                warn(
                    f"Negative squared distance {r!r}: the metric or weights are "
                    "not positive semi-definite; returning NaN.",
                    RuntimeWarning,
                    stacklevel=2,
                )
                r = math.nan
                grad = np.full_like(grad, math.nan)
            elif r > 0.0:
                r = math.sqrt(r)
                grad = grad / (2.0 * r)
            else:
                grad = np.zeros_like(grad)

        if isinstance(out, np.ndarray):
            out[idx] = grad
        else:
            for i, ik in enumerate(idx):
                out[int(ik)] = float(grad[i])
        return r, out

    # ---- packed parameters ----
    def packed_view(self) -> np.ndarray:
        """Weights (length N) or the metric's upper triangle (length N(N+1)/2).

        Read-only; regenerated after any change to the model.
        """
        if self._dirty or self._packed is None:
            self._packed = self._model.packed()
            self._dirty = False
        return self._packed

    # ---- output ----
    def format_arguments(self, fmt: str = "%f") -> str:
        return format_arguments(self.names, self._table.values, fmt)

    def print_arguments(self, stream: Any, fmt: str = "%f") -> None:
        """Write the REMARK record for this frame to a text stream."""
        stream.write(self.format_arguments(fmt))

    def __repr__(self) -> str:
        return (
            f"ReferenceArguments(kind={self.options.kind!r}, "
            f"names={self.names!r})"
        )
