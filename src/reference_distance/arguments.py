from __future__ import annotations

from typing import List, Sequence, Tuple
from warnings import warn

import numpy as np

from .errors import MismatchedArguments


class ArgumentTable:
    """Ordered argument names, their reference values, and where each one
    lives in the runtime argument vector.

    `der_index[i]` is the runtime position of `names[i]`. It starts as the
    identity and is rewritten by `align_against`.
    """

    def __init__(self, names: Sequence[str] = ()):
        self.reset(names)

    def reset(self, names: Sequence[str]) -> None:
        """Structural reset: new names, zero values, identity der_index."""
        names = tuple(str(n) for n in names)
        if len(set(names)) != len(names):
            warn(
                f"Duplicate argument names in {names!r}; alignment resolves "
                "only the first occurrence.",
                UserWarning,
                stacklevel=3,
            )
        self.names: Tuple[str, ...] = names
        self.values = np.zeros(len(names), dtype=float)
        self.der_index = np.arange(len(names), dtype=int)

    def __len__(self) -> int:
        return len(self.names)

    def set_values(self, values: Sequence[float]) -> None:
        arr = np.array(values, dtype=float).reshape(-1)
        if arr.shape[0] != len(self.names):
            raise ValueError(
                f"Expected {len(self.names)} reference values; got {arr.shape[0]}."
            )
        self.values = arr

    def align_against(self, runtime_names: List[str], allow_reorder: bool = False) -> None:
        """Map every local name to a position in `runtime_names`.

        - empty runtime list: filled with our names, identity mapping
        - strict (allow_reorder=False): must match length and order exactly
        - flexible: look each name up, append it when missing

        `runtime_names` is modified in place in the empty and flexible cases.
        """
        n = len(self.names)
        if len(runtime_names) == 0:
            runtime_names.extend(self.names)
            self.der_index = np.arange(n, dtype=int)
            return

        if not allow_reorder:
            if len(runtime_names) != n:
                raise MismatchedArguments(
                    f"Mismatched numbers of arguments in reference frames: "
                    f"{len(runtime_names)} requested, {n} in this frame."
                )
            for i, name in enumerate(self.names):
                if runtime_names[i] != name:
                    raise MismatchedArguments(
                        f"Found mismatched arguments in reference frames: "
                        f"{runtime_names[i]!r} at position {i}, expected {name!r}."
                    )
            self.der_index = np.arange(n, dtype=int)
            return

        der_index = np.empty(n, dtype=int)
        for i, name in enumerate(self.names):
            try:
                der_index[i] = runtime_names.index(name)
            except ValueError:
                der_index[i] = len(runtime_names)
                runtime_names.append(name)
        self.der_index = der_index
