from __future__ import annotations

from typing import Sequence

from .errors import ConfigurationError


def _field_template(fmt: str) -> str:
    """Template for one `name=value ` field, left-justified unless fmt says otherwise."""
    if "-" in fmt:
        return "%s=" + fmt + " "
    psign = fmt.find("%")
    if psign < 0:
        raise ConfigurationError(f"Number format {fmt!r} has no %-style placeholder.")
    # keep numbers next to the equals sign
    return "%s=%-" + fmt[psign + 1 :] + " "


def format_arguments(names: Sequence[str], values: Sequence[float], fmt: str = "%f") -> str:
    """Return the two REMARK lines describing a frame's arguments.

    REMARK ARG=x,y
    REMARK x=1.000000 y=2.000000
    """
    if len(names) != len(values):
        raise ValueError("names and values must have the same length.")
    field = _field_template(fmt)
    head = "REMARK ARG=" + ",".join(names) + "\n"
    body = "REMARK " + "".join(field % (n, float(v)) for n, v in zip(names, values)) + "\n"
    return head + body
