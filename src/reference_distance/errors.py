from __future__ import annotations


__all__ = [
    "ConfigurationError",
    "ConflictingWeightSpecification",
    "MissingParameter",
    "MismatchedArguments",
    "MalformedParameterVector",
]


class ConfigurationError(ValueError):
    """A reference frame could not be configured from the inputs given."""


class ConflictingWeightSpecification(ConfigurationError):
    """Per-argument weights and a full metric were both requested."""


class MissingParameter(ConfigurationError):
    """A required value, weight or metric entry is absent from the record."""

    def __init__(self, key: str):
        super().__init__(f"Missing required parameter {key!r} in reference record.")
        self.key = key


class MismatchedArguments(ValueError):
    """Runtime arguments disagree with a frame under strict alignment."""


class MalformedParameterVector(ValueError):
    """A flat weight/metric vector has the wrong length for the frame."""
