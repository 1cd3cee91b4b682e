"""reference_distance public API."""
from .arguments import ArgumentTable
from .errors import (
    ConfigurationError,
    ConflictingWeightSpecification,
    MalformedParameterVector,
    MismatchedArguments,
    MissingParameter,
)
from .metric import Diagonal, DistanceModel, Metric
from .options import AVAILABLE_TYPES, ReferenceOptions, get_options
from .output import format_arguments
from .reference import ReferenceArguments
from .values import Argument, arguments_for

__all__ = [
    "ReferenceArguments",
    "ArgumentTable",
    "Diagonal",
    "Metric",
    "DistanceModel",
    "ReferenceOptions",
    "get_options",
    "AVAILABLE_TYPES",
    "Argument",
    "arguments_for",
    "format_arguments",
    "ConfigurationError",
    "ConflictingWeightSpecification",
    "MissingParameter",
    "MismatchedArguments",
    "MalformedParameterVector",
]
