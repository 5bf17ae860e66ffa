"""Core math package for SE-SPS beam time estimation."""

from .models import DEFAULT_PARAMETERS, PARAMETER_LIMITS, RunEstimate, RunParameters
from .conversions import (
    ParameterError,
    clamp_parameters,
    parameters_from_mapping,
    validate_parameters,
)
from .engine import estimate
from .formatting import format_estimate
from .settings import SettingsError, dump_settings, load_settings, read_settings, save_settings

__all__ = [
    "DEFAULT_PARAMETERS",
    "PARAMETER_LIMITS",
    "RunEstimate",
    "RunParameters",
    "ParameterError",
    "SettingsError",
    "clamp_parameters",
    "parameters_from_mapping",
    "validate_parameters",
    "estimate",
    "format_estimate",
    "dump_settings",
    "load_settings",
    "read_settings",
    "save_settings",
]
