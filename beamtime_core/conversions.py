"""Unit conversions and the boundary between raw input data and the models."""

from __future__ import annotations

import math
from typing import Any, Dict, Mapping, Optional

import numpy as np

from .constants import BARN_TO_MICROBARN, CM2_TO_BARN, MSR_TO_SR, NA, NA_TO_A, UG_TO_G
from .models import (
    DEFAULT_PARAMETERS,
    FIELD_NAMES,
    INTEGER_FIELDS,
    PARAMETER_LIMITS,
    RunParameters,
)

# Key names used by the original settings record
LEGACY_ALIASES: Dict[str, str] = {
    "z_beam": "beam_charge_state",
    "slit_settings": "solid_angle",
}


class ParameterError(ValueError):
    """Raised when raw data cannot be translated into run parameters."""


def msr_to_sr(solid_angle: float) -> float:
    return solid_angle * MSR_TO_SR


def ug_per_cm2_to_g_per_cm2(target_density: float) -> float:
    return target_density * UG_TO_G


def nanoamps_to_amps(beam_current: float) -> float:
    return beam_current * NA_TO_A


def target_areal_density(target_density: float, target_molar_mass: float) -> float:
    """Return the number of target nuclei per area, scaled for µb cross sections.

    Parameters
    ----------
    target_density : float
        Target areal density in µg/cm^2.
    target_molar_mass : float
        Molar mass of the target material in g/mol.

    Returns
    -------
    float
        ``(rho * NA / M) * 1e-24 * 1e-6`` where ``rho`` is in g/cm^2. The two
        trailing factors convert cm^2 to barn and barn to microbarn. A zero
        molar mass yields ``inf`` rather than raising.
    """
    density_g = np.float64(ug_per_cm2_to_g_per_cm2(target_density))
    with np.errstate(divide="ignore", invalid="ignore"):
        f_target = (density_g * NA) / np.float64(target_molar_mass) * CM2_TO_BARN * BARN_TO_MICROBARN
    return float(f_target)


def parameters_from_mapping(
    raw: Mapping[str, Any],
    defaults: RunParameters = DEFAULT_PARAMETERS,
) -> RunParameters:
    """Return :class:`RunParameters` built from a loosely typed mapping.

    Parameters
    ----------
    raw:
        Mapping such as a loaded YAML document or the text of form fields.
        Missing keys, ``None`` and blank strings fall back to ``defaults``.
        ``z_beam`` and ``slit_settings`` are accepted as aliases. Unknown keys
        (including persisted ``time_*`` outputs) are ignored. Integer fields
        outside :data:`PARAMETER_LIMITS` raise :class:`ParameterError`.
    defaults:
        Values used for absent fields.
    """

    # canonical names win over aliases
    normalized: Dict[str, Any] = {
        LEGACY_ALIASES[key]: value for key, value in raw.items() if key in LEGACY_ALIASES
    }
    normalized.update({key: value for key, value in raw.items() if key in FIELD_NAMES})

    values: Dict[str, Any] = {}
    for name in FIELD_NAMES:
        fallback = getattr(defaults, name)
        if name in INTEGER_FIELDS:
            parsed_int = _optional_int(normalized, name)
            if parsed_int is not None:
                low, high = PARAMETER_LIMITS[name]
                if not low <= parsed_int <= high:
                    raise ParameterError(f"{name}: {parsed_int} outside of [{low}, {high}].")
            values[name] = fallback if parsed_int is None else parsed_int
        else:
            parsed = _optional_float(normalized, name)
            values[name] = fallback if parsed is None else parsed
    return RunParameters(**values)


def clamp_parameters(params: RunParameters) -> RunParameters:
    """Clamp every field into :data:`PARAMETER_LIMITS`; NaN goes to the lower bound."""
    changes: Dict[str, Any] = {}
    for name, (low, high) in PARAMETER_LIMITS.items():
        value = getattr(params, name)
        if isinstance(value, float) and math.isnan(value):
            clamped = low
        else:
            clamped = min(max(value, low), high)
        if name in INTEGER_FIELDS:
            clamped = int(clamped)
        else:
            clamped = float(clamped)
        if clamped != value:
            changes[name] = clamped
    return params.replace(**changes) if changes else params


def validate_parameters(params: RunParameters) -> None:
    """Raise :class:`ParameterError` if any field lies outside its domain."""
    for name, (low, high) in PARAMETER_LIMITS.items():
        value = getattr(params, name)
        if name in INTEGER_FIELDS:
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ParameterError(f"{name}: expected an integer, got {value!r}.")
        elif not math.isfinite(value):
            raise ParameterError(f"{name}: value must be finite, got {value!r}.")
        if not low <= value <= high:
            raise ParameterError(f"{name}: {value!r} outside of [{low}, {high}].")
    if params.target_molar_mass <= 0:
        raise ParameterError("target_molar_mass: must be greater than zero.")


def _optional_float(raw: Mapping[str, Any], key: str) -> Optional[float]:
    value = raw.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise ParameterError(f"invalid numeric value for '{key}': {value!r}.")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ParameterError(f"invalid numeric value for '{key}': {value!r}.")


def _optional_int(raw: Mapping[str, Any], key: str) -> Optional[int]:
    value = raw.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise ParameterError(f"invalid integer value for '{key}': {value!r}.")
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    as_float = _optional_float(raw, key)
    if as_float is None or not as_float.is_integer():
        raise ParameterError(f"invalid integer value for '{key}': {value!r}.")
    return int(as_float)
