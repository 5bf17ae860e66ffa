"""Pure math routine for beam time estimation."""

from __future__ import annotations

import math

import numpy as np

from .constants import CHARGE, HOURS_PER_DAY, SECONDS_PER_HOUR
from .conversions import (
    msr_to_sr,
    nanoamps_to_amps,
    target_areal_density,
    validate_parameters,
)
from .models import RunEstimate, RunParameters


def _count_as_float(value: int) -> float:
    # integers past the double range saturate like any other overflow
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def estimate(params: RunParameters, *, validate: bool = False) -> RunEstimate:
    """Return the beam-on-target time needed to collect ``desired_counts``.

    Inverts ``rate = sigma * N_target * dOmega * I / (q * e)`` for the time.
    Zero denominators propagate as ``inf`` (or ``nan`` for 0/0) instead of
    raising; callers decide how to show them. ``validate=True`` checks the
    parameter domains first and raises ``ParameterError`` on violations.
    """

    if validate:
        validate_parameters(params)

    solid_angle_sr = msr_to_sr(params.solid_angle)
    beam_current_a = nanoamps_to_amps(params.beam_current)
    f_target = target_areal_density(params.target_density, params.target_molar_mass)

    with np.errstate(divide="ignore", invalid="ignore"):
        charge_state = np.float64(_count_as_float(params.beam_charge_state))
        numerator = charge_state * CHARGE * _count_as_float(params.desired_counts)
        denominator = np.float64(params.cross_section) * f_target * solid_angle_sr * beam_current_a
        time_s = float(numerator / denominator)

    time_h = time_s / SECONDS_PER_HOUR
    time_d = time_h / HOURS_PER_DAY
    return RunEstimate(time_seconds=time_s, time_hours=time_h, time_days=time_d)
