import math

import pytest

from beamtime_core.constants import CHARGE, NA
from beamtime_core.conversions import ParameterError
from beamtime_core.engine import estimate
from beamtime_core.models import RunEstimate, RunParameters


def _reference_seconds(p: RunParameters) -> float:
    slits_sr = p.solid_angle * 1e-3
    target_density = p.target_density * 1e-6
    beam_current = p.beam_current * 1e-9
    f_target = (target_density * NA) / p.target_molar_mass * 1e-24 * 1e-6
    return (p.beam_charge_state * CHARGE * p.desired_counts) / (p.cross_section * f_target * slits_sr * beam_current)


def test_default_scenario_is_pinned(default_parameters: RunParameters) -> None:
    result = estimate(default_parameters)

    assert result.time_seconds == pytest.approx(68999.57, rel=1e-6)
    assert result.time_hours == pytest.approx(19.16655, rel=1e-6)
    assert result.time_days == pytest.approx(0.7986063, rel=1e-6)


@pytest.mark.parametrize(
    "params",
    [
        RunParameters(100.0, 100.0, 240.0, 20.0, 1, 4.62, 1000),
        RunParameters(2.5, 35.0, 12.0, 150.0, 2, 12.8, 250),
        RunParameters(0.04, 1200.0, 208.0, 0.5, 6, 1.0, 10**7),
    ],
)
def test_estimate_matches_formula(params: RunParameters) -> None:
    result = estimate(params)

    assert math.isclose(result.time_seconds, _reference_seconds(params), rel_tol=1e-12)
    assert math.isfinite(result.time_seconds)
    assert result.time_seconds > 0


def test_hours_and_days_are_derived_from_seconds(default_parameters: RunParameters) -> None:
    result = estimate(default_parameters)

    assert result.time_hours == result.time_seconds / 3600
    assert result.time_days == result.time_hours / 24


def test_doubling_counts_doubles_time(default_parameters: RunParameters) -> None:
    base = estimate(default_parameters)
    doubled = estimate(default_parameters.replace(desired_counts=2 * default_parameters.desired_counts))

    assert doubled.time_seconds == 2 * base.time_seconds


def test_doubling_current_halves_time(default_parameters: RunParameters) -> None:
    base = estimate(default_parameters)
    doubled = estimate(default_parameters.replace(beam_current=2 * default_parameters.beam_current))

    assert doubled.time_seconds == base.time_seconds / 2


def test_charge_state_scales_time_linearly(default_parameters: RunParameters) -> None:
    base = estimate(default_parameters)
    carbon = estimate(default_parameters.replace(beam_charge_state=6))

    assert carbon.time_seconds == pytest.approx(6 * base.time_seconds)


@pytest.mark.parametrize("field", ["beam_current", "cross_section", "solid_angle"])
def test_zero_denominator_gives_infinity(default_parameters: RunParameters, field: str) -> None:
    result = estimate(default_parameters.replace(**{field: 0.0}))

    assert result.time_seconds == math.inf
    assert result.time_hours == math.inf
    assert result.time_days == math.inf


def test_zero_counts_over_zero_current_is_nan(default_parameters: RunParameters) -> None:
    result = estimate(default_parameters.replace(beam_current=0.0, desired_counts=0))

    assert math.isnan(result.time_seconds)
    assert math.isnan(result.time_days)


def test_zero_counts_gives_zero_time(default_parameters: RunParameters) -> None:
    result = estimate(default_parameters.replace(desired_counts=0))

    assert result == RunEstimate(0.0, 0.0, 0.0)


def test_zero_molar_mass_propagates_without_raising(default_parameters: RunParameters) -> None:
    # infinite areal density drives the time to zero; no error path
    result = estimate(default_parameters.replace(target_molar_mass=0.0))

    assert result.time_seconds == 0.0


def test_validate_flag_rejects_zero_molar_mass(default_parameters: RunParameters) -> None:
    with pytest.raises(ParameterError):
        estimate(default_parameters.replace(target_molar_mass=0.0), validate=True)


def test_validate_flag_accepts_valid_input(default_parameters: RunParameters) -> None:
    assert estimate(default_parameters, validate=True) == estimate(default_parameters)


def test_unit_conversions_are_applied(default_parameters: RunParameters) -> None:
    pre_converted = default_parameters.replace(
        target_density=default_parameters.target_density * 1e-6,
        solid_angle=default_parameters.solid_angle * 1e-3,
    )
    base = estimate(default_parameters)
    converted_twice = estimate(pre_converted)

    assert not math.isclose(base.time_seconds, converted_twice.time_seconds)
    assert converted_twice.time_seconds == pytest.approx(base.time_seconds * 1e9)


def test_estimate_is_deterministic(default_parameters: RunParameters) -> None:
    assert estimate(default_parameters) == estimate(default_parameters)


def test_counts_beyond_double_range_give_infinity(default_parameters: RunParameters) -> None:
    result = estimate(default_parameters.replace(desired_counts=10**400))

    assert result.time_seconds == math.inf
    assert result.time_days == math.inf
