"""Domain models for beam time estimation."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Mapping, Tuple

I64_MAX = 2**63 - 1


@dataclass(frozen=True)
class RunParameters:
    """Experimental inputs in the units used on the spectrograph floor."""

    cross_section: float  # µb/sr
    target_density: float  # µg/cm^2
    target_molar_mass: float  # g/mol
    beam_current: float  # nA
    beam_charge_state: int  # proton number of the beam
    solid_angle: float  # msr
    desired_counts: int  # counts

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RunParameters":
        """Build from an exact mapping of all seven fields (no coercion)."""
        return cls(**{f.name: data[f.name] for f in fields(cls)})

    def replace(self, **changes: Any) -> "RunParameters":
        return replace(self, **changes)


@dataclass(frozen=True)
class RunEstimate:
    """Estimated beam-on-target time."""

    time_seconds: float
    time_hours: float
    time_days: float


FIELD_NAMES: Tuple[str, ...] = tuple(f.name for f in fields(RunParameters))
INTEGER_FIELDS: Tuple[str, ...] = ("beam_charge_state", "desired_counts")

DEFAULT_PARAMETERS = RunParameters(
    cross_section=100.0,
    target_density=100.0,
    target_molar_mass=240.0,
    beam_current=20.0,
    beam_charge_state=1,
    solid_angle=4.62,
    desired_counts=1000,
)

# Inclusive (min, max) ranges used by front ends for clamping
PARAMETER_LIMITS: Dict[str, Tuple[float, float]] = {
    "cross_section": (0.0, float("inf")),
    "target_density": (0.0, float("inf")),
    "target_molar_mass": (0.0, float("inf")),
    "beam_current": (0.0, float("inf")),
    "beam_charge_state": (1, 118),
    "solid_angle": (0.0, 12.8),  # SE-SPS maximum acceptance
    "desired_counts": (0, I64_MAX),
}
