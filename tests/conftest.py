import pytest

from beamtime_core.models import DEFAULT_PARAMETERS, RunParameters


@pytest.fixture
def default_parameters() -> RunParameters:
    """SE-SPS defaults: 100 µb/sr on a 100 µg/cm^2 A=240 target, 20 nA protons at 4.62 msr."""
    return DEFAULT_PARAMETERS
