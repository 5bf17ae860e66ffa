"""Physical constants and unit scale factors.

The rounded values of the elementary charge and Avogadro's number are kept
as-is so that estimates match those quoted in existing run proposals.
"""

CHARGE = 1.6e-19  # Elementary charge in C
NA = 6.023e23  # Avogadro's number in 1/mol

MSR_TO_SR = 1e-3
UG_TO_G = 1e-6
NA_TO_A = 1e-9
CM2_TO_BARN = 1e-24
BARN_TO_MICROBARN = 1e-6

SECONDS_PER_HOUR = 3600.0
HOURS_PER_DAY = 24.0
