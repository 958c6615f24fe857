"""Physical constants in SI units."""

# Boltzmann constant (J/K)
K_BOLTZMANN = 1.380649e-23

# Typical interatomic spacing used for time step heuristics (m)
ANGSTROM = 1e-10

# Default arena budgets (bytes)
DEFAULT_PARTICLE_BUDGET = 1024 * 1024 * 1024
DEFAULT_FIELD_BUDGET = 256 * 1024 * 1024
