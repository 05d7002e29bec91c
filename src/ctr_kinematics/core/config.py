"""Library-wide defaults for tube materials and the torsion solver."""

# Nitinol sits between 0.30 and 0.55
DEFAULT_POISSON_RATIO = 0.40

DEFAULT_MAX_ITERATIONS = 50
DEFAULT_TOLERANCE = 1e-10

# Overlap status codes shared by segmentation, superposition and arc building
STRAIGHT = 0
CURVED = 1
ABSENT = -1
