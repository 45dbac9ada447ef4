"""Central sentinels and numerical tolerances.

Keeps the tiny thresholds used by the grid utilities and the local update
formulas in one place so they can be tuned consistently.
"""
from __future__ import annotations

# Arrival-time sentinel for cells that were never reached
INF_VALUE: float = 1e100

# Geometry tolerances
EPS_AREA: float = 1e-12        # minimum positive polygon area for centroid weighting
EPS_SECTOR: float = 1e-12      # relative cross-product floor for a proper update sector
EPS_TINY: float = 1e-15        # guards divisions in the triangle update
EPS_RADIUS: float = 1e-9       # relative slack on the re-evaluation radius

# Metric tolerances
EPS_EIG: float = 1e-16         # eigenvalue floor used for SPD square roots and ratios

__all__ = [
    'INF_VALUE',
    'EPS_AREA',
    'EPS_SECTOR',
    'EPS_TINY',
    'EPS_RADIUS',
    'EPS_EIG',
]
