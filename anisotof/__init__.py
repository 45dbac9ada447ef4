"""Public package API for anisotof.

Time-of-flight fields on unstructured 2-D grids under an anisotropic metric,
computed with the Ordered Upwind Method. This facade provides a flat import
surface on top of the internal implementation package ``anisotof.core``.

Example
-------
    from anisotof import cartesian_grid, identity_metric, AnisotropicEikonal2D

    grid = cartesian_grid(20, 20)
    tof = AnisotropicEikonal2D(grid).solve(identity_metric(grid.number_of_cells), [0])
"""
import logging as _logging

try:  # runtime version export
    from importlib.metadata import version as _pkg_version
    __version__ = _pkg_version("anisotof")  # populated when installed
except Exception:  # pragma: no cover - editable / unknown state
    __version__ = "0.0.0+dev"

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

from .core import constants, grid, metric  # noqa: E402
from .core.config import EikonalConfig  # noqa: E402
from .core.considered import ConsideredQueue  # noqa: E402
from .core.constants import INF_VALUE  # noqa: E402
from .core.eikonal import AnisotropicEikonal2D, SolveSession, solve_eikonal  # noqa: E402
from .core.front import AcceptedFront  # noqa: E402
from .core.grid import (  # noqa: E402
    UnstructuredGrid2D, cartesian_grid, grid_from_triangles, delaunay_grid,
    vertex_neighbours, order_counter_clockwise,
)
from .core.local_update import LocalUpdateSolver, line_update, triangle_update  # noqa: E402
from .core.logging_utils import configure_logging, get_logger  # noqa: E402
from .core.metric import (  # noqa: E402
    identity_metric, scaled_metric, rotated_metric, anisotropy_ratios,
)
from .core.stats import SolveStats, format_stats_table  # noqa: E402

__all__ = [
    '__version__',
    # solver
    'AnisotropicEikonal2D', 'SolveSession', 'solve_eikonal', 'EikonalConfig',
    # building blocks
    'ConsideredQueue', 'AcceptedFront', 'LocalUpdateSolver', 'line_update', 'triangle_update',
    # grids
    'UnstructuredGrid2D', 'cartesian_grid', 'grid_from_triangles', 'delaunay_grid',
    'vertex_neighbours', 'order_counter_clockwise',
    # metrics
    'identity_metric', 'scaled_metric', 'rotated_metric', 'anisotropy_ratios',
    # diagnostics
    'SolveStats', 'format_stats_table', 'configure_logging', 'get_logger',
    'INF_VALUE',
    # submodules
    'constants', 'grid', 'metric',
]
