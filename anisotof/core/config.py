"""Configuration objects for the anisotropic eikonal solver."""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Optional, Any, Dict

from .constants import INF_VALUE

FRONT_PRUNING_MODES = ('count', 'scan')


@dataclass
class EikonalConfig:
    """Solver options.

    Attributes
    ----------
    inf_value : float
        Sentinel written for cells never reached from the start cells.
    locality_factor : float
        Multiplier on the re-evaluation radius ``h_r * max(ratio_r, ratio_c)``
        used after each acceptance. Must be >= 1 so that direct neighbours of
        the accepted cell are always re-evaluated.
    front_pruning : str
        ``'count'`` keeps a per-cell count of non-accepted neighbours,
        ``'scan'`` re-scans the whole front after each acceptance.
    validate_metric : bool
        Check symmetry and positive definiteness of the metric before solving.
    record_order : bool
        Keep the acceptance order on the session.
    log_level : str, optional
        If set, applied to the 'anisotof' logger family on solver construction.
    """
    inf_value: float = INF_VALUE
    locality_factor: float = 1.0
    front_pruning: str = 'count'
    validate_metric: bool = False
    record_order: bool = True
    log_level: Optional[str] = None

    def __post_init__(self):
        if not self.inf_value > 0.0:
            raise ValueError(f"inf_value must be positive, got {self.inf_value!r}")
        if not self.locality_factor >= 1.0:
            raise ValueError(f"locality_factor must be >= 1, got {self.locality_factor!r}")
        if self.front_pruning not in FRONT_PRUNING_MODES:
            raise ValueError(
                f"Unknown front_pruning: {self.front_pruning!r} (expected one of {FRONT_PRUNING_MODES})")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'EikonalConfig':
        known = {k: v for k, v in values.items() if k in cls.__dataclass_fields__}
        return cls(**known)


__all__ = ['EikonalConfig', 'FRONT_PRUNING_MODES']
