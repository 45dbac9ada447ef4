"""Per-solve statistics and presentation utilities."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Any


@dataclass
class SolveStats:
    accepted: int = 0
    pushes: int = 0
    decrease_keys: int = 0
    reevaluations: int = 0
    tri_updates: int = 0
    line_updates: int = 0
    front_max: int = 0
    unreachable: int = 0
    # Timing (seconds)
    time_total: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'accepted': self.accepted,
            'pushes': self.pushes,
            'decrease_keys': self.decrease_keys,
            'reevaluations': self.reevaluations,
            'tri_updates': self.tri_updates,
            'line_updates': self.line_updates,
            'front_max': self.front_max,
            'unreachable': self.unreachable,
            'decrease_rate': (self.decrease_keys / self.reevaluations) if self.reevaluations else 0.0,
            'time_total': self.time_total,
            'time_per_accept': (self.time_total / self.accepted) if self.accepted else 0.0,
        }


def format_stats_table(stats) -> str:
    """Return a human readable two-column table for a SolveStats or its dict."""
    if stats is None:
        return "<no stats>"
    d = stats.to_dict() if isinstance(stats, SolveStats) else dict(stats)
    if not d:
        return "<no stats>"
    rows = []
    for key, value in d.items():
        if isinstance(value, float):
            if key.startswith('time'):
                rows.append((key, f"{value * 1000.0:.3f} ms"))
            else:
                rows.append((key, f"{value:.4f}"))
        else:
            rows.append((key, str(value)))
    kw = max(len(k) for k, _ in rows)
    vw = max(len(v) for _, v in rows)
    lines = [f"{'stat'.ljust(kw)} {'value'.rjust(vw)}", "-" * (kw + vw + 1)]
    lines += [f"{k.ljust(kw)} {v.rjust(vw)}" for k, v in rows]
    return "\n".join(lines)


__all__ = ['SolveStats', 'format_stats_table']
