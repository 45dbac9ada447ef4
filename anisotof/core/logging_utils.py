"""Logging utilities for anisotof.

Provides a consistent logger hierarchy and formatting without modifying the
process root logger. All anisotof code should obtain loggers via get_logger().
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, Union

_FORMAT = logging.Formatter('%(levelname)s %(name)s: %(message)s')


def _ensure_root() -> logging.Logger:
    """Ensure the 'anisotof' logger has a single stream handler and is isolated
    from the process root logger. Returns the 'anisotof' logger.
    """
    root = logging.getLogger('anisotof')
    # NullHandlers installed by the package __init__ would swallow records
    for h in list(root.handlers):
        if isinstance(h, logging.NullHandler):
            root.removeHandler(h)
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(_FORMAT)
        root.addHandler(handler)
    root.propagate = False
    return root


def _to_level(level: Union[str, int, None], default: int = logging.INFO) -> int:
    if level is None:
        return default
    if isinstance(level, int):
        return level
    value = getattr(logging, str(level).upper(), None)
    return value if isinstance(value, int) else default


def configure_logging(level: Union[str, int] = 'INFO') -> None:
    """Configure the 'anisotof' logger family level.

    This does NOT modify the process root logger.
    """
    root = _ensure_root()
    root.setLevel(_to_level(level))


def get_logger(name: str, level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Return a configured logger under the 'anisotof' namespace.

    Without an explicit level the logger is left at NOTSET so it inherits the
    level set on the 'anisotof' parent by configure_logging().
    """
    _ensure_root()
    log = logging.getLogger(name)
    if level is not None:
        log.setLevel(_to_level(level))
    else:
        log.setLevel(logging.NOTSET)
    return log


__all__ = ['get_logger', 'configure_logging']
