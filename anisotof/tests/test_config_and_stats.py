import logging

import pytest

from anisotof.core.config import EikonalConfig
from anisotof.core.logging_utils import configure_logging, get_logger
from anisotof.core.stats import SolveStats, format_stats_table


def test_config_defaults():
    cfg = EikonalConfig()
    assert cfg.inf_value == 1e100
    assert cfg.front_pruning == 'count'
    assert cfg.locality_factor == 1.0
    assert cfg.validate_metric is False


@pytest.mark.parametrize('kwargs', [
    {'inf_value': 0.0},
    {'locality_factor': 0.5},
    {'front_pruning': 'lazy'},
])
def test_config_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        EikonalConfig(**kwargs)


def test_config_dict_round_trip_ignores_unknown_keys():
    cfg = EikonalConfig(front_pruning='scan', locality_factor=2.0)
    d = cfg.to_dict()
    d['unused_option'] = 1
    assert EikonalConfig.from_dict(d) == cfg


def test_stats_rates_and_table():
    stats = SolveStats(accepted=10, reevaluations=8, decrease_keys=2, time_total=0.5)
    d = stats.to_dict()
    assert d['decrease_rate'] == pytest.approx(0.25)
    assert d['time_per_accept'] == pytest.approx(0.05)
    table = format_stats_table(stats)
    assert 'accepted' in table and 'decrease_keys' in table
    assert format_stats_table(None) == "<no stats>"
    assert SolveStats().to_dict()['decrease_rate'] == 0.0


def test_logger_family_is_isolated():
    log = get_logger('anisotof.test')
    root = logging.getLogger('anisotof')
    assert log.level == logging.NOTSET
    assert root.propagate is False
    assert any(not isinstance(h, logging.NullHandler) for h in root.handlers)
    previous = root.level
    try:
        configure_logging('DEBUG')
        assert log.getEffectiveLevel() == logging.DEBUG
        configure_logging('not-a-level')
        assert root.level == logging.INFO
    finally:
        root.setLevel(previous)
