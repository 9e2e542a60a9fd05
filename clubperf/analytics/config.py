#!/usr/bin/env python3
"""
Analytics Configuration

Loads the YAML configuration used by the analytics engine and overlays it on
the built-in defaults, so callers always receive a complete config dict.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "analytics_config.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    'INTERVENTION_MEMBERSHIP': 12,
    'INTERVENTION_NET_GROWTH': 3,
    'THRIVING_MEMBERSHIP': 20,
    'THRIVING_NET_GROWTH': 3,
    'DCP_CHECKPOINTS': {
        7: 0, 8: 1, 9: 1, 10: 2, 11: 2, 12: 3,
        1: 3, 2: 4, 3: 4, 4: 5, 5: 5, 6: 5,
    },
    'CSP_REQUIRED_FROM': None,
    'TOP_AREAS_LIMIT': 10,
    'TREND_IMPROVING_RATIO': 1.1,
    'TREND_DECLINING_RATIO': 0.9,
    'LEADERSHIP_WEIGHTS': {'health': 0.4, 'growth': 0.3, 'dcp': 0.3},
    'BEST_PRACTICE_SCORE': 75,
    'BEST_PRACTICE_PERCENTILE': 0.2,
    'CONSISTENCY_DROP_RATIO': 0.7,
    'LEADERSHIP_CHANGE_RATIO': 0.2,
    'LEADERSHIP_SUMMARY_LIMIT': 5,
    'UNPAID_CLUB_STATUSES': ['suspended'],
    'DAP_PAID_CLUBS_PERCENT': 75,
    'DDP_PAID_AREAS_PERCENT': 85,
    'RECOGNITION_DISTINGUISHED_PERCENT': 50,
    'RECOGNITION_SELECT_PERCENT': 75,
    'RECOGNITION_PRESIDENTS_PERCENT': 100,
    'MEMBERSHIP_GROWTH_RATE': 0.05,
    'DISTINGUISHED_CLUB_RATE': 0.5,
    'CLUB_GROWTH_RATE': 0.02,
    'PROJECTED_ACHIEVEMENT_PROGRESS': 0.8,
    'TOP_CLUBS_LIMIT': 10,
    'MULTI_YEAR_LOOKBACK': 5,
    'VALIDATE_SNAPSHOTS': False,
}


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load analytics configuration from YAML.

    Args:
        path: Config file path (default: bundled analytics_config.yaml)

    Returns:
        Config dict with every key of DEFAULT_CONFIG present

    Raises:
        FileNotFoundError: If the config file does not exist
        ValueError: If the file does not contain a mapping
    """
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        loaded = yaml.safe_load(f) or {}

    if not isinstance(loaded, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    unknown = sorted(set(loaded) - set(DEFAULT_CONFIG))
    if unknown:
        logger.warning(f"Ignoring unknown config keys: {unknown}")

    config = resolve_config(loaded)
    logger.info(f"Loaded analytics config from {config_path}")
    return config


def resolve_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return DEFAULT_CONFIG with known keys from overrides applied."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    if not overrides:
        return config

    for key, value in overrides.items():
        if key not in DEFAULT_CONFIG:
            continue
        if key == 'DCP_CHECKPOINTS' and value is not None:
            value = {int(month): int(goals) for month, goals in value.items()}
        if key == 'CSP_REQUIRED_FROM' and value is not None:
            # YAML parses bare dates into datetime.date
            value = str(value)
        config[key] = value

    return config


def ensure_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Complete config for functions that take an optional config.

    A config already carrying every default key is used as given; anything
    else, including a partial override dict, goes through resolve_config.
    """
    if config is not None and all(key in config for key in DEFAULT_CONFIG):
        return config
    return resolve_config(config)
