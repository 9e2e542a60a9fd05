#!/usr/bin/env python3
"""
Target Calculator

Four-tier recognition targets derived from a base value, the tier a current
value has reached, and the district performance targets built on them.

Targets use a plain math.ceil of the float product. A product that lands a
hair above an integer because of binary rounding (100 * 0.55) rounds up to
the next integer.
"""

import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from clubperf.analytics.config import ensure_config
from clubperf.analytics.membership import get_total_membership, get_total_payments
from clubperf.analytics.recognition import calculate_area_recognition
from clubperf.analytics.utils_stats import safe_ratio

logger = logging.getLogger(__name__)

# Achieved-level keys, lowest tier first
TARGET_LEVELS: List[str] = ['distinguished', 'select', 'presidents', 'smedley']

GROWTH_PERCENTAGES: Dict[str, float] = {
    'distinguished': 0.01,
    'select': 0.03,
    'presidents': 0.05,
    'smedley': 0.08,
}

DISTINGUISHED_PERCENTAGES: Dict[str, float] = {
    'distinguished': 0.45,
    'select': 0.50,
    'presidents': 0.55,
    'smedley': 0.60,
}


def calculate_growth_targets(base: float) -> Dict[str, int]:
    """
    Targets for growth metrics: ceil(base * (1 + pct)) per tier.

    Example:
        >>> calculate_growth_targets(100)
        {'distinguished': 101, 'select': 103, 'presidents': 105, 'smedley': 108}
    """
    return {level: math.ceil(base * (1 + GROWTH_PERCENTAGES[level])) for level in TARGET_LEVELS}


def calculate_percentage_targets(base: float) -> Dict[str, int]:
    """
    Targets for share-of-base metrics: ceil(base * pct) per tier.

    Example:
        >>> calculate_percentage_targets(95)
        {'distinguished': 43, 'select': 48, 'presidents': 53, 'smedley': 57}
    """
    return {level: math.ceil(base * DISTINGUISHED_PERCENTAGES[level]) for level in TARGET_LEVELS}


def determine_achieved_level(current: float, targets: Optional[Dict[str, int]]) -> Optional[str]:
    """
    Highest tier whose target the current value reaches.

    Args:
        current: Current metric value
        targets: Target table, or None when no base was available

    Returns:
        Tier key, or None when nothing is reached or targets is None
    """
    if targets is None:
        return None
    for level in reversed(TARGET_LEVELS):
        if current >= targets[level]:
            return level
    return None


def build_recognition_target(current: float, base: Optional[float], percentage_based: bool = False) -> Dict[str, Any]:
    """
    Current value, base, targets and achieved level for one metric.

    A missing or non-positive base yields targets and achieved_level None.
    """
    if base is None or base <= 0:
        return {'current': current, 'base': base, 'targets': None, 'achieved_level': None}

    targets = calculate_percentage_targets(base) if percentage_based else calculate_growth_targets(base)
    return {
        'current': current,
        'base': base,
        'targets': targets,
        'achieved_level': determine_achieved_level(current, targets),
    }


def _paid_and_distinguished(snapshot: Dict[str, Any], config: Optional[Dict[str, Any]]) -> Tuple[int, int]:
    areas = calculate_area_recognition(snapshot, config)
    return sum(a['paid_clubs'] for a in areas), sum(a['distinguished_clubs'] for a in areas)


def calculate_recognition_targets(snapshots: List[Dict[str, Any]],
                                  config: Optional[Dict[str, Any]] = None) -> Dict[str, Dict[str, Any]]:
    """
    Recognition targets for paid clubs, membership payments and
    distinguished clubs.

    Bases come from the earliest snapshot, current values from the latest.
    Paid clubs and payments use growth targets; distinguished clubs use
    percentage targets of the paid club base.
    """
    if not snapshots:
        return {
            'paid_clubs': build_recognition_target(0, None),
            'membership_payments': build_recognition_target(0, None),
            'distinguished_clubs': build_recognition_target(0, None, percentage_based=True),
        }

    base_paid, _ = _paid_and_distinguished(snapshots[0], config)
    current_paid, current_distinguished = _paid_and_distinguished(snapshots[-1], config)

    return {
        'paid_clubs': build_recognition_target(current_paid, base_paid),
        'membership_payments': build_recognition_target(
            get_total_payments(snapshots[-1]), get_total_payments(snapshots[0])
        ),
        'distinguished_clubs': build_recognition_target(
            current_distinguished, base_paid, percentage_based=True
        ),
    }


def compute_performance_targets(district_id: str, snapshots: List[Dict[str, Any]],
                                config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    District membership, distinguished and club growth targets with progress.

    - membership target: ceil(base membership * (1 + MEMBERSHIP_GROWTH_RATE))
    - distinguished target: ceil(paid clubs * DISTINGUISHED_CLUB_RATE)
    - club growth target: max(1, ceil(base clubs * CLUB_GROWTH_RATE))

    An achievement is projected when progress toward its target reaches
    PROJECTED_ACHIEVEMENT_PROGRESS.

    Args:
        district_id: District identifier
        snapshots: Snapshots sorted ascending by date
        config: Optional analytics config

    Returns:
        Performance targets dict
    """
    config = ensure_config(config)

    if not snapshots:
        return {
            'district_id': district_id,
            'membership_target': 0,
            'distinguished_target': 0,
            'club_growth_target': 0,
            'current_progress': {'membership': 0, 'distinguished': 0, 'club_growth': 0},
            'projected_achievement': {'membership': False, 'distinguished': False, 'club_growth': False},
            'recognition_targets': calculate_recognition_targets([], config),
        }

    base, latest = snapshots[0], snapshots[-1]

    current_membership = get_total_membership(latest)
    membership_target = math.ceil(get_total_membership(base) * (1 + config['MEMBERSHIP_GROWTH_RATE']))

    paid_clubs, current_distinguished = _paid_and_distinguished(latest, config)
    distinguished_target = math.ceil(paid_clubs * config['DISTINGUISHED_CLUB_RATE'])

    base_club_count = len(base['clubs'])
    club_growth = len(latest['clubs']) - base_club_count
    club_growth_target = max(1, math.ceil(base_club_count * config['CLUB_GROWTH_RATE']))

    threshold = config['PROJECTED_ACHIEVEMENT_PROGRESS']
    membership_progress = safe_ratio(current_membership, membership_target)
    distinguished_progress = safe_ratio(current_distinguished, distinguished_target)
    club_growth_progress = club_growth / club_growth_target

    logger.info(
        f"District {district_id} targets: membership {membership_target}, "
        f"distinguished {distinguished_target}, club growth {club_growth_target}"
    )
    return {
        'district_id': district_id,
        'membership_target': membership_target,
        'distinguished_target': distinguished_target,
        'club_growth_target': club_growth_target,
        'current_progress': {
            'membership': current_membership,
            'distinguished': current_distinguished,
            'club_growth': club_growth,
        },
        'projected_achievement': {
            'membership': membership_progress >= threshold,
            'distinguished': distinguished_progress >= threshold,
            'club_growth': club_growth_progress >= threshold,
        },
        'recognition_targets': calculate_recognition_targets(snapshots, config),
    }
