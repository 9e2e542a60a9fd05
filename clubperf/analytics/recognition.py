#!/usr/bin/env python3
"""
Area and Division Recognition

Distinguished Area Program (DAP) and Distinguished Division Program (DDP)
standing computed from the latest snapshot.

Areas qualify on the share of paid clubs and the share of paid clubs that
are distinguished; divisions apply the same rules one level up, over areas.
Club visit data is not in the exports, so eligibility is always 'unknown'.
"""

import logging
from typing import Any, Dict, List, Optional

from clubperf.analytics.config import ensure_config
from clubperf.analytics.eligibility import NOT_DISTINGUISHED, club_recognition_tier, is_csp_submitted
from clubperf.analytics.utils_stats import safe_ratio

logger = logging.getLogger(__name__)

# Area and division recognition levels, lowest first
LEVEL_NOT_DISTINGUISHED = 'NotDistinguished'
LEVEL_DISTINGUISHED = 'Distinguished'
LEVEL_SELECT = 'Select'
LEVEL_PRESIDENTS = 'Presidents'

AREA_ELIGIBILITY_REASON = "Club visit data not available from dashboard exports"
DIVISION_ELIGIBILITY_REASON = "Area club visit completion data not available from dashboard exports"


def is_paid_club(club: Dict[str, Any], config: Optional[Dict[str, Any]] = None) -> bool:
    """A club is paid unless its status is one of the configured unpaid statuses."""
    unpaid = {status.lower() for status in ensure_config(config)['UNPAID_CLUB_STATUSES']}
    status = club.get('club_status') or club.get('status') or ''
    return status.strip().lower() not in unpaid


def _percent(part: int, whole: int) -> float:
    return safe_ratio(part, whole) * 100


def determine_recognition_level(meets_paid_threshold: bool, distinguished_percent: float,
                                config: Optional[Dict[str, Any]] = None) -> str:
    """
    Recognition level from the paid gate and the distinguished share.

    Args:
        meets_paid_threshold: Whether the paid share reached its threshold
        distinguished_percent: Distinguished share of paid units (0-100)
        config: Optional analytics config

    Returns:
        'NotDistinguished', 'Distinguished', 'Select' or 'Presidents'
    """
    config = ensure_config(config)
    if not meets_paid_threshold:
        return LEVEL_NOT_DISTINGUISHED
    if distinguished_percent >= config['RECOGNITION_PRESIDENTS_PERCENT']:
        return LEVEL_PRESIDENTS
    if distinguished_percent >= config['RECOGNITION_SELECT_PERCENT']:
        return LEVEL_SELECT
    if distinguished_percent >= config['RECOGNITION_DISTINGUISHED_PERCENT']:
        return LEVEL_DISTINGUISHED
    return LEVEL_NOT_DISTINGUISHED


def calculate_area_recognition(snapshot: Dict[str, Any],
                               config: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    DAP standing for every area of a snapshot.

    Args:
        snapshot: Canonical snapshot
        config: Optional analytics config

    Returns:
        Area recognition dicts in first-seen order
    """
    config = ensure_config(config)
    snapshot_date = snapshot.get('snapshot_date')
    areas: Dict[str, Dict[str, Any]] = {}

    for club in snapshot.get('clubs', []):
        area_id = club.get('area_id')
        if not area_id:
            continue
        area = areas.setdefault(area_id, {
            'area_id': area_id,
            'area_name': club.get('area_name') or area_id,
            'division_id': club.get('division_id', ''),
            'total_clubs': 0,
            'paid_clubs': 0,
            'distinguished_clubs': 0,
        })
        area['total_clubs'] += 1
        if not is_paid_club(club, config):
            continue
        area['paid_clubs'] += 1
        tier = club_recognition_tier(club, is_csp_submitted(club, snapshot_date, config))
        if tier != NOT_DISTINGUISHED:
            area['distinguished_clubs'] += 1

    recognitions = []
    for area in areas.values():
        paid_percent = _percent(area['paid_clubs'], area['total_clubs'])
        distinguished_percent = _percent(area['distinguished_clubs'], area['paid_clubs'])
        meets_paid = paid_percent >= config['DAP_PAID_CLUBS_PERCENT']
        level = determine_recognition_level(meets_paid, distinguished_percent, config)
        recognitions.append({
            **area,
            'paid_clubs_percent': paid_percent,
            'distinguished_clubs_percent': distinguished_percent,
            'eligibility': 'unknown',
            'eligibility_reason': AREA_ELIGIBILITY_REASON,
            'recognition_level': level,
            'meets_paid_threshold': meets_paid,
            'meets_distinguished_threshold': level != LEVEL_NOT_DISTINGUISHED,
        })
    return recognitions


def calculate_division_recognition(snapshot: Dict[str, Any],
                                   config: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    DDP standing for every division of a snapshot, with its areas nested.

    An area counts as paid when it has at least one paid club and as
    distinguished when its own recognition level is above NotDistinguished.
    """
    config = ensure_config(config)
    division_names: Dict[str, str] = {}
    for club in snapshot.get('clubs', []):
        division_id = club.get('division_id')
        if division_id and division_id not in division_names:
            division_names[division_id] = club.get('division_name') or division_id

    areas_by_division: Dict[str, List[Dict[str, Any]]] = {division_id: [] for division_id in division_names}
    for area in calculate_area_recognition(snapshot, config):
        if area['division_id'] in areas_by_division:
            areas_by_division[area['division_id']].append(area)

    recognitions = []
    for division_id, areas in areas_by_division.items():
        paid_areas = [area for area in areas if area['paid_clubs'] > 0]
        distinguished_areas = [
            area for area in paid_areas if area['recognition_level'] != LEVEL_NOT_DISTINGUISHED
        ]
        paid_percent = _percent(len(paid_areas), len(areas))
        distinguished_percent = _percent(len(distinguished_areas), len(paid_areas))
        meets_paid = paid_percent >= config['DDP_PAID_AREAS_PERCENT']
        level = determine_recognition_level(meets_paid, distinguished_percent, config)

        recognitions.append({
            'division_id': division_id,
            'division_name': division_names[division_id],
            'total_areas': len(areas),
            'paid_areas': len(paid_areas),
            'distinguished_areas': len(distinguished_areas),
            'paid_areas_percent': paid_percent,
            'distinguished_areas_percent': distinguished_percent,
            'eligibility': 'unknown',
            'eligibility_reason': DIVISION_ELIGIBILITY_REASON,
            'recognition_level': level,
            'meets_paid_threshold': meets_paid,
            'meets_distinguished_threshold': level != LEVEL_NOT_DISTINGUISHED,
            'areas': areas,
        })

    logger.debug(f"Computed recognition for {len(recognitions)} divisions")
    return recognitions
