#!/usr/bin/env python3
"""
Club Health Classification

Builds a ClubTrend for every club in the latest snapshot of an ascending
snapshot sequence: health status and risk factors, health score, recognition
tier and the membership / goals time series across all snapshots.

The thriving, vulnerable and intervention-required lists are filtered from
the all-clubs list, so every subset entry is the same dict object as its
all-clubs counterpart.
"""

import logging
from typing import Any, Dict, List, Optional

from clubperf.analytics.config import ensure_config
from clubperf.analytics.eligibility import (
    INTERVENTION_REQUIRED,
    STABLE,
    THRIVING,
    VULNERABLE,
    calculate_health_score,
    calculate_net_growth,
    classify_club_health,
    club_recognition_tier,
    is_csp_submitted,
)

logger = logging.getLogger(__name__)


def build_club_trend(club: Dict[str, Any], snapshot_date: str,
                     config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Classify one club from the latest snapshot.

    Args:
        club: Canonical club dict
        snapshot_date: Date of the snapshot holding the club
        config: Optional analytics config

    Returns:
        ClubTrend dict with empty time series
    """
    csp_submitted = is_csp_submitted(club, snapshot_date, config)
    status, risk_factors = classify_club_health(club, snapshot_date, csp_submitted, config)
    membership = club.get('membership_count', 0)
    goals = club.get('dcp_goals', 0)

    return {
        'club_id': club['club_id'],
        'club_name': club['club_name'],
        'division_id': club.get('division_id', ''),
        'division_name': club.get('division_name', ''),
        'area_id': club.get('area_id', ''),
        'area_name': club.get('area_name', ''),
        'membership_trend': [],
        'dcp_goals_trend': [],
        'current_status': status,
        'health_score': calculate_health_score(membership, goals),
        'risk_factors': risk_factors,
        'distinguished_level': club_recognition_tier(club, csp_submitted),
        'membership_count': membership,
        'payments_count': club.get('payments_count', 0),
        'dcp_goals': goals,
        'net_growth': calculate_net_growth(club),
        'october_renewals': club.get('october_renewals', 0),
        'april_renewals': club.get('april_renewals', 0),
        'new_members': club.get('new_members', 0),
        'club_status': club.get('club_status'),
        'csp_submitted': csp_submitted,
    }


def analyze_club_trends(snapshots: List[Dict[str, Any]],
                        config: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    Build ClubTrends for the clubs of the latest snapshot.

    Each snapshot contributes one membership point and one goals point per
    club it contains; clubs missing from a snapshot get no point for that
    date.

    Args:
        snapshots: Snapshots sorted ascending by date
        config: Optional analytics config

    Returns:
        ClubTrend dicts in latest-snapshot order
    """
    if not snapshots:
        return []

    config = ensure_config(config)
    latest = snapshots[-1]
    trends: Dict[str, Dict[str, Any]] = {}
    for club in latest['clubs']:
        trends[club['club_id']] = build_club_trend(club, latest['snapshot_date'], config)

    for snapshot in snapshots:
        snapshot_date = snapshot['snapshot_date']
        for club in snapshot['clubs']:
            trend = trends.get(club['club_id'])
            if trend is None:
                continue
            trend['membership_trend'].append({
                'date': snapshot_date,
                'count': club.get('membership_count', 0),
            })
            trend['dcp_goals_trend'].append({
                'date': snapshot_date,
                'goals_achieved': club.get('dcp_goals', 0),
            })

    return list(trends.values())


def filter_by_status(club_trends: List[Dict[str, Any]], status: str) -> List[Dict[str, Any]]:
    """Club trends whose current status equals status (same objects, same order)."""
    return [trend for trend in club_trends if trend['current_status'] == status]


def generate_club_health_data(snapshots: List[Dict[str, Any]],
                              config: Optional[Dict[str, Any]] = None) -> Dict[str, List[Dict[str, Any]]]:
    """
    Classify all clubs and split them by health status.

    Args:
        snapshots: Snapshots sorted ascending by date
        config: Optional analytics config

    Returns:
        Dict with all_clubs and the thriving / vulnerable /
        intervention-required subsets
    """
    all_clubs = analyze_club_trends(snapshots, config)
    health = {
        'all_clubs': all_clubs,
        'thriving_clubs': filter_by_status(all_clubs, THRIVING),
        'vulnerable_clubs': filter_by_status(all_clubs, VULNERABLE),
        'intervention_required_clubs': filter_by_status(all_clubs, INTERVENTION_REQUIRED),
    }

    logger.info(
        f"Classified {len(all_clubs)} clubs: {len(health['thriving_clubs'])} thriving, "
        f"{len(health['vulnerable_clubs'])} vulnerable, "
        f"{len(health['intervention_required_clubs'])} intervention required"
    )
    return health


def count_health_categories(snapshot: Dict[str, Any],
                            config: Optional[Dict[str, Any]] = None) -> Dict[str, int]:
    """
    Count one snapshot's clubs per health status.

    Uses the same classification as generate_club_health_data, so the counts
    always match the lengths of its lists for that snapshot.
    """
    counts = {THRIVING: 0, STABLE: 0, VULNERABLE: 0, INTERVENTION_REQUIRED: 0}
    snapshot_date = snapshot['snapshot_date']
    for club in snapshot['clubs']:
        csp_submitted = is_csp_submitted(club, snapshot_date, config)
        status, _ = classify_club_health(club, snapshot_date, csp_submitted, config)
        counts[status] += 1
    return counts


def build_vulnerable_clubs_data(district_id: str, club_health: Dict[str, List[Dict[str, Any]]]) -> Dict[str, Any]:
    """Summary of clubs needing attention, reusing the classified ClubTrends."""
    vulnerable = club_health['vulnerable_clubs']
    intervention = club_health['intervention_required_clubs']
    return {
        'district_id': district_id,
        'total_vulnerable_clubs': len(vulnerable),
        'intervention_required_clubs': len(intervention),
        'vulnerable_clubs': vulnerable,
        'intervention_required': intervention,
    }


def build_club_trends_index(district_id: str, club_health: Dict[str, List[Dict[str, Any]]]) -> Dict[str, Any]:
    """Index the all-clubs ClubTrends by club id."""
    return {
        'district_id': district_id,
        'clubs': {trend['club_id']: trend for trend in club_health['all_clubs']},
    }
