#!/usr/bin/env python3
"""
Membership Analytics

District membership and payment series, growth and retention figures, the
clubs growing or shrinking most and a calendar year-over-year comparison.
"""

import logging
from typing import Any, Dict, List, Optional

from clubperf.analytics.config import DEFAULT_CONFIG, ensure_config
from clubperf.analytics.program_calendar import get_month_name, parse_snapshot_date
from clubperf.analytics.utils_stats import round_half_up

logger = logging.getLogger(__name__)

SEASONAL_CHANGE_THRESHOLD = 2


def get_total_membership(snapshot: Dict[str, Any]) -> int:
    """Sum of club membership counts in a snapshot."""
    return sum(club.get('membership_count', 0) for club in snapshot['clubs'])


def get_total_payments(snapshot: Dict[str, Any]) -> int:
    """Sum of club payments-to-date in a snapshot."""
    return sum(club.get('payments_count', 0) for club in snapshot['clubs'])


def calculate_membership_trend(snapshots: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [{'date': s['snapshot_date'], 'count': get_total_membership(s)} for s in snapshots]


def calculate_payments_trend(snapshots: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [{'date': s['snapshot_date'], 'payments': get_total_payments(s)} for s in snapshots]


def calculate_membership_change(snapshots: List[Dict[str, Any]]) -> int:
    """Latest minus first total membership; 0 with fewer than two snapshots."""
    if len(snapshots) < 2:
        return 0
    return get_total_membership(snapshots[-1]) - get_total_membership(snapshots[0])


def calculate_growth_rate(snapshots: List[Dict[str, Any]]) -> float:
    """
    Percentage membership growth from the first to the latest snapshot.

    Growth from zero reports 100, no growth from zero reports 0.
    """
    if len(snapshots) < 2:
        return 0.0
    first = get_total_membership(snapshots[0])
    last = get_total_membership(snapshots[-1])
    if first == 0:
        return 100.0 if last > 0 else 0.0
    return round_half_up((last - first) / first * 100, 1)


def calculate_retention_rate(snapshot: Dict[str, Any]) -> float:
    """
    Rough retention estimate from payments against membership.

    Each retained member pays twice a program year, so payments over twice
    the membership approximates retention. Capped at 100.
    """
    membership = get_total_membership(snapshot)
    if membership == 0:
        return 0.0
    payments = get_total_payments(snapshot)
    return round_half_up(min(100.0, payments / (membership * 2) * 100), 1)


def _club_membership_deltas(snapshots: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    first_counts: Dict[str, int] = {}
    last_counts: Dict[str, int] = {}
    points: Dict[str, int] = {}
    for snapshot in snapshots:
        for club in snapshot['clubs']:
            club_id = club['club_id']
            first_counts.setdefault(club_id, club.get('membership_count', 0))
            last_counts[club_id] = club.get('membership_count', 0)
            points[club_id] = points.get(club_id, 0) + 1

    deltas = []
    for club in snapshots[-1]['clubs'] if snapshots else []:
        club_id = club['club_id']
        delta = last_counts[club_id] - first_counts[club_id] if points[club_id] >= 2 else 0
        deltas.append({'club_id': club_id, 'club_name': club['club_name'], 'delta': delta})
    return deltas


def calculate_top_growth_clubs(snapshots: List[Dict[str, Any]], limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """
    Clubs of the latest snapshot with the largest membership gain.

    Args:
        snapshots: Snapshots sorted ascending by date
        limit: Maximum clubs returned (default TOP_CLUBS_LIMIT)

    Returns:
        Dicts with club_id, club_name and growth, largest first
    """
    if limit is None:
        limit = DEFAULT_CONFIG['TOP_CLUBS_LIMIT']
    growth = [
        {'club_id': d['club_id'], 'club_name': d['club_name'], 'growth': d['delta']}
        for d in _club_membership_deltas(snapshots) if d['delta'] > 0
    ]
    growth.sort(key=lambda club: club['growth'], reverse=True)
    return growth[:limit]


def calculate_top_declining_clubs(snapshots: List[Dict[str, Any]], limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """Clubs of the latest snapshot with the largest membership loss, as positive decline values."""
    if limit is None:
        limit = DEFAULT_CONFIG['TOP_CLUBS_LIMIT']
    declining = [
        {'club_id': d['club_id'], 'club_name': d['club_name'], 'decline': -d['delta']}
        for d in _club_membership_deltas(snapshots) if d['delta'] < 0
    ]
    declining.sort(key=lambda club: club['decline'], reverse=True)
    return declining[:limit]


def calculate_program_year_change(membership_trend: List[Dict[str, Any]]) -> int:
    """
    Membership change since the first point of the current program year.

    The program year starts July 1. Without a point in the current program
    year the change over the whole series is returned.
    """
    if not membership_trend:
        return 0

    latest = parse_snapshot_date(membership_trend[-1]['date'])
    start_year = latest.year if latest.month >= 7 else latest.year - 1
    program_year_start = f"{start_year}-07-01"

    for point in membership_trend:
        if point['date'] >= program_year_start:
            return membership_trend[-1]['count'] - point['count']
    return membership_trend[-1]['count'] - membership_trend[0]['count']


def identify_seasonal_patterns(membership_trend: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Average point-to-point membership change per calendar month.

    Averages above +2 are 'growth', below -2 'decline', else 'stable'.
    """
    if len(membership_trend) < 2:
        return []

    monthly_changes: Dict[int, List[int]] = {}
    for previous, current in zip(membership_trend, membership_trend[1:]):
        month = parse_snapshot_date(current['date']).month
        monthly_changes.setdefault(month, []).append(current['count'] - previous['count'])

    patterns = []
    for month in sorted(monthly_changes):
        changes = monthly_changes[month]
        average_change = sum(changes) / len(changes)
        if average_change > SEASONAL_CHANGE_THRESHOLD:
            trend = 'growth'
        elif average_change < -SEASONAL_CHANGE_THRESHOLD:
            trend = 'decline'
        else:
            trend = 'stable'
        patterns.append({
            'month': month,
            'month_name': get_month_name(month),
            'average_change': round_half_up(average_change, 1),
            'trend': trend,
        })
    return patterns


def _change_percent(change: int, previous: int) -> float:
    return round_half_up(change / previous * 100, 1) if previous > 0 else 0


def calculate_calendar_year_comparison(snapshots: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Latest snapshot against the first snapshot of the previous calendar year.

    Returns:
        Comparison dict, or None when no snapshot falls in the previous year
    """
    if not snapshots:
        return None

    latest = snapshots[-1]
    current_year = parse_snapshot_date(latest['snapshot_date']).year
    previous = next(
        (s for s in snapshots if parse_snapshot_date(s['snapshot_date']).year == current_year - 1),
        None
    )
    if previous is None:
        return None

    current_membership = get_total_membership(latest)
    previous_membership = get_total_membership(previous)
    current_payments = get_total_payments(latest)
    previous_payments = get_total_payments(previous)
    membership_change = current_membership - previous_membership
    payments_change = current_payments - previous_payments

    return {
        'current_year': current_year,
        'previous_year': current_year - 1,
        'current_membership': current_membership,
        'previous_membership': previous_membership,
        'membership_change': membership_change,
        'membership_change_percent': _change_percent(membership_change, previous_membership),
        'payments_change': payments_change,
        'payments_change_percent': _change_percent(payments_change, previous_payments),
    }


def generate_membership_trends(snapshots: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Membership and payments series with the calendar year comparison."""
    return {
        'membership_trend': calculate_membership_trend(snapshots),
        'payments_trend': calculate_payments_trend(snapshots),
        'year_over_year': calculate_calendar_year_comparison(snapshots),
    }


def compute_membership_analytics(district_id: str, snapshots: List[Dict[str, Any]],
                                 config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Full membership analytics for a snapshot series.

    Args:
        district_id: District identifier
        snapshots: Snapshots sorted ascending by date
        config: Optional analytics config

    Returns:
        Membership analytics dict; zeros and empty lists without snapshots
    """
    config = ensure_config(config)
    limit = config['TOP_CLUBS_LIMIT']

    if not snapshots:
        return {
            'district_id': district_id,
            'total_membership': 0,
            'total_payments': 0,
            'membership_change': 0,
            'program_year_change': 0,
            'growth_rate': 0.0,
            'retention_rate': 0.0,
            'membership_trend': [],
            'payments_trend': [],
            'top_growth_clubs': [],
            'top_declining_clubs': [],
            'seasonal_patterns': [],
            'year_over_year': None,
        }

    membership_trend = calculate_membership_trend(snapshots)
    analytics = {
        'district_id': district_id,
        'total_membership': membership_trend[-1]['count'],
        'total_payments': get_total_payments(snapshots[-1]),
        'membership_change': calculate_membership_change(snapshots),
        'program_year_change': calculate_program_year_change(membership_trend),
        'growth_rate': calculate_growth_rate(snapshots),
        'retention_rate': calculate_retention_rate(snapshots[-1]),
        'membership_trend': membership_trend,
        'payments_trend': calculate_payments_trend(snapshots),
        'top_growth_clubs': calculate_top_growth_clubs(snapshots, limit),
        'top_declining_clubs': calculate_top_declining_clubs(snapshots, limit),
        'seasonal_patterns': identify_seasonal_patterns(membership_trend),
        'year_over_year': calculate_calendar_year_comparison(snapshots),
    }

    logger.info(
        f"District {district_id}: membership {analytics['total_membership']} "
        f"(change {analytics['membership_change']} over {len(snapshots)} snapshots)"
    )
    return analytics
