#!/usr/bin/env python3
"""
Year-over-Year Comparison

Compares the snapshot for a date against the snapshot one program year
earlier, and builds multi-year trends when several years of snapshots exist.
Missing history is reported with data_available False rather than raised.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from clubperf.analytics.club_health import count_health_categories
from clubperf.analytics.config import ensure_config
from clubperf.analytics.distinguished import count_recognition_tiers
from clubperf.analytics.eligibility import INTERVENTION_REQUIRED, THRIVING, VULNERABLE
from clubperf.analytics.membership import get_total_membership
from clubperf.analytics.program_calendar import parse_snapshot_date, previous_program_year_date
from clubperf.analytics.utils_stats import percentage_change, round_half_up

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = 'No snapshot data available for this district'
NO_HISTORY_MESSAGE = (
    'Insufficient historical data for year-over-year comparison. '
    'Previous year data not available.'
)


def find_snapshot_for_date(snapshots: List[Dict[str, Any]], target_date: str) -> Optional[Dict[str, Any]]:
    """
    Snapshot best matching a date.

    Exact date first, then the latest snapshot of the same calendar year,
    then the snapshot closest in days (earliest wins a tie).

    Args:
        snapshots: Snapshots sorted ascending by date
        target_date: YYYY-MM-DD date

    Returns:
        Matching snapshot, or None when snapshots is empty
    """
    if not snapshots:
        return None

    for snapshot in snapshots:
        if snapshot['snapshot_date'] == target_date:
            return snapshot

    target = parse_snapshot_date(target_date)
    same_year = [s for s in snapshots if parse_snapshot_date(s['snapshot_date']).year == target.year]
    if same_year:
        return same_year[-1]

    return min(snapshots, key=lambda s: abs((parse_snapshot_date(s['snapshot_date']) - target).days))


def create_metric_comparison(current: float, previous: float) -> Dict[str, Any]:
    return {
        'current': current,
        'previous': previous,
        'change': current - previous,
        'percentage_change': percentage_change(previous, current),
    }


def _total_goals(snapshot: Dict[str, Any]) -> int:
    return sum(club.get('dcp_goals', 0) for club in snapshot['clubs'])


def _average_goals(snapshot: Dict[str, Any]) -> float:
    if not snapshot['clubs']:
        return 0
    return round_half_up(_total_goals(snapshot) / len(snapshot['clubs']), 1)


def compute_year_over_year_metrics(current: Dict[str, Any], previous: Dict[str, Any],
                                   config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Metric comparisons between two snapshots.

    Distinguished and health counts come from the same classification as
    the per-club analytics.
    """
    current_health = count_health_categories(current, config)
    previous_health = count_health_categories(previous, config)

    return {
        'membership': create_metric_comparison(get_total_membership(current), get_total_membership(previous)),
        'distinguished_clubs': create_metric_comparison(
            count_recognition_tiers(current, config)['total'],
            count_recognition_tiers(previous, config)['total'],
        ),
        'club_health': {
            'thriving_clubs': create_metric_comparison(current_health[THRIVING], previous_health[THRIVING]),
            'vulnerable_clubs': create_metric_comparison(current_health[VULNERABLE], previous_health[VULNERABLE]),
            'intervention_required_clubs': create_metric_comparison(
                current_health[INTERVENTION_REQUIRED], previous_health[INTERVENTION_REQUIRED]
            ),
        },
        'dcp_goals': {
            'total_goals': create_metric_comparison(_total_goals(current), _total_goals(previous)),
            'average_per_club': create_metric_comparison(_average_goals(current), _average_goals(previous)),
        },
        'club_count': create_metric_comparison(len(current['clubs']), len(previous['clubs'])),
    }


def _same_day_in_year(reference: date, year: int) -> str:
    try:
        return reference.replace(year=year).isoformat()
    except ValueError:
        return reference.replace(year=year, day=28).isoformat()


def compute_multi_year_trends(snapshots: List[Dict[str, Any]], current_date: str,
                              config: Optional[Dict[str, Any]] = None) -> Optional[List[Dict[str, Any]]]:
    """
    One data point per year for up to MULTI_YEAR_LOOKBACK years.

    A year contributes only when a snapshot dated in that year resolves for
    it. Returns None unless at least two years resolve.
    """
    if len(snapshots) < 2:
        return None

    config = ensure_config(config)
    reference = parse_snapshot_date(current_date)
    trends = []

    for offset in range(config['MULTI_YEAR_LOOKBACK']):
        year = reference.year - offset
        snapshot = find_snapshot_for_date(snapshots, _same_day_in_year(reference, year))
        if snapshot is None or parse_snapshot_date(snapshot['snapshot_date']).year != year:
            continue
        trends.append({
            'year': year,
            'date': snapshot['snapshot_date'],
            'membership': get_total_membership(snapshot),
            'distinguished_clubs': count_recognition_tiers(snapshot, config)['total'],
            'total_dcp_goals': _total_goals(snapshot),
            'club_count': len(snapshot['clubs']),
        })

    trends.sort(key=lambda trend: trend['year'])
    if len(trends) < 2:
        return None
    return trends


def compute_year_over_year(district_id: str, snapshots: List[Dict[str, Any]], current_date: str,
                           config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Year-over-year comparison for a district.

    The previous-year snapshot must be dated before the current one; the
    closest-date fallback never pairs a snapshot with itself.

    Args:
        district_id: District identifier
        snapshots: Snapshots sorted ascending by date
        current_date: YYYY-MM-DD date to compare from
        config: Optional analytics config

    Returns:
        Dict with data_available and either metrics (plus multi-year trends)
        or a message
    """
    previous_date = previous_program_year_date(current_date)
    result = {
        'district_id': district_id,
        'current_date': current_date,
        'previous_year_date': previous_date,
    }

    current = find_snapshot_for_date(snapshots, current_date)
    if current is None:
        result.update({'data_available': False, 'message': NO_DATA_MESSAGE})
        return result

    earlier = [s for s in snapshots if s['snapshot_date'] < current['snapshot_date']]
    previous = find_snapshot_for_date(earlier, previous_date)
    if previous is None:
        logger.info(f"District {district_id}: no snapshot before {current['snapshot_date']} for comparison")
        result.update({'data_available': False, 'message': NO_HISTORY_MESSAGE})
        return result

    result.update({
        'data_available': True,
        'metrics': compute_year_over_year_metrics(current, previous, config),
    })
    multi_year = compute_multi_year_trends(snapshots, current_date, config)
    if multi_year is not None:
        result['multi_year_trends'] = multi_year
    return result
