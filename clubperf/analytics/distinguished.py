#!/usr/bin/env python3
"""
Distinguished Club Analytics

Recognition tier counts, the distinguished club list, year-end projections,
tier achievements over time and the per-goal breakdown of the program's ten
goals from the raw club export.

Counts are derived from the shared tier function in eligibility, so they
always match the distinguished_level of the ClubTrends for the same snapshot.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from clubperf.analytics.eligibility import (
    DISTINGUISHED,
    NOT_DISTINGUISHED,
    PRESIDENT,
    SELECT,
    SMEDLEY,
    calculate_net_growth,
    club_recognition_tier,
    is_csp_submitted,
    tier_rank,
)
from clubperf.analytics.utils_stats import linear_projection, round_half_up
from clubperf.normalizers.record_fields import extract_number

logger = logging.getLogger(__name__)

# Count key per tier, highest first
TIER_COUNT_KEYS: List[Tuple[str, str]] = [
    (SMEDLEY, 'smedley'),
    (PRESIDENT, 'presidents'),
    (SELECT, 'select'),
    (DISTINGUISHED, 'distinguished'),
]

# Level 4 award columns by program-year export format, newest first
LEVEL4_FIELD_FORMATS: List[Tuple[str, str]] = [
    ('Level 4s, Path Completions, or DTM Awards', 'Add. Level 4s, Path Completions, or DTM award'),
    ('Level 4s, Level 5s, or DTM award', 'Add. Level 4s, Level 5s, or DTM award'),
    ('CL/AL/DTMs', 'Add. CL/AL/DTMs'),
]

GOAL_ANALYSIS_LIMIT = 5


def snapshot_tiers(snapshot: Dict[str, Any], config: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
    """Recognition tier per club id for one snapshot."""
    snapshot_date = snapshot['snapshot_date']
    return {
        club['club_id']: club_recognition_tier(club, is_csp_submitted(club, snapshot_date, config))
        for club in snapshot['clubs']
    }


def count_recognition_tiers(snapshot: Dict[str, Any], config: Optional[Dict[str, Any]] = None) -> Dict[str, int]:
    """
    Count one snapshot's clubs per recognition tier.

    Returns:
        Dict with smedley, presidents, select, distinguished and total
    """
    counts = {key: 0 for _, key in TIER_COUNT_KEYS}
    for tier in snapshot_tiers(snapshot, config).values():
        for tier_name, key in TIER_COUNT_KEYS:
            if tier == tier_name:
                counts[key] += 1
    counts['total'] = sum(counts.values())
    return counts


def empty_tier_counts() -> Dict[str, int]:
    counts = {key: 0 for _, key in TIER_COUNT_KEYS}
    counts['total'] = 0
    return counts


def list_distinguished_clubs(snapshot: Dict[str, Any], config: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """Clubs of a snapshot with a tier above NotDistinguished, highest tier first."""
    tiers = snapshot_tiers(snapshot, config)
    clubs = []
    for club in snapshot['clubs']:
        tier = tiers[club['club_id']]
        if tier == NOT_DISTINGUISHED:
            continue
        clubs.append({
            'club_id': club['club_id'],
            'club_name': club['club_name'],
            'status': tier,
            'dcp_points': club.get('dcp_goals', 0),
            'goals_completed': club.get('dcp_goals', 0),
            'membership_count': club.get('membership_count', 0),
            'net_growth': calculate_net_growth(club),
        })
    clubs.sort(key=lambda club: tier_rank(club['status']), reverse=True)
    return clubs


def project_year_end(snapshots: List[Dict[str, Any]], config: Optional[Dict[str, Any]] = None) -> Dict[str, int]:
    """
    Projected year-end count per tier.

    A least squares line per tier over the series, evaluated two periods
    past its end. Fewer than two snapshots project the current counts.
    """
    if not snapshots:
        return empty_tier_counts()

    series = [count_recognition_tiers(snapshot, config) for snapshot in snapshots]
    if len(series) < 2:
        return dict(series[-1])

    projection = {
        key: linear_projection([counts[key] for counts in series])
        for _, key in TIER_COUNT_KEYS
    }
    projection['total'] = sum(projection.values())
    return projection


def calculate_tier_trends(snapshots: List[Dict[str, Any]], config: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
    """Trend label per tier comparing the first and last snapshot counts."""
    labels = {key: 'stable' for _, key in TIER_COUNT_KEYS}
    if len(snapshots) < 2:
        return labels

    first = count_recognition_tiers(snapshots[0], config)
    last = count_recognition_tiers(snapshots[-1], config)
    for _, key in TIER_COUNT_KEYS:
        if last[key] > first[key]:
            labels[key] = 'improving'
        elif last[key] < first[key]:
            labels[key] = 'declining'
    return labels


def calculate_progress_by_level(snapshots: List[Dict[str, Any]],
                                config: Optional[Dict[str, Any]] = None) -> Dict[str, Dict[str, Any]]:
    """Current count, projection and trend for every tier."""
    current = count_recognition_tiers(snapshots[-1], config) if snapshots else empty_tier_counts()
    projected = project_year_end(snapshots, config)
    trends = calculate_tier_trends(snapshots, config)
    return {
        key: {
            'current': current[key],
            'projected': projected[key],
            'trend': trends[key],
        }
        for _, key in TIER_COUNT_KEYS
    }


def track_achievements(snapshots: List[Dict[str, Any]], config: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    Record when clubs first reach a tier or move up to a higher one.

    Snapshots are scanned in date order; a drop in tier is not recorded and
    does not reset the club's best tier.

    Returns:
        Achievement dicts, newest first
    """
    best_tier: Dict[str, str] = {}
    achievements = []

    for snapshot in snapshots:
        tiers = snapshot_tiers(snapshot, config)
        for club in snapshot['clubs']:
            club_id = club['club_id']
            tier = tiers[club_id]
            if tier == NOT_DISTINGUISHED:
                continue

            previous = best_tier.get(club_id)
            if previous is not None and tier_rank(tier) <= tier_rank(previous):
                continue

            best_tier[club_id] = tier
            achievements.append({
                'club_id': club_id,
                'club_name': club['club_name'],
                'level': tier,
                'previous_level': previous,
                'achieved_date': snapshot['snapshot_date'],
            })

    achievements.sort(key=lambda achievement: achievement['achieved_date'], reverse=True)
    return achievements


def get_level4_fields(record: Dict[str, Any]) -> Tuple[str, str]:
    """Level 4 base and additional column names for a raw club record's format."""
    for base_field, additional_field in LEVEL4_FIELD_FORMATS:
        if base_field in record:
            return base_field, additional_field
    logger.debug(f"No Level 4 column found for club {record.get('Club Number', 'unknown')}, using newest format")
    return LEVEL4_FIELD_FORMATS[0]


def achieved_goals(record: Dict[str, Any]) -> List[bool]:
    """
    Which of the ten program goals a raw club record shows as met.

    Args:
        record: Raw club performance record

    Returns:
        Ten booleans, goal 1 first
    """
    level1s = extract_number(record, 'Level 1s')
    level2s = extract_number(record, 'Level 2s')
    add_level2s = extract_number(record, 'Add. Level 2s')
    level3s = extract_number(record, 'Level 3s')
    base_field, additional_field = get_level4_fields(record)
    level4s = extract_number(record, base_field)
    add_level4s = extract_number(record, additional_field)
    new_members = extract_number(record, 'New Members')
    add_new_members = extract_number(record, 'Add. New Members')
    trained_round1 = extract_number(record, 'Off. Trained Round 1')
    trained_round2 = extract_number(record, 'Off. Trained Round 2')
    dues_oct = extract_number(record, 'Mem. dues on time Oct')
    dues_apr = extract_number(record, 'Mem. dues on time Apr')
    officer_list = extract_number(record, 'Off. List On Time')

    return [
        level1s >= 4,
        level2s >= 2,
        level2s >= 2 and add_level2s >= 2,
        level3s >= 2,
        level4s >= 1,
        level4s >= 1 and add_level4s >= 1,
        new_members >= 4,
        new_members >= 4 and add_new_members >= 4,
        trained_round1 >= 4 and trained_round2 >= 4,
        officer_list >= 1 and (dues_oct >= 1 or dues_apr >= 1),
    ]


def analyze_dcp_goals(club_records: List[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """
    Most and least commonly achieved program goals.

    Args:
        club_records: Raw club performance records of one snapshot

    Returns:
        Dict with most_commonly_achieved (top five by count) and
        least_commonly_achieved (bottom five, lowest first)
    """
    goal_counts = [0] * 10
    for record in club_records:
        for index, met in enumerate(achieved_goals(record)):
            if met:
                goal_counts[index] += 1

    total_clubs = len(club_records)
    analysis = [
        {
            'goal_number': index + 1,
            'achievement_count': count,
            'achievement_percentage': round_half_up(count / total_clubs * 100, 1) if total_clubs > 0 else 0,
        }
        for index, count in enumerate(goal_counts)
    ]

    by_count = sorted(analysis, key=lambda goal: goal['achievement_count'], reverse=True)
    return {
        'most_commonly_achieved': by_count[:GOAL_ANALYSIS_LIMIT],
        'least_commonly_achieved': list(reversed(by_count[-GOAL_ANALYSIS_LIMIT:])),
    }


def generate_distinguished_club_analytics(district_id: str, snapshots: List[Dict[str, Any]],
                                          config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Full distinguished club analytics for a snapshot series.

    Args:
        district_id: District identifier
        snapshots: Snapshots sorted ascending by date
        config: Optional analytics config

    Returns:
        Dict with counts, clubs, projection, progress by level,
        achievements and the goal analysis
    """
    if not snapshots:
        return {
            'district_id': district_id,
            'distinguished_clubs': empty_tier_counts(),
            'distinguished_clubs_list': [],
            'distinguished_projection': empty_tier_counts(),
            'progress_by_level': calculate_progress_by_level([], config),
            'achievements': [],
            'dcp_goal_analysis': analyze_dcp_goals([]),
        }

    latest = snapshots[-1]
    counts = count_recognition_tiers(latest, config)
    logger.info(f"District {district_id}: {counts['total']} distinguished clubs on {latest['snapshot_date']}")

    return {
        'district_id': district_id,
        'distinguished_clubs': counts,
        'distinguished_clubs_list': list_distinguished_clubs(latest, config),
        'distinguished_projection': project_year_end(snapshots, config),
        'progress_by_level': calculate_progress_by_level(snapshots, config),
        'achievements': track_achievements(snapshots, config),
        'dcp_goal_analysis': analyze_dcp_goals(latest.get('club_performance') or []),
    }
