#!/usr/bin/env python3
"""
Leadership Effectiveness Analytics

Scores each division's leadership from club health, membership growth and
goal achievement across the snapshot series, flags best-practice divisions,
detects leadership changes and relates area performance to area director
activity.
"""

import logging
import math
from typing import Any, Dict, List, Optional

from clubperf.analytics.config import ensure_config
from clubperf.analytics.eligibility import is_healthy_club
from clubperf.analytics.utils_stats import clamp, round_half_up

logger = logging.getLogger(__name__)


def calculate_division_health_score(clubs: List[Dict[str, Any]]) -> float:
    """
    Health sub-score (0-100) for a division's clubs.

    50% share of healthy clubs, 30% average membership against a cap of 30
    members and 20% share of clubs with 20+ members.
    """
    if not clubs:
        return 0.0

    count = len(clubs)
    healthy = sum(1 for club in clubs if is_healthy_club(club))
    strong = sum(1 for club in clubs if club['membership_count'] >= 20)
    average_membership = sum(club['membership_count'] for club in clubs) / count

    return (
        healthy / count * 100 * 0.5
        + min(average_membership / 30 * 100, 100) * 0.3
        + strong / count * 100 * 0.2
    )


def calculate_growth_from_base(clubs: List[Dict[str, Any]]) -> float:
    """Growth sub-score from current membership against program-year base."""
    if not clubs:
        return 50.0
    total_base = sum(club.get('membership_base') or 0 for club in clubs)
    if total_base == 0:
        return 50.0
    total_current = sum(club['membership_count'] for club in clubs)
    growth_rate = (total_current - total_base) / total_base * 100
    return clamp(50 + growth_rate * 5, 0, 100)


def calculate_division_growth_score(history: List[Dict[str, Any]]) -> float:
    """
    Growth sub-score (0-100) from a division's dated club lists.

    50 points baseline, plus or minus 5 points per 1% membership change from
    the first to the last date. A single date falls back to the base
    comparison.
    """
    if len(history) < 2:
        latest_clubs = history[0]['clubs'] if history else []
        return calculate_growth_from_base(latest_clubs)

    first = sum(club['membership_count'] for club in history[0]['clubs'])
    last = sum(club['membership_count'] for club in history[-1]['clubs'])
    growth_rate = (last - first) / first * 100 if first > 0 else 0
    return clamp(50 + growth_rate * 5, 0, 100)


def calculate_division_dcp_score(clubs: List[Dict[str, Any]]) -> float:
    """Average goals achieved as a percentage of the 10 available."""
    if not clubs:
        return 0.0
    return sum(club['dcp_goals'] for club in clubs) / (len(clubs) * 10) * 100


def _collect_division_history(snapshots: List[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    divisions: Dict[str, Dict[str, Any]] = {}
    latest = snapshots[-1]

    for snapshot in snapshots:
        for club in snapshot['clubs']:
            division_id = club.get('division_id')
            if not division_id:
                continue

            division = divisions.setdefault(division_id, {
                'division_id': division_id,
                'division_name': club.get('division_name') or division_id,
                'clubs': [],
                'history': [],
            })

            if not division['history'] or division['history'][-1]['date'] != snapshot['snapshot_date']:
                division['history'].append({'date': snapshot['snapshot_date'], 'clubs': []})
            division['history'][-1]['clubs'].append(club)

            if snapshot is latest:
                division['clubs'].append(club)

    return divisions


def calculate_leadership_effectiveness(snapshots: List[Dict[str, Any]],
                                       config: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    Leadership effectiveness score per division, best first.

    overall = 40% health + 30% growth + 30% DCP, rounded half up. Divisions
    seen only in earlier snapshots score from empty latest club lists.

    Args:
        snapshots: Snapshots sorted ascending by date
        config: Optional analytics config

    Returns:
        Score dicts with rank assigned
    """
    if not snapshots:
        return []

    config = ensure_config(config)
    weights = config['LEADERSHIP_WEIGHTS']
    scores = []

    for division in _collect_division_history(snapshots).values():
        health = calculate_division_health_score(division['clubs'])
        growth = calculate_division_growth_score(division['history'])
        dcp = calculate_division_dcp_score(division['clubs'])
        overall = round_half_up(
            health * weights['health'] + growth * weights['growth'] + dcp * weights['dcp']
        )
        scores.append({
            'division_id': division['division_id'],
            'division_name': division['division_name'],
            'health_score': round_half_up(health),
            'growth_score': round_half_up(growth),
            'dcp_score': round_half_up(dcp),
            'overall_score': overall,
            'rank': 0,
            'is_best_practice': False,
        })

    scores.sort(key=lambda score: score['overall_score'], reverse=True)
    for index, score in enumerate(scores):
        score['rank'] = index + 1
    return scores


def is_division_consistent(division_id: str, snapshots: List[Dict[str, Any]],
                           config: Optional[Dict[str, Any]] = None) -> bool:
    """
    False when summed goals ever drop below 70% of the previous snapshot.

    Fewer than three snapshots always count as consistent.
    """
    if len(snapshots) < 3:
        return True

    drop_ratio = ensure_config(config)['CONSISTENCY_DROP_RATIO']
    goals_by_date = [
        sum(club['dcp_goals'] for club in snapshot['clubs'] if club.get('division_id') == division_id)
        for snapshot in snapshots
    ]
    for previous, current in zip(goals_by_date, goals_by_date[1:]):
        if previous > 0 and current < previous * drop_ratio:
            return False
    return True


def identify_best_practice_divisions(scores: List[Dict[str, Any]], snapshots: List[Dict[str, Any]],
                                     config: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    Divisions that score high, rank in the top fifth and perform consistently.

    Marks is_best_practice on the matching score dicts and returns them.
    """
    config = ensure_config(config)
    top_count = math.ceil(len(scores) * config['BEST_PRACTICE_PERCENTILE'])
    best = []

    for index, score in enumerate(scores):
        if (score['overall_score'] >= config['BEST_PRACTICE_SCORE']
                and index < top_count
                and is_division_consistent(score['division_id'], snapshots, config)):
            score['is_best_practice'] = True
            best.append(score)

    return best


def track_leadership_changes(snapshots: List[Dict[str, Any]],
                             config: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    Detect sharp shifts in a division's average goals per club.

    A change is recorded when a point differs from the mean of the two
    points before it by at least 20% of that mean. Needs three or more
    snapshots.

    Returns:
        Change dicts, newest first
    """
    if len(snapshots) < 3:
        return []

    change_ratio = ensure_config(config)['LEADERSHIP_CHANGE_RATIO']
    performance: Dict[str, List[Dict[str, Any]]] = {}

    for snapshot in snapshots:
        totals: Dict[str, List[int]] = {}
        for club in snapshot['clubs']:
            division_id = club.get('division_id')
            if not division_id:
                continue
            entry = totals.setdefault(division_id, [0, 0])
            entry[0] += club['dcp_goals']
            entry[1] += 1
            performance.setdefault(division_id, [])

        for division_id, (total_goals, total_clubs) in totals.items():
            average = total_goals / total_clubs if total_clubs > 0 else 0
            performance[division_id].append({'date': snapshot['snapshot_date'], 'score': average})

    latest_clubs = snapshots[-1]['clubs']
    changes = []
    for division_id, history in performance.items():
        if len(history) < 3:
            continue

        for i in range(2, len(history)):
            before = (history[i - 2]['score'] + history[i - 1]['score']) / 2
            after = history[i]['score']
            delta = after - before
            if before <= 0 or abs(delta) < before * change_ratio:
                continue

            division_name = next(
                (club.get('division_name') for club in latest_clubs if club.get('division_id') == division_id),
                None
            ) or division_id
            changes.append({
                'division_id': division_id,
                'division_name': division_name,
                'change_date': history[i]['date'],
                'performance_before_change': round_half_up(before, 1),
                'performance_after_change': round_half_up(after, 1),
                'performance_delta': round_half_up(delta, 1),
                'trend': 'improved' if delta > 0 else 'declined' if delta < 0 else 'stable',
            })

    changes.sort(key=lambda change: change['change_date'], reverse=True)
    return changes


def analyze_area_director_correlations(snapshots: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Score each area of the latest snapshot and classify director activity.

    score = avg goals / 10 * 40 + capped avg membership * 0.3
            + healthy share * 100 * 0.3, rounded half up.
    Activity is high at 70+, medium at 40+, else low.
    """
    if not snapshots:
        return []

    areas: Dict[str, Dict[str, Any]] = {}
    for club in snapshots[-1]['clubs']:
        area_id = club.get('area_id')
        if not area_id:
            continue
        area = areas.setdefault(area_id, {
            'area_id': area_id,
            'area_name': club.get('area_name') or area_id,
            'division_id': club.get('division_id', ''),
            'clubs': [],
        })
        area['clubs'].append(club)

    correlations = []
    for area in areas.values():
        clubs = area['clubs']
        count = len(clubs)
        average_goals = sum(club['dcp_goals'] for club in clubs) / count
        average_membership = sum(club['membership_count'] for club in clubs) / count
        healthy_share = sum(1 for club in clubs if is_healthy_club(club)) / count

        score = round_half_up(
            average_goals / 10 * 40
            + min(average_membership / 30 * 100, 100) * 0.3
            + healthy_share * 100 * 0.3
        )

        if score >= 70:
            activity = 'high'
        elif score >= 40:
            activity = 'medium'
        else:
            activity = 'low'

        if activity == 'high':
            correlation = 'positive'
        elif activity == 'low':
            correlation = 'negative'
        else:
            correlation = 'neutral'

        correlations.append({
            'area_id': area['area_id'],
            'area_name': area['area_name'],
            'division_id': area['division_id'],
            'club_performance_score': score,
            'activity_indicator': activity,
            'correlation': correlation,
        })

    correlations.sort(key=lambda item: item['club_performance_score'], reverse=True)
    return correlations


def generate_leadership_summary(scores: List[Dict[str, Any]], best_practices: List[Dict[str, Any]],
                                snapshots: List[Dict[str, Any]],
                                config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Top divisions and areas, average leadership score and best-practice count."""
    limit = ensure_config(config)['LEADERSHIP_SUMMARY_LIMIT']
    if not snapshots:
        return empty_summary()

    top_divisions = [
        {
            'division_id': score['division_id'],
            'division_name': score['division_name'],
            'score': score['overall_score'],
        }
        for score in scores[:limit]
    ]

    area_totals: Dict[str, Dict[str, Any]] = {}
    for club in snapshots[-1]['clubs']:
        area_id = club.get('area_id')
        if not area_id:
            continue
        area = area_totals.setdefault(area_id, {
            'area_id': area_id,
            'area_name': club.get('area_name') or area_id,
            'total_dcp': 0,
            'total_clubs': 0,
        })
        area['total_dcp'] += club['dcp_goals']
        area['total_clubs'] += 1

    top_areas = sorted(
        (
            {
                'area_id': area['area_id'],
                'area_name': area['area_name'],
                'score': round_half_up(area['total_dcp'] / area['total_clubs'] * 10),
            }
            for area in area_totals.values()
        ),
        key=lambda area: area['score'],
        reverse=True,
    )[:limit]

    average_score = 0
    if scores:
        average_score = round_half_up(sum(score['overall_score'] for score in scores) / len(scores))

    return {
        'top_performing_divisions': top_divisions,
        'top_performing_areas': top_areas,
        'average_leadership_score': average_score,
        'total_best_practice_divisions': len(best_practices),
    }


def empty_summary() -> Dict[str, Any]:
    return {
        'top_performing_divisions': [],
        'top_performing_areas': [],
        'average_leadership_score': 0,
        'total_best_practice_divisions': 0,
    }


def generate_leadership_insights(snapshots: List[Dict[str, Any]],
                                 config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Full leadership insight set for a snapshot series.

    Args:
        snapshots: Snapshots sorted ascending by date
        config: Optional analytics config

    Returns:
        Dict with leadership_scores, best_practice_divisions,
        leadership_changes, area_director_correlations and summary
    """
    if not snapshots:
        return {
            'leadership_scores': [],
            'best_practice_divisions': [],
            'leadership_changes': [],
            'area_director_correlations': [],
            'summary': empty_summary(),
        }

    scores = calculate_leadership_effectiveness(snapshots, config)
    best_practices = identify_best_practice_divisions(scores, snapshots, config)
    changes = track_leadership_changes(snapshots, config)
    correlations = analyze_area_director_correlations(snapshots)
    summary = generate_leadership_summary(scores, best_practices, snapshots, config)

    logger.info(
        f"Leadership insights: {len(scores)} divisions scored, "
        f"{len(best_practices)} best practice, {len(changes)} changes"
    )
    return {
        'leadership_scores': scores,
        'best_practice_divisions': best_practices,
        'leadership_changes': changes,
        'area_director_correlations': correlations,
        'summary': summary,
    }


def identify_areas_needing_support(insights: Dict[str, Any], snapshots: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Areas with low activity or negative correlation, weakest first."""
    if not snapshots:
        return []

    latest_clubs = snapshots[-1]['clubs']
    areas = []
    for correlation in insights['area_director_correlations']:
        if correlation['activity_indicator'] != 'low' and correlation['correlation'] != 'negative':
            continue
        area_clubs = [club for club in latest_clubs if club.get('area_id') == correlation['area_id']]
        areas.append({
            'area_id': correlation['area_id'],
            'area_name': correlation['area_name'],
            'division_id': correlation['division_id'],
            'score': correlation['club_performance_score'],
            'club_count': len(area_clubs),
            'membership_total': sum(club['membership_count'] for club in area_clubs),
        })

    areas.sort(key=lambda area: area['score'])
    return areas


def compute_leadership_insights(district_id: str, snapshots: List[Dict[str, Any]],
                                config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Leadership insights with district-level completion proxies.

    officer_completion_rate averages division health scores and
    training_completion_rate averages division DCP scores.
    """
    insights = generate_leadership_insights(snapshots, config)
    scores = insights['leadership_scores']
    latest_clubs = snapshots[-1]['clubs'] if snapshots else []

    officer_rate = 0
    training_rate = 0
    if scores:
        officer_rate = round_half_up(sum(score['health_score'] for score in scores) / len(scores))
        training_rate = round_half_up(sum(score['dcp_score'] for score in scores) / len(scores))

    top_divisions = []
    for index, division in enumerate(insights['summary']['top_performing_divisions']):
        division_clubs = [club for club in latest_clubs if club.get('division_id') == division['division_id']]
        top_divisions.append({
            'division_id': division['division_id'],
            'division_name': division['division_name'],
            'rank': index + 1,
            'score': division['score'],
            'club_count': len(division_clubs),
            'membership_total': sum(club['membership_count'] for club in division_clubs),
        })

    return {
        'district_id': district_id,
        'officer_completion_rate': officer_rate,
        'training_completion_rate': training_rate,
        'leadership_effectiveness_score': insights['summary']['average_leadership_score'],
        'top_performing_divisions': top_divisions,
        'areas_needing_support': identify_areas_needing_support(insights, snapshots),
        'insights': insights,
    }
