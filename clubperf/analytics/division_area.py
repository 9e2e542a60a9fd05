#!/usr/bin/env python3
"""
Division and Area Performance

Ranks divisions and surfaces top-performing areas from the latest snapshot,
with period-over-period trend labels from the snapshot before it.

Every function returns an empty list for an empty snapshot sequence or a
latest snapshot without clubs.
"""

import logging
from typing import Any, Dict, List, Optional

import pandas as pd

from clubperf.analytics.config import ensure_config
from clubperf.analytics.eligibility import health_contribution
from clubperf.analytics.utils_stats import trend_label
from clubperf.schema.club_schema import clubs_to_frame

logger = logging.getLogger(__name__)


def build_health_frame(clubs: List[Dict[str, Any]]) -> pd.DataFrame:
    """
    Club frame with a health_contribution column.

    Args:
        clubs: Canonical club dicts

    Returns:
        DataFrame (empty when clubs is empty)
    """
    df = clubs_to_frame(clubs)
    if df.empty:
        return df
    df['health_contribution'] = [health_contribution(club) for club in clubs]
    return df


def _division_goal_totals(snapshot: Dict[str, Any]) -> Dict[str, int]:
    totals: Dict[str, int] = {}
    for club in snapshot['clubs']:
        division_id = club.get('division_id')
        if not division_id:
            continue
        totals[division_id] = totals.get(division_id, 0) + club.get('dcp_goals', 0)
    return totals


def calculate_division_trends(snapshots: List[Dict[str, Any]],
                              config: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
    """
    Trend label per division of the latest snapshot.

    Compares summed goals in the latest snapshot against the one before it;
    with a single snapshot every division is 'stable'.
    """
    if not snapshots:
        return {}

    config = ensure_config(config)
    current = _division_goal_totals(snapshots[-1])
    if len(snapshots) < 2:
        return {division_id: 'stable' for division_id in current}

    previous = _division_goal_totals(snapshots[-2])
    return {
        division_id: trend_label(
            goals, previous.get(division_id, 0),
            config['TREND_IMPROVING_RATIO'], config['TREND_DECLINING_RATIO']
        )
        for division_id, goals in current.items()
    }


def _aggregate_divisions(clubs: List[Dict[str, Any]]) -> pd.DataFrame:
    df = build_health_frame(clubs)
    if df.empty:
        return df
    df = df[df['division_id'] != '']
    if df.empty:
        return df

    grouped = df.groupby('division_id', sort=False).agg(
        division_name=('division_name', 'first'),
        club_count=('club_id', 'size'),
        membership_total=('membership_count', 'sum'),
        total_dcp_goals=('dcp_goals', 'sum'),
        average_club_health=('health_contribution', 'mean'),
    ).reset_index()

    # Goals decide the order; health only breaks ties
    grouped = grouped.sort_values(
        ['total_dcp_goals', 'average_club_health'], ascending=[False, False]
    ).reset_index(drop=True)
    grouped['rank'] = range(1, len(grouped) + 1)
    return grouped


def compare_divisions(snapshots: List[Dict[str, Any]],
                      config: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    Division comparison for the latest snapshot.

    Args:
        snapshots: Snapshots sorted ascending by date
        config: Optional analytics config

    Returns:
        Division dicts with totals, average health, rank and trend
    """
    if not snapshots:
        return []

    grouped = _aggregate_divisions(snapshots[-1]['clubs'])
    if grouped.empty:
        return []

    trends = calculate_division_trends(snapshots, config)
    divisions = []
    for row in grouped.itertuples(index=False):
        divisions.append({
            'division_id': row.division_id,
            'division_name': row.division_name,
            'total_clubs': int(row.club_count),
            'membership_total': int(row.membership_total),
            'total_dcp_goals': int(row.total_dcp_goals),
            'average_club_health': float(row.average_club_health),
            'rank': int(row.rank),
            'trend': trends.get(row.division_id, 'stable'),
        })
    return divisions


def generate_division_rankings(snapshots: List[Dict[str, Any]],
                               config: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    Rank divisions by total goals, then average health contribution.

    Args:
        snapshots: Snapshots sorted ascending by date
        config: Optional analytics config

    Returns:
        Ranking dicts, rank 1 first
    """
    rankings = [
        {
            'division_id': division['division_id'],
            'division_name': division['division_name'],
            'rank': division['rank'],
            'club_count': division['total_clubs'],
            'membership_total': division['membership_total'],
            'total_dcp_goals': division['total_dcp_goals'],
            'average_club_health': division['average_club_health'],
            'trend': division['trend'],
        }
        for division in compare_divisions(snapshots, config)
    ]
    logger.info(f"Ranked {len(rankings)} divisions")
    return rankings


def generate_top_performing_areas(snapshots: List[Dict[str, Any]], limit: Optional[int] = None,
                                  config: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    Top areas by normalized score.

    normalized_score = 0.5 * average health contribution
                     + 0.5 * min(average goals per club / 10, 1)

    Args:
        snapshots: Snapshots sorted ascending by date
        limit: Maximum areas returned (default TOP_AREAS_LIMIT)
        config: Optional analytics config

    Returns:
        Area dicts, best first
    """
    if not snapshots:
        return []

    config = ensure_config(config)
    if limit is None:
        limit = config['TOP_AREAS_LIMIT']

    df = build_health_frame(snapshots[-1]['clubs'])
    if df.empty:
        return []
    df = df[df['area_id'] != '']
    if df.empty:
        return []

    grouped = df.groupby('area_id', sort=False).agg(
        area_name=('area_name', 'first'),
        division_id=('division_id', 'first'),
        total_clubs=('club_id', 'size'),
        total_dcp_goals=('dcp_goals', 'sum'),
        average_club_health=('health_contribution', 'mean'),
    ).reset_index()

    average_goals = grouped['total_dcp_goals'] / grouped['total_clubs']
    grouped['normalized_score'] = (
        0.5 * grouped['average_club_health'] + 0.5 * (average_goals / 10).clip(upper=1)
    )
    grouped = grouped.sort_values('normalized_score', ascending=False, kind='mergesort')

    areas = []
    for row in grouped.head(limit).itertuples(index=False):
        areas.append({
            'area_id': row.area_id,
            'area_name': row.area_name,
            'division_id': row.division_id,
            'total_clubs': int(row.total_clubs),
            'total_dcp_goals': int(row.total_dcp_goals),
            'average_club_health': float(row.average_club_health),
            'normalized_score': float(row.normalized_score),
        })
    return areas
