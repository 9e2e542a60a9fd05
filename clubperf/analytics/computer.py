#!/usr/bin/env python3
"""
District Analytics Computer

Runs every analytics stage over a district's ascending snapshot series and
assembles one result dict: district overview, club health, membership,
distinguished club, leadership, year-over-year, targets and the club trends
index.

The computation is a pure function of its inputs apart from the computed_at
timestamp.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from clubperf.analytics.club_health import (
    build_club_trends_index,
    build_vulnerable_clubs_data,
    generate_club_health_data,
)
from clubperf.analytics.config import resolve_config
from clubperf.analytics.distinguished import (
    count_recognition_tiers,
    empty_tier_counts,
    generate_distinguished_club_analytics,
    list_distinguished_clubs,
    project_year_end,
)
from clubperf.analytics.division_area import generate_division_rankings, generate_top_performing_areas
from clubperf.analytics.leadership import compute_leadership_insights
from clubperf.analytics.membership import (
    calculate_membership_change,
    compute_membership_analytics,
    generate_membership_trends,
    get_total_membership,
)
from clubperf.analytics.program_calendar import parse_snapshot_date
from clubperf.analytics.recognition import calculate_division_recognition
from clubperf.analytics.targets import compute_performance_targets
from clubperf.analytics.year_over_year import compute_year_over_year
from clubperf.schema.club_schema import clubs_to_frame, validate_club_frame
from clubperf.utils.logger import get_logger

SCHEMA_VERSION = "1.0.0"


def validate_snapshot_order(snapshots: List[Dict[str, Any]]) -> None:
    """
    Check that snapshot dates are strictly ascending.

    Raises:
        ValueError: If a snapshot is not dated after the one before it, or a
            date does not parse
    """
    dates = [parse_snapshot_date(snapshot['snapshot_date']) for snapshot in snapshots]
    for index in range(1, len(dates)):
        if dates[index] <= dates[index - 1]:
            raise ValueError(
                f"Snapshots must be sorted ascending by date: "
                f"{snapshots[index - 1]['snapshot_date']} is followed by {snapshots[index]['snapshot_date']}"
            )


def validate_snapshots(snapshots: List[Dict[str, Any]]) -> None:
    """Validate every snapshot's clubs against ClubSchema."""
    for snapshot in snapshots:
        validate_club_frame(clubs_to_frame(snapshot['clubs']))


def build_district_analytics(district_id: str, snapshots: List[Dict[str, Any]],
                             club_health: Dict[str, List[Dict[str, Any]]],
                             config: Dict[str, Any]) -> Dict[str, Any]:
    """District overview: totals, club lists, distinguished figures and rankings."""
    if not snapshots:
        return {
            'district_id': district_id,
            'date_range': {'start': None, 'end': None},
            'total_membership': 0,
            'membership_change': 0,
            'membership_trend': [],
            'all_clubs': [],
            'vulnerable_clubs': [],
            'thriving_clubs': [],
            'intervention_required_clubs': [],
            'distinguished_clubs': empty_tier_counts(),
            'distinguished_clubs_list': [],
            'distinguished_projection': empty_tier_counts(),
            'division_rankings': [],
            'division_recognition': [],
            'top_performing_areas': [],
        }

    latest = snapshots[-1]
    return {
        'district_id': district_id,
        'date_range': {'start': snapshots[0]['snapshot_date'], 'end': latest['snapshot_date']},
        'total_membership': get_total_membership(latest),
        'membership_change': calculate_membership_change(snapshots),
        'membership_trend': generate_membership_trends(snapshots)['membership_trend'],
        'all_clubs': club_health['all_clubs'],
        'vulnerable_clubs': club_health['vulnerable_clubs'],
        'thriving_clubs': club_health['thriving_clubs'],
        'intervention_required_clubs': club_health['intervention_required_clubs'],
        'distinguished_clubs': count_recognition_tiers(latest, config),
        'distinguished_clubs_list': list_distinguished_clubs(latest, config),
        'distinguished_projection': project_year_end(snapshots, config),
        'division_rankings': generate_division_rankings(snapshots, config),
        'division_recognition': calculate_division_recognition(latest, config),
        'top_performing_areas': generate_top_performing_areas(snapshots, config=config),
    }


def compute_district_analytics(district_id: str, snapshots: List[Dict[str, Any]],
                               config: Optional[Dict[str, Any]] = None,
                               logger: Optional[logging.Logger] = None) -> Dict[str, Any]:
    """
    Compute the full analytics set for one district.

    Args:
        district_id: District identifier
        snapshots: Canonical snapshots sorted ascending by date
        config: Config overrides applied on top of the defaults
        logger: Logger for progress messages (default: get_logger())

    Returns:
        Dict of every analytics result plus computed_at and schema_version

    Raises:
        ValueError: If snapshots are not in ascending date order
        pa.errors.SchemaError: If VALIDATE_SNAPSHOTS is set and a snapshot's
            clubs fail schema validation
    """
    logger = logger or get_logger()
    config = resolve_config(config)

    validate_snapshot_order(snapshots)
    if config['VALIDATE_SNAPSHOTS']:
        validate_snapshots(snapshots)

    if snapshots:
        logger.info(
            f"Computing analytics for district {district_id} over {len(snapshots)} snapshots "
            f"({snapshots[0]['snapshot_date']} to {snapshots[-1]['snapshot_date']})"
        )
    else:
        logger.warning(f"No snapshots for district {district_id}; returning empty analytics")

    current_date = snapshots[-1]['snapshot_date'] if snapshots else datetime.now(timezone.utc).date().isoformat()

    club_health = generate_club_health_data(snapshots, config)

    results = {
        'district_id': district_id,
        'computed_at': datetime.now(timezone.utc).isoformat(),
        'schema_version': SCHEMA_VERSION,
        'district_analytics': build_district_analytics(district_id, snapshots, club_health, config),
        'membership_trends': generate_membership_trends(snapshots),
        'club_health': club_health,
        'membership_analytics': compute_membership_analytics(district_id, snapshots, config),
        'vulnerable_clubs': build_vulnerable_clubs_data(district_id, club_health),
        'leadership_insights': compute_leadership_insights(district_id, snapshots, config),
        'distinguished_club_analytics': generate_distinguished_club_analytics(district_id, snapshots, config),
        'year_over_year': compute_year_over_year(district_id, snapshots, current_date, config),
        'performance_targets': compute_performance_targets(district_id, snapshots, config),
        'club_trends_index': build_club_trends_index(district_id, club_health),
    }

    logger.info(
        f"District {district_id}: {len(club_health['all_clubs'])} clubs analysed, "
        f"{len(club_health['vulnerable_clubs'])} vulnerable, "
        f"{len(club_health['intervention_required_clubs'])} intervention required"
    )
    return results
