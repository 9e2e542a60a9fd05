#!/usr/bin/env python3
"""
Club Eligibility Rules

The single source of the club-level rules used across the analytics engine:
net growth, recognition tier, plan-submitted gating, health status with risk
factors, the per-club health score and the simpler health contribution used
for division and area rankings.

Per-club trends, aggregate counts, projections and year-over-year figures all
call these functions, so their results always agree.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from clubperf.analytics.config import ensure_config
from clubperf.analytics.program_calendar import (
    get_dcp_checkpoint,
    get_month_name,
    get_program_month,
    parse_snapshot_date,
)
from clubperf.normalizers.record_fields import parse_csp_flag

logger = logging.getLogger(__name__)

# Recognition tiers, lowest first
NOT_DISTINGUISHED = 'NotDistinguished'
DISTINGUISHED = 'Distinguished'
SELECT = 'Select'
PRESIDENT = 'President'
SMEDLEY = 'Smedley'
TIER_ORDER = [NOT_DISTINGUISHED, DISTINGUISHED, SELECT, PRESIDENT, SMEDLEY]

# Health statuses
THRIVING = 'thriving'
STABLE = 'stable'
VULNERABLE = 'vulnerable'
INTERVENTION_REQUIRED = 'intervention-required'


def tier_rank(tier: str) -> int:
    """Ordinal of a recognition tier (NotDistinguished = 0, Smedley = 4)."""
    return TIER_ORDER.index(tier)


def calculate_net_growth(club: Dict[str, Any]) -> int:
    """Current membership minus the program-year base (unset base counts as 0)."""
    return club.get('membership_count', 0) - (club.get('membership_base') or 0)


def determine_recognition_tier(goals: int, membership: int, net_growth: int) -> str:
    """
    Highest recognition tier whose criteria are met.

    Tiers are checked top-down so a club meeting several criteria always
    gets the highest one:

    - Smedley: 10+ goals and 25+ members
    - President: 9+ goals and 20+ members
    - Select: 7+ goals and (20+ members or net growth 5+)
    - Distinguished: 5+ goals and (20+ members or net growth 3+)

    Args:
        goals: Program goals achieved
        membership: Current membership
        net_growth: Membership minus base

    Returns:
        Tier name
    """
    if goals >= 10 and membership >= 25:
        return SMEDLEY
    if goals >= 9 and membership >= 20:
        return PRESIDENT
    if goals >= 7 and (membership >= 20 or net_growth >= 5):
        return SELECT
    if goals >= 5 and (membership >= 20 or net_growth >= 3):
        return DISTINGUISHED
    return NOT_DISTINGUISHED


def is_csp_submitted(club: Dict[str, Any], snapshot_date: Optional[str] = None,
                     config: Optional[Dict[str, Any]] = None) -> bool:
    """
    Whether the club's success plan counts as submitted.

    An explicit flag on the club wins. Without one the plan counts as
    submitted, except for snapshots dated on or after CSP_REQUIRED_FROM when
    that cutover is configured.
    """
    value = club.get('csp_submitted')
    flag = value if isinstance(value, bool) else parse_csp_flag(value)
    if flag is not None:
        return flag

    cutover = ensure_config(config).get('CSP_REQUIRED_FROM')
    if cutover and snapshot_date:
        return parse_snapshot_date(snapshot_date) < parse_snapshot_date(cutover)
    return True


def club_recognition_tier(club: Dict[str, Any], csp_submitted: bool = True) -> str:
    """Recognition tier for a canonical club; an unsubmitted plan forces NotDistinguished."""
    if not csp_submitted:
        return NOT_DISTINGUISHED
    return determine_recognition_tier(
        club.get('dcp_goals', 0),
        club.get('membership_count', 0),
        calculate_net_growth(club),
    )


def calculate_health_score(membership: int, goals: int) -> float:
    """
    Per-club health score: 1.0, 0.5 or 0.0.

    1.0 needs 20+ members and 5+ goals; 0.5 needs 12+ members or 3+ goals.
    """
    if membership >= 20 and goals >= 5:
        return 1.0
    if membership >= 12 or goals >= 3:
        return 0.5
    return 0.0


def classify_club_health(club: Dict[str, Any], snapshot_date: str,
                         csp_submitted: bool = True,
                         config: Optional[Dict[str, Any]] = None) -> Tuple[str, List[str]]:
    """
    Assign a health status and explanatory risk factors.

    First match wins:
    1. intervention-required: membership below the intervention threshold
       and net growth below the override
    2. thriving: membership requirement, monthly goal checkpoint and plan
       submission all met
    3. vulnerable: otherwise, with one risk factor per unmet requirement

    Args:
        club: Canonical club dict
        snapshot_date: Date of the snapshot the club comes from
        csp_submitted: Plan-submitted flag (see is_csp_submitted)
        config: Optional analytics config

    Returns:
        Tuple of (status, risk factors)
    """
    config = ensure_config(config)
    membership = club.get('membership_count', 0)
    goals = club.get('dcp_goals', 0)
    net_growth = calculate_net_growth(club)

    intervention_membership = config['INTERVENTION_MEMBERSHIP']
    intervention_growth = config['INTERVENTION_NET_GROWTH']
    if membership < intervention_membership and net_growth < intervention_growth:
        return INTERVENTION_REQUIRED, [
            f"Membership below {intervention_membership} (critical)",
            f"Net growth since July: {net_growth} (need {intervention_growth}+ to override)",
        ]

    month = get_program_month(snapshot_date)
    required_goals = get_dcp_checkpoint(month, config)

    thriving_membership = config['THRIVING_MEMBERSHIP']
    thriving_growth = config['THRIVING_NET_GROWTH']
    membership_met = membership >= thriving_membership or net_growth >= thriving_growth
    checkpoint_met = goals >= required_goals

    if membership_met and checkpoint_met and csp_submitted:
        return THRIVING, []

    risk_factors = []
    if not membership_met:
        risk_factors.append(
            f"Membership below threshold ({membership} members, "
            f"need {thriving_membership}+ or net growth {thriving_growth}+)"
        )
    if not checkpoint_met:
        plural = 's' if goals != 1 else ''
        risk_factors.append(
            f"DCP checkpoint not met: {goals} goal{plural} achieved, "
            f"{required_goals} required for {get_month_name(month)}"
        )
    if not csp_submitted:
        risk_factors.append("CSP not submitted")

    return VULNERABLE, risk_factors


def health_contribution(club: Dict[str, Any]) -> float:
    """
    Ranking health contribution: 0 critical, 0.5 at-risk, 1 healthy.

    Critical is under 12 members; at-risk is 12+ members with no goals.
    """
    membership = club.get('membership_count', 0)
    if membership < 12:
        return 0.0
    if club.get('dcp_goals', 0) == 0:
        return 0.5
    return 1.0


def is_healthy_club(club: Dict[str, Any]) -> bool:
    """12+ members and at least one goal achieved."""
    return health_contribution(club) == 1.0
