"""
Analytics module for club performance snapshots.

This module provides club health classification, division and area
aggregation, leadership insights and recognition target calculations.
"""

from .computer import compute_district_analytics
from .config import load_config, resolve_config
from .club_health import generate_club_health_data
from .eligibility import determine_recognition_tier, classify_club_health
from .targets import calculate_growth_targets, calculate_percentage_targets, determine_achieved_level

__all__ = [
    'compute_district_analytics',
    'load_config',
    'resolve_config',
    'generate_club_health_data',
    'determine_recognition_tier',
    'classify_club_health',
    'calculate_growth_targets',
    'calculate_percentage_targets',
    'determine_achieved_level',
]
