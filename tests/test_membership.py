#!/usr/bin/env python3
"""
Test suite for membership analytics
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from clubperf.analytics.membership import (
    calculate_calendar_year_comparison,
    calculate_growth_rate,
    calculate_membership_change,
    calculate_program_year_change,
    calculate_retention_rate,
    calculate_top_declining_clubs,
    calculate_top_growth_clubs,
    compute_membership_analytics,
    generate_membership_trends,
    identify_seasonal_patterns,
)


@pytest.fixture
def snapshots(make_club, make_snapshot):
    """A year of snapshots; club 1 grows, club 2 shrinks, club 3 holds"""
    return [
        make_snapshot('2024-01-31', [make_club('1', membership=20), make_club('2', membership=15)]),
        make_snapshot('2024-12-31', [
            make_club('1', membership=25), make_club('2', membership=10), make_club('3', membership=12),
        ]),
        make_snapshot('2025-01-31', [
            make_club('1', membership=30), make_club('2', membership=8), make_club('3', membership=12),
        ]),
    ]


class TestMembershipFigures:
    """Test cases for district membership figures"""

    def test_change_and_growth_rate(self, snapshots):
        """Test first-to-last change and percentage growth"""
        assert calculate_membership_change(snapshots) == 15
        assert calculate_growth_rate(snapshots) == 42.9

    def test_growth_rate_from_zero(self, make_club, make_snapshot):
        """Test growth from an empty district"""
        grown = [make_snapshot('2024-07-31', []), make_snapshot('2024-08-31', [make_club('1', membership=5)])]
        assert calculate_growth_rate(grown) == 100.0
        assert calculate_growth_rate(grown[:1]) == 0.0

    def test_retention_rate(self, snapshots, make_club, make_snapshot):
        """Test payments over twice membership, capped at 100"""
        assert calculate_retention_rate(snapshots[-1]) == 50.0
        overpaid = make_snapshot('2025-01-31', [make_club('1', membership=10, payments_count=50)])
        assert calculate_retention_rate(overpaid) == 100.0

    def test_top_clubs(self, snapshots):
        """Test growth and decline lists exclude unchanged clubs"""
        assert calculate_top_growth_clubs(snapshots) == [{'club_id': '1', 'club_name': 'Club 1', 'growth': 10}]
        assert calculate_top_declining_clubs(snapshots) == [{'club_id': '2', 'club_name': 'Club 2', 'decline': 7}]

    def test_top_clubs_limit(self, make_club, make_snapshot):
        """Test the limit"""
        first = make_snapshot('2024-12-31', [make_club(str(i), membership=10) for i in range(15)])
        last = make_snapshot('2025-01-31', [make_club(str(i), membership=11 + i) for i in range(15)])
        top = calculate_top_growth_clubs([first, last], limit=3)
        assert [c['club_id'] for c in top] == ['14', '13', '12']


class TestSeriesAndComparisons:
    """Test cases for series, program year change and comparisons"""

    def test_trends(self, snapshots):
        """Test membership and payments series"""
        trends = generate_membership_trends(snapshots)
        assert [p['count'] for p in trends['membership_trend']] == [35, 47, 50]
        assert [p['payments'] for p in trends['payments_trend']] == [35, 47, 50]

    def test_program_year_change(self, snapshots):
        """Test change since the first point after July 1"""
        trend = generate_membership_trends(snapshots)['membership_trend']
        assert calculate_program_year_change(trend) == 3

    def test_seasonal_patterns(self, snapshots):
        """Test month-keyed average changes"""
        trend = generate_membership_trends(snapshots)['membership_trend']
        patterns = identify_seasonal_patterns(trend)

        assert [(p['month'], p['average_change'], p['trend']) for p in patterns] == [
            (1, 3.0, 'growth'), (12, 12.0, 'growth'),
        ]

    def test_calendar_year_comparison(self, snapshots):
        """Test the comparison against the previous calendar year"""
        comparison = calculate_calendar_year_comparison(snapshots)

        assert comparison['previous_year'] == 2024
        assert comparison['membership_change'] == 15
        assert comparison['membership_change_percent'] == 42.9
        assert comparison['payments_change_percent'] == 42.9

    def test_no_previous_year(self, snapshots):
        """Test that the comparison is absent without previous-year data"""
        assert calculate_calendar_year_comparison(snapshots[-1:]) is None


class TestComputeMembershipAnalytics:
    """Test cases for the combined analytics"""

    def test_combined(self, snapshots):
        """Test the combined dict"""
        analytics = compute_membership_analytics('D42', snapshots)

        assert analytics['total_membership'] == 50
        assert analytics['membership_change'] == 15
        assert analytics['retention_rate'] == 50.0
        assert analytics['year_over_year']['current_year'] == 2025

    def test_empty(self):
        """Test zeros for no snapshots"""
        analytics = compute_membership_analytics('D42', [])
        assert analytics['total_membership'] == 0
        assert analytics['year_over_year'] is None
