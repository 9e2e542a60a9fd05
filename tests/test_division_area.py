#!/usr/bin/env python3
"""
Test suite for division rankings and top areas
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from clubperf.analytics.division_area import (
    calculate_division_trends,
    compare_divisions,
    generate_division_rankings,
    generate_top_performing_areas,
)


@pytest.fixture
def snapshots(make_club, make_snapshot):
    """Two snapshots; divisions A and B tie on goals in the latest"""
    return [
        make_snapshot('2024-12-31', [
            make_club('1', membership=20, goals=1, division='A', area='1'),
            make_club('2', membership=10, goals=1, division='A', area='2'),
            make_club('3', membership=15, goals=5, division='B', area='3'),
        ]),
        make_snapshot('2025-01-31', [
            make_club('1', membership=20, goals=3, division='A', area='1'),
            make_club('2', membership=10, goals=2, division='A', area='2'),
            make_club('3', membership=15, goals=5, division='B', area='3'),
            make_club('4', membership=30, goals=9, division='', area=''),
        ]),
    ]


class TestDivisionRankings:
    """Test cases for division ranking"""

    def test_health_breaks_goal_ties(self, snapshots):
        """Test that the healthier division ranks first on equal goals"""
        rankings = generate_division_rankings(snapshots)

        assert [r['division_id'] for r in rankings] == ['B', 'A']
        assert [r['rank'] for r in rankings] == [1, 2]
        assert rankings[0]['average_club_health'] == 1.0
        assert rankings[1]['average_club_health'] == 0.5

    def test_totals(self, snapshots):
        """Test club counts, membership and goal totals"""
        division_a = next(d for d in compare_divisions(snapshots) if d['division_id'] == 'A')

        assert division_a['total_clubs'] == 2
        assert division_a['membership_total'] == 30
        assert division_a['total_dcp_goals'] == 5
        assert division_a['division_name'] == 'Division A'

    def test_clubs_without_division_skipped(self, snapshots):
        """Test that the unassigned club forms no division"""
        assert {d['division_id'] for d in compare_divisions(snapshots)} == {'A', 'B'}

    def test_trend_labels(self, snapshots):
        """Test improving and stable labels against the previous snapshot"""
        trends = calculate_division_trends(snapshots)

        assert trends['A'] == 'improving'
        assert trends['B'] == 'stable'

    def test_single_snapshot_is_stable(self, snapshots):
        """Test the single-snapshot default"""
        rankings = generate_division_rankings(snapshots[-1:])
        assert {r['trend'] for r in rankings} == {'stable'}

    def test_empty_input(self):
        """Test that no snapshots yields no rankings"""
        assert generate_division_rankings([]) == []
        assert compare_divisions([]) == []


class TestTopPerformingAreas:
    """Test cases for the area score"""

    def test_sorted_by_normalized_score(self, snapshots):
        """Test area order and scores"""
        areas = generate_top_performing_areas(snapshots)

        assert [a['area_id'] for a in areas] == ['3', '1', '2']
        assert areas[0]['normalized_score'] == pytest.approx(0.75)
        assert areas[1]['normalized_score'] == pytest.approx(0.65)
        assert areas[2]['normalized_score'] == pytest.approx(0.1)

    def test_limit(self, snapshots):
        """Test the top-N cut"""
        assert len(generate_top_performing_areas(snapshots, limit=2)) == 2

    def test_goal_component_capped(self, make_club, make_snapshot):
        """Test that average goals above 10 cap at a full half point"""
        areas = generate_top_performing_areas([make_snapshot('2025-01-31', [make_club('1', membership=30, goals=10)])])
        assert areas[0]['normalized_score'] == pytest.approx(1.0)

    def test_empty_input(self):
        """Test that no snapshots yields no areas"""
        assert generate_top_performing_areas([]) == []
