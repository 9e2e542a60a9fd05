#!/usr/bin/env python3
"""
Test suite for the target calculator
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from clubperf.analytics.targets import (
    DISTINGUISHED_PERCENTAGES,
    GROWTH_PERCENTAGES,
    TARGET_LEVELS,
    build_recognition_target,
    calculate_growth_targets,
    calculate_percentage_targets,
    calculate_recognition_targets,
    compute_performance_targets,
    determine_achieved_level,
)

LEVEL_RANK = {None: 0, 'distinguished': 1, 'select': 2, 'presidents': 3, 'smedley': 4}


class TestTargetTables:
    """Test cases for growth and percentage target tables"""

    def test_growth_targets_base_100(self):
        """Test the growth table for base 100"""
        assert calculate_growth_targets(100) == {
            'distinguished': 101, 'select': 103, 'presidents': 105, 'smedley': 108,
        }

    def test_percentage_targets_base_95(self):
        """Test the percentage table for base 95"""
        assert calculate_percentage_targets(95) == {
            'distinguished': 43, 'select': 48, 'presidents': 53, 'smedley': 57,
        }

    def test_float_artifact_rounds_up(self):
        """Test that 100 * 0.55 lands above 55 and rounds up"""
        assert calculate_percentage_targets(100)['presidents'] == 56

    def test_growth_targets_small_base(self):
        """Test that every tier of a small base needs at least one more"""
        assert calculate_growth_targets(10) == {
            'distinguished': 11, 'select': 11, 'presidents': 11, 'smedley': 11,
        }

    @pytest.mark.parametrize("base", list(range(1, 201)) + [250, 999, 1000, 5000])
    def test_ceiling_and_ordering(self, base):
        """Test integer ceilings and non-decreasing tiers for both tables"""
        growth = calculate_growth_targets(base)
        percentage = calculate_percentage_targets(base)

        for level in TARGET_LEVELS:
            growth_product = base * (1 + GROWTH_PERCENTAGES[level])
            percentage_product = base * DISTINGUISHED_PERCENTAGES[level]
            assert isinstance(growth[level], int)
            assert isinstance(percentage[level], int)
            assert growth_product <= growth[level] < growth_product + 1
            assert percentage_product <= percentage[level] < percentage_product + 1

        assert [growth[level] for level in TARGET_LEVELS] == sorted(growth.values())
        assert [percentage[level] for level in TARGET_LEVELS] == sorted(percentage.values())


class TestAchievedLevel:
    """Test cases for achieved-level determination"""

    def test_highest_level_reached(self):
        """Test each boundary of the base 100 growth table"""
        targets = calculate_growth_targets(100)

        assert determine_achieved_level(100, targets) is None
        assert determine_achieved_level(101, targets) == 'distinguished'
        assert determine_achieved_level(104, targets) == 'select'
        assert determine_achieved_level(105, targets) == 'presidents'
        assert determine_achieved_level(108, targets) == 'smedley'

    def test_equal_targets_report_highest(self):
        """Test that identical targets resolve to the top tier"""
        targets = {'distinguished': 11, 'select': 11, 'presidents': 11, 'smedley': 11}
        assert determine_achieved_level(11, targets) == 'smedley'
        assert determine_achieved_level(10, targets) is None

    def test_missing_targets(self):
        """Test that no table means unknown, not unachieved"""
        assert determine_achieved_level(500, None) is None

    @pytest.mark.parametrize("base", [1, 10, 37, 95, 100, 1000])
    def test_monotonic(self, base):
        """Test that a rising current value never lowers the level"""
        for targets in (calculate_growth_targets(base), calculate_percentage_targets(base)):
            ranks = [LEVEL_RANK[determine_achieved_level(current, targets)] for current in range(0, base * 2 + 2)]
            assert ranks == sorted(ranks)

    def test_recognition_target(self):
        """Test the combined metric record"""
        record = build_recognition_target(104, 100)
        assert record['targets']['select'] == 103
        assert record['achieved_level'] == 'select'

    @pytest.mark.parametrize("base", [None, 0, -3])
    def test_recognition_target_without_base(self, base):
        """Test that a missing base leaves targets and level empty"""
        record = build_recognition_target(12, base)
        assert record['targets'] is None
        assert record['achieved_level'] is None


@pytest.fixture
def snapshots(make_club, make_snapshot):
    """Five 20-member clubs growing to six clubs and 110 members"""
    base_clubs = [make_club(str(i), membership=20, goals=5) for i in range(5)]
    latest_clubs = [make_club(str(i), membership=20, goals=5) for i in range(5)]
    latest_clubs.append(make_club('5', membership=10, goals=1))
    return [make_snapshot('2024-07-31', base_clubs), make_snapshot('2025-01-31', latest_clubs)]


class TestPerformanceTargets:
    """Test cases for district performance targets"""

    def test_targets_and_progress(self, snapshots):
        """Test membership, distinguished and club growth targets"""
        result = compute_performance_targets('D42', snapshots)

        assert result['membership_target'] == 105
        assert result['distinguished_target'] == 3
        assert result['club_growth_target'] == 1
        assert result['current_progress'] == {'membership': 110, 'distinguished': 5, 'club_growth': 1}
        assert result['projected_achievement'] == {'membership': True, 'distinguished': True, 'club_growth': True}

    def test_recognition_targets(self, snapshots):
        """Test paid clubs, payments and distinguished club targets"""
        targets = calculate_recognition_targets(snapshots)

        assert targets['paid_clubs']['base'] == 5
        assert targets['paid_clubs']['current'] == 6
        assert targets['paid_clubs']['targets'] == {
            'distinguished': 6, 'select': 6, 'presidents': 6, 'smedley': 6,
        }
        assert targets['paid_clubs']['achieved_level'] == 'smedley'
        assert targets['membership_payments']['targets'] == calculate_growth_targets(100)
        assert targets['distinguished_clubs']['targets'] == calculate_percentage_targets(5)
        assert targets['distinguished_clubs']['achieved_level'] == 'smedley'

    def test_club_growth_target_floor(self, make_club, make_snapshot):
        """Test that the club growth target is at least one"""
        result = compute_performance_targets('D42', [make_snapshot('2025-01-31', [make_club('1')])])
        assert result['club_growth_target'] == 1
        assert result['projected_achievement']['club_growth'] is False

    def test_empty_base_snapshot(self, make_club, make_snapshot):
        """Test that an empty first snapshot leaves recognition targets unavailable"""
        series = [make_snapshot('2024-07-31', []), make_snapshot('2025-01-31', [make_club('1')])]
        targets = calculate_recognition_targets(series)

        assert targets['paid_clubs']['targets'] is None
        assert targets['paid_clubs']['achieved_level'] is None

    def test_empty(self):
        """Test zeros and unavailable targets without snapshots"""
        result = compute_performance_targets('D42', [])

        assert result['membership_target'] == 0
        assert result['projected_achievement']['membership'] is False
        assert all(t['targets'] is None for t in result['recognition_targets'].values())

    def test_no_paid_clubs(self, make_club, make_snapshot):
        """Test that a zero distinguished target reports no projected achievement"""
        snapshot = make_snapshot('2025-01-31', [make_club('1', membership=20, goals=5, club_status='Suspended')])
        result = compute_performance_targets('D42', [snapshot])

        assert result['distinguished_target'] == 0
        assert result['projected_achievement']['distinguished'] is False
        assert result['projected_achievement']['membership'] is True
