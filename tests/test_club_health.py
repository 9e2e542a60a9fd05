#!/usr/bin/env python3
"""
Test suite for club health classification and trends
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from clubperf.analytics.club_health import (
    analyze_club_trends,
    build_club_trends_index,
    build_vulnerable_clubs_data,
    count_health_categories,
    generate_club_health_data,
)
from clubperf.analytics.eligibility import (
    INTERVENTION_REQUIRED,
    NOT_DISTINGUISHED,
    STABLE,
    THRIVING,
    VULNERABLE,
    classify_club_health,
)
from clubperf.analytics.recognition import calculate_area_recognition
from clubperf.analytics.targets import compute_performance_targets


@pytest.fixture
def series(make_club, make_snapshot):
    """Three monthly snapshots; club 3 joins late"""
    return [
        make_snapshot('2024-11-30', [
            make_club('1', membership=22, goals=1),
            make_club('2', membership=14, goals=0),
        ]),
        make_snapshot('2024-12-31', [
            make_club('1', membership=23, goals=2, base=22),
            make_club('2', membership=13, goals=1, base=14),
        ]),
        make_snapshot('2025-01-31', [
            make_club('1', membership=24, goals=4, base=22),
            make_club('2', membership=11, goals=1, base=14),
            make_club('3', membership=20, goals=0),
        ]),
    ]


class TestClubTrends:
    """Test cases for ClubTrend construction"""

    def test_one_trend_per_latest_club(self, series):
        """Test that trends follow the latest snapshot's clubs"""
        trends = analyze_club_trends(series)
        assert [trend['club_id'] for trend in trends] == ['1', '2', '3']

    def test_series_not_padded_for_absent_snapshots(self, series):
        """Test that a club missing earlier gets fewer points"""
        trends = {trend['club_id']: trend for trend in analyze_club_trends(series)}

        assert [p['count'] for p in trends['1']['membership_trend']] == [22, 23, 24]
        assert [p['goals_achieved'] for p in trends['1']['dcp_goals_trend']] == [1, 2, 4]
        assert len(trends['3']['membership_trend']) == 1
        assert trends['3']['membership_trend'][0]['date'] == '2025-01-31'

    def test_classification_uses_latest_values(self, series):
        """Test status, score, tier and net growth from the latest snapshot"""
        trends = {trend['club_id']: trend for trend in analyze_club_trends(series)}

        assert trends['1']['current_status'] == THRIVING
        assert trends['1']['net_growth'] == 2
        assert trends['1']['health_score'] == 0.5
        assert trends['2']['current_status'] == INTERVENTION_REQUIRED
        assert trends['3']['current_status'] == VULNERABLE
        assert trends['3']['distinguished_level'] == 'NotDistinguished'

    def test_empty_series(self):
        """Test that no snapshots yields no trends"""
        assert analyze_club_trends([]) == []


class TestClubHealthData:
    """Test cases for the categorized lists"""

    def test_subsets_are_same_objects(self, series):
        """Test that every subset entry is the all-clubs object itself"""
        health = generate_club_health_data(series)
        all_ids = {id(trend) for trend in health['all_clubs']}

        for key in ('thriving_clubs', 'vulnerable_clubs', 'intervention_required_clubs'):
            for trend in health[key]:
                assert id(trend) in all_ids

    def test_subsets_partition_by_status(self, series):
        """Test subset contents"""
        health = generate_club_health_data(series)

        assert [t['club_id'] for t in health['thriving_clubs']] == ['1']
        assert [t['club_id'] for t in health['vulnerable_clubs']] == ['3']
        assert [t['club_id'] for t in health['intervention_required_clubs']] == ['2']

    def test_counts_match_lists(self, series):
        """Test that aggregate counts agree with the categorized lists"""
        health = generate_club_health_data(series)
        counts = count_health_categories(series[-1])

        assert counts[THRIVING] == len(health['thriving_clubs'])
        assert counts[VULNERABLE] == len(health['vulnerable_clubs'])
        assert counts[INTERVENTION_REQUIRED] == len(health['intervention_required_clubs'])
        assert counts[STABLE] == 0

    def test_vulnerable_data_and_index(self, series):
        """Test the vulnerable summary and the club index reuse the trends"""
        health = generate_club_health_data(series)
        vulnerable = build_vulnerable_clubs_data('D42', health)
        index = build_club_trends_index('D42', health)

        assert vulnerable['total_vulnerable_clubs'] == 1
        assert vulnerable['intervention_required_clubs'] == 1
        assert vulnerable['vulnerable_clubs'][0] is health['all_clubs'][2]
        assert set(index['clubs']) == {'1', '2', '3'}
        assert index['clubs']['1'] is health['all_clubs'][0]


class TestPartialConfig:
    """Test cases for config dicts that override only some keys"""

    def test_health_data_with_one_key(self, make_club, make_snapshot):
        """Test that a single override keeps every other default"""
        snapshots = [make_snapshot('2025-08-01', [make_club('1', membership=20, goals=5)])]
        health = generate_club_health_data(snapshots, {'CSP_REQUIRED_FROM': '2025-07-01'})

        trend = health['all_clubs'][0]
        assert trend['current_status'] == VULNERABLE
        assert trend['risk_factors'] == ["CSP not submitted"]
        assert trend['distinguished_level'] == NOT_DISTINGUISHED

    def test_classify_with_one_key(self, make_club):
        """Test a raised thriving threshold with defaults elsewhere"""
        club = make_club('1', membership=20, goals=5)

        assert classify_club_health(club, '2025-01-31')[0] == THRIVING
        status, _ = classify_club_health(club, '2025-01-31', config={'THRIVING_MEMBERSHIP': 25})
        assert status == VULNERABLE

    def test_other_stages_with_one_key(self, make_club, make_snapshot):
        """Test recognition and targets with a partial override"""
        snapshot = make_snapshot('2025-01-31', [make_club('1', membership=20, goals=5)])

        area = calculate_area_recognition(snapshot, {'DAP_PAID_CLUBS_PERCENT': 100})[0]
        assert area['meets_paid_threshold'] is True
        assert compute_performance_targets('D42', [snapshot], {'MEMBERSHIP_GROWTH_RATE': 0.5})['membership_target'] == 30
