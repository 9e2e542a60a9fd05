#!/usr/bin/env python3
"""
Test suite for record field extraction and alias tables
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from clubperf.normalizers.column_aliases import CLUB_FIELD_ALIASES, PAYMENT_FIELD_ALIASES
from clubperf.normalizers.record_fields import (
    extract_number,
    extract_string,
    normalize_club_id,
    parse_area,
    parse_csp_flag,
    parse_division,
    parse_leading_int,
)


class TestNormalizeClubId:
    """Test cases for identifier normalization"""

    def test_strips_leading_zeros(self):
        """Test that padding is removed"""
        assert normalize_club_id('00009905') == '9905'
        assert normalize_club_id('9905') == '9905'

    def test_all_zero_identifier_kept(self):
        """Test that an all-zero id keeps its original text"""
        assert normalize_club_id('0000') == '0000'
        assert normalize_club_id('0') == '0'

    def test_inner_zeros_untouched(self):
        """Test that only leading zeros are stripped"""
        assert normalize_club_id('0100200') == '100200'


class TestExtraction:
    """Test cases for alias-driven extraction"""

    def test_first_present_alias_wins(self):
        """Test that aliases are tried in order"""
        record = {'Membership': '15', 'Active Members': '22'}
        assert extract_number(record, *CLUB_FIELD_ALIASES['membership_count']) == 22

    def test_later_alias_used_when_earlier_missing(self):
        """Test fallback to a later spelling"""
        record = {'October Renewals': '6'}
        assert extract_number(record, *PAYMENT_FIELD_ALIASES['october_renewals']) == 6

    def test_unparseable_alias_falls_through(self):
        """Test that a non-numeric cell does not stop the alias chain"""
        record = {'Active Members': 'abc', 'Membership': '11'}
        assert extract_number(record, 'Active Members', 'Membership') == 11

    def test_missing_number_defaults_to_zero(self):
        """Test the zero default"""
        assert extract_number({}, 'Active Members') == 0

    def test_numeric_cells_returned_unchanged(self):
        """Test that already-numeric cells pass through"""
        assert extract_number({'Goals Met': 7}, 'Goals Met') == 7

    def test_leading_integer_semantics(self):
        """Test leading integer parsing"""
        assert parse_leading_int('12abc') == 12
        assert parse_leading_int(' 7') == 7
        assert parse_leading_int('-3') == -3
        assert parse_leading_int('abc') is None

    def test_extract_string_strips(self):
        """Test that strings are stripped and None skipped"""
        assert extract_string({'Club Name': None, 'ClubName': ' Alpha '}, 'Club Name', 'ClubName') == 'Alpha'
        assert extract_string({}, 'Club Name') is None


class TestLabels:
    """Test cases for division and area label parsing"""

    @pytest.mark.parametrize("value,expected", [
        ('A', ('A', 'Division A')),
        ('Division A', ('A', 'Division A')),
        ('division c', ('c', 'division c')),
        ('', ('', '')),
    ])
    def test_parse_division(self, value, expected):
        """Test bare, prefixed and empty division cells"""
        assert parse_division(value) == expected

    def test_parse_area(self):
        """Test bare and prefixed area cells"""
        assert parse_area('12') == ('12', 'Area 12')
        assert parse_area('Area 12') == ('12', 'Area 12')


class TestCspFlag:
    """Test cases for plan-submitted parsing"""

    @pytest.mark.parametrize("value", ['Yes', 'true', '1', 'Submitted', 'Y'])
    def test_true_values(self, value):
        """Test recognised true answers"""
        assert parse_csp_flag(value) is True

    @pytest.mark.parametrize("value", ['No', 'FALSE', '0', 'Not Submitted', 'n'])
    def test_false_values(self, value):
        """Test recognised false answers"""
        assert parse_csp_flag(value) is False

    def test_blank_is_unknown(self):
        """Test that blanks leave the decision to the caller"""
        assert parse_csp_flag(None) is None
        assert parse_csp_flag('  ') is None

    def test_unrecognised_text_counts_as_submitted(self):
        """Test the default-true fallback for unknown text"""
        assert parse_csp_flag('pending review') is True
