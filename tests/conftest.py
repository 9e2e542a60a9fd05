#!/usr/bin/env python3
"""
Pytest configuration and fixtures
"""

import pytest
import tempfile
import shutil
from pathlib import Path
import sys

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))


def build_club(club_id, membership=20, goals=5, base=None, division='A', area='1', **extra):
    """Canonical club dict with sensible defaults."""
    club = {
        'club_id': club_id,
        'club_name': f"Club {club_id}",
        'division_id': division,
        'division_name': f"Division {division}" if division else 'Unknown Division',
        'area_id': area,
        'area_name': f"Area {area}" if area else 'Unknown Area',
        'membership_count': membership,
        'payments_count': membership,
        'dcp_goals': goals,
        'status': 'Active',
        'october_renewals': 0,
        'april_renewals': 0,
        'new_members': 0,
        'membership_base': membership if base is None else base,
    }
    club.update(extra)
    return club


def build_snapshot(snapshot_date, clubs, district_id='D42', club_performance=None):
    """Canonical snapshot dict around a club list."""
    return {
        'district_id': district_id,
        'snapshot_date': snapshot_date,
        'clubs': clubs,
        'divisions': [],
        'areas': [],
        'totals': {
            'total_clubs': len(clubs),
            'total_membership': sum(c['membership_count'] for c in clubs),
            'total_payments': sum(c['payments_count'] for c in clubs),
            'distinguished_clubs': 0,
            'select_distinguished_clubs': 0,
            'president_distinguished_clubs': 0,
        },
        'club_performance': club_performance or [],
        'division_performance': [],
        'district_performance': [],
    }


@pytest.fixture
def make_club():
    """Factory for canonical club dicts"""
    return build_club


@pytest.fixture
def make_snapshot():
    """Factory for canonical snapshots"""
    return build_snapshot


@pytest.fixture
def club_performance_table():
    """Raw club performance export, header row first, with a footer row"""
    return [
        ['Division', 'Area', 'Club Number', 'Club Name', 'Club Status', 'Mem. Base',
         'Active Members', 'Goals Met', 'Club Distinguished Status', 'Oct. Ren.',
         'Apr. Ren.', 'New Members', 'Total to Date'],
        ['A', '1', '00009905', 'Sunrise Speakers', 'Active', '18', '24', '7',
         'Select Distinguished', '1', '1', '1', '3'],
        ['Division B', 'Area 12', '1234', 'Evening Orators', 'Active', '15', '10', '2',
         '', '5', '2', '0', '7'],
        ['A', '2', '5555', 'Lunch Club', 'Suspended', '9', '8', '0', '', '0', '0', '0', '0'],
        ['', '', '', 'No Number Club', 'Active', '10', '10', '0', '', '0', '0', '0', '0'],
        ['Month of Jan, As of 01/31/2025', None, None, None],
    ]


@pytest.fixture
def district_performance_table():
    """Raw district performance export keyed by unpadded club numbers"""
    return [
        ['Club', 'Club Name', 'Oct. Ren.', 'Apr. Ren.', 'New Members', 'Total to Date',
         'Distinguished Clubs', 'Select Distinguished', "President's Distinguished"],
        ['9905', 'Sunrise Speakers', '9', '4', '2', '16', '3', '0', '0'],
        ['1234', 'Evening Orators', '6', '3', '1', '10', '', '', ''],
    ]


@pytest.fixture
def division_performance_table():
    """Raw division performance export with a repeated division row"""
    return [
        ['Division', 'Division Name', 'Club Count', 'Membership', 'Total to Date'],
        ['A', 'Division A', '2', '32', '3'],
        ['B', 'Division B', '1', '10', '7'],
        ['A', 'Division A', '1', '5', '1'],
    ]


@pytest.fixture
def temp_data_dir():
    """Temporary directory for test data"""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir)
