#!/usr/bin/env python3
"""
Column Alias Tables

Ordered header spellings accepted for each logical field of the club,
division and district performance exports. Spellings are tried in order and
the first present, non-null cell wins.

Historical exports must keep parsing, so entries are only ever appended to
these tuples, never removed.
"""

from typing import Dict, Tuple

# Rows containing this text in any cell are report footers, not data
FOOTER_MARKER = "Month of"

# Club performance export: fields always sourced from this table
CLUB_FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    'club_id': ('Club Number', 'ClubId', 'Club'),
    'club_name': ('Club Name', 'ClubName', 'Name'),
    'division': ('Division', 'Div'),
    'area': ('Area',),
    'membership_count': ('Active Members', 'Membership', 'Members'),
    'dcp_goals': ('Goals Met', 'DCP Goals', 'Goals'),
    'membership_base': ('Mem. Base', 'Membership Base', 'Base'),
    'charter_date': ('Charter Date', 'Chartered'),
    'club_status': ('Club Status', 'Status'),
    'csp_submitted': ('CSP', 'Club Success Plan', 'CSP Submitted', 'Club Success Plan Submitted'),
}

# Payment fields: sourced from the district export when the club matches there
PAYMENT_FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    'payments_count': ('Total to Date', 'Payments', 'Total'),
    'october_renewals': ('Oct. Ren.', 'Oct. Ren', 'October Renewals', 'Oct Ren'),
    'april_renewals': ('Apr. Ren.', 'Apr. Ren', 'April Renewals', 'Apr Ren'),
    'new_members': ('New Members', 'New'),
}

DISTINGUISHED_STATUS_ALIASES: Tuple[str, ...] = (
    'Club Distinguished Status', 'Distinguished Status', 'Distinguished',
)

# Club identifier column of the district export
DISTRICT_CLUB_ID_ALIASES: Tuple[str, ...] = ('Club', 'Club Number', 'Club ID')

# Division performance export
DIVISION_FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    'division_id': ('Division', 'Div'),
    'division_name': ('Division Name', 'Name'),
    'club_count': ('Club Count', 'Clubs'),
    'membership_total': ('Membership', 'Members', 'Active Members'),
    'payments_total': ('Total to Date', 'Payments'),
}

# Area rollups read payments with a narrower alias list than clubs do
AREA_PAYMENT_ALIASES: Tuple[str, ...] = ('Total to Date', 'Payments')

# Aggregate recognition counts on the first row of the district export
DISTRICT_RECOGNITION_ALIASES: Dict[str, Tuple[str, ...]] = {
    'distinguished_clubs': ('Distinguished Clubs', 'Distinguished'),
    'select_distinguished_clubs': ('Select Distinguished', 'Select'),
    'president_distinguished_clubs': ("President's Distinguished", 'President'),
}

