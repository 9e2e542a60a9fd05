#!/usr/bin/env python3
"""
Snapshot Transformer

Turns the raw club, division and district performance exports for one
district and date into a canonical snapshot: clubs, divisions, areas and
totals, with the parsed export records preserved for downstream consumers.

Nothing in this module raises on malformed rows. Rows missing an identifier
are dropped, unparseable numbers become 0 and unmatched payment lookups fall
back to the club export's own columns.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from clubperf.normalizers.column_aliases import (
    AREA_PAYMENT_ALIASES,
    CLUB_FIELD_ALIASES,
    DISTINGUISHED_STATUS_ALIASES,
    DISTRICT_CLUB_ID_ALIASES,
    DISTRICT_RECOGNITION_ALIASES,
    DIVISION_FIELD_ALIASES,
    FOOTER_MARKER,
    PAYMENT_FIELD_ALIASES,
)
from clubperf.normalizers.record_fields import (
    extract_number,
    extract_string,
    first_present,
    normalize_club_id,
    parse_area,
    parse_csp_flag,
    parse_division,
)

logger = logging.getLogger(__name__)

UNKNOWN_DIVISION = "Unknown Division"
UNKNOWN_AREA = "Unknown Area"

Record = Dict[str, Any]


def parse_csv_rows(rows: Sequence[Sequence[Any]]) -> List[Record]:
    """
    Map export rows to header -> cell records.

    The first row is the header. Footer rows (any cell containing the
    "Month of" marker) are discarded and missing trailing cells become None.

    Args:
        rows: 2-D table of cells, header row first

    Returns:
        List of records, empty when there is no data row
    """
    if len(rows) < 2:
        return []

    headers = rows[0]
    if not headers:
        return []

    records = []
    for row in rows[1:]:
        if row is None:
            continue
        if any(isinstance(cell, str) and FOOTER_MARKER in cell for cell in row):
            logger.debug(f"Skipping footer row: {list(row)[:3]}")
            continue

        record = {}
        for index, header in enumerate(headers):
            if header is None:
                continue
            record[header] = row[index] if index < len(row) else None
        records.append(record)

    return records


def extract_club_status(record: Record) -> str:
    """
    Resolve a club's status text.

    A distinguished-status cell wins when it mentions "distinguished";
    otherwise the club status column is used, defaulting to "Active".
    """
    distinguished = extract_string(record, *DISTINGUISHED_STATUS_ALIASES)
    if distinguished and 'distinguished' in distinguished.lower():
        return distinguished

    status = extract_string(record, *CLUB_FIELD_ALIASES['club_status'])
    return status if status is not None else "Active"


def build_district_performance_lookup(district_records: List[Record]) -> Dict[str, Record]:
    """
    Index district export records by normalized club id.

    Records without a club id are skipped. Later duplicates replace earlier
    ones.
    """
    lookup = {}
    for record in district_records:
        raw_id = extract_string(record, *DISTRICT_CLUB_ID_ALIASES)
        if not raw_id:
            continue
        lookup[normalize_club_id(raw_id)] = record
    return lookup


def extract_clubs(club_records: List[Record], district_records: Optional[List[Record]] = None) -> List[Dict[str, Any]]:
    """
    Build canonical club dicts from the club export.

    Payment fields (payments to date, October and April renewals, new members)
    come from the district export record whose normalized club id matches;
    without a match they fall back to the club export record. Every other
    field always comes from the club export.

    Args:
        club_records: Parsed club performance records
        district_records: Parsed district performance records

    Returns:
        List of canonical club dicts in export order
    """
    lookup = build_district_performance_lookup(district_records or [])
    clubs = []
    unmatched = 0

    for record in club_records:
        club_id = extract_string(record, *CLUB_FIELD_ALIASES['club_id'])
        club_name = extract_string(record, *CLUB_FIELD_ALIASES['club_name'])
        if not club_id or not club_name:
            logger.debug(f"Skipping club row without id or name: {club_id!r} / {club_name!r}")
            continue

        division_id, division_name = parse_division(
            extract_string(record, *CLUB_FIELD_ALIASES['division']) or ''
        )
        area_id, area_name = parse_area(
            extract_string(record, *CLUB_FIELD_ALIASES['area']) or ''
        )

        payment_record = lookup.get(normalize_club_id(club_id))
        if payment_record is None:
            unmatched += 1
            payment_record = record

        club = {
            'club_id': club_id,
            'club_name': club_name,
            'division_id': division_id,
            'area_id': area_id,
            'division_name': division_name or UNKNOWN_DIVISION,
            'area_name': area_name or UNKNOWN_AREA,
            'membership_count': extract_number(record, *CLUB_FIELD_ALIASES['membership_count']),
            'payments_count': extract_number(payment_record, *PAYMENT_FIELD_ALIASES['payments_count']),
            'dcp_goals': extract_number(record, *CLUB_FIELD_ALIASES['dcp_goals']),
            'status': extract_club_status(record),
            'october_renewals': extract_number(payment_record, *PAYMENT_FIELD_ALIASES['october_renewals']),
            'april_renewals': extract_number(payment_record, *PAYMENT_FIELD_ALIASES['april_renewals']),
            'new_members': extract_number(payment_record, *PAYMENT_FIELD_ALIASES['new_members']),
            'membership_base': extract_number(record, *CLUB_FIELD_ALIASES['membership_base']),
        }

        charter_date = extract_string(record, *CLUB_FIELD_ALIASES['charter_date'])
        if charter_date:
            club['charter_date'] = charter_date

        club_status = extract_string(record, *CLUB_FIELD_ALIASES['club_status'])
        if club_status:
            club['club_status'] = club_status

        csp = parse_csp_flag(first_present(record, CLUB_FIELD_ALIASES['csp_submitted']))
        if csp is not None:
            club['csp_submitted'] = csp

        clubs.append(club)

    if lookup and unmatched:
        logger.debug(f"{unmatched} clubs had no district performance match; using club export payments")

    return clubs


def extract_divisions(division_records: List[Record]) -> List[Dict[str, Any]]:
    """
    Build division dicts from the division export, summing duplicate rows.
    """
    divisions: Dict[str, Dict[str, Any]] = {}

    for record in division_records:
        division_id = extract_string(record, *DIVISION_FIELD_ALIASES['division_id'])
        if not division_id:
            continue

        club_count = extract_number(record, *DIVISION_FIELD_ALIASES['club_count'])
        membership = extract_number(record, *DIVISION_FIELD_ALIASES['membership_total'])
        payments = extract_number(record, *DIVISION_FIELD_ALIASES['payments_total'])

        existing = divisions.get(division_id)
        if existing:
            existing['club_count'] += club_count
            existing['membership_total'] += membership
            existing['payments_total'] += payments
            continue

        name = extract_string(record, *DIVISION_FIELD_ALIASES['division_name'])
        divisions[division_id] = {
            'division_id': division_id,
            'division_name': name if name is not None else division_id,
            'club_count': club_count,
            'membership_total': membership,
            'payments_total': payments,
        }

    return list(divisions.values())


def extract_areas(club_records: List[Record]) -> List[Dict[str, Any]]:
    """
    Roll club export rows up into areas keyed by division and area id.
    """
    areas: Dict[str, Dict[str, Any]] = {}

    for record in club_records:
        area_id = extract_string(record, *CLUB_FIELD_ALIASES['area'])
        if not area_id:
            continue
        division_id = extract_string(record, *CLUB_FIELD_ALIASES['division']) or ''

        membership = extract_number(record, *CLUB_FIELD_ALIASES['membership_count'])
        payments = extract_number(record, *AREA_PAYMENT_ALIASES)

        key = f"{division_id}-{area_id}"
        existing = areas.get(key)
        if existing:
            existing['club_count'] += 1
            existing['membership_total'] += membership
            existing['payments_total'] += payments
            continue

        areas[key] = {
            'area_id': area_id,
            'area_name': f"Area {area_id}",
            'division_id': division_id,
            'club_count': 1,
            'membership_total': membership,
            'payments_total': payments,
        }

    return list(areas.values())


def calculate_totals(clubs: List[Dict[str, Any]], district_records: Optional[List[Record]] = None) -> Dict[str, Any]:
    """
    Sum club totals and count recognised clubs.

    Recognition counts come from each club's status text, checked as
    "president", then "select", then "distinguished"; president and select
    clubs also count towards the distinguished total. When the first district
    export row carries its own aggregate counts, each one replaces the local
    count only if it is larger.

    Args:
        clubs: Canonical club dicts
        district_records: Parsed district performance records

    Returns:
        Totals dict
    """
    totals = {
        'total_clubs': len(clubs),
        'total_membership': sum(club['membership_count'] for club in clubs),
        'total_payments': sum(club['payments_count'] for club in clubs),
        'distinguished_clubs': 0,
        'select_distinguished_clubs': 0,
        'president_distinguished_clubs': 0,
    }

    for club in clubs:
        status = club['status'].lower()
        if 'president' in status:
            totals['president_distinguished_clubs'] += 1
            totals['distinguished_clubs'] += 1
        elif 'select' in status:
            totals['select_distinguished_clubs'] += 1
            totals['distinguished_clubs'] += 1
        elif 'distinguished' in status:
            totals['distinguished_clubs'] += 1

    if district_records:
        district_record = district_records[0]
        for field, aliases in DISTRICT_RECOGNITION_ALIASES.items():
            reported = extract_number(district_record, *aliases)
            if reported > totals[field]:
                totals[field] = reported

    return totals


def transform_raw_csv(district_id: str, snapshot_date: str,
                      club_performance: Sequence[Sequence[Any]],
                      division_performance: Optional[Sequence[Sequence[Any]]] = None,
                      district_performance: Optional[Sequence[Sequence[Any]]] = None) -> Dict[str, Any]:
    """
    Transform raw export tables into one canonical snapshot.

    Args:
        district_id: District identifier
        snapshot_date: Snapshot date (YYYY-MM-DD)
        club_performance: Club performance table, header row first
        division_performance: Division performance table
        district_performance: District performance table (club payments)

    Returns:
        Snapshot dict with clubs, divisions, areas, totals and parsed records
    """
    if len(club_performance) < 2:
        logger.warning(f"Club performance export for {district_id} on {snapshot_date} has no data rows")

    club_records = parse_csv_rows(club_performance)
    division_records = parse_csv_rows(division_performance or [])
    district_records = parse_csv_rows(district_performance or [])

    clubs = extract_clubs(club_records, district_records)
    divisions = extract_divisions(division_records)
    areas = extract_areas(club_records)
    totals = calculate_totals(clubs, district_records)

    logger.info(
        f"Transformed {district_id} {snapshot_date}: {len(clubs)} clubs, "
        f"{len(divisions)} divisions, {len(areas)} areas"
    )

    return {
        'district_id': district_id,
        'snapshot_date': snapshot_date,
        'clubs': clubs,
        'divisions': divisions,
        'areas': areas,
        'totals': totals,
        'club_performance': club_records,
        'division_performance': division_records,
        'district_performance': district_records,
    }
