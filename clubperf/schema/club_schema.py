#!/usr/bin/env python3
"""
Canonical Club Schema

Pandera schema for the per-snapshot club frame produced from canonical club
records. The aggregation engine builds its frames through clubs_to_frame so
column names and dtypes stay consistent across snapshots and export formats.
"""

import logging
from typing import Any, Dict, List

import pandas as pd
import pandera as pa
from pandera.typing import DataFrame, Series

logger = logging.getLogger(__name__)

CLUB_COLUMNS = [
    'club_id', 'club_name', 'division_id', 'division_name', 'area_id', 'area_name',
    'membership_count', 'payments_count', 'dcp_goals', 'status',
    'october_renewals', 'april_renewals', 'new_members', 'membership_base',
]

NUMERIC_COLUMNS = [
    'membership_count', 'payments_count', 'dcp_goals',
    'october_renewals', 'april_renewals', 'new_members', 'membership_base',
]


class ClubSchema(pa.DataFrameModel):
    """
    Pandera schema for one snapshot's clubs.

    Fields:
    - club_id / club_name: required identity
    - division_* / area_*: organisational placement (ids may be empty)
    - membership_count, payments_count, renewals, new_members, membership_base:
      non-negative counts
    - dcp_goals: program goals achieved, 0-10
    - status: free-text status, compared case-insensitively downstream
    """

    club_id: Series[str] = pa.Field(
        description="Club identifier as exported",
        str_length={'min_value': 1}
    )

    club_name: Series[str] = pa.Field(
        description="Club display name"
    )

    division_id: Series[str] = pa.Field(description="Division id (may be empty)")
    division_name: Series[str] = pa.Field(description="Division display name")
    area_id: Series[str] = pa.Field(description="Area id (may be empty)")
    area_name: Series[str] = pa.Field(description="Area display name")

    membership_count: Series[int] = pa.Field(
        description="Active members",
        ge=0
    )

    payments_count: Series[int] = pa.Field(
        description="Membership payments to date",
        ge=0
    )

    dcp_goals: Series[int] = pa.Field(
        description="Program goals achieved",
        ge=0,
        le=10
    )

    status: Series[str] = pa.Field(description="Operational or recognition status text")

    october_renewals: Series[int] = pa.Field(ge=0)
    april_renewals: Series[int] = pa.Field(ge=0)
    new_members: Series[int] = pa.Field(ge=0)

    membership_base: Series[int] = pa.Field(
        description="Membership at the start of the program year",
        ge=0
    )

    class Config:
        """Pandera configuration."""
        coerce = True
        strict = False

    @pa.dataframe_check
    def club_ids_unique(cls, df: DataFrame) -> Series[bool]:
        """A club appears at most once per snapshot."""
        return ~df["club_id"].duplicated(keep=False)


def clubs_to_frame(clubs: List[Dict[str, Any]]) -> pd.DataFrame:
    """
    Build a club DataFrame with the canonical column set.

    Args:
        clubs: Canonical club dicts

    Returns:
        DataFrame with CLUB_COLUMNS (empty frame when clubs is empty)
    """
    df = pd.DataFrame(clubs, columns=CLUB_COLUMNS)
    if df.empty:
        return df
    df[NUMERIC_COLUMNS] = df[NUMERIC_COLUMNS].fillna(0)
    return df


def validate_club_frame(df: pd.DataFrame, schema: ClubSchema = ClubSchema) -> pd.DataFrame:
    """
    Validate a club DataFrame against ClubSchema.

    Args:
        df: Club DataFrame (see clubs_to_frame)
        schema: Pandera schema class (default: ClubSchema)

    Returns:
        Validated DataFrame

    Raises:
        pa.errors.SchemaError: If validation fails
    """
    try:
        return schema.validate(df)
    except (pa.errors.SchemaError, pa.errors.SchemaErrors) as e:
        logger.error(f"Club schema validation failed: {e}")
        logger.error(f"DataFrame shape: {df.shape}, columns: {list(df.columns)}")
        if getattr(e, 'failure_cases', None) is not None:
            logger.error(f"Failure cases:\n{e.failure_cases}")
        raise
