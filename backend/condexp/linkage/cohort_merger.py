"""Combine per-category person aggregates into the comprehensive record."""

import logging

import pandas as pd

from condexp.linkage.categories import EventCategory
from condexp.linkage.condition_filter import PRESENCE_COLUMN
from condexp.linkage.person_aggregator import check_row_count
from condexp.models.tables import PERSON_ID, PERSON_KEY

logger = logging.getLogger(__name__)


def merge_cohort(
    cohort: pd.DataFrame,
    aggregates: dict[EventCategory, pd.DataFrame],
    presence: pd.DataFrame,
) -> pd.DataFrame:
    """
    Left-join every category aggregate and the condition indicator onto the cohort.

    Each aggregate contributes only its condition-specific columns; the
    cohort totals it carried are already on the anchor. Persons absent from
    an aggregate or from `presence` get 0, and so do blank cohort totals.
    """
    result = cohort.copy()

    for category, person in aggregates.items():
        cols = category.condition_columns
        # 1 cohort row : 1 aggregate row
        result = result.merge(
            person[PERSON_KEY + cols], on=PERSON_KEY, how="left"
        )
        check_row_count(result, cohort, f"merge {category.name}")

    # condition columns of unmatched persons and blank cohort totals
    numeric = [c for c in result.select_dtypes("number").columns if c not in PERSON_KEY]
    result[numeric] = result[numeric].fillna(0)

    result = result.merge(
        presence[[PERSON_ID, PRESENCE_COLUMN]], on=PERSON_ID, how="left"
    )
    check_row_count(result, cohort, "merge condition presence")
    result[PRESENCE_COLUMN] = result[PRESENCE_COLUMN].fillna(0).astype(int)

    for category in aggregates:
        for col in (category.events_column, category.any_column):
            result[col] = result[col].astype(int)

    logger.info(
        "Comprehensive record: %d persons, %d with the condition",
        len(result), int(result[PRESENCE_COLUMN].sum()),
    )
    return result
