"""
Person Aggregator

Rolls attributed events of one category up to exactly one row per cohort
person. Event-level fields vary within a person and are summed; totals
inherited from the cohort are constant within a person and are averaged,
which leaves them unchanged instead of multiplying them by the number of
events.
"""

import logging

import pandas as pd

from condexp.linkage.categories import EventCategory
from condexp.linkage.errors import RowCountInvariantError, SchemaMismatchError
from condexp.linkage.event_attributor import FLAG_COLUMN
from condexp.models.tables import EVENT_ID, PERSON_ID, PERSON_KEY

logger = logging.getLogger(__name__)


def check_row_count(df: pd.DataFrame, cohort: pd.DataFrame, stage: str) -> None:
    if len(df) != len(cohort):
        raise RowCountInvariantError(stage, len(cohort), len(df))


def aggregate_person_level(
    attributed: pd.DataFrame,
    cohort: pd.DataFrame,
    category: EventCategory,
) -> pd.DataFrame:
    """
    One row per cohort person with condition-specific totals for `category`.

    Args:
        attributed: output of attribute_events for the category
        cohort: person table (dupersid, varstr, varpsu, perwt, totals)
        category: the event category

    Returns:
        DataFrame keyed by the person composite key with columns
        <cat>_cond_exp, [<cat>_cond_<util>], <cat>_cond_events,
        <cat>_cond_any and the mean of each carried cohort total.
    """
    carried = list(category.cohort_totals)
    missing = [c for c in PERSON_KEY + carried if c not in cohort.columns]
    if missing:
        raise SchemaMismatchError("cohort", missing)

    event_cols = [PERSON_ID, EVENT_ID, category.cost, FLAG_COLUMN]
    if category.utilization is not None:
        event_cols.append(category.utilization)

    numeric = [c for c in event_cols if c not in (PERSON_ID, EVENT_ID)]
    events = attributed[event_cols].astype({c: float for c in numeric})
    orphans = ~events[PERSON_ID].isin(cohort[PERSON_ID])
    if orphans.any():
        logger.warning(
            "%s: dropping %d attributed events of persons not in the cohort",
            category.name, int(orphans.sum()),
        )
        events = events[~orphans]

    # 1 cohort row : N attributed events, persons without events kept
    unioned = cohort[PERSON_KEY + carried].merge(
        events, on=PERSON_ID, how="outer", validate="one_to_many"
    )

    aggs = {category.exp_column: (category.cost, "sum")}
    if category.utilization is not None:
        aggs[category.utilization_column] = (category.utilization, "sum")
    aggs[category.events_column] = (EVENT_ID, "count")
    aggs[category.any_column] = (FLAG_COLUMN, "max")
    for total in carried:
        aggs[total] = (total, "mean")

    person = unioned.groupby(PERSON_KEY, as_index=False, sort=True, dropna=False).agg(**aggs)
    person = person.fillna(0)

    person[category.events_column] = person[category.events_column].astype(int)
    person[category.any_column] = person[category.any_column].astype(int)

    check_row_count(person, cohort, f"{category.name} person aggregate")

    logger.info(
        "%s: %d persons, %d with a condition-related event",
        category.name, len(person), int(person[category.any_column].sum()),
    )
    return person
