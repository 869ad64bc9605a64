"""Tag the event rows that a condition was linked to."""

import logging

import pandas as pd

from condexp.linkage.categories import EventCategory
from condexp.linkage.errors import DuplicateKeyError, SchemaMismatchError
from condexp.linkage.link_resolver import ASSOCIATION_COLUMNS

logger = logging.getLogger(__name__)

FLAG_COLUMN = "cond_flag"


def check_unique_events(events: pd.DataFrame, category: EventCategory) -> None:
    dupes = events.duplicated(subset=ASSOCIATION_COLUMNS, keep=False)
    if dupes.any():
        sample = events.loc[dupes, ASSOCIATION_COLUMNS].head(5).to_dict("records")
        raise DuplicateKeyError(
            f"{category.name} events: {int(dupes.sum())} rows share a "
            f"(dupersid, evntidx) key, e.g. {sample}"
        )


def attribute_events(
    events: pd.DataFrame,
    associations: pd.DataFrame,
    category: EventCategory,
) -> pd.DataFrame:
    """
    Event rows whose (dupersid, evntidx) is in `associations`, with cond_flag = 1.

    The join uses both the person and the event id. A link row whose event id
    belongs to another person's event never matches.
    """
    missing = [c for c in category.table_schema.names if c not in events.columns]
    if missing:
        raise SchemaMismatchError(category.name, missing)

    check_unique_events(events, category)

    attributed = events.merge(
        associations[ASSOCIATION_COLUMNS],
        on=ASSOCIATION_COLUMNS,
        how="inner",
        validate="one_to_one",
    )
    attributed[FLAG_COLUMN] = 1

    unmatched = len(associations) - len(attributed)
    if unmatched:
        logger.debug(
            "%s: %d linked (dupersid, evntidx) pairs have no event row",
            category.name, unmatched,
        )
    logger.info("%s: %d of %d events attributed", category.name, len(attributed), len(events))
    return attributed.reset_index(drop=True)
