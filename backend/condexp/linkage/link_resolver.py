"""
Link Resolver

Turns the many-to-many condition-event link file into the set of distinct
(person, event) pairs of one event category that relate to the target
condition. Attribution is binary at the event level, so an event linked to
two matching conditions survives once.
"""

import logging

import pandas as pd

from condexp.linkage.errors import (
    DuplicateKeyError,
    EventTypeContaminationError,
    SchemaMismatchError,
)
from condexp.models.tables import CONDITION_ID, EVENT_ID, EVENT_TYPE, PERSON_ID

logger = logging.getLogger(__name__)

ASSOCIATION_COLUMNS = [PERSON_ID, EVENT_ID]


def filter_event_type(link: pd.DataFrame, event_type: int) -> pd.DataFrame:
    """Link rows of one EVENTYPE; raises if anything else slips through."""
    missing = [c for c in (PERSON_ID, CONDITION_ID, EVENT_ID, EVENT_TYPE)
               if c not in link.columns]
    if missing:
        raise SchemaMismatchError("link", missing)

    filtered = link[link[EVENT_TYPE] == event_type]
    check_event_type(filtered, event_type)
    return filtered.reset_index(drop=True)


def check_event_type(filtered: pd.DataFrame, event_type: int) -> None:
    other = sorted(set(filtered[EVENT_TYPE].unique().tolist()) - {event_type})
    if other:
        raise EventTypeContaminationError(
            f"Link rows filtered to eventype {event_type} still contain {other}"
        )


def deduplicate_links(pairs: pd.DataFrame) -> pd.DataFrame:
    """One row per distinct (dupersid, evntidx)."""
    return (
        pairs[ASSOCIATION_COLUMNS]
        .drop_duplicates()
        .sort_values(ASSOCIATION_COLUMNS)
        .reset_index(drop=True)
    )


def resolve_links(
    link: pd.DataFrame,
    event_type: int,
    condition_subset: pd.DataFrame,
) -> pd.DataFrame:
    """
    Distinct (person, event) pairs of `event_type` linked to a matching condition.

    Args:
        link: CLNK table (dupersid, condidx, evntidx, eventype)
        event_type: EVENTYPE code of the category
        condition_subset: output of filter_conditions

    Returns:
        DataFrame with columns dupersid, evntidx
    """
    typed = filter_event_type(link, event_type)

    cond_keys = condition_subset[[PERSON_ID, CONDITION_ID]]
    if cond_keys.duplicated().any():
        raise DuplicateKeyError(
            "Condition subset repeats (dupersid, condidx); "
            "joining it to the link file would fan out"
        )

    # N link rows : 1 condition row
    pairs = typed.merge(cond_keys, on=[PERSON_ID, CONDITION_ID], how="inner")
    associations = deduplicate_links(pairs)

    logger.info(
        "eventype %d: %d link rows, %d matched a condition, %d distinct events",
        event_type, len(typed), len(pairs), len(associations),
    )
    return associations
