"""
Condition-specific expenditure linkage

Runs the stages for one target condition code over every requested event
category:

    conditions --filter--> condition subset
    link + subset --resolve--> (person, event) pairs      (per category)
    events + pairs --attribute--> flagged events           (per category)
    flagged events + cohort --aggregate--> person rows     (per category)
    cohort + person rows + presence --merge--> comprehensive record

Every input is an argument; nothing here reads configuration.
"""

import logging
from typing import NamedTuple

import pandas as pd

from condexp.linkage.categories import DEFAULT_CATEGORIES, EventCategory
from condexp.linkage.cohort_merger import merge_cohort
from condexp.linkage.condition_filter import condition_presence, filter_conditions
from condexp.linkage.event_attributor import attribute_events
from condexp.linkage.link_resolver import resolve_links
from condexp.linkage.person_aggregator import aggregate_person_level

logger = logging.getLogger(__name__)


class LinkageResult(NamedTuple):
    comprehensive: pd.DataFrame
    aggregates: dict[str, pd.DataFrame]
    condition_subset: pd.DataFrame


def run_linkage(
    tables: dict[str, pd.DataFrame],
    target_code: str,
    categories: tuple[EventCategory, ...] = DEFAULT_CATEGORIES,
) -> LinkageResult:
    """
    Build the comprehensive per-person record for `target_code`.

    Args:
        tables: prepared tables keyed by role: "cohort", "conditions",
            "link" and one entry per category name (e.g. "ob", "ip")
        target_code: diagnosis category code, e.g. "NVS010"
        categories: event categories to attribute

    Returns:
        LinkageResult with the comprehensive record, the person-level
        aggregate of each category keyed by name, and the matching
        condition rows
    """
    missing = [r for r in ["cohort", "conditions", "link"] + [c.name for c in categories]
               if r not in tables]
    if missing:
        raise KeyError(f"Missing tables for roles {missing}")

    cohort = tables["cohort"]
    logger.info(
        "Linking %s over %s for %d persons",
        target_code, [c.name for c in categories], len(cohort),
    )

    subset = filter_conditions(tables["conditions"], target_code)
    presence = condition_presence(subset)

    aggregates: dict[EventCategory, pd.DataFrame] = {}
    for category in categories:
        associations = resolve_links(tables["link"], category.event_type, subset)
        attributed = attribute_events(tables[category.name], associations, category)
        aggregates[category] = aggregate_person_level(attributed, cohort, category)

    comprehensive = merge_cohort(cohort, aggregates, presence)

    return LinkageResult(
        comprehensive=comprehensive,
        aggregates={c.name: df for c, df in aggregates.items()},
        condition_subset=subset,
    )
