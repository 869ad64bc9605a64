"""Select condition records coded with a target diagnosis category."""

import logging

import pandas as pd

from condexp.linkage.errors import SchemaMismatchError
from condexp.models.tables import CONDITION_CODE_COLUMNS, CONDITION_ID, PERSON_ID

logger = logging.getLogger(__name__)

PRESENCE_COLUMN = "cond_present"


def _code_string(conditions: pd.DataFrame, code_columns: list[str]) -> pd.Series:
    """Join a row's codes into one space-separated, upper-cased string."""
    joined = pd.Series("", index=conditions.index, dtype=object)
    for col in code_columns:
        codes = conditions[col].fillna("").astype(str).str.strip().str.upper()
        joined = joined + " " + codes
    return joined


def filter_conditions(
    conditions: pd.DataFrame,
    target_code: str,
    code_columns: list[str] | None = None,
) -> pd.DataFrame:
    """
    Keep condition rows where any category code equals `target_code`.

    The codes of each row are concatenated and the target is matched as a
    whole token, so "NVS01" does not match "NVS010". Matching ignores case
    and surrounding whitespace. A person keeps every matching row.
    """
    if code_columns is None:
        code_columns = CONDITION_CODE_COLUMNS

    required = [PERSON_ID, CONDITION_ID] + list(code_columns)
    missing = [c for c in required if c not in conditions.columns]
    if missing:
        raise SchemaMismatchError("conditions", missing)

    target = target_code.strip().upper()
    if not target:
        raise ValueError("target_code must be a non-empty code")

    tokens = " " + _code_string(conditions, code_columns) + " "
    mask = tokens.str.contains(f" {target} ", regex=False)

    subset = conditions[mask].reset_index(drop=True)
    logger.info(
        "Condition filter %s: %d of %d rows, %d persons",
        target, len(subset), len(conditions), subset[PERSON_ID].nunique(),
    )
    return subset


def condition_presence(condition_subset: pd.DataFrame) -> pd.DataFrame:
    """Distinct persons with at least one matching condition, flagged 1."""
    persons = (
        condition_subset[[PERSON_ID]]
        .drop_duplicates()
        .sort_values(PERSON_ID)
        .reset_index(drop=True)
    )
    persons[PRESENCE_COLUMN] = 1
    return persons
