"""
MEPS Table Loader

Loads the public-use files the linkage pipeline needs and normalises them
to the declared schema of each table role:

- h209  Full Year Consolidated (cohort: one row per person)
- h207  Medical Conditions (one row per condition)
- h206if1  Condition-Event Link file (CLNK)
- h206g / h206f / h206e / h206d  Office-based / outpatient / ER / inpatient events

Column names are lower-cased and year-suffixed names are mapped to a
canonical name (PERWT18F -> perwt, OBXP18X -> obxp) so the rest of the
code never sees a survey year.
"""

import logging
from pathlib import Path

import pandas as pd

from condexp.linkage.categories import DEFAULT_CATEGORIES, EventCategory, get_category
from condexp.linkage.errors import DuplicateKeyError, NullKeyError, SchemaMismatchError
from condexp.models.tables import (
    BASE_SCHEMAS,
    CONDITION_ID,
    EVENT_ID,
    PERSON_ID,
    PERSON_KEY,
    TableSchema,
)

logger = logging.getLogger(__name__)

# Default public-use file per role (2018 release numbering)
MEPS_FILES = {
    "cohort": "h209.csv",
    "conditions": "h207.csv",
    "link": "h206if1.csv",
    "ob": "h206g.csv",
    "op": "h206f.csv",
    "er": "h206e.csv",
    "ip": "h206d.csv",
}


def get_schema(role: str) -> TableSchema:
    if role in BASE_SCHEMAS:
        return BASE_SCHEMAS[role]
    return get_category(role).table_schema


def key_columns(role: str, schema: TableSchema) -> list[str]:
    """Columns that must be filled on every row: join ids, plus the design key for the cohort."""
    if role == "cohort":
        return list(PERSON_KEY)
    return [c for c in (PERSON_ID, CONDITION_ID, EVENT_ID) if c in schema.names]


def _coerce(series: pd.Series, dtype: str) -> pd.Series:
    if dtype == "str":
        return series.astype("string").str.strip().astype(object)
    values = pd.to_numeric(series, errors="coerce")
    if dtype == "int":
        return values.astype("Int64")
    return values.astype(float)


def prepare_table(df: pd.DataFrame, role: str, year: int | None = None) -> pd.DataFrame:
    """
    Normalise a raw table to the schema of `role`.

    Lower-cases column names, renames year-suffixed columns, checks every
    declared column is present, coerces dtypes and clips MEPS negative
    reserve codes (-1 inapplicable, -8 don't know, ...) and blanks to 0 on
    cost and count columns. Blank ids, and for the cohort a blank stratum,
    cluster or weight, raise NullKeyError. Returns a new frame with the
    declared columns only.
    """
    schema = get_schema(role)
    raw = df.rename(columns=str.lower)

    renames = {}
    missing = []
    for col in schema.columns:
        source = col.source_name(year)
        if source in raw.columns:
            renames[source] = col.name
        elif col.name not in raw.columns:
            missing.append(source)
    if missing:
        raise SchemaMismatchError(role, missing)

    table = raw.rename(columns=renames)[schema.names].copy()
    for col in schema.columns:
        table[col.name] = _coerce(table[col.name], col.dtype)
        if col.nonnegative:
            # blank cost/count cells count as no spending
            table[col.name] = table[col.name].clip(lower=0).fillna(0)

    keys = key_columns(role, schema)
    blank = table[keys].isna().any(axis=1)
    if blank.any():
        raise NullKeyError(role, keys, int(blank.sum()))

    if role == "cohort" and table[PERSON_ID].duplicated().any():
        raise DuplicateKeyError("cohort: dupersid is not unique")

    return table.reset_index(drop=True)


def load_table(path: str | Path, role: str, year: int | None = None) -> pd.DataFrame:
    """Read a CSV extract as strings and normalise it to `role`."""
    df = pd.read_csv(path, dtype=str, encoding="utf-8-sig")
    table = prepare_table(df, role, year)
    logger.info("Loaded %s from %s: %d rows", role, path, len(table))
    return table


def _find_data_file(data_dir: Path, filename: str) -> Path:
    """Locate a MEPS extract, also accepting an upper-case file name."""
    candidates = [
        data_dir / filename,
        data_dir / filename.upper().replace(".CSV", ".csv"),
        Path.cwd() / "data" / filename,
    ]
    for p in candidates:
        if p.exists():
            return p
    raise FileNotFoundError(
        f"{filename} not found. Searched: {[str(c) for c in candidates]}"
    )


def load_tables(
    data_dir: str | Path,
    year: int | None = None,
    categories: tuple[EventCategory, ...] = DEFAULT_CATEGORIES,
    files: dict[str, str] | None = None,
) -> dict[str, pd.DataFrame]:
    """Load cohort, conditions, link and one event table per category."""
    data_dir = Path(data_dir)
    files = {**MEPS_FILES, **(files or {})}

    roles = ["cohort", "conditions", "link"] + [c.name for c in categories]
    return {
        role: load_table(_find_data_file(data_dir, files[role]), role, year)
        for role in roles
    }
