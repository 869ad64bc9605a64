"""
Survey-weighted descriptive statistics over the comprehensive record.

Point estimates only: weighted means and totals with the person weight.
The strata and cluster columns are required so the record can be handed
to a design-based variance estimator, but they do not enter these numbers.
"""

import numpy as np
import pandas as pd

from condexp.linkage.condition_filter import PRESENCE_COLUMN
from condexp.linkage.errors import SchemaMismatchError
from condexp.models.report import ReportingOptions, WeightedEstimate


def check_design_columns(df: pd.DataFrame, options: ReportingOptions) -> None:
    missing = [c for c in options.design_columns if c not in df.columns]
    if missing:
        raise SchemaMismatchError("comprehensive record", missing)


def weighted_mean(df: pd.DataFrame, column: str, options: ReportingOptions) -> float:
    check_design_columns(df, options)
    weights = df[options.weight].to_numpy(dtype=float)
    if len(df) == 0 or weights.sum() == 0:
        return float("nan")
    values = df[column].to_numpy(dtype=float)
    return round(float(np.average(values, weights=weights)), options.digits)


def weighted_total(df: pd.DataFrame, column: str, options: ReportingOptions) -> float:
    check_design_columns(df, options)
    weights = df[options.weight].to_numpy(dtype=float)
    values = df[column].to_numpy(dtype=float)
    return round(float(np.sum(values * weights)), options.digits)


def subgroup_mean(
    df: pd.DataFrame,
    column: str,
    indicator: str,
    options: ReportingOptions,
) -> float:
    """Weighted mean of `column` over rows where `indicator` == 1."""
    return weighted_mean(df[df[indicator] == 1], column, options)


def summarize(
    comprehensive: pd.DataFrame,
    columns: list[str],
    options: ReportingOptions,
    indicator: str = PRESENCE_COLUMN,
) -> list[WeightedEstimate]:
    """Weighted mean and total of each column, for everyone and for indicator == 1."""
    check_design_columns(comprehensive, options)

    groups = {"all": comprehensive, indicator: comprehensive[comprehensive[indicator] == 1]}
    estimates = []
    for column in columns:
        for name, group in groups.items():
            estimates.append(WeightedEstimate(
                variable=column,
                subgroup=name,
                n=len(group),
                population=round(float(group[options.weight].sum()), options.digits),
                mean=weighted_mean(group, column, options),
                total=weighted_total(group, column, options),
            ))
    return estimates
