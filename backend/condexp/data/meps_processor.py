"""
MEPS Condition-Specific Expenditure Processor

Links the Medical Conditions file to the office-based and inpatient event
files through the condition-event link file (CLNK) and writes, for one
diagnosis category code:

1. comprehensive_<code>.csv: one row per person in the consolidated file
   with condition-specific expenditure, nights and event counts per event
   category plus the cond_present indicator, and the survey design columns
2. <category>_person_<code>.csv: the person-level aggregate of each category
3. summary_<code>.json: weighted means/totals for all persons and for
   persons with the condition

Run directly to regenerate:
    python -m condexp.data.meps_processor
"""

import argparse
import json
import logging
import os
from pathlib import Path

from condexp import config
from condexp.data.meps_loader import load_tables
from condexp.linkage.categories import DEFAULT_CATEGORIES, get_category
from condexp.linkage.pipeline import run_linkage
from condexp.models.report import ReportingOptions
from condexp.reporting.weighted import summarize


def process_and_save(
    data_dir: str | None = None,
    output_dir: str | None = None,
    target_code: str | None = None,
    year: int | None = None,
    categories=DEFAULT_CATEGORIES,
    options: ReportingOptions | None = None,
):
    """Run the full pipeline and save processed data."""
    data_dir = Path(data_dir) if data_dir else config.MEPS_DATA_DIR
    output_dir = str(output_dir) if output_dir else str(config.OUTPUT_DIR)
    target_code = target_code or config.TARGET_CONDITION_CODE
    year = year or config.MEPS_YEAR
    if options is None:
        options = ReportingOptions(digits=config.REPORT_DIGITS)

    os.makedirs(output_dir, exist_ok=True)
    tag = target_code.lower()

    print(f"Loading MEPS {year} tables from {data_dir}...")
    tables = load_tables(data_dir, year, categories)
    for role, df in tables.items():
        print(f"  {role:10s} {len(df):>8,} rows")

    print(f"Linking conditions coded {target_code}...")
    result = run_linkage(tables, target_code, categories)
    comprehensive = result.comprehensive
    print(f"  {len(result.condition_subset)} matching condition rows")

    comprehensive_path = os.path.join(output_dir, f"comprehensive_{tag}.csv")
    comprehensive.to_csv(comprehensive_path, index=False)
    print(f"  {len(comprehensive)} persons → {comprehensive_path}")

    for name, person in result.aggregates.items():
        person_path = os.path.join(output_dir, f"{name}_person_{tag}.csv")
        person.to_csv(person_path, index=False)
        print(f"  {name}: {len(person)} persons → {person_path}")

    print("Building weighted summary...")
    columns = [col for c in categories for col in c.condition_columns]
    estimates = summarize(comprehensive, columns, options)
    summary = {
        "target_code": target_code,
        "year": year,
        "n_persons": len(comprehensive),
        "n_with_condition": int(comprehensive["cond_present"].sum()),
        "estimates": [e.model_dump() for e in estimates],
    }
    summary_path = os.path.join(output_dir, f"summary_{tag}.json")
    with open(summary_path, "w") as f:
        json.dump(summary, f, indent=2, allow_nan=False)
    print(f"  {len(estimates)} estimates → {summary_path}")
    for e in estimates:
        if e.subgroup != "all" and e.mean is not None:
            print(f"    {e.variable:20s}  mean=${e.mean:>10,.2f}  n={e.n}")

    print("Done.")
    return comprehensive, summary


def main():
    parser = argparse.ArgumentParser(description="Condition-specific MEPS expenditures")
    parser.add_argument("--code", default=None, help="Diagnosis category code, e.g. NVS010")
    parser.add_argument("--year", type=int, default=None, help="MEPS survey year")
    parser.add_argument("--data-dir", default=None, help="Directory with the MEPS CSV extracts")
    parser.add_argument("--output-dir", default=None)
    parser.add_argument(
        "--categories", default=",".join(c.name for c in DEFAULT_CATEGORIES),
        help="Comma-separated event categories (ob, op, er, ip)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    categories = tuple(get_category(name.strip()) for name in args.categories.split(","))
    process_and_save(
        data_dir=args.data_dir,
        output_dir=args.output_dir,
        target_code=args.code,
        year=args.year,
        categories=categories,
    )


if __name__ == "__main__":
    main()
