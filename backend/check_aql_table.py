"""Check a reference AQL sheet against the built-in sampling plan.

Usage:
    python check_aql_table.py <path_to_sheet> [--sheet NAME]

The sheet (.xlsx/.xls read with pandas, anything else read as CSV) needs one
row per lot-size band with the columns min lot size, max lot size, sample
size, max major and max minor. Header spelling is loose: "Min Lot Size",
"min_lot_size" and "minLotSize" are all accepted.

Exits 0 when the sheet matches the built-in General Level II plan, 1 on any
difference, 2 when the sheet cannot be read.
"""

import argparse
import re
import sys
from pathlib import Path

import pandas as pd

from garment_qc.utils.aql import GENERAL_LEVEL_II_PLAN, SamplingPlanRow, SamplingPlanTable
from garment_qc.utils.errors import SamplingPlanError

COLUMNS = {
    "minlotsize": "min_lot_size",
    "maxlotsize": "max_lot_size",
    "samplesize": "sample_size",
    "maxmajor": "max_major",
    "maxminor": "max_minor",
}


def _normalise_header(name) -> str:
    return re.sub(r"[^a-z0-9]", "", str(name).lower())


def load_reference_sheet(path: Path, sheet=None) -> pd.DataFrame:
    """Read the sheet and return it with canonical snake_case columns."""
    if path.suffix.lower() in (".xlsx", ".xls"):
        df = pd.read_excel(path, sheet_name=sheet or 0)
    else:
        df = pd.read_csv(path)

    df = df.rename(columns=lambda c: COLUMNS.get(_normalise_header(c), c))
    missing = [col for col in COLUMNS.values() if col not in df.columns]
    if missing:
        raise ValueError(f"Missing column(s): {', '.join(missing)}")

    # Blank trailing rows are common in exported sheets
    df = df[list(COLUMNS.values())].dropna(how="all")
    return df.astype(int)


def compare_with_builtin(df: pd.DataFrame, table: SamplingPlanTable = GENERAL_LEVEL_II_PLAN) -> list:
    """Return a list of human-readable differences (empty when identical)."""
    problems = []
    reference = [SamplingPlanRow(**{k: int(v) for k, v in rec.items()}) for rec in df.to_dict("records")]

    try:
        SamplingPlanTable(reference)
    except SamplingPlanError as exc:
        problems.append(f"reference sheet is not a valid plan: {exc}")

    builtin = table.rows
    for index, (ref, own) in enumerate(zip(reference, builtin), start=1):
        for name in COLUMNS.values():
            if getattr(ref, name) != getattr(own, name):
                problems.append(
                    f"row {index}: {name} is {getattr(ref, name)} in sheet, {getattr(own, name)} built in"
                )
    if len(reference) > len(builtin):
        problems.append(f"sheet has {len(reference) - len(builtin)} extra row(s)")
    elif len(reference) < len(builtin):
        problems.append(f"sheet is missing {len(builtin) - len(reference)} row(s)")
    return problems


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Compare an AQL reference sheet with the built-in plan")
    parser.add_argument("path", type=Path, help="Excel or CSV file holding the reference plan")
    parser.add_argument("--sheet", help="Excel sheet name (defaults to the first sheet)")
    args = parser.parse_args(argv)

    if not args.path.exists():
        print(f"Error: File not found -> {args.path}")
        return 2

    try:
        df = load_reference_sheet(args.path, args.sheet)
    except (ValueError, OSError) as exc:
        print(f"Failed to read reference sheet: {exc}")
        return 2

    problems = compare_with_builtin(df)
    if not problems:
        print(f"OK: {len(df)} row(s) match the built-in General Level II plan")
        return 0

    for problem in problems:
        print(f"MISMATCH {problem}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
