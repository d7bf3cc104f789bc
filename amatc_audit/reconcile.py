"""
Reconciler: joins fetched GSOM values onto the reference dataset.

All reference years are kept (left join). Years without a fetched value get
NaN differences, which the ranking puts last and the summary skips.
"""

import logging
from dataclasses import dataclass

import pandas as pd

from amatc_audit.config import FETCHED_COLUMN, REFERENCE_COLUMN, YEAR_COLUMN

logger = logging.getLogger(__name__)

DIFF_COLUMN = "diff"
ABS_DIFF_COLUMN = "abs_diff"


@dataclass(frozen=True)
class Reconciliation:
    """Everything the reconciler produces for one run."""
    joined: pd.DataFrame
    ranked: pd.DataFrame
    summary: pd.Series


def join_records(
    reference: pd.DataFrame,
    fetched: pd.DataFrame,
    reference_column: str = REFERENCE_COLUMN,
    fetched_column: str = FETCHED_COLUMN,
) -> pd.DataFrame:
    """
    Left-join fetched values onto the reference rows by year.

    Adds ``diff`` (reference - fetched) and ``abs_diff``.

    Raises:
        pandas.errors.MergeError: a year appears twice in ``fetched``.
    """
    joined = reference.merge(
        fetched[[YEAR_COLUMN, fetched_column]],
        on=YEAR_COLUMN,
        how="left",
        validate="many_to_one",
    )
    joined[DIFF_COLUMN] = joined[reference_column] - joined[fetched_column]
    joined[ABS_DIFF_COLUMN] = joined[DIFF_COLUMN].abs()

    matched = int(joined[fetched_column].notna().sum())
    logger.info(f"[join_records] {len(joined)} reference years, {matched} with a fetched value")
    return joined


def rank_differences(joined: pd.DataFrame) -> pd.DataFrame:
    """Largest absolute difference first; ties keep their original order."""
    return joined.sort_values(
        ABS_DIFF_COLUMN,
        ascending=False,
        kind="mergesort",
        na_position="last",
    )


def summarize_differences(joined: pd.DataFrame) -> pd.Series:
    """Count, min, quartiles, mean and max of ``abs_diff`` over non-missing rows."""
    abs_diff = joined[ABS_DIFF_COLUMN].dropna()
    return pd.Series(
        {
            "count": int(abs_diff.count()),
            "min": abs_diff.min(),
            "q1": abs_diff.quantile(0.25),
            "median": abs_diff.median(),
            "mean": abs_diff.mean(),
            "q3": abs_diff.quantile(0.75),
            "max": abs_diff.max(),
        },
        name=ABS_DIFF_COLUMN,
    )


def reconcile(
    reference: pd.DataFrame,
    fetched: pd.DataFrame,
    reference_column: str = REFERENCE_COLUMN,
    fetched_column: str = FETCHED_COLUMN,
) -> Reconciliation:
    joined = join_records(reference, fetched, reference_column, fetched_column)
    ranked = rank_differences(joined)
    summary = summarize_differences(joined)

    if summary["count"]:
        logger.info(f"[reconcile] abs_diff median={summary['median']:.2f} "
                    f"mean={summary['mean']:.2f} max={summary['max']:.2f}")
    else:
        logger.warning("[reconcile] No overlapping years to compare")

    return Reconciliation(joined=joined, ranked=ranked, summary=summary)
