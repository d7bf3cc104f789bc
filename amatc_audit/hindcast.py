"""
Hindcast Engine

Rolling-origin hindcasts of the run-timing target: for each target year,
fit OLS on every earlier year in the dataset and predict the target year.
The same procedure runs twice, once with the curated AMATC and once with
the GSOM value swapped in, so the two prediction vectors can be compared.

Predictions are floored because the target is reported as a whole
day-of-year.
"""

import logging
from typing import Iterable, List, Sequence, Tuple, TypedDict

import numpy as np
import pandas as pd
import statsmodels.formula.api as smf
from patsy import dmatrices

from amatc_audit.config import (
    COVARIATES,
    FETCHED_COLUMN,
    REFERENCE_COLUMN,
    TARGET_COLUMN,
    YEAR_COLUMN,
)
from amatc_audit.errors import DegenerateFitError

logger = logging.getLogger(__name__)

REFERENCE_VARIANT = "reference"
FETCHED_VARIANT = "fetched"


class HindcastResult(TypedDict):
    target_year: int
    predicted_value: float
    variant: str


def build_formula(target: str = TARGET_COLUMN, covariates: Sequence[str] = COVARIATES) -> str:
    """``target ~ a + b + c`` for plain column names."""
    return f"{target} ~ {' + '.join(covariates)}"


def formula_pair(
    target: str = TARGET_COLUMN,
    covariates: Sequence[str] = COVARIATES,
    reference_column: str = REFERENCE_COLUMN,
    fetched_column: str = FETCHED_COLUMN,
) -> Tuple[str, str]:
    """
    The reference formula and the same formula with the fetched column
    substituted for the reference column.
    """
    if reference_column not in covariates:
        raise ValueError(f"{reference_column} is not one of the covariates {list(covariates)}")
    swapped = [fetched_column if c == reference_column else c for c in covariates]
    return build_formula(target, covariates), build_formula(target, swapped)


def floor_prediction(value: float) -> float:
    """Round toward negative infinity: 137.8 -> 137, -0.2 -> -1. NaN stays NaN."""
    return float(np.floor(value))


def training_window(data: pd.DataFrame, target_year: int) -> pd.DataFrame:
    """Rows from the dataset's first year through ``target_year - 1``."""
    min_year = data[YEAR_COLUMN].min()
    mask = (data[YEAR_COLUMN] >= min_year) & (data[YEAR_COLUMN] <= target_year - 1)
    return data.loc[mask]


def hindcast_year(data: pd.DataFrame, formula: str, target_year: int) -> float:
    """
    Fit on all years before ``target_year`` and predict that year.

    Returns:
        The floored prediction, or NaN if the target year's predictors are
        missing.

    Raises:
        KeyError: ``target_year`` is not in the dataset.
        DegenerateFitError: fewer complete training rows than parameters.
    """
    target_row = data.loc[data[YEAR_COLUMN] == target_year]
    if target_row.empty:
        raise KeyError(f"Target year {target_year} not in dataset")

    # Rows left after NA drop; may be zero when a column is entirely missing
    _, design = dmatrices(formula, data, NA_action="drop", return_type="dataframe")
    nparams = design.shape[1]

    window = training_window(data, target_year)
    complete = window.index.intersection(design.index)
    nobs = len(complete)
    if nobs < nparams:
        raise DegenerateFitError(target_year, nobs, nparams)

    results = smf.ols(formula, data=window.loc[complete]).fit()
    predicted = results.predict(target_row.iloc[[0]])
    raw = float(predicted.iloc[0]) if len(predicted) else float("nan")

    logger.debug(f"[hindcast_year] {target_year}: window {window[YEAR_COLUMN].min()}-"
                 f"{window[YEAR_COLUMN].max()} (n={nobs}), raw={raw:.3f}")
    return floor_prediction(raw)


def run_hindcast(
    data: pd.DataFrame,
    formula: str,
    target_years: Iterable[int],
    variant: str = REFERENCE_VARIANT,
) -> List[HindcastResult]:
    """Hindcast every target year in order. The first failure aborts the batch."""
    target_years = list(target_years)
    logger.info(f"[run_hindcast] {variant}: '{formula}' over {len(target_years)} years")

    results: List[HindcastResult] = []
    for year in target_years:
        results.append({
            "target_year": int(year),
            "predicted_value": hindcast_year(data, formula, year),
            "variant": variant,
        })
    return results


def compare_hindcasts(
    data: pd.DataFrame,
    target_years: Iterable[int],
    target: str = TARGET_COLUMN,
    covariates: Sequence[str] = COVARIATES,
    reference_column: str = REFERENCE_COLUMN,
    fetched_column: str = FETCHED_COLUMN,
) -> pd.DataFrame:
    """
    Hindcast under both AMATC versions.

    Returns:
        DataFrame with ``year``, ``reference``, ``fetched`` and
        ``difference`` (fetched - reference), one row per target year.
    """
    target_years = list(target_years)
    reference_formula, fetched_formula = formula_pair(target, covariates, reference_column, fetched_column)

    reference = run_hindcast(data, reference_formula, target_years, REFERENCE_VARIANT)
    fetched = run_hindcast(data, fetched_formula, target_years, FETCHED_VARIANT)

    comparison = pd.DataFrame({
        YEAR_COLUMN: target_years,
        REFERENCE_VARIANT: [r["predicted_value"] for r in reference],
        FETCHED_VARIANT: [r["predicted_value"] for r in fetched],
    })
    comparison["difference"] = comparison[FETCHED_VARIANT] - comparison[REFERENCE_VARIANT]

    changed, not_comparable = changed_years(comparison)
    if changed:
        logger.warning(f"[compare_hindcasts] {len(changed)}/{len(comparison)} hindcasts changed")
    if not_comparable:
        logger.warning(f"[compare_hindcasts] {len(not_comparable)}/{len(comparison)} hindcasts "
                       f"not comparable (missing prediction): {not_comparable}")
    if not changed and not not_comparable:
        logger.info(f"[compare_hindcasts] All {len(comparison)} hindcasts identical")
    return comparison


def changed_years(comparison: pd.DataFrame) -> Tuple[List[int], List[int]]:
    """
    Split comparison years into those whose prediction moved and those
    where either variant has no prediction. Years in neither list are
    identical under both variants.
    """
    difference = comparison["difference"]
    years = comparison[YEAR_COLUMN]
    changed = years[difference.notna() & (difference != 0)]
    not_comparable = years[difference.isna()]
    return [int(y) for y in changed], [int(y) for y in not_comparable]


def hindcast_accuracy(
    data: pd.DataFrame,
    comparison: pd.DataFrame,
    target: str = TARGET_COLUMN,
) -> pd.DataFrame:
    """
    Mean absolute error of each variant against the observed target.

    Years with a missing observation or prediction are skipped per variant.
    Lower MAE ranks first.
    """
    observed = data[[YEAR_COLUMN, target]]
    merged = comparison.merge(observed, on=YEAR_COLUMN, how="left")

    rows = []
    for variant in (REFERENCE_VARIANT, FETCHED_VARIANT):
        errors = (merged[variant] - merged[target]).abs().dropna()
        rows.append({
            "variant": variant,
            "years": int(errors.count()),
            "mae": errors.mean() if len(errors) else float("nan"),
        })

    board = pd.DataFrame(rows).sort_values("mae", kind="mergesort").reset_index(drop=True)
    board["rank"] = range(1, len(board) + 1)
    return board
