"""
Sensitivity Reporter

Fits the forecast formula once over every year, under each AMATC version,
and reports the AMATC coefficient. A GSOM/dataset difference of d degrees
moves a prediction by roughly coefficient * d days; this puts the hindcast
differences in scale.
"""

import logging
from typing import Sequence

import pandas as pd
import statsmodels.formula.api as smf
from statsmodels.regression.linear_model import RegressionResultsWrapper

from amatc_audit.config import COVARIATES, FETCHED_COLUMN, REFERENCE_COLUMN, TARGET_COLUMN
from amatc_audit.hindcast import FETCHED_VARIANT, REFERENCE_VARIANT, formula_pair

logger = logging.getLogger(__name__)


def fit_full(data: pd.DataFrame, formula: str) -> RegressionResultsWrapper:
    """OLS over the whole dataset; rows with missing values are dropped."""
    results = smf.ols(formula, data=data).fit()
    logger.info(f"[fit_full] '{formula}': n={int(results.nobs)}, R²={results.rsquared:.3f}")
    logger.debug(f"[fit_full] Summary:\n{results.summary()}")
    return results


def coefficient_report(
    data: pd.DataFrame,
    target: str = TARGET_COLUMN,
    covariates: Sequence[str] = COVARIATES,
    reference_column: str = REFERENCE_COLUMN,
    fetched_column: str = FETCHED_COLUMN,
) -> pd.DataFrame:
    """
    Coefficient of the audited variable under each variant.

    Returns:
        One row per variant: ``variant``, ``term``, ``estimate``,
        ``std_error``, ``t_value``, ``p_value``, ``nobs``, ``rsquared``.
    """
    reference_formula, fetched_formula = formula_pair(target, covariates, reference_column, fetched_column)

    rows = []
    for variant, formula, term in (
        (REFERENCE_VARIANT, reference_formula, reference_column),
        (FETCHED_VARIANT, fetched_formula, fetched_column),
    ):
        results = fit_full(data, formula)
        rows.append({
            "variant": variant,
            "term": term,
            "estimate": results.params[term],
            "std_error": results.bse[term],
            "t_value": results.tvalues[term],
            "p_value": results.pvalues[term],
            "nobs": int(results.nobs),
            "rsquared": results.rsquared,
        })

    report = pd.DataFrame(rows)
    for row in rows:
        logger.info(f"[coefficient_report] {row['variant']}: {row['term']}="
                    f"{row['estimate']:.3f} (SE {row['std_error']:.3f}, p={row['p_value']:.3g})")
    return report
