"""
Pipeline orchestration for AMATC Audit.

fetch -> join -> difference -> plot -> refit-and-compare, in that order,
each stage consuming the previous stage's complete output. Any failure
propagates to the caller; there is no partial result.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import pandas as pd
from matplotlib.figure import Figure

from amatc_audit.config import COVARIATES, FETCHED_COLUMN, REFERENCE_COLUMN, TARGET_COLUMN, YEAR_COLUMN
from amatc_audit.hindcast import compare_hindcasts, hindcast_accuracy
from amatc_audit.providers.noaa import NOAAProvider
from amatc_audit.reconcile import Reconciliation, reconcile
from amatc_audit.sensitivity import coefficient_report
from amatc_audit.visualize import plot_comparison

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    fetched: pd.DataFrame
    reconciliation: Reconciliation
    figure: Figure
    hindcasts: pd.DataFrame
    accuracy: pd.DataFrame
    sensitivity: pd.DataFrame


def hindcast_years_for(
    reference: pd.DataFrame,
    start: int,
    end: Optional[int] = None,
) -> List[int]:
    """Reference years in ``[start, end]``; ``end`` defaults to the last year."""
    years = sorted(reference[YEAR_COLUMN].unique())
    last = years[-1] if end is None else end
    return [int(y) for y in years if start <= y <= last]


def run_pipeline(
    reference: pd.DataFrame,
    provider: NOAAProvider,
    hindcast_years: Iterable[int],
    fetch_years: Optional[Iterable[int]] = None,
    target: str = TARGET_COLUMN,
    covariates: Sequence[str] = COVARIATES,
) -> PipelineResult:
    """
    Run every stage once.

    Args:
        reference: Loaded reference dataset.
        provider: Configured GSOM provider.
        hindcast_years: Target years for the hindcast comparison.
        fetch_years: Years to request from CDO. Defaults to every
            reference year.
        target: Outcome column of the forecast formula.
        covariates: Predictor columns, including the audited one.
    """
    if fetch_years is None:
        fetch_years = sorted(int(y) for y in reference[YEAR_COLUMN].unique())
    fetch_years = list(fetch_years)
    hindcast_years = list(hindcast_years)

    logger.info(f"[run_pipeline] Fetching {len(fetch_years)} years, "
                f"hindcasting {len(hindcast_years)} years")

    fetched = provider.fetch_years(fetch_years)
    reconciliation = reconcile(reference, fetched, REFERENCE_COLUMN, FETCHED_COLUMN)
    figure = plot_comparison(reconciliation.joined, REFERENCE_COLUMN, FETCHED_COLUMN)

    hindcasts = compare_hindcasts(
        reconciliation.joined, hindcast_years, target, covariates,
        REFERENCE_COLUMN, FETCHED_COLUMN,
    )
    accuracy = hindcast_accuracy(reconciliation.joined, hindcasts, target)
    sensitivity = coefficient_report(
        reconciliation.joined, target, covariates, REFERENCE_COLUMN, FETCHED_COLUMN,
    )

    logger.info("[run_pipeline] Complete")
    return PipelineResult(
        fetched=fetched,
        reconciliation=reconciliation,
        figure=figure,
        hindcasts=hindcasts,
        accuracy=accuracy,
        sensitivity=sensitivity,
    )
