"""Time-series comparison plot of reference vs. fetched AMATC."""

import logging

import matplotlib.pyplot as plt
import pandas as pd
from matplotlib.figure import Figure

from amatc_audit.config import FETCHED_COLUMN, REFERENCE_COLUMN, YEAR_COLUMN

logger = logging.getLogger(__name__)

PALETTE = {
    "reference": "#1b9e77",
    "fetched": "#d95f02",
}


def to_long(
    joined: pd.DataFrame,
    reference_column: str = REFERENCE_COLUMN,
    fetched_column: str = FETCHED_COLUMN,
) -> pd.DataFrame:
    """Melt the two value columns into ``year, series, value`` rows."""
    long_df = joined.melt(
        id_vars=[YEAR_COLUMN],
        value_vars=[reference_column, fetched_column],
        var_name="series",
        value_name="value",
    )
    long_df["series"] = long_df["series"].map({
        reference_column: "reference",
        fetched_column: "fetched",
    })
    return long_df


def plot_comparison(
    joined: pd.DataFrame,
    reference_column: str = REFERENCE_COLUMN,
    fetched_column: str = FETCHED_COLUMN,
    title: str = "April mean air temperature: dataset vs. GSOM",
) -> Figure:
    """
    Draw both series as lines over year on one set of axes.

    Missing fetched years show up as gaps in the fetched line. The figure
    is returned, not saved.
    """
    long_df = to_long(joined, reference_column, fetched_column)

    fig, ax = plt.subplots(figsize=(10, 5))
    for series, group in long_df.groupby("series", sort=False):
        group = group.sort_values(YEAR_COLUMN)
        ax.plot(group[YEAR_COLUMN], group["value"], label=series,
                color=PALETTE[series], linewidth=1.5)

    ax.set_title(title)
    ax.set_xlabel("Year")
    ax.set_ylabel("Temperature (°C)")
    ax.grid(True, linestyle="--", linewidth=0.5)
    ax.legend()
    fig.tight_layout()

    logger.info(f"[plot_comparison] Plotted {long_df['series'].nunique()} series "
                f"over {long_df[YEAR_COLUMN].nunique()} years")
    return fig
