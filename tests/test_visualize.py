"""
Tests for the comparison plot

Run with: python -m pytest tests/test_visualize.py -v
"""

import logging

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest
from matplotlib.colors import to_hex
from matplotlib.figure import Figure

from amatc_audit.visualize import PALETTE, plot_comparison, to_long

logger = logging.getLogger(__name__)


@pytest.fixture
def joined():
    return pd.DataFrame({
        "year": [2000, 2001, 2002],
        "amatc": [-5.0, -3.0, -6.0],
        "gsom_amatc": [-5.5, np.nan, -6.0],
        "mdj": [160, 165, 158],
    })


class TestToLong:
    """Test suite for the long reshape."""

    def test_two_rows_per_year(self, joined):
        long_df = to_long(joined)
        logger.info(f"[TEST] Long:\n{long_df}")

        assert list(long_df.columns) == ["year", "series", "value"]
        assert len(long_df) == 2 * len(joined)
        assert set(long_df["series"]) == {"reference", "fetched"}

    def test_series_share_year_domain(self, joined):
        long_df = to_long(joined)

        reference_years = long_df.loc[long_df["series"] == "reference", "year"].tolist()
        fetched_years = long_df.loc[long_df["series"] == "fetched", "year"].tolist()
        assert reference_years == fetched_years == [2000, 2001, 2002]

    def test_values_carried_over(self, joined):
        long_df = to_long(joined).set_index(["series", "year"])

        assert long_df.loc[("reference", 2001), "value"] == -3.0
        assert long_df.loc[("fetched", 2000), "value"] == -5.5
        assert pd.isna(long_df.loc[("fetched", 2001), "value"])


class TestPlotComparison:
    """Test suite for the rendered figure."""

    def test_two_lines_with_fixed_palette(self, joined):
        fig = plot_comparison(joined)

        assert isinstance(fig, Figure)
        ax = fig.axes[0]
        lines = {line.get_label(): line for line in ax.get_lines()}
        assert set(lines) == {"reference", "fetched"}
        for label, line in lines.items():
            assert to_hex(line.get_color()) == PALETTE[label]
            assert list(line.get_xdata()) == [2000, 2001, 2002]

        plt.close(fig)

    def test_labels(self, joined):
        fig = plot_comparison(joined, title="Nome AMATC")
        ax = fig.axes[0]

        assert ax.get_title() == "Nome AMATC"
        assert ax.get_xlabel() == "Year"
        assert ax.get_legend() is not None

        plt.close(fig)


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
