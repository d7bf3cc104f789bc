"""Shared fixtures: synthetic forecast datasets and a fake CDO endpoint."""

import logging
import sys
from pathlib import Path

import httpx
import matplotlib
import numpy as np
import pandas as pd
import pytest

matplotlib.use("Agg")

sys.path.insert(0, str(Path(__file__).parent.parent))

logging.basicConfig(level=logging.DEBUG)


def gsom_payload(year, value):
    """CDO /data body for one station-month; ``{}`` when value is None."""
    if value is None:
        return {}
    return {
        "metadata": {"resultset": {"offset": 1, "count": 1, "limit": 1000}},
        "results": [{
            "date": f"{year}-04-01T00:00:00",
            "datatype": "TAVG",
            "station": "GHCND:USW00026617",
            "attributes": ",,,",
            "value": value,
        }],
    }


def make_transport(values, calls=None):
    """
    MockTransport serving ``values`` (year -> value or None).

    Every request is appended to ``calls`` when given.
    """
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        year = int(request.url.params["startdate"][:4])
        return httpx.Response(200, json=gsom_payload(year, values.get(year)))

    return httpx.MockTransport(handler)


@pytest.fixture
def five_year_reference():
    """Five consecutive years, one covariate, a non-integer linear target."""
    return pd.DataFrame({
        "year": [2000, 2001, 2002, 2003, 2004],
        "amatc": [-5.0, -3.0, -6.0, -2.0, -4.0],
        "mdj": [160.6, 165.1, 157.9, 167.2, 162.4],
    })


@pytest.fixture
def forecast_reference():
    """Twenty years shaped like the Yukon forecast dataset, with noise."""
    rng = np.random.RandomState(42)
    years = np.arange(1990, 2010)
    amatc = rng.normal(-6.0, 3.0, len(years)).round(1)
    msstc = rng.normal(0.5, 1.5, len(years)).round(1)
    pice = rng.uniform(0.2, 0.9, len(years)).round(2)
    mdj = (170.0 + 1.2 * amatc - 0.9 * msstc + 4.0 * pice
           + rng.normal(0.0, 1.5, len(years))).round(0)
    return pd.DataFrame({
        "year": years,
        "amatc": amatc,
        "msstc": msstc,
        "pice": pice,
        "mdj": mdj,
    })
