"""
NOAA Climate Data Online (CDO) Provider for AMATC Audit

Fetches the Global Summary of the Month (GSOM) average temperature (TAVG)
for a single station and calendar month, one request per year, from the
CDO v2 web services (ncei.noaa.gov/cdo-web/api/v2).

Failures are not retried: an HTTP error or a malformed payload aborts the
batch. A year with no data is not a failure and comes back as None.
"""

import calendar
import logging
import time
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, TypedDict

import httpx
import pandas as pd

from amatc_audit.config import DEFAULT_MONTH, DEFAULT_STATION_ID, FETCHED_COLUMN, YEAR_COLUMN
from amatc_audit.errors import GSOMResponseError

logger = logging.getLogger(__name__)

# Earliest GSOM records in CDO
GSOM_FIRST_YEAR = 1763


class GSOMResult(TypedDict):
    date: str
    datatype: str
    station: str
    attributes: str
    value: float


class YearlyClimateRecord(TypedDict):
    year: int
    value: Optional[float]


def parse_gsom_value(payload: Dict[str, Any]) -> Optional[float]:
    """
    Pull the single monthly value out of a CDO /data response.

    CDO answers an empty query with a bare ``{}``; that maps to None.
    More than one result for a one-month window means the query was not
    what we think it is, so it is rejected rather than averaged.
    """
    results: List[GSOMResult] = payload.get('results') or []
    if not results:
        return None
    if len(results) > 1:
        dates = [r.get('date') for r in results]
        raise GSOMResponseError(f"Expected one GSOM value, got {len(results)}: {dates}")

    value = results[0].get('value')
    if value is None:
        raise GSOMResponseError(f"GSOM result has no value: {results[0]}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise GSOMResponseError(f"GSOM value is not numeric: {value!r}") from None


class NOAAProvider:
    """
    Provider for GSOM monthly average temperature.

    One station, one month, one datatype. Successive requests are separated
    by a fixed delay to stay under the CDO limit of 5 requests per second.
    """

    DATA_URL = "https://www.ncei.noaa.gov/cdo-web/api/v2/data"
    DATASET_ID = "GSOM"
    DATATYPE_ID = "TAVG"

    def __init__(
        self,
        token: str,
        station_id: str = DEFAULT_STATION_ID,
        month: int = DEFAULT_MONTH,
        delay_seconds: float = 1.0,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        logger.info(f"[NOAAProvider] Initializing provider for {station_id}, month {month}...")
        self.station_id = station_id
        self.month = month
        self.delay_seconds = delay_seconds
        self.timeout = timeout
        self.headers = {"token": token}
        self._transport = transport
        self._sleep = sleep

    def build_params(self, year: int) -> Dict[str, Any]:
        """Query parameters for one station-month."""
        last_day = calendar.monthrange(year, self.month)[1]
        return {
            "datasetid": self.DATASET_ID,
            "datatypeid": self.DATATYPE_ID,
            "stationid": self.station_id,
            "startdate": date(year, self.month, 1).isoformat(),
            "enddate": date(year, self.month, last_day).isoformat(),
            "units": "metric",
            "limit": 1000,
        }

    def fetch_year(self, year: int) -> Optional[float]:
        """
        Fetch the GSOM TAVG value for one year.

        Returns:
            The monthly mean temperature in Celsius, or None if CDO has no
            value for that station-month.

        Raises:
            ValueError: year outside the GSOM record.
            httpx.HTTPStatusError: non-2xx response (bad token included).
            httpx.RequestError: transport failure.
            GSOMResponseError: payload is not a single numeric value.
        """
        if not GSOM_FIRST_YEAR <= year <= date.today().year:
            raise ValueError(f"Year {year} is outside the GSOM record "
                             f"({GSOM_FIRST_YEAR}-{date.today().year})")

        params = self.build_params(year)
        logger.debug(f"[NOAAProvider] GET {self.DATA_URL} {params}")

        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            resp = client.get(self.DATA_URL, params=params, headers=self.headers)
            resp.raise_for_status()
            data = resp.json()

        value = parse_gsom_value(data)
        if value is None:
            logger.warning(f"[NOAAProvider] No GSOM {self.DATATYPE_ID} for {self.station_id} in {year}")
        else:
            logger.info(f"[NOAAProvider] {year}: {value:.2f}°C")
        return value

    def fetch_years(self, years: Iterable[int]) -> pd.DataFrame:
        """
        Fetch one value per year, sleeping between requests.

        The first failure propagates and the partial batch is discarded.

        Returns:
            DataFrame with ``year`` and ``gsom_amatc`` (NaN where absent).
        """
        years = list(years)
        logger.info(f"[NOAAProvider] Fetching {len(years)} years from CDO...")

        records: List[YearlyClimateRecord] = []
        for i, year in enumerate(years):
            if i > 0:
                self._sleep(self.delay_seconds)
            records.append({"year": year, "value": self.fetch_year(year)})

        df = pd.DataFrame(records, columns=["year", "value"])
        df = df.rename(columns={"year": YEAR_COLUMN, "value": FETCHED_COLUMN})
        df[YEAR_COLUMN] = df[YEAR_COLUMN].astype(int)
        df[FETCHED_COLUMN] = df[FETCHED_COLUMN].astype(float)

        missing = int(df[FETCHED_COLUMN].isna().sum())
        logger.info(f"[NOAAProvider] Retrieved {len(df) - missing} values, {missing} years missing")
        return df


if __name__ == "__main__":
    import os

    from dotenv import load_dotenv

    load_dotenv()
    logging.basicConfig(level=logging.INFO)

    provider = NOAAProvider(token=os.environ["NOAA_TOKEN"])

    print("=== Testing NOAA GSOM Provider ===\n")
    print(provider.fetch_years([2015, 2016, 2017]))
