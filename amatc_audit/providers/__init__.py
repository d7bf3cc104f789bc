"""
Providers package for AMATC Audit

Remote sources of the climate variable being audited:

1. NOAA CDO - Global Summary of the Month (GSOM), monthly TAVG per station
"""

from amatc_audit.providers.noaa import (
    NOAAProvider,
    GSOMResult,
    YearlyClimateRecord,
    parse_gsom_value,
)

__all__ = [
    # NOAA CDO (GSOM monthly summaries)
    "NOAAProvider",
    "GSOMResult",
    "YearlyClimateRecord",
    "parse_gsom_value",
]
