"""
AMATC Audit: GSOM vs. curated April air temperature

Compares the April mean air temperature (AMATC) in the curated Yukon
run-timing forecast dataset against the same measurement pulled from NOAA's
Global Summary of the Month (GSOM), then checks whether the differences move
the linear-regression hindcasts of the run-timing midpoint (MDJ).

Architecture:
    providers/     - Remote data fetching:
                     * noaa.py - NOAA CDO v2 API, GSOM monthly TAVG
    reference.py   - Curated forecast dataset loader
    reconcile.py   - Year join, signed/absolute differences, ranking
    visualize.py   - Two-series time plot (matplotlib)
    hindcast.py    - Rolling-origin OLS hindcasts under both AMATC versions
    sensitivity.py - Full-data fit, AMATC coefficient per variant
    config.py      - Environment-driven settings

Entry Point:
    main.py - Runs the whole pipeline top to bottom
"""

__version__ = "1.0.0"
__author__ = "AMATC Audit"
