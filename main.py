"""
AMATC Audit: GSOM vs. curated April air temperature

Fetches the April mean air temperature for Nome from NOAA's Global Summary
of the Month, compares it year by year with the AMATC column of the Yukon
run-timing forecast dataset, and re-runs the MDJ hindcasts under both
versions to see whether the discrepancies change any prediction.

Steps: GSOM fetch -> join -> differences -> plot -> hindcast -> coefficients
"""

import argparse
import logging
import os
import sys
from datetime import datetime

import matplotlib.pyplot as plt
import pandas as pd
from colorama import Fore, Style, init
from dotenv import load_dotenv

from amatc_audit.config import Settings
from amatc_audit.hindcast import changed_years
from amatc_audit.pipeline import PipelineResult, hindcast_years_for, run_pipeline
from amatc_audit.providers.noaa import NOAAProvider
from amatc_audit.reference import load_reference

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description='AMATC Audit - compare dataset AMATC against NOAA GSOM and re-run hindcasts'
    )
    parser.add_argument('--start-year', type=int, default=None,
                        help='First year to fetch from GSOM (default: first reference year)')
    parser.add_argument('--end-year', type=int, default=None,
                        help='Last year to fetch from GSOM (default: last reference year)')
    parser.add_argument('--hindcast-start', type=int, default=None,
                        help='First hindcast target year (default: AMATC_HINDCAST_START or 1980)')
    parser.add_argument('--hindcast-end', type=int, default=None,
                        help='Last hindcast target year (default: AMATC_HINDCAST_END or last reference year)')
    parser.add_argument('--show', action='store_true',
                        help='Display the comparison plot when done')
    return parser.parse_args(argv)


def configure_logging():
    """Log to logs/amatc_audit.log and stdout."""
    os.makedirs("logs", exist_ok=True)
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler("logs/amatc_audit.log", mode='a', encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )


def print_banner():
    """Print the system banner."""
    print(f"\n{Fore.CYAN}{'=' * 60}{Style.RESET_ALL}")
    print(f"{Fore.CYAN}   AMATC AUDIT: DATASET vs. NOAA GSOM{Style.RESET_ALL}")
    print(f"{Fore.CYAN}   April mean air temperature, Nome AK{Style.RESET_ALL}")
    print(f"{Fore.CYAN}{'=' * 60}{Style.RESET_ALL}")
    print()


def print_section(title: str):
    print(f"\n{Fore.CYAN}{'=' * 60}{Style.RESET_ALL}")
    print(f"{Fore.WHITE}{title}{Style.RESET_ALL}")
    print(f"{Fore.CYAN}{'=' * 60}{Style.RESET_ALL}")


def print_results(result: PipelineResult, top: int = 10):
    """Print the ranked differences, summaries, hindcasts and coefficients."""
    recon = result.reconciliation

    print_section(f"LARGEST DIFFERENCES (top {top}, dataset - GSOM)")
    columns = ['year', 'amatc', 'gsom_amatc', 'diff', 'abs_diff']
    print(recon.ranked[columns].head(top).to_string(index=False, float_format='{:.2f}'.format))

    print_section("ABSOLUTE DIFFERENCE SUMMARY (°C)")
    print(recon.summary.to_string(float_format='{:.3f}'.format))

    missing = int(recon.joined['gsom_amatc'].isna().sum())
    if missing:
        print(f"\n{Fore.YELLOW}{missing} reference years have no GSOM value{Style.RESET_ALL}")

    print_section("HINDCAST COMPARISON (MDJ, floored)")
    print(result.hindcasts.to_string(index=False, float_format='{:.0f}'.format))

    changed, not_comparable = changed_years(result.hindcasts)
    if changed:
        years = ', '.join(str(y) for y in changed)
        print(f"\n{Fore.YELLOW}{len(changed)} hindcasts changed: {years}{Style.RESET_ALL}")
    if not_comparable:
        years = ', '.join(str(y) for y in not_comparable)
        print(f"\n{Fore.YELLOW}{len(not_comparable)} hindcasts not comparable "
              f"(no GSOM prediction): {years}{Style.RESET_ALL}")
    if not changed and not not_comparable:
        print(f"\n{Fore.GREEN}No hindcast changed between variants{Style.RESET_ALL}")

    print_section("HINDCAST ACCURACY (MAE, days)")
    print(result.accuracy.to_string(index=False, float_format='{:.2f}'.format))

    print_section("AMATC COEFFICIENT (full-data fit)")
    with pd.option_context('display.float_format', '{:.4f}'.format):
        print(result.sensitivity.to_string(index=False))


def main(args=None):
    """Main entry point for AMATC Audit."""
    start_time = datetime.now()

    print_banner()

    logger.info("=" * 60)
    logger.info(f"AMATC Audit - Run: {start_time.strftime('%Y-%m-%d %H:%M:%S')}")
    logger.info("=" * 60)

    try:
        settings = Settings.from_env()
        token = settings.require_token()

        print(f"{Fore.YELLOW}[1/2]{Style.RESET_ALL} Loading reference dataset...")
        reference = load_reference(settings.reference_url)
        print(f"      {Fore.GREEN}OK{Style.RESET_ALL} - {len(reference)} years")

        first_year = int(reference['year'].min())
        last_year = int(reference['year'].max())
        start = args.start_year if args and args.start_year is not None else first_year
        end = args.end_year if args and args.end_year is not None else last_year
        fetch_years = range(start, end + 1)

        hindcast_start = args.hindcast_start if args and args.hindcast_start is not None else settings.hindcast_start
        hindcast_end = args.hindcast_end if args and args.hindcast_end is not None else settings.hindcast_end
        hindcast_years = hindcast_years_for(reference, hindcast_start, hindcast_end)

        print(f"{Fore.YELLOW}[2/2]{Style.RESET_ALL} Polling NOAA CDO (GSOM {settings.station_id}) "
              f"for {start}-{end}...")
        print(f"      {settings.request_delay_seconds:.1f}s between requests, this takes a while")
        provider = NOAAProvider(
            token=token,
            station_id=settings.station_id,
            month=settings.month,
            delay_seconds=settings.request_delay_seconds,
            timeout=settings.request_timeout_seconds,
        )

        result = run_pipeline(reference, provider, hindcast_years, fetch_years=fetch_years)

        print_results(result)

        duration = (datetime.now() - start_time).total_seconds()
        print(f"\n{Fore.GREEN}{'=' * 60}{Style.RESET_ALL}")
        print(f"{Fore.GREEN}   DONE{Style.RESET_ALL} in {duration:.1f} seconds")
        print(f"{Fore.GREEN}{'=' * 60}{Style.RESET_ALL}")

        if args and args.show:
            plt.show()
        return 0

    except Exception as e:
        logger.error(f"FAILED: {e}", exc_info=True)
        print(f"\n{Fore.RED}ERROR: {e}{Style.RESET_ALL}")
        return 1


if __name__ == "__main__":
    init()
    load_dotenv()
    configure_logging()
    sys.exit(main(parse_args()))
