"""
Reference dataset loader.

The curated forecast dataset is a plain CSV, one row per year, with the
environmental covariates (amatc, msstc, pice, ...) and the run-timing
targets (fifdj, qdj, mdj). It is trusted as clean; the only check is that
the join key is there.
"""

import logging
from pathlib import Path
from typing import Union

import pandas as pd

from amatc_audit.config import YEAR_COLUMN
from amatc_audit.errors import ReferenceDataError

logger = logging.getLogger(__name__)


def load_reference(source: Union[str, Path]) -> pd.DataFrame:
    """
    Load the reference dataset from a URL or a local path.

    Returns:
        The rows in file order with ``year`` as int.

    Raises:
        ReferenceDataError: the file has no ``year`` column.
    """
    logger.info(f"[load_reference] Loading reference dataset from {source}")
    df = pd.read_csv(source)

    if YEAR_COLUMN not in df.columns:
        logger.error(f"[load_reference] No '{YEAR_COLUMN}' column in {list(df.columns)}")
        raise ReferenceDataError(f"Reference dataset has no '{YEAR_COLUMN}' column")

    df[YEAR_COLUMN] = df[YEAR_COLUMN].astype(int)

    logger.info(f"[load_reference] {len(df)} rows, years "
                f"{df[YEAR_COLUMN].min()}-{df[YEAR_COLUMN].max()}, "
                f"columns: {', '.join(df.columns)}")
    return df
