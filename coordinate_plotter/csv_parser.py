"""
CSV text to row mappings.

Only the structure is handled here: header detection, quoting and trimming.
Every cell comes back as a string; numeric checks belong to the validator.
"""
from __future__ import annotations

import io
import warnings
from typing import Dict, List

import pandas as pd

from .errors import MissingColumnsError, ParseError

REQUIRED_COLUMNS = ('latitude', 'longitude')


def parse_csv(text: str) -> List[Dict[str, str]]:
    """Parses CSV text into one {column: cell} dict per data row, column names lower-cased."""
    lines = [line for line in (text or '').splitlines() if line.strip()]
    if not lines:
        raise ParseError("CSV text is empty.")

    try:
        with warnings.catch_warnings():
            # rows wider than the header lose their trailing cells
            warnings.simplefilter('ignore', pd.errors.ParserWarning)
            df = pd.read_csv(
                io.StringIO('\n'.join(lines)),
                sep=',',
                quotechar='"',
                dtype=str,
                keep_default_na=False,
                skipinitialspace=True,
                index_col=False,
                engine='python',
            )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ParseError(f"Could not parse CSV: {e}") from e

    # Normalize column names (strip whitespace, lower case)
    df.columns = df.columns.str.strip().str.lower()
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise MissingColumnsError(missing)
    if df.empty:
        return []

    df = df.fillna('').astype(str).apply(lambda col: col.str.strip())
    return df.to_dict(orient='records')
