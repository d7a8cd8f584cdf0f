"""
CSV loading — path, bytes or text in, normalized Dataset out.
"""
from __future__ import annotations

import io
import logging
from pathlib import Path

import pandas as pd

from salescope.data.dataset import Dataset
from salescope.data.normalize import drop_empty_rows

logger = logging.getLogger(__name__)


class IngestionError(ValueError):
    """Raised when the input cannot be read as delimited text at all."""


def _read_frame(source) -> pd.DataFrame:
    if isinstance(source, bytes):
        source = io.StringIO(source.decode("utf-8-sig", errors="replace"))
    elif isinstance(source, str) and not _looks_like_path(source):
        source = io.StringIO(source)

    # Every cell stays text; blank cells become "" and are mapped to None below
    return pd.read_csv(
        source,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        skipinitialspace=False,
        encoding_errors="replace",
    )


def _looks_like_path(text: str) -> bool:
    if not text.strip() or "\n" in text:
        return False
    try:
        if Path(text).exists():
            return True
    except (OSError, ValueError):
        return False
    if "," in text:
        return False
    return Path(text).suffix.lower() in (".csv", ".txt")


def load_frame(source) -> pd.DataFrame:
    """Read a CSV into a string-typed DataFrame with blanks as None."""
    try:
        df = _read_frame(source)
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as exc:
        raise IngestionError(f"Could not read CSV input: {exc}") from exc

    return df.where(df != "", None)


def load_csv(source) -> Dataset:
    """Load CSV input (Path, file path string, CSV text or bytes) as a Dataset.

    Structurally empty rows are dropped.
    """
    if isinstance(source, Path):
        logger.info("Processing file: %s", source.name)
    df = load_frame(source)
    raw = Dataset.from_frame(df)
    data = drop_empty_rows(raw)
    logger.info("Parsed %d records, %d valid", len(raw), len(data))
    return data
