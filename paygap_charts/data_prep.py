import logging
from typing import List

import pandas as pd

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: List[str] = ["geo", "country", "year", "value"]
RECORD_COLUMNS: List[str] = ["geo", "country", "year", "value", "date"]


def empty_records() -> pd.DataFrame:
    return pd.DataFrame({
        "geo": pd.Series(dtype=object),
        "country": pd.Series(dtype=object),
        "year": pd.Series(dtype=float),
        "value": pd.Series(dtype=float),
        "date": pd.Series(dtype="datetime64[ns]"),
    })


def coerce_records(raw: pd.DataFrame) -> pd.DataFrame:
    """
    Map raw text rows to records:
      year, value -> numbers (malformed -> NaN)
      date        -> Jan 1 of `year`, parsed as a 4-digit year (malformed -> NaT)
      geo, country passed through unchanged
    Row order is kept; extra columns are dropped.
    """
    if raw.empty:
        return empty_records()

    year_txt = raw["year"].astype(str).str.strip()
    out = pd.DataFrame({
        "geo": raw["geo"].to_numpy(),
        "country": raw["country"].to_numpy(),
        "year": pd.to_numeric(year_txt, errors="coerce"),
        "value": pd.to_numeric(raw["value"].astype(str).str.strip(), errors="coerce").astype(float),
        "date": pd.to_datetime(year_txt, format="%Y", errors="coerce"),
    })
    out.index = pd.RangeIndex(len(out))

    bad = out["year"].isna() | out["value"].isna()
    if bad.any():
        logger.debug("%d of %d rows have a non-numeric year or value", int(bad.sum()), len(out))
    return out


def load_records(path: str) -> pd.DataFrame:
    """
    Load a delimited file (path or URL) with a header row and coerce it to records.

    Header names are matched case-insensitively. Read/parse errors propagate;
    a zero-byte or header-only file gives an empty record frame.
    """
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError:
        logger.warning("%s is empty", path)
        return empty_records()

    cols = {c.strip().lower(): c for c in df.columns}
    missing = [r for r in REQUIRED_COLUMNS if r not in cols]
    if missing:
        raise ValueError(f"CSV is missing required columns: {missing}. Found: {list(df.columns)}")
    df = df.rename(columns={cols[r]: r for r in REQUIRED_COLUMNS})

    records = coerce_records(df)
    logger.info("loaded %d records from %s", len(records), path)
    return records
