from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Mapping

import numpy as np
import pandas as pd
import matplotlib
from matplotlib.colors import to_hex

logger = logging.getLogger(__name__)

TARGET_YEAR = 2020
FALLBACK_COLOR = "#999999"


def filter_year(df: pd.DataFrame, year: int = TARGET_YEAR) -> pd.DataFrame:
    return df.loc[df["year"] == year].copy()

def sort_by_value(df: pd.DataFrame) -> pd.DataFrame:
    # stable: equal values keep their relative order, NaN goes last
    return df.sort_values("value", ascending=False, kind="stable", na_position="last")

def distinct_countries(df: pd.DataFrame) -> List[str]:
    return list(pd.unique(df["country"]))


class CategoryColorMap(Mapping[str, str]):
    """
    Read-only country -> hex color lookup shared by both charts.

    Colors are sampled evenly over [0, 1) of a matplotlib colormap, one per
    distinct country, so no two countries share a color. Countries outside the
    domain get `fallback` and are not added to the map.
    """

    def __init__(self, colors: Mapping[str, str], fallback: str = FALLBACK_COLOR):
        self._colors: Dict[str, str] = dict(colors)
        self.fallback = fallback

    @classmethod
    def from_countries(
        cls,
        countries: Iterable[str],
        colormap: str = "rainbow",
        fallback: str = FALLBACK_COLOR,
    ) -> "CategoryColorMap":
        domain = list(dict.fromkeys(countries))
        cmap = matplotlib.colormaps[colormap]
        n = len(domain)
        colors = {c: to_hex(cmap(i / n)) for i, c in enumerate(domain)}
        return cls(colors, fallback=fallback)

    def __call__(self, country: str) -> str:
        return self._colors.get(country, self.fallback)

    def __getitem__(self, country: str) -> str:
        return self._colors[country]

    def __iter__(self) -> Iterator[str]:
        return iter(self._colors)

    def __len__(self) -> int:
        return len(self._colors)

    def __repr__(self) -> str:
        return f"CategoryColorMap({self._colors!r})"


@dataclass(frozen=True)
class Aggregate:
    filtered: pd.DataFrame     # target-year records, value descending
    countries: List[str]
    colors: CategoryColorMap


def aggregate(
    df: pd.DataFrame,
    year: int = TARGET_YEAR,
    colormap: str = "rainbow",
    fallback: str = FALLBACK_COLOR,
) -> Aggregate:
    filtered = sort_by_value(filter_year(df, year))
    countries = distinct_countries(filtered)
    colors = CategoryColorMap.from_countries(countries, colormap=colormap, fallback=fallback)
    logger.info("%d records for %s across %d countries", len(filtered), year, len(countries))
    return Aggregate(filtered=filtered, countries=countries, colors=colors)


def group_by_country(df: pd.DataFrame) -> Dict[str, pd.DataFrame]:
    """
    Groups in order of first appearance; rows inside a group keep input order.
    """
    return {
        country: sub.copy()
        for country, sub in df.groupby("country", sort=False, dropna=False)
    }


def summary_stats(df: pd.DataFrame) -> Dict[str, float]:
    vals = df["value"].dropna().to_numpy(dtype=float)
    if vals.size == 0:
        return {"count": 0, "min": np.nan, "max": np.nan, "mean": np.nan, "median": np.nan}
    return {
        "count": int(vals.size),
        "min": float(vals.min()),
        "max": float(vals.max()),
        "mean": float(vals.mean()),
        "median": float(np.median(vals)),
    }
