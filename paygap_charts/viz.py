from __future__ import annotations
import html
import io
import logging
import math
import os
import xml.etree.ElementTree as ET
from typing import Dict, Optional, Sequence, Tuple

import pandas as pd
import matplotlib
from matplotlib.figure import Figure
from matplotlib.patches import Rectangle
from matplotlib.transforms import ScaledTranslation

from .config import BAR_CHART, LINE_CHART, ChartConfig
from .join import ArtistJoin
from .metrics import TARGET_YEAR, CategoryColorMap, filter_year, group_by_country

logger = logging.getLogger(__name__)

# figure dpi == 72 makes one drawing unit == one point == one SVG user unit
UNITS_PER_INCH = 72
TICK_SIZE, TICK_PAD = 6, 3

SVG_NS = "http://www.w3.org/2000/svg"
ET.register_namespace("", SVG_NS)
for _prefix, _uri in (
    ("xlink", "http://www.w3.org/1999/xlink"),
    ("dc", "http://purl.org/dc/elements/1.1/"),
    ("cc", "http://creativecommons.org/ns#"),
    ("rdf", "http://www.w3.org/1999/02/22-rdf-syntax-ns#"),
):
    ET.register_namespace(_prefix, _uri)


def _ensure_dir(p: Optional[str]) -> None:
    if p:
        d = os.path.dirname(p)
        if d and not os.path.exists(d):
            os.makedirs(d, exist_ok=True)

def format_value(v: float) -> str:
    """Number formatting for tooltips: 10 -> '10', 10.5 -> '10.5', NaN -> 'NaN'."""
    v = float(v)
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "Infinity" if v > 0 else "-Infinity"
    return str(int(v)) if v.is_integer() else repr(v)

def _domain_max(values: pd.Series) -> float:
    # value axis is [0, max]; no data (or no positive max) falls back to [0, 1]
    top = values.max(skipna=True)
    if pd.isna(top) or top <= 0:
        return 1.0
    return float(top)


class _Chart:
    """
    One static chart: a fixed-size figure with a single axes box placed by margins.
    Data-bound artists get an SVG id (gid) and a tooltip text in `self.tooltips`.
    """
    name = "chart"

    def __init__(self, config: ChartConfig):
        self.config = config
        w, h, m = config.width, config.height, config.margins
        self.fig = Figure(figsize=(w / UNITS_PER_INCH, h / UNITS_PER_INCH), dpi=UNITS_PER_INCH)
        self.ax = self.fig.add_axes([
            m.left / w,
            m.bottom / h,
            (w - m.left - m.right) / w,
            (h - m.top - m.bottom) / h,
        ])
        self.ax.patch.set_visible(False)
        for side in ("top", "right", "left"):
            self.ax.spines[side].set_visible(False)
        self.ax.tick_params(length=TICK_SIZE, pad=TICK_PAD)
        self.tooltips: Dict[str, str] = {}

    def to_svg(self) -> str:
        buf = io.BytesIO()
        with matplotlib.rc_context({"svg.fonttype": "none", "svg.hashsalt": self.name}):
            self.fig.savefig(buf, format="svg")
        root, ids = ET.XMLID(buf.getvalue())
        for gid, text in self.tooltips.items():
            el = ids.get(gid)
            if el is None:
                # hidden artists (NaN values) are not written out
                logger.debug("%s: no element for %s", self.name, gid)
                continue
            title = ET.Element(f"{{{SVG_NS}}}title")
            title.text = text
            el.insert(0, title)
        return ET.tostring(root, encoding="unicode")

    def save(self, out_path: str) -> str:
        _ensure_dir(out_path)
        with open(out_path, "w", encoding="utf-8") as f:
            f.write('<?xml version="1.0" encoding="utf-8"?>\n')
            f.write(self.to_svg())
        logger.info("wrote %s", out_path)
        return out_path


class BarChart(_Chart):
    """Target-year values per country, one band per country in data order."""
    name = "bar"

    def __init__(self, config: ChartConfig = BAR_CHART):
        super().__init__(config)
        self.bars = ArtistJoin()

    def render(self, data: pd.DataFrame, colors: CategoryColorMap) -> "BarChart":
        ax = self.ax
        countries = list(pd.unique(data["country"]))
        band = {c: i for i, c in enumerate(countries)}
        pad = self.config.padding
        width = 1 - pad

        def enter(rec) -> Rectangle:
            return ax.add_patch(Rectangle((0, 0), 0, 0, linewidth=0))

        def update(bar: Rectangle, rec) -> None:
            bar.set_xy((band[rec.country] - width / 2, 0))
            bar.set_width(width)
            bar.set_height(rec.value)
            bar.set_facecolor(colors(rec.country))
            bar.set_visible(not pd.isna(rec.value))

        records = list(data.itertuples(index=False))
        self.bars.join(records, enter, update)

        self.tooltips = {}
        for i, (rec, bar) in enumerate(zip(records, self.bars.artists())):
            gid = f"bar-{i}"
            bar.set_gid(gid)
            self.tooltips[gid] = f"{rec.country}: {format_value(rec.value)}"

        # band centers sit on integers; outer padding on both ends
        outer = width / 2 + pad
        if countries:
            ax.set_xlim(-outer, len(countries) - 1 + outer)
        else:
            ax.set_xlim(0, 1)
        ax.set_ylim(0, _domain_max(data["value"]))
        ax.set_xticks(range(len(countries)), labels=countries)
        self._rotate_tick_labels()
        return self

    def _rotate_tick_labels(self) -> None:
        # end-anchored, rotated, shifted left by .8em and down by .15em
        base = self.ax.get_xaxis_text1_transform(TICK_SIZE + TICK_PAD)[0]
        for label in self.ax.get_xticklabels():
            em = label.get_fontsize() / UNITS_PER_INCH
            shift = ScaledTranslation(-0.8 * em, -0.15 * em, self.fig.dpi_scale_trans)
            label.set_transform(base + shift)
            label.set_rotation(self.config.tick_rotation)
            label.set_horizontalalignment("right")
            label.set_rotation_mode("anchor")


class LineChart(_Chart):
    """
    One line per country over time plus a label at the right edge for every
    record of the label year.
    """
    name = "line"

    def __init__(self, config: ChartConfig = LINE_CHART):
        super().__init__(config)
        self.lines = ArtistJoin(key=lambda i, item: item[0])
        self.labels = ArtistJoin()

    def render(
        self,
        data: pd.DataFrame,
        colors: CategoryColorMap,
        year: int = TARGET_YEAR,
    ) -> "LineChart":
        ax = self.ax
        dates = data["date"].dropna()
        if not dates.empty:
            ax.xaxis.update_units(dates.to_numpy())

        def enter_line(item):
            (line,) = ax.plot([], [], linewidth=2, linestyle="-", marker="")
            return line

        def update_line(line, item) -> None:
            country, sub = item
            sub = sub.sort_values("date", kind="stable")
            line.set_data(sub["date"].to_numpy(), sub["value"].to_numpy(dtype=float))
            line.set_color(colors(country))

        self.lines.join(group_by_country(data).items(), enter_line, update_line)

        offset = self.config.label_offset

        def enter_label(rec):
            return ax.annotate(
                "", xy=(1, 0), xycoords=("axes fraction", "data"),
                xytext=(offset, 0), textcoords="offset points",
                ha="left", va="center", annotation_clip=False,
                fontfamily="sans-serif", fontsize=self.config.label_font_size,
            )

        def update_label(label, rec) -> None:
            label.set_text(str(rec.country))
            label.xy = (1, rec.value)
            label.set_color(colors(rec.country))
            label.set_visible(not pd.isna(rec.value))

        # labels use their own year filter, independent of the bar chart's data
        self.labels.join(filter_year(data, year).itertuples(index=False), enter_label, update_label)

        self.tooltips = {}
        for i, country in enumerate(self.lines.keys()):
            gid = f"line-{i}"
            self.lines[country].set_gid(gid)
            self.tooltips[gid] = str(country)

        ax.set_ylim(0, _domain_max(data["value"]))
        if not dates.empty:
            lo, hi = dates.min(), dates.max()
            if lo == hi:
                # single date: keep it centred
                lo, hi = lo - pd.DateOffset(months=6), hi + pd.DateOffset(months=6)
            ax.set_xlim(lo.to_datetime64(), hi.to_datetime64())
        return self


# ---------- function API ----------

def plot_bar_chart(
    filtered: pd.DataFrame,
    colors: CategoryColorMap,
    out_path: Optional[str] = None,
    config: ChartConfig = BAR_CHART,
) -> Tuple[BarChart, Optional[str]]:
    """
    Bar chart of the (already filtered and sorted) target-year records.
    Returns the chart and the saved SVG path (None if not saved).
    """
    chart = BarChart(config).render(filtered, colors)
    saved = chart.save(out_path) if out_path else None
    return chart, saved

def plot_line_chart(
    records: pd.DataFrame,
    colors: CategoryColorMap,
    out_path: Optional[str] = None,
    config: ChartConfig = LINE_CHART,
    year: int = TARGET_YEAR,
) -> Tuple[LineChart, Optional[str]]:
    chart = LineChart(config).render(records, colors, year=year)
    saved = chart.save(out_path) if out_path else None
    return chart, saved

def render_page(charts: Sequence[_Chart], title: str = "Gender pay gap") -> str:
    """HTML page with one `<div id="<chart.name>">` container per chart, SVG inlined."""
    blocks = "\n".join(f'<div id="{c.name}">\n{c.to_svg()}\n</div>' for c in charts)
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        f'<head>\n<meta charset="utf-8">\n<title>{html.escape(title)}</title>\n</head>\n'
        f"<body>\n{blocks}\n</body>\n"
        "</html>\n"
    )
