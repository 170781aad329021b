"""
Load the pay-gap CSV, aggregate the target year and write both charts.

    python -m paygap_charts data.csv --out figures --year 2020
"""
from __future__ import annotations
import argparse
import logging
import os
from typing import Dict, List, Optional

import pandas as pd

from .config import PipelineConfig
from .data_prep import load_records
from .metrics import aggregate, summary_stats
from .viz import _ensure_dir, plot_bar_chart, plot_line_chart, render_page

logger = logging.getLogger(__name__)


def run(config: PipelineConfig) -> Dict[str, str]:
    """
    Run the whole pipeline; returns {"bar": path, "line": path[, "page": path]}.
    Load errors propagate and nothing is rendered.
    """
    records = load_records(config.data_path)

    stats = summary_stats(records)
    logger.info("value min=%s max=%s mean=%s median=%s",
                stats["min"], stats["max"], stats["mean"], stats["median"])

    agg = aggregate(records, year=config.target_year,
                    colormap=config.colormap, fallback=config.unknown_color)
    logger.debug("%s summary: %s", config.target_year, summary_stats(agg.filtered))

    out = config.out_dir
    bar, bar_path = plot_bar_chart(agg.filtered, agg.colors,
                                   out_path=os.path.join(out, "bar.svg"), config=config.bar)
    line, line_path = plot_line_chart(records, agg.colors,
                                      out_path=os.path.join(out, "line.svg"),
                                      config=config.line, year=config.target_year)
    written = {"bar": bar_path, "line": line_path}

    if config.write_page:
        page_path = os.path.join(out, "index.html")
        _ensure_dir(page_path)
        with open(page_path, "w", encoding="utf-8") as f:
            f.write(render_page([bar, line]))
        logger.info("wrote %s", page_path)
        written["page"] = page_path
    return written


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="paygap_charts", description=__doc__.strip().splitlines()[0])
    p.add_argument("data", nargs="?", default=None, help="CSV path or URL (default ./data.csv)")
    p.add_argument("--out", dest="out_dir", default=None, help="output directory (default figures/)")
    p.add_argument("--year", dest="target_year", type=int, default=None)
    p.add_argument("--colormap", default=None, help="matplotlib colormap name (default rainbow)")
    p.add_argument("--no-page", dest="write_page", action="store_false", default=None,
                   help="skip index.html")
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")
    config = PipelineConfig.from_env(
        data_path=args.data,
        out_dir=args.out_dir,
        target_year=args.target_year,
        colormap=args.colormap,
        write_page=args.write_page,
    )
    try:
        written = run(config)
    except (OSError, ValueError, pd.errors.ParserError) as e:
        logger.error("could not load %s: %s", config.data_path, e)
        return 1
    for name, path in written.items():
        logger.info("%s -> %s", name, path)
    return 0
