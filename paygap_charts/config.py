from __future__ import annotations
import os
from dataclasses import dataclass, field, replace
from typing import Optional


@dataclass(frozen=True)
class Margins:
    top: float
    right: float
    bottom: float
    left: float


@dataclass(frozen=True)
class ChartConfig:
    """
    Layout of one chart, in drawing units (one unit == one SVG user unit).
    """
    margins: Margins
    width: float = 900
    height: float = 400
    padding: float = 0.2          # band padding (inner and outer), bar chart only
    label_offset: float = 5       # gap between plot edge and end labels, line chart only
    label_font_size: float = 12
    tick_rotation: float = 65


BAR_CHART = ChartConfig(margins=Margins(top=10, right=30, bottom=80, left=20))
# wider right margin leaves room for the end-of-line labels
LINE_CHART = ChartConfig(margins=Margins(top=10, right=100, bottom=20, left=20))


@dataclass(frozen=True)
class PipelineConfig:
    data_path: str = "./data.csv"
    out_dir: str = "figures"
    target_year: int = 2020
    colormap: str = "rainbow"
    unknown_color: str = "#999999"
    write_page: bool = True
    bar: ChartConfig = field(default=BAR_CHART)
    line: ChartConfig = field(default=LINE_CHART)

    @classmethod
    def from_env(cls, **overrides: Optional[object]) -> "PipelineConfig":
        """
        Defaults <- PAYGAP_* environment variables <- explicit overrides.
        Overrides that are None are ignored so argparse results can be passed straight in.
        """
        cfg = cls()
        env = {}
        if os.getenv("PAYGAP_DATA"):
            env["data_path"] = os.environ["PAYGAP_DATA"]
        if os.getenv("PAYGAP_OUT_DIR"):
            env["out_dir"] = os.environ["PAYGAP_OUT_DIR"]
        if os.getenv("PAYGAP_COLORMAP"):
            env["colormap"] = os.environ["PAYGAP_COLORMAP"]
        year = os.getenv("PAYGAP_YEAR")
        if year:
            try:
                env["target_year"] = int(year)
            except ValueError:
                raise ValueError(f"PAYGAP_YEAR must be an integer year, got {year!r}") from None
        env.update({k: v for k, v in overrides.items() if v is not None})
        return replace(cfg, **env)
