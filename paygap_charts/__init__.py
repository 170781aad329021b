"""Pay-gap bar and line charts from a country/year CSV."""
from .config import BAR_CHART, LINE_CHART, ChartConfig, Margins, PipelineConfig
from .data_prep import coerce_records, load_records
from .metrics import (
    Aggregate,
    CategoryColorMap,
    aggregate,
    distinct_countries,
    filter_year,
    group_by_country,
    sort_by_value,
    summary_stats,
)
from .viz import BarChart, LineChart, plot_bar_chart, plot_line_chart, render_page

__version__ = "0.1.0"
