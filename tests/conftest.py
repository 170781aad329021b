"""Shared fixtures: small CSVs written to tmp_path."""

from __future__ import annotations

import pytest

from paygap_charts.data_prep import load_records

SAMPLE_CSV = """geo,country,year,value
FR,France,2020,10
ES,Spain,2020,5
IT,Italy,2019,8
"""

HISTORY_CSV = """geo,country,year,value
FR,France,2018,15.5
FR,France,2019,16.5
FR,France,2020,15.8
DE,Germany,2018,20.1
DE,Germany,2019,19.2
DE,Germany,2020,18.3
IT,Italy,2018,5
IT,Italy,2019,4.7
"""


@pytest.fixture
def write_csv(tmp_path):
    """Return a helper writing `text` to a CSV under tmp_path and returning its path."""

    def _write(text: str, name: str = "data.csv") -> str:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def sample_records(write_csv):
    return load_records(write_csv(SAMPLE_CSV))


@pytest.fixture
def history_records(write_csv):
    return load_records(write_csv(HISTORY_CSV))
