"""Shared fixtures for the dashboard tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from domain.geo import assign_coordinates
from domain.models import CaseStudy, Dataset, MacroRecord, TariffRecord, TradeRecord
from integration.table_loader import TABLE_FILES

TARIFFS_CSV = """country,product,year,tariff_rate
US,Steel,2018,25
US,Steel,2019,25
CN,Soybeans,2018,25
CN,Soybeans,2019,30
"""

TRADE_CSV = """year,product,exporter,importer,value_usd_billion
2018,Steel,US,CN,10
2019,Steel,US,CN,12
2018,Soybeans,US,CN,3
2019,Soybeans,CN,US,4.5
"""

MACRO_CSV = """country,year,gdp_growth_pct,inflation_pct,unemployment_pct
US,2018,2.9,2.4,3.9
US,2019,2.3,1.8,3.7
CN,2018,6.7,2.1,4.9
CN,2019,6.0,3.5,5.2
"""


@pytest.fixture
def case_study() -> CaseStudy:
    return CaseStudy(
        id="test",
        name="Test Dispute",
        map_center=(10.0, 20.0),
        map_zoom=3,
        country_colors={"US": "#3498db", "CN": "#e74c3c"},
        insights=("first insight", "second insight"),
        data_path="test",
    )


@pytest.fixture
def dataset(case_study) -> Dataset:
    tariffs = [
        TariffRecord("US", "Steel", 2018, 25.0),
        TariffRecord("US", "Steel", 2019, 20.0),
        TariffRecord("US", "Steel", 2019, 30.0),
        TariffRecord("CN", "Soybeans", 2018, 0.0),
        TariffRecord("CN", "Soybeans", 2019, 30.0),
        TariffRecord("UK", "Whiskey", 2019, 5.0),
    ]
    trade = [
        TradeRecord(2018, "Steel", "US", "CN", 10.0),
        TradeRecord(2019, "Steel", "US", "CN", 12.0),
        TradeRecord(2019, "Soybeans", "US", "CN", 5.0),
        TradeRecord(2019, "Electronics", "CN", "US", 100.0),
        TradeRecord(2020, "Electronics", "CN", "US", 80.0),
        TradeRecord(2020, "Steel", "CN", "US", 6.0),
    ]
    macro = [
        MacroRecord("US", 2019, 2.3, 1.8, 3.7),
        MacroRecord("CN", 2019, -1.0, 4.0, 6.0),
        MacroRecord("US", 2020, -3.4, 1.2, 8.1),
    ]
    return Dataset(
        case_study=case_study,
        tariffs=tuple(assign_coordinates(tariffs, case_study)),
        trade=tuple(trade),
        macro=tuple(macro),
    )


@pytest.fixture
def write_case_files():
    """Returns a helper writing CSV tables for one case study under a data root."""

    def _write(root: Path, data_path: str, **tables: str) -> Path:
        case_dir = Path(root) / data_path
        case_dir.mkdir(parents=True, exist_ok=True)
        for table, text in tables.items():
            (case_dir / TABLE_FILES[table]).write_text(text, encoding="utf-8")
        return case_dir

    return _write


@pytest.fixture
def data_root(tmp_path, write_case_files) -> Path:
    """Data root with a complete us-china case study and nothing for the others."""
    write_case_files(tmp_path, "us-china", tariffs=TARIFFS_CSV, trade=TRADE_CSV, macro=MACRO_CSV)
    return tmp_path
