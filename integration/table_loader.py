from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from io import StringIO
from pathlib import Path
from typing import Callable, Dict, List, Optional
import logging
import math

import pandas as pd
import requests

from core.config import Config
from domain.geo import assign_coordinates
from domain.models import CaseStudy, Dataset, MacroRecord, TariffRecord, TradeRecord

logger = logging.getLogger(__name__)

# nazwa tabeli -> plik w katalogu case study
TABLE_FILES: Dict[str, str] = {
    "tariffs": "tariffs.csv",
    "trade": "trade_volumes.csv",
    "macro": "macro.csv",
}

REQUIRED_COLUMNS: Dict[str, set] = {
    "tariffs": {"country", "product", "year", "tariff_rate"},
    "trade": {"year", "product", "exporter", "importer", "value_usd_billion"},
    "macro": {"country", "year", "gdp_growth_pct", "inflation_pct", "unemployment_pct"},
}


# ----------------- parsowanie pól -----------------

def _text(value) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _num(value) -> Optional[float]:
    s = _text(value)
    if s is None:
        return None
    try:
        # CSV z Excela bywa z przecinkiem dziesiętnym
        v = float(s.replace(",", "."))
    except ValueError:
        return None
    # float() przyjmuje "nan" i "inf" – takie pola traktujemy jak brak wartości
    return v if math.isfinite(v) else None


def _year(value) -> Optional[int]:
    v = _num(value)
    if v is None or not v.is_integer():
        return None
    return int(v)


def _parse_tariff(row: Dict) -> Optional[TariffRecord]:
    country, product = _text(row.get("country")), _text(row.get("product"))
    year, rate = _year(row.get("year")), _num(row.get("tariff_rate"))
    if not country or not product or year is None or rate is None or rate < 0:
        return None
    return TariffRecord(
        country=country.upper(),
        product=product,
        year=year,
        tariff_rate=rate,
        lat=_num(row.get("lat")),
        lng=_num(row.get("lng")),
    )


def _parse_trade(row: Dict) -> Optional[TradeRecord]:
    exporter, importer = _text(row.get("exporter")), _text(row.get("importer"))
    product = _text(row.get("product"))
    year, value = _year(row.get("year")), _num(row.get("value_usd_billion"))
    if not exporter or not importer or not product or year is None or value is None or value < 0:
        return None
    return TradeRecord(
        year=year,
        product=product,
        exporter=exporter.upper(),
        importer=importer.upper(),
        value_usd_billion=value,
    )


def _parse_macro(row: Dict) -> Optional[MacroRecord]:
    country, year = _text(row.get("country")), _year(row.get("year"))
    gdp = _num(row.get("gdp_growth_pct"))
    inflation = _num(row.get("inflation_pct"))
    unemployment = _num(row.get("unemployment_pct"))
    if not country or year is None or None in (gdp, inflation, unemployment):
        return None
    return MacroRecord(
        country=country.upper(),
        year=year,
        gdp_growth_pct=gdp,
        inflation_pct=inflation,
        unemployment_pct=unemployment,
    )


PARSERS: Dict[str, Callable[[Dict], Optional[object]]] = {
    "tariffs": _parse_tariff,
    "trade": _parse_trade,
    "macro": _parse_macro,
}


class TableLoader:
    """
    Wczytuje trzy tabele case study (tariffs / trade_volumes / macro).

    DATA_ROOT może być katalogiem lokalnym albo bazowym URL-em http(s)://.
    Brak albo błąd jednej tabeli = pusta lista tylko dla tej tabeli (log WARNING),
    pozostałe tabele ładują się normalnie.
    """

    def __init__(self,
                 data_root: Optional[str] = None,
                 session: Optional[requests.Session] = None,
                 timeout: Optional[float] = None) -> None:
        self.data_root = str(data_root or Config.DATA_ROOT)
        self.s = session or requests.Session()
        self.timeout = timeout if timeout is not None else Config.REMOTE_TIMEOUT

    # ----------------- źródła -----------------

    @property
    def is_remote(self) -> bool:
        return self.data_root.lower().startswith(("http://", "https://"))

    def source_for(self, case_study: CaseStudy, table: str) -> str:
        filename = TABLE_FILES[table]
        if self.is_remote:
            return f"{self.data_root.rstrip('/')}/{case_study.data_path}/{filename}"
        return str(Path(self.data_root) / case_study.data_path / filename)

    def _read_frame(self, source: str) -> pd.DataFrame:
        opts = {"dtype": str, "keep_default_na": False, "skipinitialspace": True}
        if self.is_remote:
            r = self.s.get(source, timeout=self.timeout)
            r.raise_for_status()
            return pd.read_csv(StringIO(r.text), **opts)
        return pd.read_csv(source, **opts)

    # ----------------- tabele -----------------

    def read_table(self, case_study: CaseStudy, table: str) -> List:
        source = self.source_for(case_study, table)
        try:
            df = self._read_frame(source)
        except (OSError, ValueError, requests.RequestException) as e:
            logger.warning("Table %s unavailable (%s): %s", table, source, e)
            return []

        df.columns = [str(c).strip().lower() for c in df.columns]
        missing = REQUIRED_COLUMNS[table] - set(df.columns)
        if missing:
            logger.warning("Table %s (%s) is missing columns %s, skipping", table, source, sorted(missing))
            return []

        parse = PARSERS[table]
        rows = []
        skipped = 0
        for raw in df.to_dict(orient="records"):
            rec = parse(raw)
            if rec is None:
                skipped += 1
                continue
            rows.append(rec)
        if skipped:
            logger.warning("Table %s: skipped %d malformed rows", table, skipped)
        return rows

    def load(self, case_study: CaseStudy) -> Dataset:
        # trzy niezależne odczyty; load kończy się, gdy wszystkie się zakończą
        with ThreadPoolExecutor(max_workers=len(TABLE_FILES)) as ex:
            futs = {name: ex.submit(self.read_table, case_study, name) for name in TABLE_FILES}
            tables = {name: fut.result() for name, fut in futs.items()}

        dataset = Dataset(
            case_study=case_study,
            tariffs=tuple(assign_coordinates(tables["tariffs"], case_study)),
            trade=tuple(tables["trade"]),
            macro=tuple(tables["macro"]),
        )
        logger.info(
            "Loaded case study %s: tariffs=%d trade=%d macro=%d",
            case_study.id, len(dataset.tariffs), len(dataset.trade), len(dataset.macro),
        )
        return dataset
