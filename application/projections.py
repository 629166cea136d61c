"""
Projekcje widoków: (Dataset, FilterState) -> dokładnie taki kształt danych,
jakiego potrzebuje zewnętrzny renderer (mapa, wykresy, suwak, tabela).

Wszystkie funkcje są czyste – nie modyfikują datasetu ani filtrów.
"""
from __future__ import annotations
from typing import Dict, List, Optional, Tuple
import math

from markupsafe import escape

from application.delta_engine import compute_delta
from application.filters import apply_filters, rows_for_year
from application.trade_index import TradeIndex
from core.config import Config
from domain.geo import country_display_name
from domain.models import Dataset, FilterState, TariffRecord, YoYDelta

TABLE_COLUMNS = ["Year", "Product", "Exporter", "Importer", "Value (USD bn)", "YoY change"]
MACRO_COLUMNS = ["Country", "GDP Growth", "Inflation", "Unemployment"]


def _fmt_num(value: float) -> str:
    return f"{value:g}"


# ---------------- mapa ----------------

def _popup_html(country: str, product: str, history: List[TariffRecord]) -> str:
    lines = [
        f"<b>{escape(product)} Tariffs</b><br>",
        "<table>",
        f"<tr><td>Country:</td><td>{escape(country_display_name(country))} ({escape(country)})</td></tr>",
    ]
    for r in history:
        lines.append(f"<tr><td>{r.year}:</td><td>{_fmt_num(r.tariff_rate)}%</td></tr>")
    lines.append("</table>")
    return "\n".join(lines)


def map_markers(dataset: Dataset,
                filters: FilterState,
                base_radius: Optional[float] = None,
                neutral_color: Optional[str] = None) -> List[Dict]:
    """
    Jeden marker na (country, product) w wybranym roku.
    Promień z średniej stawki w grupie, popup z historią stawek ze wszystkich lat.
    """
    base = Config.MARKER_BASE_RADIUS if base_radius is None else base_radius
    neutral = neutral_color or Config.NEUTRAL_COLOR
    year = filters.selected_year

    groups: Dict[Tuple[str, str], List[TariffRecord]] = {}
    for r in dataset.tariffs:
        groups.setdefault((r.country, r.product), []).append(r)

    markers: List[Dict] = []
    for (country, product), records in sorted(groups.items()):
        current = [r for r in records if r.year == year]
        if not current:
            continue
        avg_rate = sum(r.tariff_rate for r in current) / len(current)
        history = sorted(records, key=lambda r: r.year)
        markers.append({
            "lat": current[0].lat,
            "lng": current[0].lng,
            "color": dataset.case_study.color_for(country, neutral),
            "radius": base + avg_rate / 5,
            "popupText": _popup_html(country, product, history),
            "country": country,
            "product": product,
            "year": year,
            "tariffRate": avg_rate,
        })
    return markers


# ---------------- wykres słupkowy ----------------

def focus_country(dataset: Dataset, filters: FilterState) -> Optional[str]:
    if filters.country_filter:
        return filters.country_filter
    configured = list(dataset.case_study.country_colors)
    if configured:
        return configured[0]
    countries = dataset.countries
    return countries[0] if countries else None


def bar_chart(dataset: Dataset, filters: FilterState, neutral_color: Optional[str] = None) -> Dict:
    """Para słupków (eksport/import kraju fokusowego) na produkt w wybranym roku."""
    neutral = neutral_color or Config.NEUTRAL_COLOR
    cs = dataset.case_study
    focus = focus_country(dataset, filters)
    rows = rows_for_year(apply_filters(dataset, filters), filters.selected_year)

    exports: List[Dict] = []
    imports: List[Dict] = []
    for product in sorted({r.product for r in rows}):
        out_rows = [r for r in rows if r.product == product and r.exporter == focus]
        in_rows = [r for r in rows if r.product == product and r.importer == focus]
        if not out_rows and not in_rows:
            continue
        export_value = sum(r.value_usd_billion for r in out_rows)
        import_value = sum(r.value_usd_billion for r in in_rows)
        top_partner = max(in_rows, key=lambda r: r.value_usd_billion).exporter if in_rows else None

        exports.append({
            "x": product,
            "y": export_value,
            "color": cs.color_for(focus, neutral) if focus else neutral,
            "label": f"${_fmt_num(export_value)}B",
        })
        imports.append({
            "x": product,
            "y": import_value,
            "color": cs.color_for(top_partner, neutral) if top_partner else neutral,
            "label": f"${_fmt_num(import_value)}B",
        })

    return {
        "year": filters.selected_year,
        "focus": focus,
        "export": exports,
        "import": imports,
    }


# ---------------- trend ----------------

def trend_series(dataset: Dataset, filters: FilterState, neutral_color: Optional[str] = None) -> List[Dict]:
    """
    Wszystkie lata dla wybranego produktu (filtr roku ignorowany).
    tariff_active = eksporter miał w danym roku jakąkolwiek stawkę > 0.
    """
    if filters.product_filter is None:
        return []
    neutral = neutral_color or Config.NEUTRAL_COLOR
    cs = dataset.case_study

    tariffed = {(t.country, t.year) for t in dataset.tariffs if t.tariff_rate > 0}
    rows = sorted(apply_filters(dataset, filters), key=lambda r: (r.year, r.exporter, r.importer))
    return [
        {
            "x": r.year,
            "y": r.value_usd_billion,
            "color": cs.color_for(r.exporter, neutral),
            "label": f"{r.exporter} → {r.importer}",
            "series": f"{r.exporter} → {r.importer}",
            "tariff_active": (r.exporter, r.year) in tariffed,
        }
        for r in rows
    ]


# ---------------- tabela trade ----------------

def _cell(text: str, style: str = "") -> Dict:
    return {"text": text, "style": style}


def change_cell(delta: YoYDelta) -> Dict:
    if delta.is_baseline_year:
        return {"text": "Baseline year", "style": "baseline", "state": "baseline"}
    if delta.percent_change is None:
        return {"text": "No previous data", "style": "no-data", "state": "no-data"}

    pct = delta.percent_change
    if math.isnan(pct):
        direction, text = "flat", "n/a"
    elif math.isinf(pct):
        direction = "up" if pct > 0 else "down"
        text = "+∞%" if pct > 0 else "-∞%"
    else:
        direction = "up" if pct > 0 else "down" if pct < 0 else "flat"
        text = f"{pct:+.1f}%"
    return {
        "text": text,
        "style": f"change-{direction}",
        "state": "change",
        "direction": direction,
        "percent": round(pct, 2) if math.isfinite(pct) else None,
    }


def trade_table(dataset: Dataset,
                filters: FilterState,
                index: TradeIndex,
                baseline: Optional[int]) -> Dict:
    rows = sorted(
        apply_filters(dataset, filters),
        key=lambda r: (r.year, r.product, r.exporter, r.importer),
    )
    matrix = []
    for r in rows:
        delta = compute_delta(r, index, baseline)
        matrix.append([
            _cell(str(r.year), "year"),
            _cell(r.product),
            _cell(r.exporter, "country"),
            _cell(r.importer, "country"),
            _cell(_fmt_num(r.value_usd_billion), "numeric"),
            change_cell(delta),
        ])
    return {"columns": list(TABLE_COLUMNS), "rows": matrix}


# ---------------- tabela makro ----------------

def macro_table(dataset: Dataset,
                filters: FilterState,
                inflation_alert: Optional[float] = None,
                unemployment_alert: Optional[float] = None) -> Dict:
    inflation_limit = Config.INFLATION_ALERT_PCT if inflation_alert is None else inflation_alert
    unemployment_limit = Config.UNEMPLOYMENT_ALERT_PCT if unemployment_alert is None else unemployment_alert

    rows = sorted((m for m in dataset.macro if m.year == filters.selected_year), key=lambda m: m.country)
    matrix = []
    for m in rows:
        matrix.append([
            _cell(country_display_name(m.country), "country"),
            _cell(f"{_fmt_num(m.gdp_growth_pct)}%", "positive" if m.gdp_growth_pct >= 0 else "negative"),
            _cell(f"{_fmt_num(m.inflation_pct)}%", "negative" if m.inflation_pct > inflation_limit else "positive"),
            _cell(f"{_fmt_num(m.unemployment_pct)}%", "negative" if m.unemployment_pct > unemployment_limit else "positive"),
        ])
    return {"columns": list(MACRO_COLUMNS), "rows": matrix}


# ---------------- suwak ----------------

def year_domain(dataset: Dataset, default_year: Optional[int] = None) -> Dict:
    years = dataset.years
    if not years:
        return {"years": [], "min": None, "max": None, "default": None}
    return {
        "years": years,
        "min": years[0],
        "max": years[-1],
        "default": default_year if default_year in years else years[0],
    }
