from __future__ import annotations
from typing import Dict, List, Sequence

from domain.models import ALL, Dataset, FilterState, TradeRecord


def apply_filters(dataset: Dataset, filters: FilterState) -> List[TradeRecord]:
    """Wiersze trade po filtrze kraju (exporter lub importer) i produktu. Bez efektów ubocznych."""
    country = filters.country_filter
    product = filters.product_filter
    return [
        r for r in dataset.trade
        if (country is None or country in (r.exporter, r.importer))
        and (product is None or r.product == product)
    ]


def rows_for_year(rows: Sequence[TradeRecord], year) -> List[TradeRecord]:
    if year is None:
        return []
    return [r for r in rows if r.year == year]


def filter_options(dataset: Dataset) -> Dict[str, List[str]]:
    return {
        "countries": [ALL] + dataset.countries,
        "products": [ALL] + dataset.products,
    }
