from __future__ import annotations
from typing import Iterable, Optional
import math

from application.trade_index import TradeIndex
from domain.models import TradeRecord, YoYDelta


def baseline_year(records: Iterable[TradeRecord]) -> Optional[int]:
    """Pierwszy rok w tabeli trade (None dla pustej tabeli)."""
    return min((r.year for r in records), default=None)


def percent_change(current: float, previous: float) -> float:
    # previous == 0: +/-inf wg znaku różnicy, nan gdy oba 0
    diff = current - previous
    if previous == 0:
        if diff == 0:
            return math.nan
        return math.copysign(math.inf, diff)
    return diff / previous * 100.0


def compute_delta(record: TradeRecord, index: TradeIndex, baseline: Optional[int]) -> YoYDelta:
    """
    Zmiana r/r dla rekordu trade.

    Poprzedni rok szukamy najpierw w tym samym kierunku (exporter, importer),
    potem w odwróconym. Rok bazowy nie ma porównania, nawet jeśli rok wcześniejszy
    istnieje w indeksie.
    """
    current = index.lookup(record.year, record.product, record.exporter, record.importer)

    prev_year = record.year - 1
    previous = index.lookup(prev_year, record.product, record.exporter, record.importer)
    if previous is None:
        previous = index.lookup(prev_year, record.product, record.importer, record.exporter)

    if baseline is not None and record.year == baseline:
        return YoYDelta(current, previous, None, is_baseline_year=True)

    if current is None or previous is None:
        return YoYDelta(current, previous, None)

    return YoYDelta(current, previous, percent_change(current, previous))
