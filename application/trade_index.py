from __future__ import annotations
from typing import Dict, Iterable, Optional, Tuple

from domain.models import TradeRecord

TradeKey = Tuple[int, str, str, str]  # (year, product, a, b)


class TradeIndex:
    """
    Indeks (year, product, a, b) -> value_usd_billion, symetryczny względem kierunku.

    Każdy rekord zapisujemy pod własnym kluczem (exporter, importer) i pod kluczem
    lustrzanym (importer, exporter). Klucz zapisany przez rekord w jego własnym
    kierunku nie jest nadpisywany przez wpis lustrzany innego rekordu.
    """

    def __init__(self) -> None:
        self._values: Dict[TradeKey, float] = {}
        self._direct: set = set()

    def add(self, record: TradeRecord) -> None:
        own = (record.year, record.product, record.exporter, record.importer)
        mirrored = (record.year, record.product, record.importer, record.exporter)
        self._values[own] = record.value_usd_billion
        self._direct.add(own)
        if mirrored not in self._direct:
            self._values[mirrored] = record.value_usd_billion

    def lookup(self, year: int, product: str, a: str, b: str) -> Optional[float]:
        return self._values.get((year, product, a, b))

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: TradeKey) -> bool:
        return key in self._values


def build_index(records: Iterable[TradeRecord]) -> TradeIndex:
    index = TradeIndex()
    for r in records:
        index.add(r)
    return index
