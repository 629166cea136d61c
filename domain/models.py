from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

ALL = "ALL"


@dataclass(frozen=True)
class TariffRecord:
    country: str
    product: str
    year: int
    tariff_rate: float  # %
    lat: Optional[float] = None
    lng: Optional[float] = None

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lng is not None


@dataclass(frozen=True)
class TradeRecord:
    """Kierunkowy przepływ exporter -> importer (odwrotny kierunek to osobny rekord)."""
    year: int
    product: str
    exporter: str
    importer: str
    value_usd_billion: float


@dataclass(frozen=True)
class MacroRecord:
    country: str
    year: int
    gdp_growth_pct: float
    inflation_pct: float
    unemployment_pct: float


@dataclass(frozen=True)
class CaseStudy:
    id: str
    name: str
    map_center: Tuple[float, float]
    map_zoom: int
    country_colors: Dict[str, str]
    insights: Tuple[str, ...] = ()
    data_path: str = ""

    def color_for(self, country: str, default: str) -> str:
        return self.country_colors.get(country, default)


@dataclass(frozen=True)
class Dataset:
    case_study: CaseStudy
    tariffs: Tuple[TariffRecord, ...] = ()
    trade: Tuple[TradeRecord, ...] = ()
    macro: Tuple[MacroRecord, ...] = ()

    @property
    def trade_years(self) -> List[int]:
        return sorted({r.year for r in self.trade})

    @property
    def years(self) -> List[int]:
        return sorted({r.year for r in self.tariffs} | {r.year for r in self.trade})

    @property
    def countries(self) -> List[str]:
        codes = set()
        for r in self.trade:
            codes.add(r.exporter)
            codes.add(r.importer)
        return sorted(codes)

    @property
    def products(self) -> List[str]:
        return sorted({r.product for r in self.trade})

    def is_empty(self) -> bool:
        return not (self.tariffs or self.trade or self.macro)


@dataclass(frozen=True)
class YoYDelta:
    current_value: Optional[float]
    previous_value: Optional[float]
    percent_change: Optional[float]
    is_baseline_year: bool = False


@dataclass(frozen=True)
class FilterState:
    selected_year: Optional[int] = None
    selected_country: str = ALL
    selected_product: Optional[str] = None

    @property
    def country_filter(self) -> Optional[str]:
        if not self.selected_country or self.selected_country.upper() == ALL:
            return None
        return self.selected_country

    @property
    def product_filter(self) -> Optional[str]:
        if not self.selected_product or self.selected_product.upper() == ALL:
            return None
        return self.selected_product
