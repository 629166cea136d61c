from __future__ import annotations
from dataclasses import replace
from typing import Dict, Iterable, List, Tuple

import pycountry

from domain.models import CaseStudy, TariffRecord

# Przybliżone centroidy (lat, lng) dla kodów używanych w case studies
COUNTRY_CENTROIDS: Dict[str, Tuple[float, float]] = {
    "US": (39.8, -98.6),
    "CN": (35.9, 104.2),
    "EU": (50.1, 9.7),
    "UK": (54.0, -2.5),
    "GB": (54.0, -2.5),
    "DE": (51.2, 10.4),
    "FR": (46.6, 2.2),
    "JP": (36.2, 138.3),
    "CA": (56.1, -106.3),
    "MX": (23.6, -102.6),
}

# Przesunięcie per produkt, żeby markery jednego kraju się nie nakładały
PRODUCT_OFFSETS: Dict[str, Tuple[float, float]] = {
    "Steel": (1.5, -2.0),
    "Aluminum": (-1.5, -2.0),
    "Aluminium": (-1.5, -2.0),
    "Soybeans": (1.5, 2.0),
    "Electronics": (-1.5, 2.0),
    "Machinery": (0.0, 3.0),
    "Vehicles": (0.0, -3.0),
    "Agriculture": (2.5, 0.0),
    "Textiles": (-2.5, 0.0),
    "Whiskey": (2.5, 3.0),
}

ZERO_OFFSET: Tuple[float, float] = (0.0, 0.0)

# Kody spoza ISO 3166 albo z inną nazwą w pycountry
ALIAS_CODES = {"UK": "GB"}
SPECIAL_NAMES = {"EU": "European Union", "ALL": "All countries"}


def coordinates_for(country: str, product: str, case_study: CaseStudy) -> Tuple[float, float]:
    base = COUNTRY_CENTROIDS.get(country, case_study.map_center)
    offset = PRODUCT_OFFSETS.get(product, ZERO_OFFSET)
    return base[0] + offset[0], base[1] + offset[1]


def assign_coordinates(records: Iterable[TariffRecord], case_study: CaseStudy) -> List[TariffRecord]:
    """
    Uzupełnia lat/lng tam, gdzie brak ich w danych źródłowych.
    Deterministycznie: centroid kraju (albo środek mapy case study) + offset produktu.
    """
    out: List[TariffRecord] = []
    for r in records:
        if r.has_coordinates:
            out.append(r)
            continue
        lat, lng = coordinates_for(r.country, r.product, case_study)
        out.append(replace(r, lat=lat, lng=lng))
    return out


def country_display_name(code: str) -> str:
    if not code:
        return ""
    raw = code.strip().upper()
    if raw in SPECIAL_NAMES:
        return SPECIAL_NAMES[raw]
    try:
        country = pycountry.countries.lookup(ALIAS_CODES.get(raw, raw))
    except LookupError:
        return code
    return getattr(country, "common_name", None) or country.name
