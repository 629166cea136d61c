from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Optional
import logging
import threading

from application.debounce import Debouncer
from application.delta_engine import baseline_year
from application.filters import filter_options
from application.projections import (
    bar_chart,
    macro_table,
    map_markers,
    trade_table,
    trend_series,
    year_domain,
)
from application.trade_index import TradeIndex, build_index
from core.config import Config
from domain.case_studies import get_case_study
from domain.models import ALL, CaseStudy, Dataset, FilterState
from integration.table_loader import TableLoader

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardSession:
    """Bieżący dataset + filtry. Tworzony przy wczytaniu case study, zastępowany w całości."""
    dataset: Dataset
    filters: FilterState
    index: TradeIndex
    baseline_year: Optional[int]

    @property
    def case_study(self) -> CaseStudy:
        return self.dataset.case_study


@dataclass(frozen=True)
class DashboardEvent:
    kind: str  # "year" | "country" | "product"
    value: Any = None


# ---------------- handlery (event, session) -> session ----------------

def on_year_changed(event: DashboardEvent, session: DashboardSession) -> DashboardSession:
    year = None if event.value in (None, "") else int(event.value)
    return replace(session, filters=replace(session.filters, selected_year=year))


def on_country_changed(event: DashboardEvent, session: DashboardSession) -> DashboardSession:
    country = str(event.value).strip().upper() if event.value else ALL
    return replace(session, filters=replace(session.filters, selected_country=country or ALL))


def on_product_changed(event: DashboardEvent, session: DashboardSession) -> DashboardSession:
    product = str(event.value).strip() if event.value else None
    if product and product.upper() == ALL:
        product = None
    return replace(session, filters=replace(session.filters, selected_product=product or None))


HANDLERS: Dict[str, Callable[[DashboardEvent, DashboardSession], DashboardSession]] = {
    "year": on_year_changed,
    "country": on_country_changed,
    "product": on_product_changed,
}


def apply_event(event: DashboardEvent, session: DashboardSession) -> DashboardSession:
    handler = HANDLERS.get(event.kind)
    if handler is None:
        raise ValueError(f"Unknown dashboard event: {event.kind!r}")
    return handler(event, session)


def _config_default_year() -> Optional[int]:
    raw = (Config.DEFAULT_YEAR or "").strip()
    try:
        return int(raw) if raw else None
    except ValueError:
        logger.warning("DEFAULT_YEAR=%r is not a year, ignoring", raw)
        return None


class DashboardService:
    """
    Wczytywanie case study i wyliczanie wszystkich projekcji od zera dla sesji.
    """

    def __init__(self,
                 loader: Optional[TableLoader] = None,
                 default_year: Optional[int] = None) -> None:
        self._loader = loader or TableLoader()
        self._default_year = default_year if default_year is not None else _config_default_year()

    def load_case_study(self, study_id: str, filters: Optional[FilterState] = None) -> DashboardSession:
        case_study = get_case_study(study_id)
        logger.info("Loading %s...", case_study.name)
        return self.new_session(self._loader.load(case_study), filters)

    def new_session(self, dataset: Dataset, filters: Optional[FilterState] = None) -> DashboardSession:
        if filters is None:
            filters = FilterState(selected_year=self.years(dataset)["default"])
        return DashboardSession(
            dataset=dataset,
            filters=filters,
            index=build_index(dataset.trade),
            baseline_year=baseline_year(dataset.trade),
        )

    def years(self, dataset: Dataset) -> Dict:
        return year_domain(dataset, self._default_year)

    def with_filters(self,
                     session: DashboardSession,
                     year: Optional[int] = None,
                     country: Optional[str] = None,
                     product: Optional[str] = None) -> DashboardSession:
        """Nadpisuje tylko podane filtry (None = zostaw bez zmian)."""
        if year is not None:
            session = on_year_changed(DashboardEvent("year", year), session)
        if country is not None:
            session = on_country_changed(DashboardEvent("country", country), session)
        if product is not None:
            session = on_product_changed(DashboardEvent("product", product), session)
        return session

    # ---------------- projekcje ----------------

    def project(self, session: DashboardSession, name: str) -> Any:
        dataset, filters = session.dataset, session.filters
        if name == "map":
            return map_markers(dataset, filters)
        if name == "bar-chart":
            return bar_chart(dataset, filters)
        if name == "trend":
            return trend_series(dataset, filters)
        if name == "table":
            return trade_table(dataset, filters, session.index, session.baseline_year)
        if name == "macro":
            return macro_table(dataset, filters)
        if name == "years":
            return self.years(dataset)
        raise ValueError(f"Unknown projection: {name!r}")

    def render(self, session: DashboardSession) -> Dict:
        cs = session.case_study
        filters = session.filters
        return {
            "caseStudy": {
                "id": cs.id,
                "name": cs.name,
                "title": f"{cs.name} Dashboard",
                "mapCenter": list(cs.map_center),
                "mapZoom": cs.map_zoom,
                "countryColors": dict(cs.country_colors),
                "insights": list(cs.insights),
            },
            "filters": {
                "year": filters.selected_year,
                "country": filters.selected_country,
                "product": filters.selected_product,
            },
            "options": filter_options(session.dataset),
            "baselineYear": session.baseline_year,
            "years": self.project(session, "years"),
            "map": self.project(session, "map"),
            "barChart": self.project(session, "bar-chart"),
            "trend": self.project(session, "trend"),
            "table": self.project(session, "table"),
            "macro": self.project(session, "macro"),
        }


class DashboardController:
    """
    Trzyma bieżącą sesję i przelicza widoki po każdym evencie.
    Adapter UI woła dispatch() (od razu) albo dispatch_debounced() (np. pole tekstowe).
    """

    def __init__(self,
                 service: Optional[DashboardService] = None,
                 listener: Optional[Callable[[Dict], None]] = None,
                 debounce_delay: Optional[float] = None) -> None:
        self.service = service or DashboardService()
        self.listener = listener
        self.session: Optional[DashboardSession] = None
        self._lock = threading.RLock()
        self._debouncer = Debouncer(self.dispatch, debounce_delay)

    def select_case_study(self, study_id: str) -> DashboardSession:
        # oczekujące zmiany filtrów dotyczą poprzedniego case study
        self._debouncer.cancel()
        session = self.service.load_case_study(study_id)
        with self._lock:
            return self._publish(session)

    def dispatch(self, event: DashboardEvent) -> DashboardSession:
        with self._lock:
            if self.session is None:
                raise RuntimeError("No case study loaded")
            return self._publish(apply_event(event, self.session))

    def dispatch_debounced(self, event: DashboardEvent) -> None:
        self._debouncer.trigger(event)

    def flush(self) -> bool:
        return self._debouncer.flush()

    def _publish(self, session: DashboardSession) -> DashboardSession:
        self.session = session
        if self.listener is not None:
            self.listener(self.service.render(session))
        return session
