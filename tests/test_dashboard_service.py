"""Tests for sessions, event handlers and the dashboard controller."""

from __future__ import annotations

import logging
import time

import pytest

from application.dashboard_service import (
    DashboardController,
    DashboardEvent,
    DashboardService,
    apply_event,
)
from domain.case_studies import UnknownCaseStudyError, get_case_study, list_case_studies
from domain.models import ALL, FilterState
from integration.table_loader import TableLoader


@pytest.fixture
def service(data_root) -> DashboardService:
    return DashboardService(loader=TableLoader(data_root=str(data_root)))


def test_case_study_catalogue():
    ids = [c["id"] for c in list_case_studies()]
    assert ids == ["us-china", "brexit", "us-eu"]
    assert get_case_study("brexit").country_colors["UK"] == "#9b59b6"


def test_unknown_case_study(service):
    with pytest.raises(UnknownCaseStudyError):
        service.load_case_study("mars-venus")
    with pytest.raises(KeyError):
        get_case_study("mars-venus")


def test_load_case_study_builds_session(service):
    session = service.load_case_study("us-china")
    assert session.case_study.id == "us-china"
    assert session.baseline_year == 2018
    assert session.filters == FilterState(selected_year=2018)
    assert session.index.lookup(2019, "Soybeans", "US", "CN") == 4.5


def test_load_missing_case_study_data(service):
    """brexit has no files under the data root: an empty but valid session."""
    session = service.load_case_study("brexit")
    assert session.dataset.is_empty()
    assert session.baseline_year is None
    assert session.filters.selected_year is None

    rendered = service.render(session)
    assert rendered["map"] == []
    assert rendered["table"]["rows"] == []
    assert rendered["years"]["years"] == []


def test_configured_default_year(data_root):
    service = DashboardService(loader=TableLoader(data_root=str(data_root)), default_year=2019)
    assert service.load_case_study("us-china").filters.selected_year == 2019


def test_handlers_return_new_sessions(service):
    session = service.load_case_study("us-china")

    by_year = apply_event(DashboardEvent("year", "2019"), session)
    by_country = apply_event(DashboardEvent("country", "cn"), by_year)
    by_product = apply_event(DashboardEvent("product", "Steel"), by_country)

    assert session.filters == FilterState(selected_year=2018)
    assert by_product.filters == FilterState(selected_year=2019, selected_country="CN", selected_product="Steel")
    assert by_product.dataset is session.dataset

    cleared = apply_event(DashboardEvent("product", ALL), apply_event(DashboardEvent("country", None), by_product))
    assert cleared.filters.selected_product is None
    assert cleared.filters.selected_country == ALL


def test_unknown_event_kind(service):
    session = service.load_case_study("us-china")
    with pytest.raises(ValueError):
        apply_event(DashboardEvent("zoom", 4), session)


def test_with_filters_only_overrides_given_values(service):
    session = service.with_filters(service.load_case_study("us-china"), year=2019, product="Steel")
    session = service.with_filters(session, country="US")
    assert session.filters == FilterState(selected_year=2019, selected_country="US", selected_product="Steel")


def test_render_contains_every_view(service):
    session = service.with_filters(service.load_case_study("us-china"), year=2019, product="Soybeans")
    rendered = service.render(session)

    assert rendered["caseStudy"]["title"] == "U.S.-China Trade War Dashboard"
    assert rendered["caseStudy"]["insights"]
    assert rendered["filters"] == {"year": 2019, "country": ALL, "product": "Soybeans"}
    assert rendered["baselineYear"] == 2018
    assert len(rendered["map"]) == 2
    assert rendered["barChart"]["focus"] == "US"
    assert [p["x"] for p in rendered["trend"]] == [2018, 2019]

    changes = [row[-1] for row in rendered["table"]["rows"]]
    assert changes[0]["state"] == "baseline"
    assert changes[1]["percent"] == pytest.approx(50.0)
    assert len(rendered["macro"]["rows"]) == 2


def test_render_is_repeatable(service):
    session = service.with_filters(service.load_case_study("us-china"), year=2019)
    assert service.render(session) == service.render(session)


def test_unknown_projection(service):
    with pytest.raises(ValueError):
        service.project(service.load_case_study("us-china"), "pie")


def test_controller_dispatch_notifies_listener(service):
    renders = []
    controller = DashboardController(service=service, listener=renders.append, debounce_delay=0.05)

    with pytest.raises(RuntimeError):
        controller.dispatch(DashboardEvent("year", 2019))

    controller.select_case_study("us-china")
    controller.dispatch(DashboardEvent("year", 2019))

    assert [r["filters"]["year"] for r in renders] == [2018, 2019]
    assert controller.session.filters.selected_year == 2019


def test_controller_debounce_coalesces_events(service):
    renders = []
    controller = DashboardController(service=service, listener=renders.append, debounce_delay=0.05)
    controller.select_case_study("us-china")

    controller.dispatch_debounced(DashboardEvent("country", "C"))
    controller.dispatch_debounced(DashboardEvent("country", "CN"))

    deadline = time.monotonic() + 2.0
    while len(renders) < 2 and time.monotonic() < deadline:
        time.sleep(0.01)
    time.sleep(0.15)

    assert len(renders) == 2
    assert renders[-1]["filters"]["country"] == "CN"


def test_controller_case_switch_drops_pending_events(service):
    renders = []
    controller = DashboardController(service=service, listener=renders.append, debounce_delay=10)
    controller.select_case_study("us-china")
    controller.dispatch_debounced(DashboardEvent("year", 2019))

    controller.select_case_study("brexit")
    assert controller.flush() is False
    assert [r["caseStudy"]["id"] for r in renders] == ["us-china", "brexit"]


def test_controller_bad_debounced_event_is_logged(service, caplog):
    renders = []
    controller = DashboardController(service=service, listener=renders.append, debounce_delay=0.02)
    controller.select_case_study("us-china")

    with caplog.at_level(logging.ERROR, logger="application.debounce"):
        controller.dispatch_debounced(DashboardEvent("year", "abc"))
        deadline = time.monotonic() + 2.0
        while "Debounced call failed" not in caplog.text and time.monotonic() < deadline:
            time.sleep(0.01)

    assert "Debounced call failed" in caplog.text
    assert len(renders) == 1
    assert controller.session.filters.selected_year == 2018
