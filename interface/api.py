from typing import Optional, Tuple

from flask import Blueprint, current_app, jsonify, request

from application.dashboard_service import DashboardService, DashboardSession
from core.config import Config
from domain.case_studies import UnknownCaseStudyError, list_case_studies
from integration.table_loader import TableLoader

api_bp = Blueprint("api", __name__, url_prefix="/api")

EXTENSION_KEY = "trade_dashboard"
PROJECTIONS = ("map", "bar-chart", "trend", "table", "macro", "years")


def _state() -> dict:
    return current_app.extensions.setdefault(EXTENSION_KEY, {})


def _service() -> DashboardService:
    state = _state()
    if "service" not in state:
        loader = TableLoader(data_root=current_app.config.get("DATA_ROOT", Config.DATA_ROOT))
        state["service"] = DashboardService(loader=loader)
    return state["service"]


def _session_for(study_id: str, reload: bool = False) -> DashboardSession:
    """
    Trzymamy tylko jedną wczytaną sesję – inny case study (albo reload)
    zastępuje ją w całości.
    """
    state = _state()
    current: Optional[DashboardSession] = state.get("session")
    if reload or current is None or current.case_study.id != study_id:
        current = _service().load_case_study(study_id)
        state["session"] = current
    return current


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def _filtered_session(study_id: str) -> Tuple[Optional[DashboardSession], Optional[tuple]]:
    """
    Sesja z filtrami z query stringa: ?year=2019&country=CN&product=Steel
    Filtry nie zmieniają sesji w cache – każde zapytanie liczy projekcje od zera.
    """
    raw_year = (request.args.get("year") or "").strip()
    year = None
    if raw_year:
        try:
            year = int(raw_year)
        except ValueError:
            return None, _error("'year' must be an integer", 400)

    try:
        session = _session_for(study_id)
    except UnknownCaseStudyError as e:
        return None, _error(str(e), 404)

    session = _service().with_filters(
        session,
        year=year,
        country=request.args.get("country"),
        product=request.args.get("product"),
    )
    return session, None


@api_bp.route("/case-studies")
def get_case_studies():
    return jsonify({
        "caseStudies": list_case_studies(),
        "default": current_app.config.get("DEFAULT_CASE_STUDY", Config.DEFAULT_CASE_STUDY),
    })


@api_bp.route("/case-studies/<study_id>/dashboard")
def get_dashboard(study_id: str):
    """
    Pełny zestaw projekcji dla jednego case study.

    Parametry (opcjonalne):
      ?year=2019 (domyślnie pierwszy rok / DEFAULT_YEAR)
      ?country=CN (albo ALL)
      ?product=Steel (albo ALL)
    """
    session, err = _filtered_session(study_id)
    if err:
        return err
    return jsonify(_service().render(session))


@api_bp.route("/case-studies/<study_id>/reload", methods=["POST"])
def reload_case_study(study_id: str):
    try:
        session = _session_for(study_id, reload=True)
    except UnknownCaseStudyError as e:
        return _error(str(e), 404)
    dataset = session.dataset
    current_app.logger.info("Reloaded case study %s", study_id)
    return jsonify({
        "id": study_id,
        "counts": {
            "tariffs": len(dataset.tariffs),
            "trade": len(dataset.trade),
            "macro": len(dataset.macro),
        },
        "years": _service().years(dataset),
    })


@api_bp.route("/case-studies/<study_id>/<projection>")
def get_projection(study_id: str, projection: str):
    if projection not in PROJECTIONS:
        return _error(f"Unknown view: {projection}", 404)
    session, err = _filtered_session(study_id)
    if err:
        return err
    return jsonify(_service().project(session, projection))
