"""
Buduje statyczny snapshot dashboardu dla jednego case study
(wszystkie projekcje dla każdego roku suwaka) – do hostingu bez backendu.

Uruchomienie (z katalogu projektu):
    python -m tools.build_dashboard_snapshot us-china

Wyjście:
    <SNAPSHOT_DIR>/<case-study>.json
      {
        "caseStudy": {...},
        "years": {"years": [2018, 2019], "min": 2018, "max": 2019, "default": 2018},
        "byYear": {
          "2018": {"map": [...], "barChart": {...}, "table": {...}, "macro": {...}},
          ...
        }
      }
"""

from __future__ import annotations

import json
import math
import sys
from dataclasses import replace
from pathlib import Path
from typing import Dict, Optional

from application.dashboard_service import DashboardService
from core.config import Config

# projekcje zależne od roku; trend zależy tylko od produktu
PER_YEAR_VIEWS = ("map", "barChart", "table", "macro")


def _json_safe(value):
    # inf/nan nie są poprawnym JSON-em
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_json_safe(v) for v in value]
    return value


def build_snapshot(study_id: str, service: Optional[DashboardService] = None) -> Dict:
    service = service or DashboardService()
    session = service.load_case_study(study_id)
    first = service.render(session)

    by_year: Dict[str, Dict] = {}
    for year in first["years"]["years"]:
        rendered = service.render(replace(session, filters=replace(session.filters, selected_year=year)))
        by_year[str(year)] = {view: rendered[view] for view in PER_YEAR_VIEWS}

    trends: Dict[str, list] = {}
    for product in first["options"]["products"][1:]:
        trends[product] = service.project(service.with_filters(session, product=product), "trend")

    return _json_safe({
        "caseStudy": first["caseStudy"],
        "options": first["options"],
        "baselineYear": first["baselineYear"],
        "years": first["years"],
        "byYear": by_year,
        "trends": trends,
    })


def write_snapshot(snapshot: Dict, out_dir: Optional[Path] = None) -> Path:
    out_dir = Path(out_dir or Config.SNAPSHOT_DIR)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / f"{snapshot['caseStudy']['id']}.json"
    with out_path.open("w", encoding="utf-8") as f:
        json.dump(snapshot, f, indent=2, ensure_ascii=False)
    return out_path


def main(argv=None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    study_id = argv[0] if argv else Config.DEFAULT_CASE_STUDY

    print(f"[INFO] Buduję snapshot dla case study: {study_id}")
    try:
        snapshot = build_snapshot(study_id)
    except KeyError as e:
        print(f"[WARN] {e}")
        return 1

    if not snapshot["byYear"]:
        print("[WARN] Brak lat w danych – snapshot zawiera tylko konfigurację case study.")

    out_path = write_snapshot(snapshot)
    print(f"[INFO] Lata: {', '.join(snapshot['byYear']) or '-'}")
    print(f"[INFO] Snapshot zapisany do: {out_path.resolve()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
