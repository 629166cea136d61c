from __future__ import annotations
from typing import Dict, List

from domain.models import CaseStudy

US_BLUE = "#3498db"
CN_RED = "#e74c3c"
EU_GREEN = "#2ecc71"
UK_PURPLE = "#9b59b6"


class UnknownCaseStudyError(KeyError):
    def __init__(self, study_id: str) -> None:
        super().__init__(study_id)
        self.study_id = study_id

    def __str__(self) -> str:
        return f"Unknown case study: {self.study_id!r}"


# Stała konfiguracja – nie wynika z danych
CASE_STUDIES: Dict[str, CaseStudy] = {
    "us-china": CaseStudy(
        id="us-china",
        name="U.S.-China Trade War",
        map_center=(35.0, 105.0),
        map_zoom=3,
        country_colors={"US": US_BLUE, "CN": CN_RED},
        insights=(
            "Section 301 tariffs from 2018 covered roughly $370B of Chinese imports.",
            "China retaliated mainly on U.S. agricultural goods, soybeans first.",
            "The 2020 Phase One deal paused escalation but kept most tariffs in place.",
        ),
        data_path="us-china",
    ),
    "brexit": CaseStudy(
        id="brexit",
        name="Brexit Impact",
        map_center=(54.0, -2.0),
        map_zoom=5,
        country_colors={"UK": UK_PURPLE, "EU": EU_GREEN},
        insights=(
            "The Trade and Cooperation Agreement kept zero tariffs on qualifying goods.",
            "Rules-of-origin and customs checks raised non-tariff costs from 2021.",
        ),
        data_path="brexit",
    ),
    "us-eu": CaseStudy(
        id="us-eu",
        name="U.S.-EU Steel Dispute",
        map_center=(50.0, 10.0),
        map_zoom=4,
        country_colors={"US": US_BLUE, "EU": EU_GREEN},
        insights=(
            "Section 232 imposed 25% on steel and 10% on aluminium in 2018.",
            "The EU answered with rebalancing duties on bourbon, motorcycles and jeans.",
            "A tariff-rate quota replaced the steel tariffs in 2022.",
        ),
        data_path="us-eu",
    ),
}


def get_case_study(study_id: str) -> CaseStudy:
    try:
        return CASE_STUDIES[study_id]
    except KeyError:
        raise UnknownCaseStudyError(study_id) from None


def list_case_studies() -> List[Dict[str, str]]:
    return [{"id": cs.id, "name": cs.name} for cs in CASE_STUDIES.values()]
