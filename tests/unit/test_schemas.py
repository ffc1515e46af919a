"""Pydantic 스키마 테스트"""

import pytest
from pydantic import ValidationError

from puphax_gateway.schemas.drug_schema import DrugStatus, DrugSummary, PaginationInfo


class TestDrugSummary:

    def test_primary_ingredient_filled_from_list(self):
        drug = DrugSummary(id="1", name="x", active_ingredients=("metformin", "sitagliptin"))
        assert drug.active_ingredient == "metformin"

    def test_explicit_primary_ingredient_kept(self):
        drug = DrugSummary(id="1", name="x", active_ingredients=("a", "b"), active_ingredient="b")
        assert drug.active_ingredient == "b"

    def test_immutable(self):
        drug = DrugSummary(id="1", name="x")
        with pytest.raises(ValidationError):
            drug.name = "y"

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            DrugSummary(id="", name="x")

    def test_status_is_closed_set(self):
        assert DrugSummary(id="1", name="x").status is DrugStatus.ACTIVE
        with pytest.raises(ValidationError):
            DrugSummary(id="1", name="x", status="RETIRED")

    def test_accepts_camel_case_input(self):
        drug = DrugSummary.model_validate(
            {"id": "1", "name": "x", "atcCode": "N02BA01", "activeIngredients": ["a"], "prescriptionRequired": True}
        )
        assert drug.atc_code == "N02BA01"
        assert drug.active_ingredient == "a"
        assert drug.prescription_required is True


class TestPaginationInfo:

    @pytest.mark.parametrize("page,size,count,total,has_next,has_previous,total_pages", [
        (0, 20, 1, 1, False, False, 1),
        (0, 20, 20, 45, True, False, 3),
        (2, 20, 5, 45, False, True, 3),
        (0, 20, 0, 0, False, False, 0),
        (1, 10, 10, 20, False, True, 2),
    ])
    def test_of(self, page, size, count, total, has_next, has_previous, total_pages):
        info = PaginationInfo.of(page=page, size=size, number_of_elements=count, total_elements=total)
        assert info.has_next is has_next
        assert info.has_previous is has_previous
        assert info.total_pages == total_pages

    def test_elements_cannot_exceed_size(self):
        with pytest.raises(ValidationError):
            PaginationInfo.of(page=0, size=2, number_of_elements=3, total_elements=3)
