"""업스트림 응답 매핑 테스트"""

import pytest

from fixtures.payloads import (
    ASPIRIN_PAYLOAD,
    EMPTY_PAYLOAD,
    MALFORMED_PAYLOAD,
    UNSORTED_PAYLOAD,
)
from puphax_gateway.engine.mapping import PayloadMappingError, parse_search_payload
from puphax_gateway.schemas.drug_schema import DrugStatus


def test_parse_single_record():
    drugs, total = parse_search_payload(ASPIRIN_PAYLOAD.decode("utf-8"))
    assert total == 1
    drug = drugs[0]
    assert drug.id == "HU-0001"
    assert drug.name == "Aspirin 500 mg tabletta"
    assert drug.manufacturer == "Bayer Hungária Kft."
    assert drug.atc_code == "N02BA01"
    assert drug.active_ingredients == ("acetilszalicilsav",)
    assert drug.active_ingredient == "acetilszalicilsav"
    assert drug.prescription_required is False
    assert drug.reimbursable is True
    assert drug.status is DrugStatus.ACTIVE


def test_soap_envelope_and_defaults():
    drugs, total = parse_search_payload(UNSORTED_PAYLOAD.decode("utf-8"))
    assert total == 3
    assert [d.id for d in drugs] == ["C-3", "A-1", "B-2"]
    withdrawn = drugs[2]
    assert withdrawn.status is DrugStatus.WITHDRAWN
    assert withdrawn.manufacturer is None
    assert withdrawn.active_ingredients == ()
    assert withdrawn.active_ingredient is None


def test_empty_result():
    assert parse_search_payload(EMPTY_PAYLOAD.decode("utf-8")) == ([], 0)


def test_missing_id_skipped_and_missing_name_defaulted():
    text = (
        "<drugSearchResponse><drugs>"
        "<drug><name>no id</name></drug>"
        "<drug><id>X-1</id><status>unknown</status><prescriptionRequired>IGEN</prescriptionRequired></drug>"
        "</drugs></drugSearchResponse>"
    )
    drugs, total = parse_search_payload(text)
    assert total == 1
    assert drugs[0].name == "Unknown Drug"
    assert drugs[0].status is DrugStatus.ACTIVE
    assert drugs[0].prescription_required is True


def test_unparsable_total_falls_back_to_record_count():
    text = "<drugSearchResponse><totalCount>many</totalCount><drugs><drug><id>1</id></drug></drugs></drugSearchResponse>"
    assert parse_search_payload(text)[1] == 1


def test_ingredient_text_form_and_blank_entries():
    text = (
        "<drugSearchResponse><drugs><drug><id>1</id>"
        "<activeIngredients><ingredient> metformin </ingredient><ingredient>  </ingredient>"
        "<ingredient><name>sitagliptin</name></ingredient></activeIngredients>"
        "</drug></drugs></drugSearchResponse>"
    )
    drugs, _ = parse_search_payload(text)
    assert drugs[0].active_ingredients == ("metformin", "sitagliptin")
    assert drugs[0].active_ingredient == "metformin"


@pytest.mark.parametrize("text", [
    MALFORMED_PAYLOAD.decode("utf-8"),
    "<html><body>maintenance</body></html>",
])
def test_malformed_payload(text):
    with pytest.raises(PayloadMappingError):
        parse_search_payload(text)
