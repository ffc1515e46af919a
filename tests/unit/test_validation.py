"""검색 요청 검증 테스트"""

import pytest

from puphax_gateway.core.exceptions import FailureKind, ServiceFailure
from puphax_gateway.engine.validation import (
    SearchRequest,
    validate_request,
    violations_from_errors,
)


def _violations(**kwargs):
    params = {"term": "aspirin"}
    params.update(kwargs)
    with pytest.raises(ServiceFailure) as exc_info:
        validate_request(**params)
    assert exc_info.value.kind is FailureKind.VALIDATION
    return exc_info.value.violations


def test_valid_request_is_normalized():
    request = validate_request(
        term="  aspirin ", manufacturer=" Bayer ", atc_code="", sort_direction="desc"
    )
    assert request == SearchRequest(
        term="aspirin", manufacturer="Bayer", atc_code=None, page=0, size=20,
        sort_by="name", sort_direction="DESC",
    )
    assert request.applied_filters == {"manufacturer": "Bayer"}


@pytest.mark.parametrize("term", [None, "", "   "])
def test_blank_term(term):
    violations = _violations(term=term)
    assert [(v.field, v.message) for v in violations] == [("term", "Search term cannot be blank")]


@pytest.mark.parametrize("term", ["a", "x" * 101])
def test_term_length(term):
    violations = _violations(term=term)
    assert violations[0].message == "Search term must be between 2 and 100 characters"


@pytest.mark.parametrize("size,message", [
    (0, "Page size must be at least 1"),
    (150, "Page size cannot exceed 100"),
])
def test_size_bounds(size, message):
    violations = _violations(size=size)
    assert [(v.field, v.rejected_value, v.message) for v in violations] == [("size", size, message)]


@pytest.mark.parametrize("size", [1, 100])
def test_size_bounds_inclusive(size):
    assert validate_request(term="aspirin", size=size).size == size


def test_negative_page():
    assert _violations(page=-1)[0].message == "Page number must be 0 or greater"


def test_atc_code_format():
    assert _violations(atc_code="A10")[0].message == "ATC code must follow the format: A10AB01"
    assert validate_request(term="aspirin", atc_code="A10AB01").atc_code == "A10AB01"


def test_manufacturer_length():
    assert _violations(manufacturer="m" * 101)[0].field == "manufacturer"


def test_sort_parameters():
    violations = _violations(sort_by="price", sort_direction="UP")
    assert [v.field for v in violations] == ["sortBy", "sortDirection"]
    assert violations[0].message == "Sort field must be one of: name, manufacturer, atcCode"


def test_all_violations_collected_in_field_order():
    violations = _violations(term="", page=-1, size=150)
    assert [v.field for v in violations] == ["term", "page", "size"]


def test_violations_from_framework_errors():
    errors = [
        {"type": "int_parsing", "loc": ("query", "size"), "msg": "Input should be a valid integer", "input": "abc"},
        {"type": "missing", "loc": ("body",), "msg": "Field required", "input": None},
    ]
    violations = violations_from_errors(errors)
    assert violations[0].field == "size"
    assert violations[0].rejected_value == "abc"
    assert violations[0].message == "Input should be a valid integer"
    assert violations[1].field == "request"
