"""Upstream payload → DrugSummary mapping (xml.etree.ElementTree)"""

import xml.etree.ElementTree as ET
from typing import Optional

from puphax_gateway.core.logging import logger
from puphax_gateway.schemas.drug_schema import DrugStatus, DrugSummary
from puphax_gateway.utils.encoding import repair_text


UNKNOWN_DRUG_NAME = "Unknown Drug"

_TRUE_VALUES = {"true", "1", "yes", "i", "igen"}


class PayloadMappingError(ValueError):
    """업스트림 응답을 해석할 수 없음"""


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child(elem: ET.Element, name: str) -> Optional[ET.Element]:
    for child in elem:
        if _local(child.tag) == name:
            return child
    return None


def _text(elem: ET.Element, name: str) -> Optional[str]:
    child = _child(elem, name)
    if child is None or child.text is None:
        return None
    value = repair_text(child.text.strip())
    return value or None


def _flag(elem: ET.Element, name: str) -> bool:
    value = _text(elem, name)
    return value is not None and value.casefold() in _TRUE_VALUES


def _status(raw: Optional[str], drug_id: str) -> DrugStatus:
    if raw is None:
        return DrugStatus.ACTIVE
    try:
        return DrugStatus(raw.upper())
    except ValueError:
        logger.warning(f"[MAPPING] unknown status '{raw}' for drug {drug_id}, defaulting to ACTIVE")
        return DrugStatus.ACTIVE


def _ingredients(elem: ET.Element) -> tuple[str, ...]:
    container = _child(elem, "activeIngredients")
    if container is None:
        return ()
    names = []
    for ingredient in container:
        if _local(ingredient.tag) != "ingredient":
            continue
        # <ingredient><name>..</name></ingredient> 또는 <ingredient>..</ingredient>
        name = _text(ingredient, "name")
        if name is None and ingredient.text:
            name = repair_text(ingredient.text.strip()) or None
        if name:
            names.append(name)
    return tuple(names)


def map_drug(elem: ET.Element) -> Optional[DrugSummary]:
    """<drug> 요소 하나를 DrugSummary로 변환. 식별자가 없으면 None."""
    drug_id = _text(elem, "id")
    if not drug_id:
        logger.warning("[MAPPING] drug record without id skipped")
        return None

    return DrugSummary(
        id=drug_id,
        name=_text(elem, "name") or UNKNOWN_DRUG_NAME,
        manufacturer=_text(elem, "manufacturer"),
        atc_code=_text(elem, "atcCode"),
        active_ingredients=_ingredients(elem),
        prescription_required=_flag(elem, "prescriptionRequired"),
        reimbursable=_flag(elem, "reimbursable"),
        status=_status(_text(elem, "status"), drug_id),
    )


def parse_search_payload(text: str) -> tuple[list[DrugSummary], int]:
    """보정된 응답 텍스트 파싱

    Args:
        text: 인코딩 보정이 끝난 응답 (SOAP envelope 포함 가능)

    Returns:
        (drugs, total): 응답 순서의 레코드 목록과 업스트림 보고 총 개수

    Raises:
        PayloadMappingError: XML이 아니거나 drugSearchResponse가 없음
    """
    try:
        root = ET.fromstring(text.lstrip("\ufeff").strip())
    except ET.ParseError as e:
        raise PayloadMappingError(f"Malformed upstream XML: {e}") from e

    response = root if _local(root.tag) == "drugSearchResponse" else next(
        (el for el in root.iter() if _local(el.tag) == "drugSearchResponse"), None
    )
    if response is None:
        raise PayloadMappingError("Upstream response has no drugSearchResponse element")

    drugs: list[DrugSummary] = []
    container = _child(response, "drugs")
    if container is not None:
        for elem in container:
            if _local(elem.tag) != "drug":
                continue
            drug = map_drug(elem)
            if drug is not None:
                drugs.append(drug)

    total = len(drugs)
    raw_total = _text(response, "totalCount")
    if raw_total is not None:
        try:
            total = max(int(raw_total), 0)
        except ValueError:
            logger.warning(f"[MAPPING] unparsable totalCount '{raw_total}', using record count")

    return drugs, total
