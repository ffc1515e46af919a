"""Encoding repair for PUPHAX payloads.

PUPHAX declares UTF-8 in its XML prolog but emits Hungarian text as
ISO-8859-2 (Latin-2). Depending on which hop mangled it, the payload then
contains either raw Latin-2 bytes (invalid UTF-8) or UTF-8 mojibake such as
``Å‘`` for ``ő``.

Repair happens in two layers:

1. byte reversal - invalid UTF-8 runs are decoded as Latin-2, then each
   mojibake pair is re-encoded under cp1252/latin-1 and decoded as UTF-8;
2. a literal correction table for the high-frequency Hungarian letters the
   first layer cannot recover (e.g. ``Å'`` with a plain apostrophe).

Both layers only run when a corruption fingerprint is present, so already
correct payloads come back untouched, and the output never contains a
fingerprint the next pass could act on (``repair`` is idempotent).
"""

import codecs
import re

from puphax_gateway.core.logging import logger


DECLARED_ENCODING = "utf-8"
SOURCE_ENCODING = "iso-8859-2"

_LATIN2_ERROR_HANDLER = "puphax-latin2"


def _decode_invalid_run_as_latin2(exc: UnicodeError):
    if not isinstance(exc, UnicodeDecodeError):
        raise exc
    run = bytes(exc.object[exc.start:exc.end])
    return run.decode(SOURCE_ENCODING, errors="replace"), exc.end


codecs.register_error(_LATIN2_ERROR_HANDLER, _decode_invalid_run_as_latin2)


# cp1252 0x80-0x9F 영역 문자 (UTF-8 continuation 바이트가 cp1252로 읽힌 경우)
_CP1252_SPECIALS = (
    "€‚ƒ„…†‡ˆ‰Š‹ŒŽ"
    "‘’“”•–—˜™š›œžŸ"
)
_MOJIBAKE_PAIR = re.compile("[Â-Å][\u0080-¿" + _CP1252_SPECIALS + "]")

# Latin-2 바이트가 latin-1로 읽힌 헝가리어 이중 악센트 문자
_LATIN1_MISREADS = "õûÕÛ"

# 순서 유지 (dict 삽입 순서대로 치환)
HUNGARIAN_CORRECTIONS = {
    "Ã¡": "á",
    "Ã©": "é",
    "Ã\u00ad": "í",
    "Ã³": "ó",
    "Ãº": "ú",
    "Ã¶": "ö",
    "Ã¼": "ü",
    "Å‘": "ő",
    "Å'": "ő",
    "Å±": "ű",
    "Ã\u0081": "Á",
    "Ã‰": "É",
    "Ã\u0089": "É",
    "Ã\u008d": "Í",
    "Ã“": "Ó",
    "Ã\u0093": "Ó",
    "Ãš": "Ú",
    "Ã\u009a": "Ú",
    "Ã–": "Ö",
    "Ã\u0096": "Ö",
    "Ãœ": "Ü",
    "Ã\u009c": "Ü",
    "Å\u0090": "Ő",
    "Å°": "Ű",
    "õ": "ő",
    "û": "ű",
    "Õ": "Ő",
    "Û": "Ű",
    "\ufffd": "?",
}


def has_corruption_fingerprint(text: str) -> bool:
    """디코딩된 텍스트에 인코딩 손상 흔적이 있는지 확인"""
    if "\ufffd" in text:
        return True
    if _MOJIBAKE_PAIR.search(text):
        return True
    if any(ch in text for ch in _LATIN1_MISREADS):
        return True
    return any(broken in text for broken in HUNGARIAN_CORRECTIONS)


def _reverse_pair(match: "re.Match[str]") -> str:
    pair = match.group(0)
    raw = bytearray()
    for ch in pair:
        try:
            raw += ch.encode("cp1252")
        except UnicodeEncodeError:
            # cp1252 미정의 영역 (0x81, 0x8D, 0x8F, 0x90, 0x9D)
            raw += ch.encode("latin-1")
    try:
        return bytes(raw).decode(DECLARED_ENCODING)
    except UnicodeDecodeError:
        return pair


def _reverse_mojibake(text: str) -> str:
    # 성공한 치환은 두 글자를 한 글자로 줄이므로 반드시 종료된다
    while True:
        repaired = _MOJIBAKE_PAIR.sub(_reverse_pair, text)
        if repaired == text:
            return repaired
        text = repaired


def _apply_corrections(text: str) -> str:
    for broken, fixed in HUNGARIAN_CORRECTIONS.items():
        if broken in text:
            text = text.replace(broken, fixed)
    return text


def repair_text(text: str) -> str:
    """이미 디코딩된 문자열에 두 단계 보정을 적용

    Args:
        text: 디코딩된 문자열 (예: SOAP faultstring)

    Returns:
        보정된 문자열. 손상 흔적이 없으면 입력 그대로.
    """
    if not text or not has_corruption_fingerprint(text):
        return text
    try:
        return _apply_corrections(_reverse_mojibake(text))
    except Exception as e:
        logger.warning(f"[ENCODING] text repair failed, keeping original: {type(e).__name__}")
        return text


def repair(raw: bytes) -> str:
    """업스트림 원문 바이트를 올바른 텍스트로 복원

    Args:
        raw: 업스트림 응답 바이트 (UTF-8로 선언됨)

    Returns:
        복원된 텍스트. 실패 시 선언된 인코딩으로 디코딩한 텍스트.
    """
    declared = raw.decode(DECLARED_ENCODING, errors="replace")
    if not has_corruption_fingerprint(declared):
        return declared

    try:
        text = raw.decode(DECLARED_ENCODING, errors=_LATIN2_ERROR_HANDLER)
        repaired = _apply_corrections(_reverse_mojibake(text))
    except Exception as e:
        logger.warning(
            f"[ENCODING] payload repair failed ({len(raw)} bytes), "
            f"returning declared decoding: {type(e).__name__}"
        )
        return declared

    logger.debug(f"[ENCODING] repaired payload ({len(raw)} bytes)")
    return repaired
