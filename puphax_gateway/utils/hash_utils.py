"""해싱 유틸리티"""
import hashlib
import json
from typing import Mapping, Optional


CACHE_KEY_PREFIX = "drugs:search"


def hash_string(text: str) -> str:
    """
    문자열을 MD5 해시로 변환

    Args:
        text: 해시할 문자열

    Returns:
        MD5 해시 문자열
    """
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def normalize_term(term: str) -> str:
    """대소문자/공백 차이를 제거한 검색어"""
    return " ".join(term.split()).casefold()


def generate_cache_key(
    term: str,
    filters: Mapping[str, Optional[str]],
    page: int,
    size: int,
    sort_by: str,
    sort_direction: str,
) -> str:
    """
    검색 파라미터로 캐시 키 생성

    필터 순서나 대소문자만 다른 두 요청은 같은 키를 받습니다.

    Args:
        term: 검색어
        filters: 필터 (값이 None/공백인 항목은 무시)
        page: 페이지 인덱스
        size: 페이지 크기
        sort_by: 정렬 필드
        sort_direction: 정렬 방향

    Returns:
        캐시 키
    """
    applied = {
        name: " ".join(value.split()).casefold()
        for name, value in filters.items()
        if value is not None and value.strip()
    }
    canonical = json.dumps(
        {
            "term": normalize_term(term),
            "filters": applied,
            "page": page,
            "size": size,
            "sortBy": sort_by,
            "sortDirection": sort_direction.upper(),
        },
        sort_keys=True,
        ensure_ascii=False,
    )
    return f"{CACHE_KEY_PREFIX}:{hash_string(canonical)}"
