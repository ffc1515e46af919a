"""Search Outcome - orchestrator success value"""

from dataclasses import dataclass

from puphax_gateway.schemas.drug_schema import DrugSummary, PaginationInfo, SearchInfo


@dataclass(frozen=True)
class SearchOutcome:
    """검색 성공 결과

    Attributes:
        drugs: 정렬된 현재 페이지 레코드
        pagination: 페이지 정보
        search_info: 출처 메타데이터 (cache hit/miss, 소요 시간, 적용 필터)
    """

    drugs: list[DrugSummary]
    pagination: PaginationInfo
    search_info: SearchInfo

    @property
    def cache_hit(self) -> bool:
        return self.search_info.cache_hit
