"""Engine Layer - Core Orchestration

- SearchOrchestrator: validation → cache → upstream → repair → mapping → pagination
- ErrorClassifier: ServiceFailure → status / category / correlation id
- ResponseAssembler: success and error envelopes
- CacheAdapter: CachedPage over a cache store
"""

from .assembler import CORRELATION_HEADER, ResponseAssembler
from .cache_adapter import CacheAdapter
from .classifier import Classification, ErrorClassifier, STATUS_TABLE
from .mapping import PayloadMappingError, parse_search_payload
from .orchestrator import SearchOrchestrator, sort_drugs
from .result import SearchOutcome
from .validation import SearchRequest, validate_request, violations_from_errors

__all__ = [
    "CORRELATION_HEADER",
    "ResponseAssembler",
    "CacheAdapter",
    "Classification",
    "ErrorClassifier",
    "STATUS_TABLE",
    "PayloadMappingError",
    "parse_search_payload",
    "SearchOrchestrator",
    "sort_drugs",
    "SearchOutcome",
    "SearchRequest",
    "validate_request",
    "violations_from_errors",
]
