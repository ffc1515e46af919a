"""Response Assembler

The only place boundary-facing shapes (DrugSearchResponse / ErrorEnvelope)
are built.
"""

from datetime import datetime
from typing import Optional, Union

from fastapi.responses import JSONResponse

from puphax_gateway.core.correlation import RequestContext
from puphax_gateway.core.exceptions import ServiceFailure

from puphax_gateway.schemas.drug_schema import (
    DrugSearchResponse,
    ErrorEnvelope,
    FieldErrorDto,
    ValidationErrorEnvelope,
)

from .classifier import ErrorClassifier
from .result import SearchOutcome


CORRELATION_HEADER = "X-Correlation-ID"


class ResponseAssembler:
    """성공/실패 응답 조립기"""

    def __init__(self, classifier: Optional[ErrorClassifier] = None):
        self.classifier = classifier or ErrorClassifier()

    def success(self, outcome: SearchOutcome) -> DrugSearchResponse:
        return DrugSearchResponse(
            drugs=outcome.drugs,
            pagination=outcome.pagination,
            search_info=outcome.search_info,
        )

    def failure(
        self, failure: ServiceFailure, context: RequestContext
    ) -> tuple[int, Union[ErrorEnvelope, ValidationErrorEnvelope]]:
        """ServiceFailure를 분류하고 에러 envelope 생성

        Args:
            failure: 실패
            context: 요청 컨텍스트 (path, correlation id 생성기)

        Returns:
            (HTTP status, envelope)
        """
        classification = self.classifier.classify(failure, context)
        common = dict(
            timestamp=datetime.now(),
            status=classification.status,
            error=classification.error,
            message=classification.message,
            path=context.path,
            correlation_id=classification.correlation_id,
        )
        if failure.violations:
            envelope = ValidationErrorEnvelope(
                **common,
                field_errors=[
                    FieldErrorDto(
                        field=v.field,
                        rejected_value=v.rejected_value,
                        message=v.message,
                    )
                    for v in failure.violations
                ],
            )
        else:
            envelope = ErrorEnvelope(**common)
        return classification.status, envelope

    def to_json_response(self, failure: ServiceFailure, context: RequestContext) -> JSONResponse:
        status, envelope = self.failure(failure, context)
        return JSONResponse(
            status_code=status,
            content=envelope.model_dump(mode="json", by_alias=True),
            headers={CORRELATION_HEADER: envelope.correlation_id},
        )
