"""Exception handlers - 모든 실패를 동일한 envelope 형태로 변환"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from puphax_gateway.core.correlation import RequestContext
from puphax_gateway.core.exceptions import ServiceFailure
from puphax_gateway.engine.validation import violations_from_errors

from .routes.drug_routes import get_assembler


def _context(request: Request) -> RequestContext:
    return RequestContext(path=request.url.path)


async def service_failure_handler(request: Request, exc: ServiceFailure) -> JSONResponse:
    return get_assembler().to_json_response(exc, _context(request))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """프레임워크 바인딩 오류도 도메인 검증과 같은 envelope로"""
    failure = ServiceFailure.validation(
        "Request validation failed", violations=violations_from_errors(exc.errors())
    )
    return get_assembler().to_json_response(failure, _context(request))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """라우트 밖에서 새어 나온 예외용 최후 수단 (CORS 헤더 없음)"""
    failure = ServiceFailure.unclassified(f"{type(exc).__name__}: {exc}", cause=exc)
    return get_assembler().to_json_response(failure, _context(request))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceFailure, service_failure_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
