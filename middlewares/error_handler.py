import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from schemas.common import ErrorDetail, ErrorResponse
from utils.errors import SchoolError, StorageError

logger = logging.getLogger(__name__)


def _latency(request: Request) -> int:
    return getattr(request.state, "latency_ms", 0)


def _error_response(request: Request, status_code: int, code: str, message: str, details=None) -> JSONResponse:
    body = ErrorResponse(
        error=ErrorDetail(code=code, message=message, details=details),
        latency_ms=_latency(request),
        trace_id=request.headers.get("X-Request-ID"),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def add_error_handlers(app: FastAPI):
    @app.exception_handler(SchoolError)
    async def school_error_handler(request: Request, exc: SchoolError):
        if isinstance(exc, StorageError):
            logger.error("%s %s -> storage error: %s", request.method, request.url.path, exc.message)
        else:
            logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
        return _error_response(request, exc.status_code, exc.code, exc.message, exc.details)

    # 요청 본문 / 경로 검증 오류도 같은 형식으로 반환 (입력값 원문은 제외)
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
            for err in exc.errors()
        ]
        logger.info("%s %s -> VALIDATION_ERROR: %d field error(s)", request.method, request.url.path, len(details))
        return _error_response(request, 422, "VALIDATION_ERROR", "Request validation failed", details)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return _error_response(request, 500, "INTERNAL_ERROR", str(exc))
