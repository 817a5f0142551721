"""
utils/errors.py

서비스와 저장소에서 발생시키는 도메인 예외.
middlewares/error_handler.py 의 핸들러가 표준 ErrorResponse 형식으로 변환.
"""

from typing import Any, Optional


class SchoolError(Exception):
    code = "SCHOOL_ERROR"
    status_code = 400

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(SchoolError):
    """잘못되었거나 누락된 입력 (예: 허용되지 않는 값, 범위를 벗어난 점수)"""
    code = "VALIDATION_ERROR"
    status_code = 422


class NotFoundError(SchoolError):
    """참조한 학생 / 반 / 과목 / 교사가 존재하지 않음"""
    code = "NOT_FOUND"
    status_code = 404


class ConflictError(SchoolError):
    """저장된 상태와 충돌 (예: 해당 반 학생이 아님)"""
    code = "CONFLICT"
    status_code = 409


class StorageError(SchoolError):
    """저장소 오류 (트랜잭션은 롤백됨)"""
    code = "STORAGE_ERROR"
    status_code = 500
