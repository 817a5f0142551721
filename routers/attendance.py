from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from database.store import RecordStore, get_store
from dependencies.security import CurrentUser, require_teacher
from schemas.attendance import BulkAttendanceRequest, MarkAttendanceRequest
from schemas.common import ok
from services.attendance import AttendanceService

router = APIRouter(prefix="/attendance", tags=["attendance"])


def get_service(store: RecordStore = Depends(get_store)) -> AttendanceService:
    return AttendanceService(store)


# ==========================================================
# [1] 출결 입력 (학생 + 날짜 기준 upsert)
# ==========================================================

# ✅ [MARK] 학생 1명, 하루
@router.post("/mark")
def mark_attendance(
    body: MarkAttendanceRequest,
    service: AttendanceService = Depends(get_service),
    user: CurrentUser = Depends(require_teacher),
):
    record = service.mark(body.studentId, body.classId, body.date, body.status)
    return ok(record, "Attendance marked successfully")


# ✅ [BULK] 반 전체, 하루 (저장 전에 모든 행을 먼저 검증)
@router.post("/bulk")
def mark_bulk_attendance(
    body: BulkAttendanceRequest,
    service: AttendanceService = Depends(get_service),
    user: CurrentUser = Depends(require_teacher),
):
    records = service.mark_bulk(
        body.classId, body.date, [row.model_dump() for row in body.attendanceRecords]
    )
    return ok(records, f"Attendance marked for {len(records)} students")


# ==========================================================
# [2] 출결 요약
# ==========================================================

# ✅ [ROLL CALL] 특정 날짜의 반 출결 현황
@router.get("/class/{class_id}/date/{day}")
def get_class_attendance(
    class_id: int,
    day: date,
    service: AttendanceService = Depends(get_service),
    user: CurrentUser = Depends(require_teacher),
):
    return ok(service.class_roll_call(class_id, day))


# ✅ [STUDENT SUMMARY] 기간 지정 가능 (양 끝 포함)
@router.get("/student/{student_id}/summary")
def get_student_attendance_summary(
    student_id: int,
    start_date: Optional[date] = Query(None, description="inclusive, e.g. 2025-09-01"),
    end_date: Optional[date] = Query(None, description="inclusive, e.g. 2025-12-15"),
    service: AttendanceService = Depends(get_service),
    user: CurrentUser = Depends(require_teacher),
):
    return ok(service.student_summary(student_id, start_date, end_date))


# ✅ [CLASS REPORT] 기간 내 학생별 / 반 전체 집계
@router.get("/class/{class_id}/report")
def get_class_attendance_report(
    class_id: int,
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    service: AttendanceService = Depends(get_service),
    user: CurrentUser = Depends(require_teacher),
):
    return ok(service.class_report(class_id, start_date, end_date))
