import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from models.enums import AttendanceStatus


class MarkAttendanceRequest(BaseModel):
    studentId: int                          # 학생 ID
    classId: int                            # 출결을 입력하는 반
    date: datetime.date                     # 출결 날짜
    status: AttendanceStatus                # PRESENT / ABSENT / LATE


class BulkAttendanceRow(BaseModel):
    studentId: int
    # 서비스에서 행 단위로 검증 (실패한 행을 한 번에 모두 반환)
    status: str


class BulkAttendanceRequest(BaseModel):
    classId: int
    date: datetime.date
    attendanceRecords: List[BulkAttendanceRow] = Field(..., min_length=1)

    model_config = ConfigDict(extra="ignore")
