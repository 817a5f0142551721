"""
services/attendance.py

출결 집계 (학생별, 반별, 일별 출석부) 와
출결 입력 트랜잭션 (단건 / 일괄 upsert).
"""

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from database.store import RecordStore
from models.attendance import AttendanceMark
from models.enums import AttendanceStatus
from utils.errors import ConflictError, NotFoundError, ValidationError
from utils.formatting import iso_date, percent_text, round1

logger = logging.getLogger(__name__)


@dataclass
class AttendanceSummary:
    total_days: int = 0
    present_days: int = 0
    absent_days: int = 0
    late_days: int = 0

    @property
    def attendance_percentage(self) -> float:
        # 출석률 계산 시 LATE 는 출석으로 보되, 지각 횟수는 따로 집계
        if not self.total_days:
            return 0.0
        return round1((self.present_days + self.late_days) / self.total_days * 100)

    def to_dict(self) -> dict:
        return {
            "totalDays": self.total_days,
            "presentDays": self.present_days,
            "absentDays": self.absent_days,
            "lateDays": self.late_days,
            "attendancePercentage": percent_text(self.attendance_percentage, self.total_days > 0),
        }


def summarize_marks(marks: Iterable[AttendanceMark]) -> AttendanceSummary:
    counts = Counter(AttendanceStatus(m.status) for m in marks)
    return AttendanceSummary(
        total_days=sum(counts.values()),
        present_days=counts.get(AttendanceStatus.PRESENT, 0),
        absent_days=counts.get(AttendanceStatus.ABSENT, 0),
        late_days=counts.get(AttendanceStatus.LATE, 0),
    )


def parse_status(value) -> AttendanceStatus:
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise ValidationError("Status must be PRESENT, ABSENT, or LATE", details={"status": value})


def _mark_dict(mark: AttendanceMark) -> dict:
    return {
        "id": mark.id,
        "studentId": mark.student_id,
        "classId": mark.class_id,
        "date": iso_date(mark.date),
        "status": AttendanceStatus(mark.status).value,
    }


class AttendanceService:
    def __init__(self, store: RecordStore):
        self.store = store

    # ==========================================================
    # [트랜잭션] 출결 입력
    # ==========================================================
    def mark(self, student_id: int, class_id: int, day: date, status) -> dict:
        status = parse_status(status)
        if self.store.get_class(class_id) is None:
            raise NotFoundError("Class not found", details={"classId": class_id})
        student = self.store.get_student(student_id)
        if student is None:
            raise NotFoundError("Student not found", details={"studentId": student_id})
        if student.class_id != class_id:
            raise ConflictError(
                "Student does not belong to this class",
                details={"studentId": student_id, "classId": class_id},
            )

        with self.store.transaction():
            mark = self.store.put_attendance(student_id, day, class_id, status)
        logger.info("attendance marked: student=%s date=%s status=%s", student_id, day, status.value)
        return _mark_dict(mark)

    def mark_bulk(self, class_id: int, day: date, records: List[dict]) -> List[dict]:
        """
        반 전체의 하루 출결을 입력.

        저장 전에 모든 행을 먼저 검증하고, 실패한 행은 하나의 에러에 모두 담아 반환.
        검증을 통과하면 한 트랜잭션으로 저장.
        """
        if self.store.get_class(class_id) is None:
            raise NotFoundError("Class not found", details={"classId": class_id})

        failures = []
        parsed = []
        students = {s.id: s for s in self.store.get_students(r.get("studentId") for r in records)}
        for index, record in enumerate(records):
            student_id = record.get("studentId")
            try:
                status = parse_status(record.get("status"))
            except ValidationError as exc:
                failures.append({"index": index, "studentId": student_id, "error": exc.message})
                continue
            student = students.get(student_id)
            if student is None:
                failures.append({"index": index, "studentId": student_id, "error": "Student not found"})
            elif student.class_id != class_id:
                failures.append(
                    {"index": index, "studentId": student_id, "error": "Student does not belong to this class"}
                )
            else:
                parsed.append((student_id, status))

        if failures:
            raise ValidationError(
                f"{len(failures)} of {len(records)} attendance records are invalid; nothing was recorded",
                details=failures,
            )

        with self.store.transaction():
            marks = [self.store.put_attendance(sid, day, class_id, status) for sid, status in parsed]
        logger.info("bulk attendance marked: class=%s date=%s rows=%d", class_id, day, len(marks))
        return [_mark_dict(m) for m in marks]

    # ==========================================================
    # [집계] 조회
    # ==========================================================
    def student_summary(
        self, student_id: int, start: Optional[date] = None, end: Optional[date] = None
    ) -> dict:
        student = self.store.get_student(student_id)
        if student is None:
            raise NotFoundError("Student not found", details={"studentId": student_id})

        marks = self.store.list_attendance([student_id], start=start, end=end, newest_first=True)
        return {
            "studentInfo": {
                "name": student.full_name,
                "studentNumber": student.student_number,
            },
            "summary": summarize_marks(marks).to_dict(),
            "attendanceRecords": [
                {
                    "date": iso_date(m.date),
                    "status": AttendanceStatus(m.status).value,
                    "createdAt": m.created_at.isoformat() if m.created_at else None,
                }
                for m in marks
            ],
        }

    def recent_summary(self, student_id: int, window: int) -> AttendanceSummary:
        """날짜 기준 최근 `window` 건의 출결 요약"""
        marks = self.store.list_attendance([student_id], newest_first=True, limit=window)
        return summarize_marks(marks)

    def class_roll_call(self, class_id: int, on_date: date) -> dict:
        if self.store.get_class(class_id) is None:
            raise NotFoundError("Class not found", details={"classId": class_id})

        students = self.store.list_students(class_id)
        marks = {
            m.student_id: m
            for m in self.store.list_attendance([s.id for s in students], on_date=on_date)
        }
        rows = []
        for student in students:
            mark = marks.get(student.id)
            rows.append({
                "studentId": student.id,
                "studentName": student.full_name,
                "studentNumber": student.student_number,
                "status": AttendanceStatus(mark.status).value if mark else None,
                "marked": mark is not None,
            })

        return {
            "classId": class_id,
            "date": iso_date(on_date),
            "totalStudents": len(students),
            "markedAttendance": sum(1 for r in rows if r["marked"]),
            "attendanceData": rows,
        }

    def class_report(
        self, class_id: int, start: Optional[date] = None, end: Optional[date] = None
    ) -> dict:
        class_ = self.store.get_class(class_id)
        if class_ is None:
            raise NotFoundError("Class not found", details={"classId": class_id})

        students = self.store.list_students(class_id)
        by_student = {s.id: [] for s in students}
        for mark in self.store.list_attendance(list(by_student), start=start, end=end):
            by_student[mark.student_id].append(mark)

        reports = []
        totals = AttendanceSummary()
        for student in students:
            summary = summarize_marks(by_student[student.id])
            totals.total_days += summary.total_days
            totals.present_days += summary.present_days
            totals.absent_days += summary.absent_days
            totals.late_days += summary.late_days
            reports.append({
                "studentId": student.id,
                "studentName": student.full_name,
                "studentNumber": student.student_number,
                **summary.to_dict(),
            })

        return {
            "classInfo": {
                "name": class_.name,
                "year": class_.year,
                "teacher": class_.teacher.user.full_name if class_.teacher else "No teacher assigned",
            },
            "reportPeriod": {
                "startDate": iso_date(start) or "All time",
                "endDate": iso_date(end) or "All time",
            },
            "classSummary": {
                "totalStudents": len(students),
                "totalPossibleAttendance": totals.total_days,
                "totalPresent": totals.present_days,
                "totalAbsent": totals.absent_days,
                "totalLate": totals.late_days,
                "classAttendancePercentage": percent_text(
                    totals.attendance_percentage, totals.total_days > 0
                ),
            },
            "studentReports": reports,
        }
