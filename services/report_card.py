"""
services/report_card.py

학생 정보, 점수 요약, 반 석차, 최근 출결 요약과 고정 평어를 모아
학기 성적표를 구성.
"""

import logging

from config.settings import settings
from database.store import RecordStore
from services.attendance import AttendanceService
from services.grading import position_suffix
from services.ranking import position_of
from services.scores import ScoreService, parse_term, summarize_scores
from utils.errors import NotFoundError
from utils.formatting import iso_date, now_iso

logger = logging.getLogger(__name__)

# ==========================================================
# [평어] 고정 문구 테이블
# ==========================================================
ACADEMIC_REMARKS = (
    (90, "Excellent performance! Keep up the outstanding work."),
    (80, "Very good performance. Continue working hard."),
    (70, "Good performance. There is room for improvement."),
    (60, "Satisfactory performance. More effort needed."),
)
ACADEMIC_FALLBACK = "Needs significant improvement. Please seek additional support."

ATTENDANCE_REMARKS = (
    (95, "Excellent attendance record."),
    (85, "Good attendance record."),
    (75, "Satisfactory attendance. Improvement needed."),
)
ATTENDANCE_FALLBACK = "Poor attendance. This affects academic performance."


def academic_remarks(average: float) -> str:
    for lower, text in ACADEMIC_REMARKS:
        if average >= lower:
            return text
    return ACADEMIC_FALLBACK


def attendance_remarks(attendance_percentage: float) -> str:
    for lower, text in ATTENDANCE_REMARKS:
        if attendance_percentage >= lower:
            return text
    return ATTENDANCE_FALLBACK


def general_remarks(average: float, attendance_percentage: float) -> str:
    if average >= 80 and attendance_percentage >= 90:
        return "Excellent student with strong academic performance and attendance."
    if average >= 70 and attendance_percentage >= 80:
        return "Good student showing consistent effort and attendance."
    if average < 60 or attendance_percentage < 75:
        return "Student needs additional support and improved attendance."
    return "Student showing steady progress. Continue encouraging effort."


class ReportCardService:
    def __init__(self, store: RecordStore, attendance_window: int = None):
        self.store = store
        self.scores = ScoreService(store)
        self.attendance = AttendanceService(store)
        self.attendance_window = attendance_window or settings.REPORT_ATTENDANCE_WINDOW

    def generate(self, student_id: int, term, year: int) -> dict:
        term = parse_term(term)
        student = self.store.get_student(student_id)
        if student is None:
            raise NotFoundError("Student not found", details={"studentId": student_id})

        entries = self.store.list_scores([student_id], term, year)
        summary = summarize_scores(entries)
        average = summary.average

        ranked = self.scores.rank_class(student.class_id, term, year)
        position = position_of(ranked, student_id)
        total_in_class = len(ranked)

        # 학기 기간과 무관하게 날짜 기준 최근 N건
        attendance = self.attendance.recent_summary(student_id, self.attendance_window)
        attendance_pct = attendance.attendance_percentage

        class_ = student.class_
        teacher = class_.teacher if class_ else None
        parent = student.parent

        logger.debug(
            "report card: student=%s term=%s/%s average=%.1f position=%s/%s",
            student_id, term.value, year, average, position, total_in_class,
        )

        return {
            "studentInfo": {
                "name": student.full_name,
                "studentId": student.student_number,
                "class": class_.name if class_ else None,
                "year": student.year,
                "dateOfBirth": iso_date(student.date_of_birth),
                "gender": student.gender,
            },
            "termInfo": {
                "term": term.value,
                "year": year,
                "generatedDate": now_iso(),
            },
            "classInfo": {
                "className": class_.name if class_ else None,
                "classTeacher": teacher.user.full_name if teacher else "Not assigned",
            },
            "parentInfo": {
                "name": parent.user.full_name,
                "phone": parent.user.phone,
                "email": parent.user.email,
            } if parent else None,
            "academicPerformance": {
                "subjects": [
                    {
                        "subject": e.subject.name,
                        "subjectCode": e.subject.code,
                        "score": e.score,
                        "maxScore": e.max_score,
                        "percentage": f"{e.score / e.max_score * 100:.1f}",
                        "grade": e.grade,
                        "teacher": e.teacher.user.full_name if e.teacher else None,
                        "comments": e.comments,
                    }
                    for e in entries
                ],
                "summary": {
                    "totalSubjects": summary.subject_count,
                    "totalScore": summary.total_score,
                    "totalMaxScore": summary.total_max_score,
                    "overallAverage": f"{average:.1f}",
                    "overallGrade": summary.overall_grade,
                    "classPosition": position,
                    "totalStudentsInClass": total_in_class,
                    "positionSuffix": position_suffix(position) if position else None,
                },
            },
            "attendanceSummary": attendance.to_dict(),
            "remarks": {
                "academicRemarks": academic_remarks(average),
                "attendanceRemarks": attendance_remarks(attendance_pct),
                "generalRemarks": general_remarks(average, attendance_pct),
            },
        }
