"""
services/scores.py

점수 집계 (학기 / 연도별, 학생 단위와 반 단위) 와
점수 입력 트랜잭션.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from config.settings import settings
from database.store import RecordStore
from models.enums import Term
from models.scores import ScoreEntry
from services.grading import grade
from services.ranking import CohortMember, cohort_statistics, rank_cohort
from utils.errors import NotFoundError, ValidationError
from utils.formatting import percent_text, round1

logger = logging.getLogger(__name__)


@dataclass
class ScoreSummary:
    subject_count: int
    total_score: float
    total_max_score: float

    @property
    def average(self) -> float:
        # 과목별 퍼센트의 평균이 아니라 전체 합계 기준 퍼센트
        if not self.total_max_score:
            return 0.0
        return self.total_score / self.total_max_score * 100

    @property
    def overall_grade(self) -> str:
        return grade(self.average).value

    def to_dict(self) -> dict:
        return {
            "totalSubjects": self.subject_count,
            "totalScore": self.total_score,
            "totalMaxScore": self.total_max_score,
            "average": percent_text(self.average, self.subject_count > 0),
            "overallGrade": self.overall_grade,
        }


def summarize_scores(entries: Iterable[ScoreEntry]) -> ScoreSummary:
    entries = list(entries)
    return ScoreSummary(
        subject_count=len(entries),
        total_score=sum(e.score for e in entries),
        total_max_score=sum(e.max_score for e in entries),
    )


def parse_term(value) -> Term:
    if isinstance(value, Term):
        return value
    try:
        return Term(str(value).upper())
    except ValueError:
        raise ValidationError("Term must be FIRST, SECOND, or THIRD", details={"term": value})


def score_dict(entry: ScoreEntry) -> dict:
    return {
        "id": entry.id,
        "studentId": entry.student_id,
        "subjectId": entry.subject_id,
        "teacherId": entry.teacher_id,
        "term": Term(entry.term).value,
        "year": entry.year,
        "score": entry.score,
        "maxScore": entry.max_score,
        "grade": entry.grade,
        "comments": entry.comments,
        "subject": entry.subject.name if entry.subject else None,
    }


class ScoreService:
    def __init__(self, store: RecordStore):
        self.store = store

    # ==========================================================
    # [트랜잭션] 점수 입력
    # ==========================================================
    def enter(
        self,
        student_id: int,
        subject_id: int,
        teacher_id: int,
        term,
        year: int,
        score: float,
        max_score: Optional[float] = None,
        comments: Optional[str] = None,
    ) -> dict:
        term = parse_term(term)
        if max_score is None:
            max_score = settings.DEFAULT_MAX_SCORE
        if not (math.isfinite(score) and math.isfinite(max_score)):
            raise ValidationError("Score and maxScore must be finite numbers")
        if max_score <= 0:
            raise ValidationError("maxScore must be greater than 0", details={"maxScore": max_score})
        if score < 0 or score > max_score:
            raise ValidationError(
                f"Score must be between 0 and {max_score:g}", details={"score": score, "maxScore": max_score}
            )

        if self.store.get_student(student_id) is None:
            raise NotFoundError("Student not found", details={"studentId": student_id})
        if self.store.get_subject(subject_id) is None:
            raise NotFoundError("Subject not found", details={"subjectId": subject_id})
        if self.store.get_teacher(teacher_id) is None:
            raise NotFoundError("Teacher not found", details={"teacherId": teacher_id})

        letter = grade(score, max_score).value
        with self.store.transaction():
            entry = self.store.put_score(
                student_id, subject_id, term, year,
                teacher_id=teacher_id,
                score=score,
                max_score=max_score,
                grade=letter,
                comments=comments,
            )
        logger.info(
            "score entered: student=%s subject=%s term=%s/%s score=%s/%s grade=%s",
            student_id, subject_id, term.value, year, score, max_score, letter,
        )
        return score_dict(entry)

    # ==========================================================
    # [집계] 조회
    # ==========================================================
    def student_scores(self, student_id: int, term, year: int) -> dict:
        term = parse_term(term)
        if self.store.get_student(student_id) is None:
            raise NotFoundError("Student not found", details={"studentId": student_id})

        entries = self.store.list_scores([student_id], term, year)
        return {
            "studentId": student_id,
            "term": term.value,
            "year": year,
            "scores": [score_dict(e) for e in entries],
            "summary": summarize_scores(entries).to_dict(),
        }

    def rank_class(self, class_id: int, term: Term, year: int) -> List[CohortMember]:
        """한 반의 석차 목록 (점수가 없는 학생은 평균 0 으로 포함)"""
        students = self.store.list_students(class_id)
        by_student: Dict[int, List[ScoreEntry]] = {s.id: [] for s in students}
        for entry in self.store.list_scores(list(by_student), term, year):
            by_student[entry.student_id].append(entry)

        members = []
        for student in students:
            entries = by_student[student.id]
            summary = summarize_scores(entries)
            members.append(CohortMember(
                student_id=student.id,
                average=summary.average,
                overall_grade=summary.overall_grade,
                extra={"student": student, "summary": summary, "entries": entries},
            ))
        return rank_cohort(members)

    def class_scores(self, class_id: int, term, year: int) -> dict:
        term = parse_term(term)
        if self.store.get_class(class_id) is None:
            raise NotFoundError("Class not found", details={"classId": class_id})

        ranked = self.rank_class(class_id, term, year)
        stats = cohort_statistics(ranked)

        pooled_score = sum(m.extra["summary"].total_score for m in ranked)
        pooled_max = sum(m.extra["summary"].total_max_score for m in ranked)
        pooled_average = pooled_score / pooled_max * 100 if pooled_max else 0.0

        results = []
        for member in ranked:
            student = member.extra["student"]
            summary = member.extra["summary"]
            results.append({
                "studentId": student.id,
                "studentName": student.full_name,
                "studentNumber": student.student_number,
                "totalScore": summary.total_score,
                "totalMaxScore": summary.total_max_score,
                "average": round1(member.average),
                "overallGrade": member.overall_grade,
                "subjectCount": summary.subject_count,
                "position": member.position,
                "scores": [score_dict(e) for e in member.extra["entries"]],
            })

        return {
            "classId": class_id,
            "term": term.value,
            "year": year,
            "totalStudents": stats.total_students,
            "classStatistics": {
                "classAverage": percent_text(stats.class_average, stats.total_students > 0),
                "pooledAverage": percent_text(pooled_average, pooled_max > 0),
                "gradeDistribution": stats.grade_distribution,
                "highestScore": stats.highest_score,
                "lowestScore": stats.lowest_score,
            },
            "studentResults": results,
        }
