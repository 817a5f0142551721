"""
services/ranking.py

반 학생들을 평균 기준으로 정렬하고 반 전체 통계를 계산.

동점자를 같은 석차로 묶지 않음: 평균이 같으면 입력 순서를 유지하고
연속된 석차를 받음.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from services.grading import rank_weight
from utils.formatting import round1


@dataclass
class CohortMember:
    student_id: int
    average: float
    overall_grade: str
    position: int = 0
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class CohortStatistics:
    class_average: float
    highest_score: float
    lowest_score: float
    grade_distribution: Dict[str, int]
    weighted_distribution: int
    total_students: int


def rank_cohort(members: Iterable[CohortMember]) -> List[CohortMember]:
    # sorted() 는 안정 정렬: reverse=True 여도 동점자는 입력 순서 유지
    ranked = sorted(members, key=lambda m: m.average, reverse=True)
    for index, member in enumerate(ranked, start=1):
        member.position = index
    return ranked


def cohort_statistics(ranked: List[CohortMember]) -> CohortStatistics:
    if not ranked:
        return CohortStatistics(0.0, 0, 0, {}, 0, 0)

    distribution = Counter(m.overall_grade for m in ranked)
    return CohortStatistics(
        class_average=round1(sum(m.average for m in ranked) / len(ranked)),
        highest_score=round1(ranked[0].average),
        lowest_score=round1(ranked[-1].average),
        grade_distribution=dict(distribution),
        weighted_distribution=sum(rank_weight(letter) * n for letter, n in distribution.items()),
        total_students=len(ranked),
    )


def position_of(ranked: List[CohortMember], student_id: int) -> Optional[int]:
    for member in ranked:
        if member.student_id == student_id:
            return member.position
    return None
