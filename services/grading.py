"""등급 정책: 점수 → 등급, 등급 → 가중치, 석차 서수 접미사"""

from models.enums import Letter
from utils.errors import ValidationError

# (하한 퍼센트, 등급) 위에서부터 순서대로 비교
GRADE_BANDS = (
    (90, Letter.A),
    (80, Letter.B),
    (70, Letter.C),
    (60, Letter.D),
)

RANK_WEIGHTS = {
    Letter.A: 5,
    Letter.B: 4,
    Letter.C: 3,
    Letter.D: 2,
    Letter.F: 1,
}


def percentage(score: float, max_score: float = 100) -> float:
    if max_score <= 0:
        raise ValidationError(f"max_score must be greater than 0 (got {max_score})")
    return score / max_score * 100


def grade(score: float, max_score: float = 100) -> Letter:
    pct = percentage(score, max_score)
    for lower, letter in GRADE_BANDS:
        if pct >= lower:
            return letter
    return Letter.F


def rank_weight(letter) -> int:
    """등급별 가중치 (A-F 이외의 값은 0)"""
    try:
        return RANK_WEIGHTS[Letter(letter)]
    except ValueError:
        return 0


def position_suffix(position: int) -> str:
    # 11, 12, 13 (그리고 111, 112, ...) 은 항상 "th"
    if position % 100 in (11, 12, 13):
        return f"{position}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(position % 10, "th")
    return f"{position}{suffix}"
