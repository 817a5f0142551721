from typing import Optional

from pydantic import BaseModel, Field

from models.enums import Term


class EnterScoreRequest(BaseModel):
    studentId: int
    subjectId: int
    teacherId: int
    term: Term                                      # FIRST / SECOND / THIRD
    year: int = Field(..., ge=1900, le=2200)
    # 범위 검사 (0 <= score <= maxScore) 는 ScoreService.enter 에서 수행
    score: float = Field(..., allow_inf_nan=False)
    maxScore: Optional[float] = Field(default=None, allow_inf_nan=False)    # 기본값 100
    comments: Optional[str] = Field(default=None, max_length=500)
