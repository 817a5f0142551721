from typing import Optional
from pydantic import BaseModel, Field

# ✅ 입력 (POST)
class ClassCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)     # 학급 이름
    year: int                                                # 학년도
    teacherId: Optional[int] = None                          # 담임 교사
