from datetime import date
from typing import Optional
from pydantic import BaseModel, Field

# ✅ 입력 (POST): 계정 정보 + 학생 프로필
class StudentCreate(BaseModel):
    email: str = Field(..., min_length=3, max_length=120)
    firstName: str = Field(..., min_length=1, max_length=100)
    lastName: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = None
    studentNumber: str = Field(..., min_length=1, max_length=50)    # 학교에서 부여한 학번
    dateOfBirth: date
    gender: str
    classId: int
    year: int
    parentId: Optional[int] = None


# ✅ 입력 (PUT): 모든 필드 선택, 전달된 필드만 반영
class StudentUpdate(BaseModel):
    email: Optional[str] = Field(default=None, min_length=3, max_length=120)
    firstName: Optional[str] = Field(default=None, min_length=1, max_length=100)
    lastName: Optional[str] = Field(default=None, min_length=1, max_length=100)
    phone: Optional[str] = None
    dateOfBirth: Optional[date] = None
    gender: Optional[str] = None
    classId: Optional[int] = None
    year: Optional[int] = None
    parentId: Optional[int] = None
