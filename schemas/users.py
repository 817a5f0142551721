from typing import Optional
from pydantic import BaseModel, Field

from models.enums import Role

# ✅ 입력 (POST): 교직원 / 학부모 계정 (학생 계정은 /students 에서 생성)
class UserCreate(BaseModel):
    email: str = Field(..., min_length=3, max_length=120)
    firstName: str = Field(..., min_length=1, max_length=100)
    lastName: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)
    role: Role

# ✅ 입력 (PUT): 계정 정보만 (역할은 생성 시 고정)
class UserUpdate(BaseModel):
    email: Optional[str] = Field(default=None, min_length=3, max_length=120)
    firstName: Optional[str] = Field(default=None, min_length=1, max_length=100)
    lastName: Optional[str] = Field(default=None, min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)
