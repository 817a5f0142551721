from sqlalchemy import Column, Integer, String, Enum
from database.db import Base
from models.enums import Role

class User(Base):
    __tablename__ = "users"  # 사용자 계정 테이블

    id = Column(Integer, primary_key=True, index=True)          # 사용자 고유 ID (PK)
    email = Column(String(120), unique=True, nullable=False)    # 로그인 이메일
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(20))
    role = Column(Enum(Role), nullable=False)                   # 역할: ADMIN / TEACHER / STUDENT / PARENT

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
