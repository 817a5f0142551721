from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base

class Class(Base):
    __tablename__ = "classes"

    id = Column(Integer, primary_key=True, index=True)      # 학급 고유 ID (PK)
    name = Column(String(100), nullable=False)              # 학급 이름 (예: "JSS 1A")
    year = Column(Integer, nullable=False)                  # 학년도

    # ==========================================================
    # [관계 설정]
    # ==========================================================

    # ✅ 담임 교사 (N:1), 없을 수 있음
    teacher_id = Column(Integer, ForeignKey("teachers.id"))
    teacher = relationship("TeacherProfile", back_populates="classes")

    # ✅ 이 학급에 속한 학생들 (1:N)
    students = relationship("Student", back_populates="class_")
