from sqlalchemy import (
    Column, Integer, Float, String, DateTime, Enum, ForeignKey, UniqueConstraint, func,
)
from sqlalchemy.orm import relationship
from database.db import Base
from models.enums import Term

class ScoreEntry(Base):
    __tablename__ = "scores"  # 학생/과목/학기/연도당 점수 1건
    __table_args__ = (
        UniqueConstraint("student_id", "subject_id", "term", "year", name="uq_score_student_subject_term"),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False)
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=False)
    term = Column(Enum(Term), nullable=False)
    year = Column(Integer, nullable=False)
    score = Column(Float, nullable=False)
    max_score = Column(Float, nullable=False, default=100)
    grade = Column(String(2), nullable=False)             # 저장 시 score/max_score 로 산출
    comments = Column(String(500))
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    student = relationship("Student")
    subject = relationship("Subject")
    teacher = relationship("TeacherProfile")
