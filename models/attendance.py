from sqlalchemy import Column, Integer, Date, DateTime, Enum, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from database.db import Base
from models.enums import AttendanceStatus

class AttendanceMark(Base):
    __tablename__ = "attendance"  # 일별 출결 기록 테이블
    __table_args__ = (
        UniqueConstraint("student_id", "date", name="uq_attendance_student_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)    # 출결 당시 소속 반
    date = Column(Date, nullable=False)
    status = Column(Enum(AttendanceStatus), nullable=False)                 # PRESENT / ABSENT / LATE
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    student = relationship("Student")
