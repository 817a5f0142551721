from sqlalchemy import Column, Integer, String, Date, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base

class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)                       # 고유 학생 ID (Primary Key)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    student_number = Column(String(50), unique=True, nullable=False)         # 학교에서 부여한 학번
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)     # 소속 반 ID
    year = Column(Integer, nullable=False)                                   # 학년도
    date_of_birth = Column(Date)
    gender = Column(String(10))
    parent_id = Column(Integer, ForeignKey("parents.id"))                    # 학부모 (선택)

    user = relationship("User")
    class_ = relationship("Class", back_populates="students")
    parent = relationship("ParentProfile", back_populates="children")

    @property
    def full_name(self) -> str:
        return self.user.full_name if self.user else f"Student {self.id}"
