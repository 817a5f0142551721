from sqlalchemy import Column, Integer, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base

class TeacherProfile(Base):
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, index=True)                      # 교사 고유 ID (PK)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    user = relationship("User")

    # ✅ 이 교사가 담임인 학급들 (1:N)
    classes = relationship("Class", back_populates="teacher")
