from sqlalchemy import Column, Integer, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base

class ParentProfile(Base):
    __tablename__ = "parents"

    id = Column(Integer, primary_key=True, index=True)                      # 학부모 고유 ID (PK)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    user = relationship("User")
    children = relationship("Student", back_populates="parent")
