from sqlalchemy import Column, Integer, String
from database.db import Base

class Subject(Base):
    __tablename__ = "subjects"

    id = Column(Integer, primary_key=True, index=True)         # 과목 고유 ID (PK)
    name = Column(String(100), nullable=False)                # 과목명 (예: Mathematics)
    code = Column(String(20), unique=True, nullable=False)    # 과목 코드 (예: MTH)
