"""
database/store.py

RecordStore: 서비스 계층이 사용하는 저장소 인터페이스.

- SQLAlchemy Session 하나를 감쌈 (요청당 1개, get_store 참고).
- 조회: 키로 단건 조회, 조건으로 목록 조회.
- 쓰기: 자연키 기준 원자적 insert-or-update. 같은 (student, date) 또는
  (student, subject, term, year) 에 동시에 쓰면 DB 안에서 마지막 쓰기가 남음.
"""

import logging
from contextlib import contextmanager
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from fastapi import Depends
from sqlalchemy import func, or_, select
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from database.db import get_db
from models.attendance import AttendanceMark
from models.classes import Class
from models.enums import AttendanceStatus, Role, Term
from models.parents import ParentProfile
from models.scores import ScoreEntry
from models.students import Student
from models.subjects import Subject
from models.teachers import TeacherProfile
from models.users import User
from utils.errors import StorageError

logger = logging.getLogger(__name__)


class RecordStore:
    def __init__(self, db: Session):
        self.db = db

    # ==========================================================
    # [트랜잭션]
    # ==========================================================
    @contextmanager
    def transaction(self):
        """블록 안의 쓰기를 모두 커밋하거나, 실패 시 모두 롤백"""
        try:
            yield self
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("store transaction rolled back: %s", exc)
            raise StorageError("Storage operation failed") from exc
        except Exception:
            self.db.rollback()
            raise

    # ==========================================================
    # [조회] 키로 단건 조회
    # ==========================================================
    def get_student(self, student_id: int) -> Optional[Student]:
        return (
            self.db.query(Student)
            .options(
                joinedload(Student.user),
                joinedload(Student.class_).joinedload(Class.teacher).joinedload(TeacherProfile.user),
                joinedload(Student.parent).joinedload(ParentProfile.user),
            )
            .filter(Student.id == student_id)
            .first()
        )

    def get_class(self, class_id: int) -> Optional[Class]:
        return (
            self.db.query(Class)
            .options(joinedload(Class.teacher).joinedload(TeacherProfile.user))
            .filter(Class.id == class_id)
            .first()
        )

    def get_subject(self, subject_id: int) -> Optional[Subject]:
        return self.db.query(Subject).filter(Subject.id == subject_id).first()

    def get_teacher(self, teacher_id: int) -> Optional[TeacherProfile]:
        return self.db.query(TeacherProfile).filter(TeacherProfile.id == teacher_id).first()

    def get_parent_for_user(self, user_id: int) -> Optional[ParentProfile]:
        return self.db.query(ParentProfile).filter(ParentProfile.user_id == user_id).first()

    def get_students(self, student_ids: Iterable[int]) -> List[Student]:
        ids = list(set(student_ids))
        if not ids:
            return []
        return self.db.query(Student).filter(Student.id.in_(ids)).all()

    # ==========================================================
    # [조회] 조건으로 목록 조회
    # ==========================================================
    def list_students(self, class_id: int) -> List[Student]:
        """한 반의 학생 목록 (이름, id 순)"""
        return (
            self.db.query(Student)
            .join(User, Student.user_id == User.id)
            .options(joinedload(Student.user))
            .filter(Student.class_id == class_id)
            .order_by(User.first_name, Student.id)
            .all()
        )

    def list_attendance(
        self,
        student_ids: Iterable[int],
        start: Optional[date] = None,
        end: Optional[date] = None,
        on_date: Optional[date] = None,
        newest_first: bool = False,
        limit: Optional[int] = None,
    ) -> List[AttendanceMark]:
        ids = list(student_ids)
        if not ids:
            return []
        query = self.db.query(AttendanceMark).filter(AttendanceMark.student_id.in_(ids))
        if on_date is not None:
            query = query.filter(AttendanceMark.date == on_date)
        if start is not None:
            query = query.filter(AttendanceMark.date >= start)
        if end is not None:
            query = query.filter(AttendanceMark.date <= end)
        order = AttendanceMark.date.desc() if newest_first else AttendanceMark.date.asc()
        query = query.order_by(order, AttendanceMark.id)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def list_scores(self, student_ids: Iterable[int], term: Term, year: int) -> List[ScoreEntry]:
        """주어진 학생들의 한 학기 점수 (과목명 순)"""
        ids = list(student_ids)
        if not ids:
            return []
        return (
            self.db.query(ScoreEntry)
            .join(Subject, ScoreEntry.subject_id == Subject.id)
            .options(
                joinedload(ScoreEntry.subject),
                joinedload(ScoreEntry.teacher).joinedload(TeacherProfile.user),
            )
            .filter(ScoreEntry.student_id.in_(ids))
            .filter(ScoreEntry.term == term, ScoreEntry.year == year)
            .order_by(Subject.name, ScoreEntry.id)
            .all()
        )

    # ==========================================================
    # [조회] 학생 / 사용자 목록
    # ==========================================================
    def get_student_by_number(self, student_number: str) -> Optional[Student]:
        student = self.db.query(Student).filter(Student.student_number == student_number).first()
        return self.get_student(student.id) if student else None

    def search_students(
        self,
        class_id: Optional[int] = None,
        year: Optional[int] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[Student], int]:
        """학생 한 페이지와 전체 건수 (최근 생성 계정 순)"""
        query = self.db.query(Student).join(User, Student.user_id == User.id)
        if class_id is not None:
            query = query.filter(Student.class_id == class_id)
        if year is not None:
            query = query.filter(Student.year == year)
        if search:
            pattern = f"%{search.lower()}%"
            query = query.filter(or_(
                func.lower(Student.student_number).like(pattern),
                func.lower(User.first_name).like(pattern),
                func.lower(User.last_name).like(pattern),
                func.lower(User.email).like(pattern),
            ))
        total = query.count()
        rows = (
            query.options(joinedload(Student.user), joinedload(Student.class_))
            .order_by(User.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return rows, total

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(func.lower(User.email) == email.lower()).first()

    def get_teacher_for_user(self, user_id: int) -> Optional[TeacherProfile]:
        return self.db.query(TeacherProfile).filter(TeacherProfile.user_id == user_id).first()

    def get_student_for_user(self, user_id: int) -> Optional[Student]:
        return self.db.query(Student).filter(Student.user_id == user_id).first()

    def search_users(
        self,
        role: Optional[Role] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[User], int]:
        query = self.db.query(User)
        if role is not None:
            query = query.filter(User.role == role)
        if search:
            pattern = f"%{search.lower()}%"
            query = query.filter(or_(
                func.lower(User.first_name).like(pattern),
                func.lower(User.last_name).like(pattern),
                func.lower(User.email).like(pattern),
            ))
        total = query.count()
        rows = query.order_by(User.id.desc()).offset(offset).limit(limit).all()
        return rows, total

    def count_users_by_role(self) -> Dict[Role, int]:
        rows = self.db.query(User.role, func.count(User.id)).group_by(User.role).all()
        return {Role(role): count for role, count in rows}

    def count_teacher_scores(self, teacher_id: int) -> int:
        return self.db.query(ScoreEntry).filter(ScoreEntry.teacher_id == teacher_id).count()

    # ==========================================================
    # [쓰기] 자연키 기준 원자적 upsert
    # ==========================================================
    def _insert(self, model):
        dialect = self.db.get_bind().dialect.name
        if dialect == "sqlite":
            return sqlite.insert(model)
        if dialect == "postgresql":
            return postgresql.insert(model)
        if dialect in ("mysql", "mariadb"):
            return mysql.insert(model)
        raise StorageError(f"Atomic upsert is not supported on '{dialect}'")

    def _upsert(self, model, key: dict, values: dict):
        stmt = self._insert(model).values(**key, **values)
        if hasattr(stmt, "on_conflict_do_update"):
            stmt = stmt.on_conflict_do_update(index_elements=list(key), set_=values)
        else:
            stmt = stmt.on_duplicate_key_update(**values)
        try:
            self.db.execute(stmt)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("upsert into %s failed for %s: %s", model.__tablename__, key, exc)
            raise StorageError(f"Failed to write {model.__tablename__} record") from exc

        # DB에 실제 저장된 값을 다시 읽어서 반환
        conditions = [getattr(model, name) == value for name, value in key.items()]
        return self.db.execute(
            select(model).where(*conditions).execution_options(populate_existing=True)
        ).scalar_one()

    def put_attendance(
        self, student_id: int, day: date, class_id: int, status: AttendanceStatus
    ) -> AttendanceMark:
        return self._upsert(
            AttendanceMark,
            {"student_id": student_id, "date": day},
            {"class_id": class_id, "status": status, "updated_at": func.now()},
        )

    def put_score(
        self,
        student_id: int,
        subject_id: int,
        term: Term,
        year: int,
        *,
        teacher_id: int,
        score: float,
        max_score: float,
        grade: str,
        comments: Optional[str] = None,
    ) -> ScoreEntry:
        return self._upsert(
            ScoreEntry,
            {"student_id": student_id, "subject_id": subject_id, "term": term, "year": year},
            {
                "teacher_id": teacher_id,
                "score": score,
                "max_score": max_score,
                "grade": grade,
                "comments": comments,
                "updated_at": func.now(),
            },
        )

    # ==========================================================
    # [쓰기] CRUD 용 단순 insert / delete
    # ==========================================================
    def add(self, obj):
        self.db.add(obj)
        try:
            self.db.flush()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("insert of %s failed: %s", type(obj).__name__, exc)
            raise StorageError(f"Failed to write {type(obj).__name__}") from exc
        return obj

    def delete(self, obj):
        self.db.delete(obj)

    def delete_student(self, student: Student):
        """학생과 출결, 점수, 계정을 함께 삭제"""
        self.db.query(AttendanceMark).filter(AttendanceMark.student_id == student.id).delete(
            synchronize_session=False
        )
        self.db.query(ScoreEntry).filter(ScoreEntry.student_id == student.id).delete(synchronize_session=False)
        account = student.user
        self.db.delete(student)
        if account is not None:
            self.db.delete(account)


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    return RecordStore(db)
