from datetime import date
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.db import Base, get_db
from database.store import RecordStore
from main import app
from models.classes import Class
from models.enums import Role
from models.parents import ParentProfile
from models.students import Student
from models.subjects import Subject
from models.teachers import TeacherProfile
from models.users import User
from utils.security import create_access_token


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return RecordStore(db)


def _user(db, email, first, last, role, phone=None):
    user = User(email=email, first_name=first, last_name=last, role=role, phone=phone)
    db.add(user)
    db.flush()
    return user


@pytest.fixture
def school(db):
    """담임 교사가 있는 학급 1개, 학생 3명 (첫 번째 학생은 학부모 있음), 과목 2개"""
    admin = _user(db, "admin@school.test", "Grace", "Admin", Role.ADMIN)
    teacher_user = _user(db, "okafor@school.test", "Ngozi", "Okafor", Role.TEACHER)
    parent_user = _user(db, "parent@school.test", "Tunde", "Bello", Role.PARENT, phone="08030000000")

    teacher = TeacherProfile(user_id=teacher_user.id)
    parent = ParentProfile(user_id=parent_user.id)
    db.add_all([teacher, parent])
    db.flush()

    klass = Class(name="JSS 1A", year=2025, teacher_id=teacher.id)
    other_class = Class(name="JSS 1B", year=2025)
    db.add_all([klass, other_class])
    db.flush()

    students = []
    for number, (first, last) in enumerate([("Ada", "Bello"), ("Ben", "Eze"), ("Chi", "Obi")], start=1):
        account = _user(db, f"{first.lower()}@school.test", first, last, Role.STUDENT)
        student = Student(
            user_id=account.id,
            student_number=f"STU-00{number}",
            class_id=klass.id,
            year=2025,
            date_of_birth=date(2012, number, 10),
            gender="F" if number != 2 else "M",
            parent_id=parent.id if number == 1 else None,
        )
        db.add(student)
        students.append(student)

    outsider_account = _user(db, "dan@school.test", "Dan", "Uche", Role.STUDENT)
    outsider = Student(
        user_id=outsider_account.id,
        student_number="STU-099",
        class_id=other_class.id,
        year=2025,
        gender="M",
    )
    db.add(outsider)

    math = Subject(name="Mathematics", code="MTH")
    english = Subject(name="English", code="ENG")
    db.add_all([math, english])
    db.commit()

    return SimpleNamespace(
        admin=admin,
        teacher=teacher,
        teacher_user=teacher_user,
        parent=parent,
        parent_user=parent_user,
        klass=klass,
        other_class=other_class,
        students=students,
        outsider=outsider,
        math=math,
        english=english,
    )


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}
    return _headers
