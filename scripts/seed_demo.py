from datetime import date

from database.db import SessionLocal
from database.store import RecordStore
from models.classes import Class
from models.enums import Role
from models.students import Student
from models.subjects import Subject
from models.teachers import TeacherProfile
from models.users import User

DEMO_CLASS = ("Grade 5A", 2025)
DEMO_TEACHER = ("teacher@school.com", "John", "Teacher", "+23276654321")
DEMO_SUBJECTS = (("Mathematics", "MATH"), ("English Language", "ENG"), ("Basic Science", "SCI"))


def _get_or_add_user(store: RecordStore, email, first, last, phone, role) -> User:
    user = store.get_user_by_email(email)
    if user is None:
        user = store.add(User(email=email, first_name=first, last_name=last, phone=phone, role=role))
    return user


def seed_demo(store: RecordStore) -> dict:
    """
    데모용 학급 (담임 교사, 학생 3명, 과목 몇 개) 을 생성하거나 찾아서 반환.
    다시 실행해도 변경 없음.
    """
    db = store.db
    with store.transaction():
        klass = db.query(Class).filter(Class.name == DEMO_CLASS[0], Class.year == DEMO_CLASS[1]).first()
        if klass is None:
            klass = store.add(Class(name=DEMO_CLASS[0], year=DEMO_CLASS[1]))

        email, first, last, phone = DEMO_TEACHER
        teacher_user = _get_or_add_user(store, email, first, last, phone, Role.TEACHER)
        teacher = store.get_teacher_for_user(teacher_user.id) or store.add(TeacherProfile(user_id=teacher_user.id))
        if klass.teacher_id is None:
            klass.teacher_id = teacher.id

        students = []
        for i in range(1, 4):
            account = _get_or_add_user(
                store, f"student{i}@school.com", f"Student{i}", "Test", f"+2327698765{i}", Role.STUDENT
            )
            student = store.get_student_for_user(account.id) or store.get_student_by_number(f"STU00{i}")
            if student is None:
                student = store.add(Student(
                    user_id=account.id,
                    student_number=f"STU00{i}",
                    class_id=klass.id,
                    year=DEMO_CLASS[1],
                    date_of_birth=date(2010, 1, 1),
                    gender="FEMALE" if i % 2 == 0 else "MALE",
                ))
            students.append(student)

        subjects = []
        for name, code in DEMO_SUBJECTS:
            subject = db.query(Subject).filter(Subject.code == code).first()
            if subject is None:
                subject = store.add(Subject(name=name, code=code))
            subjects.append(subject)

    return {
        "classId": klass.id,
        "teacherId": teacher.id,
        "students": [
            {"id": s.id, "name": s.full_name, "studentId": s.student_number, "classId": s.class_id}
            for s in students
        ],
        "subjects": [{"id": s.id, "name": s.name, "code": s.code} for s in subjects],
    }


if __name__ == "__main__":
    db = SessionLocal()
    try:
        ids = seed_demo(RecordStore(db))
    finally:
        db.close()
    print(f"✅ demo data ready: class={ids['classId']} teacher={ids['teacherId']}")
    for s in ids["students"]:
        print(f"   - {s['studentId']} {s['name']} (id={s['id']})")
