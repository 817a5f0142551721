from datetime import date

import pytest

from models.attendance import AttendanceMark
from models.enums import AttendanceStatus, Term
from models.scores import ScoreEntry
from services.attendance import AttendanceService
from services.scores import ScoreService
from utils.errors import ConflictError, NotFoundError, ValidationError

DAY = date(2025, 9, 15)


def test_marking_twice_keeps_one_record_with_latest_status(store, db, school):
    service = AttendanceService(store)
    student = school.students[0]

    first = service.mark(student.id, school.klass.id, DAY, "PRESENT")
    second = service.mark(student.id, school.klass.id, DAY, "LATE")

    rows = db.query(AttendanceMark).filter(AttendanceMark.student_id == student.id).all()
    assert len(rows) == 1
    assert rows[0].status == AttendanceStatus.LATE
    assert first["id"] == second["id"]
    assert second["status"] == "LATE"


def test_mark_rejects_unknown_status(store, school):
    with pytest.raises(ValidationError):
        AttendanceService(store).mark(school.students[0].id, school.klass.id, DAY, "EXCUSED")


def test_mark_rejects_student_outside_class(store, db, school):
    with pytest.raises(ConflictError):
        AttendanceService(store).mark(school.outsider.id, school.klass.id, DAY, "PRESENT")
    assert db.query(AttendanceMark).count() == 0


def test_mark_unknown_student(store, school):
    with pytest.raises(NotFoundError):
        AttendanceService(store).mark(9999, school.klass.id, DAY, "PRESENT")


def test_mark_unknown_class(store, db, school):
    with pytest.raises(NotFoundError) as excinfo:
        AttendanceService(store).mark(school.students[0].id, 9999, DAY, "PRESENT")
    assert excinfo.value.message == "Class not found"
    assert db.query(AttendanceMark).count() == 0


def test_bulk_marking_records_every_row(store, db, school):
    rows = [
        {"studentId": school.students[0].id, "status": "PRESENT"},
        {"studentId": school.students[1].id, "status": "ABSENT"},
        {"studentId": school.students[2].id, "status": "LATE"},
    ]
    marks = AttendanceService(store).mark_bulk(school.klass.id, DAY, rows)

    assert [m["status"] for m in marks] == ["PRESENT", "ABSENT", "LATE"]
    assert db.query(AttendanceMark).filter(AttendanceMark.date == DAY).count() == 3


def test_bulk_marking_writes_nothing_when_any_row_is_invalid(store, db, school):
    rows = [
        {"studentId": school.students[0].id, "status": "PRESENT"},
        {"studentId": school.outsider.id, "status": "PRESENT"},
        {"studentId": school.students[2].id, "status": "HOLIDAY"},
        {"studentId": 9999, "status": "ABSENT"},
    ]
    with pytest.raises(ValidationError) as excinfo:
        AttendanceService(store).mark_bulk(school.klass.id, DAY, rows)

    failing = {row["index"]: row["error"] for row in excinfo.value.details}
    assert sorted(failing) == [1, 2, 3]
    assert failing[1] == "Student does not belong to this class"
    assert failing[3] == "Student not found"
    assert db.query(AttendanceMark).count() == 0


def test_bulk_marking_unknown_class(store, school):
    with pytest.raises(NotFoundError):
        AttendanceService(store).mark_bulk(9999, DAY, [])


def test_bulk_remark_overwrites_previous_marks(store, db, school):
    service = AttendanceService(store)
    student = school.students[1]
    service.mark(student.id, school.klass.id, DAY, "ABSENT")
    service.mark_bulk(school.klass.id, DAY, [{"studentId": student.id, "status": "PRESENT"}])

    rows = db.query(AttendanceMark).filter(AttendanceMark.student_id == student.id).all()
    assert [r.status for r in rows] == [AttendanceStatus.PRESENT]


def test_score_entry_derives_grade_and_is_idempotent(store, db, school):
    service = ScoreService(store)
    args = (school.students[0].id, school.math.id, school.teacher.id, "FIRST", 2025)

    first = service.enter(*args, score=72)
    second = service.enter(*args, score=45, max_score=50, comments="Much improved")

    rows = db.query(ScoreEntry).all()
    assert len(rows) == 1
    assert first["grade"] == "C"
    assert second["id"] == first["id"]
    assert second["grade"] == "A"
    assert rows[0].score == 45
    assert rows[0].max_score == 50
    assert rows[0].comments == "Much improved"
    assert rows[0].term == Term.FIRST


def test_score_entry_defaults_max_score_to_100(store, school):
    entry = ScoreService(store).enter(
        school.students[0].id, school.english.id, school.teacher.id, "SECOND", 2025, score=60
    )
    assert entry["maxScore"] == 100
    assert entry["grade"] == "D"


@pytest.mark.parametrize("score, max_score", [(-1, 100), (101, 100), (30, 25), (10, 0)])
def test_score_entry_rejects_out_of_range(store, db, school, score, max_score):
    with pytest.raises(ValidationError):
        ScoreService(store).enter(
            school.students[0].id, school.math.id, school.teacher.id, "FIRST", 2025,
            score=score, max_score=max_score,
        )
    assert db.query(ScoreEntry).count() == 0


def test_score_entry_rejects_unknown_term(store, school):
    with pytest.raises(ValidationError):
        ScoreService(store).enter(
            school.students[0].id, school.math.id, school.teacher.id, "FOURTH", 2025, score=50
        )


@pytest.mark.parametrize("missing", ["student", "subject", "teacher"])
def test_score_entry_unknown_references(store, school, missing):
    ids = {
        "student_id": school.students[0].id,
        "subject_id": school.math.id,
        "teacher_id": school.teacher.id,
    }
    ids[f"{missing}_id"] = 9999
    with pytest.raises(NotFoundError):
        ScoreService(store).enter(**ids, term="FIRST", year=2025, score=50)


@pytest.mark.parametrize(
    "score, max_score",
    [(float("nan"), 100), (50, float("nan")), (50, float("inf")), (float("inf"), float("inf"))],
)
def test_score_entry_rejects_non_finite_values(store, db, school, score, max_score):
    with pytest.raises(ValidationError):
        ScoreService(store).enter(
            school.students[0].id, school.math.id, school.teacher.id, "FIRST", 2025,
            score=score, max_score=max_score,
        )
    assert db.query(ScoreEntry).count() == 0
