import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from config.settings import settings
from database.store import RecordStore, get_store
from dependencies.security import CurrentUser, require_admin, require_teacher
from models.enums import AttendanceStatus, Role
from models.parents import ParentProfile
from models.students import Student as StudentModel
from models.users import User as UserModel
from schemas.common import ok, pagination
from schemas.students import StudentCreate, StudentUpdate
from services.attendance import AttendanceService
from utils.errors import ConflictError, NotFoundError
from utils.formatting import iso_date

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/students", tags=["students"])

# 학번 조회 시 recentAttendance 에 보여줄 최근 출결 개수
RECENT_MARKS = 5


def _student_dict(s: StudentModel) -> dict:
    return {
        "id": s.id,
        "name": s.full_name,
        "email": s.user.email if s.user else None,
        "studentNumber": s.student_number,
        "classId": s.class_id,
        "className": s.class_.name if s.class_ else None,
        "year": s.year,
        "dateOfBirth": iso_date(s.date_of_birth),
        "gender": s.gender,
        "parentId": s.parent_id,
    }


def _get_or_404(store: RecordStore, student_id: int) -> StudentModel:
    student = store.get_student(student_id)
    if student is None:
        raise NotFoundError("Student not found", details={"studentId": student_id})
    return student


def _check_references(store: RecordStore, class_id: Optional[int], parent_id: Optional[int]):
    if class_id is not None and store.get_class(class_id) is None:
        raise NotFoundError("Class not found", details={"classId": class_id})
    if parent_id is not None and store.db.get(ParentProfile, parent_id) is None:
        raise NotFoundError("Parent not found", details={"parentId": parent_id})


# ✅ [READ] 페이지 목록 (반 / 연도 / 검색어 필터)
@router.get("/")
def read_students(
    classId: Optional[int] = None,
    year: Optional[int] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    store: RecordStore = Depends(get_store),
    user: CurrentUser = Depends(require_teacher),
):
    rows, total = store.search_students(
        class_id=classId, year=year, search=search, offset=(page - 1) * limit, limit=limit
    )
    return ok({"students": [_student_dict(s) for s in rows], "pagination": pagination(total, page, limit)})


# ✅ [READ] 학번으로 학생 프로필 조회
@router.get("/search/{student_number}")
def search_student(
    student_number: str,
    store: RecordStore = Depends(get_store),
    user: CurrentUser = Depends(require_teacher),
):
    student = store.get_student_by_number(student_number)
    if student is None:
        raise NotFoundError("Student not found", details={"studentNumber": student_number})

    summary = AttendanceService(store).recent_summary(student.id, settings.REPORT_ATTENDANCE_WINDOW)
    recent = store.list_attendance([student.id], newest_first=True, limit=RECENT_MARKS)
    class_ = student.class_
    teacher = class_.teacher if class_ else None
    parent = student.parent

    return ok({
        "studentInfo": {
            "id": student.id,
            "studentId": student.student_number,
            "fullName": student.full_name,
            "gender": student.gender,
            "dateOfBirth": iso_date(student.date_of_birth),
            "class": class_.name if class_ else None,
            "year": student.year,
        },
        "contactInfo": {
            "email": student.user.email,
            "phone": student.user.phone,
            "parentContact": {
                "name": parent.user.full_name,
                "phone": parent.user.phone,
                "email": parent.user.email,
            } if parent else None,
        },
        "attendanceSummary": {
            **summary.to_dict(),
            "recentAttendance": [
                {"date": iso_date(m.date), "status": AttendanceStatus(m.status).value} for m in recent
            ],
        },
        "classInfo": {
            "className": class_.name if class_ else None,
            "classTeacher": {
                "name": teacher.user.full_name,
                "email": teacher.user.email,
                "phone": teacher.user.phone,
            } if teacher else None,
        },
    })


# ✅ [CREATE] 사용자 계정 + 학생 프로필을 한 트랜잭션으로 생성
@router.post("/", status_code=201)
def create_student(
    body: StudentCreate,
    store: RecordStore = Depends(get_store),
    user: CurrentUser = Depends(require_admin),
):
    db = store.db
    if db.query(StudentModel).filter(StudentModel.student_number == body.studentNumber).first():
        raise ConflictError("Student ID already exists", details={"studentNumber": body.studentNumber})
    if store.get_user_by_email(body.email):
        raise ConflictError("Email already exists", details={"email": body.email})
    _check_references(store, body.classId, body.parentId)

    with store.transaction():
        account = store.add(UserModel(
            email=body.email.strip().lower(),
            first_name=body.firstName,
            last_name=body.lastName,
            phone=body.phone,
            role=Role.STUDENT,
        ))
        student = store.add(StudentModel(
            user_id=account.id,
            student_number=body.studentNumber,
            class_id=body.classId,
            year=body.year,
            date_of_birth=body.dateOfBirth,
            gender=body.gender,
            parent_id=body.parentId,
        ))
    logger.info("student created: id=%s number=%s", student.id, student.student_number)
    return ok(_student_dict(student), "Student created successfully")


# ✅ [READ] 학생 단건 조회
@router.get("/{student_id}")
def read_student(
    student_id: int,
    store: RecordStore = Depends(get_store),
    user: CurrentUser = Depends(require_teacher),
):
    return ok(_student_dict(_get_or_404(store, student_id)))


# ✅ [UPDATE] 전달된 필드만 수정
@router.put("/{student_id}")
def update_student(
    student_id: int,
    body: StudentUpdate,
    store: RecordStore = Depends(get_store),
    user: CurrentUser = Depends(require_admin),
):
    student = _get_or_404(store, student_id)
    changes = body.model_dump(exclude_none=True)

    if "email" in changes:
        other = store.get_user_by_email(changes["email"])
        if other is not None and other.id != student.user_id:
            raise ConflictError("Email already exists", details={"email": changes["email"]})
    _check_references(store, changes.get("classId"), changes.get("parentId"))

    account_fields = {"email": "email", "firstName": "first_name", "lastName": "last_name", "phone": "phone"}
    profile_fields = {
        "dateOfBirth": "date_of_birth",
        "gender": "gender",
        "classId": "class_id",
        "year": "year",
        "parentId": "parent_id",
    }
    with store.transaction():
        for key, value in changes.items():
            if key in account_fields:
                if key == "email":
                    value = value.strip().lower()
                setattr(student.user, account_fields[key], value)
            else:
                setattr(student, profile_fields[key], value)
    logger.info("student updated: id=%s fields=%s", student_id, sorted(changes))
    return ok(_student_dict(_get_or_404(store, student_id)), "Student updated successfully")


# ✅ [DELETE] 프로필, 계정, 출결, 점수를 함께 삭제
@router.delete("/{student_id}")
def delete_student(
    student_id: int,
    store: RecordStore = Depends(get_store),
    user: CurrentUser = Depends(require_admin),
):
    student = _get_or_404(store, student_id)
    with store.transaction():
        store.delete_student(student)
    logger.info("student deleted: id=%s", student_id)
    return ok({"studentId": student_id}, "Student deleted successfully")
