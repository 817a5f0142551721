import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from database.store import RecordStore, get_store
from dependencies.security import CurrentUser, require_admin
from models.enums import Role
from models.parents import ParentProfile
from models.teachers import TeacherProfile
from models.users import User as UserModel
from schemas.common import ok, pagination
from schemas.users import UserCreate, UserUpdate
from utils.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


def _profile(store: RecordStore, user: UserModel) -> Optional[dict]:
    if user.role == Role.TEACHER:
        teacher = store.get_teacher_for_user(user.id)
        return {"teacherId": teacher.id, "classIds": [c.id for c in teacher.classes]} if teacher else None
    if user.role == Role.PARENT:
        parent = store.get_parent_for_user(user.id)
        return {"parentId": parent.id, "childIds": [c.id for c in parent.children]} if parent else None
    if user.role == Role.STUDENT:
        student = store.get_student_for_user(user.id)
        return {"studentId": student.id, "studentNumber": student.student_number} if student else None
    return None


def _user_dict(user: UserModel, profile: Optional[dict] = None) -> dict:
    body = {
        "id": user.id,
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "name": user.full_name,
        "phone": user.phone,
        "role": Role(user.role).value,
    }
    if profile is not None:
        body["profile"] = profile
    return body


def _get_or_404(store: RecordStore, user_id: int) -> UserModel:
    user = store.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found", details={"userId": user_id})
    return user


# ✅ [READ] 페이지 목록 (역할 / 검색어 필터)
@router.get("/")
def read_users(
    role: Optional[Role] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    store: RecordStore = Depends(get_store),
    user: CurrentUser = Depends(require_admin),
):
    rows, total = store.search_users(role=role, search=search, offset=(page - 1) * limit, limit=limit)
    return ok({"users": [_user_dict(u) for u in rows], "pagination": pagination(total, page, limit)})


# ✅ [READ] 역할별 사용자 수
@router.get("/stats/overview")
def user_stats(store: RecordStore = Depends(get_store), user: CurrentUser = Depends(require_admin)):
    counts = store.count_users_by_role()
    return ok({
        "totalUsers": sum(counts.values()),
        "admins": counts.get(Role.ADMIN, 0),
        "teachers": counts.get(Role.TEACHER, 0),
        "students": counts.get(Role.STUDENT, 0),
        "parents": counts.get(Role.PARENT, 0),
    })


# ✅ [READ] 사용자 단건 + 역할 프로필
@router.get("/{user_id}")
def read_user(user_id: int, store: RecordStore = Depends(get_store), user: CurrentUser = Depends(require_admin)):
    account = _get_or_404(store, user_id)
    return ok(_user_dict(account, _profile(store, account)))


# ✅ [CREATE] 계정 + 교사 / 학부모 프로필 생성
@router.post("/", status_code=201)
def create_user(body: UserCreate, store: RecordStore = Depends(get_store), user: CurrentUser = Depends(require_admin)):
    if body.role == Role.STUDENT:
        raise ValidationError("Student accounts are created through /v1/students", details={"role": body.role.value})
    email = body.email.strip().lower()
    if store.get_user_by_email(email):
        raise ConflictError("Email already exists", details={"email": email})

    with store.transaction():
        account = store.add(UserModel(
            email=email,
            first_name=body.firstName.strip(),
            last_name=body.lastName.strip(),
            phone=body.phone.strip() if body.phone else None,
            role=body.role,
        ))
        if body.role == Role.TEACHER:
            store.add(TeacherProfile(user_id=account.id))
        elif body.role == Role.PARENT:
            store.add(ParentProfile(user_id=account.id))
    logger.info("user created: id=%s role=%s", account.id, body.role.value)
    return ok(_user_dict(account, _profile(store, account)), "User created successfully")


# ✅ [UPDATE] 계정 정보만 수정
@router.put("/{user_id}")
def update_user(
    user_id: int,
    body: UserUpdate,
    store: RecordStore = Depends(get_store),
    user: CurrentUser = Depends(require_admin),
):
    account = _get_or_404(store, user_id)
    changes = body.model_dump(exclude_none=True)
    if "email" in changes:
        changes["email"] = changes["email"].strip().lower()
        other = store.get_user_by_email(changes["email"])
        if other is not None and other.id != account.id:
            raise ConflictError("Email already exists", details={"email": changes["email"]})

    columns = {"email": "email", "firstName": "first_name", "lastName": "last_name", "phone": "phone"}
    with store.transaction():
        for key, value in changes.items():
            setattr(account, columns[key], value)
    logger.info("user updated: id=%s fields=%s", user_id, sorted(changes))
    return ok(_user_dict(account, _profile(store, account)), "User updated successfully")


# ✅ [DELETE] 계정과 프로필 삭제
@router.delete("/{user_id}")
def delete_user(user_id: int, store: RecordStore = Depends(get_store), user: CurrentUser = Depends(require_admin)):
    account = _get_or_404(store, user_id)
    role = Role(account.role)

    if role == Role.ADMIN and store.count_users_by_role().get(Role.ADMIN, 0) <= 1:
        raise ConflictError("Cannot delete the last admin user", details={"userId": user_id})

    teacher = store.get_teacher_for_user(user_id) if role == Role.TEACHER else None
    if teacher is not None and (teacher.classes or store.count_teacher_scores(teacher.id)):
        raise ConflictError(
            "Teacher is still assigned to classes or scores",
            details={"teacherId": teacher.id, "classIds": [c.id for c in teacher.classes]},
        )

    deleted = _user_dict(account)
    with store.transaction():
        if role == Role.STUDENT:
            student = store.get_student_for_user(user_id)
            if student is not None:
                store.delete_student(student)
            else:
                store.delete(account)
        else:
            if teacher is not None:
                store.delete(teacher)
            parent = store.get_parent_for_user(user_id) if role == Role.PARENT else None
            if parent is not None:
                for child in parent.children:
                    child.parent_id = None
                store.delete(parent)
            store.delete(account)
    logger.info("user deleted: id=%s role=%s", user_id, role.value)
    return ok({"deletedUser": deleted}, "User deleted successfully")
