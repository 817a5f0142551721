from fastapi import APIRouter, Depends

from database.store import RecordStore, get_store
from dependencies.security import CurrentUser, get_current_user, require_admin
from models.classes import Class as ClassModel
from schemas.classes import ClassCreate
from schemas.common import ok
from utils.errors import NotFoundError

router = APIRouter(prefix="/classes", tags=["classes"])


def _class_dict(c: ClassModel) -> dict:
    return {
        "id": c.id,
        "name": c.name,
        "year": c.year,
        "teacherId": c.teacher_id,
        "teacher": c.teacher.user.full_name if c.teacher else None,
        "studentCount": len(c.students),
    }


# ✅ [READ] 전체 학급 조회
@router.get("/")
def read_classes(store: RecordStore = Depends(get_store), user: CurrentUser = Depends(get_current_user)):
    records = store.db.query(ClassModel).order_by(ClassModel.year, ClassModel.name).all()
    return ok([_class_dict(c) for c in records])


# ✅ [CREATE] 관리자 전용
@router.post("/", status_code=201)
def create_class(
    body: ClassCreate,
    store: RecordStore = Depends(get_store),
    user: CurrentUser = Depends(require_admin),
):
    if body.teacherId is not None and store.get_teacher(body.teacherId) is None:
        raise NotFoundError("Teacher not found", details={"teacherId": body.teacherId})

    with store.transaction():
        new_class = store.add(ClassModel(name=body.name, year=body.year, teacher_id=body.teacherId))
    return ok(_class_dict(new_class), "Class created successfully")
