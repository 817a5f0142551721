from fastapi import APIRouter, Depends

from database.store import RecordStore, get_store
from dependencies.security import CurrentUser, get_current_user, require_admin
from models.subjects import Subject as SubjectModel
from schemas.common import ok
from schemas.subjects import SubjectCreate, SubjectUpdate
from utils.errors import NotFoundError

router = APIRouter(prefix="/subjects", tags=["subjects"])


def _subject_dict(s: SubjectModel) -> dict:
    return {"id": s.id, "name": s.name, "code": s.code}


def _get_or_404(store: RecordStore, subject_id: int) -> SubjectModel:
    subject = store.get_subject(subject_id)
    if subject is None:
        raise NotFoundError("Subject not found", details={"subjectId": subject_id})
    return subject


# ✅ [READ] 전체 과목 조회
@router.get("/")
def read_subjects(store: RecordStore = Depends(get_store), user: CurrentUser = Depends(get_current_user)):
    records = store.db.query(SubjectModel).order_by(SubjectModel.name).all()
    return ok([_subject_dict(s) for s in records])


# ✅ [CREATE] 과목 생성
@router.post("/", status_code=201)
def create_subject(
    body: SubjectCreate,
    store: RecordStore = Depends(get_store),
    user: CurrentUser = Depends(require_admin),
):
    with store.transaction():
        subject = store.add(SubjectModel(name=body.name, code=body.code))
    return ok(_subject_dict(subject), "Subject created successfully")


# ✅ [UPDATE] 전달된 필드만 수정
@router.put("/{subject_id}")
def update_subject(
    subject_id: int,
    body: SubjectUpdate,
    store: RecordStore = Depends(get_store),
    user: CurrentUser = Depends(require_admin),
):
    subject = _get_or_404(store, subject_id)
    with store.transaction():
        for key, value in body.model_dump(exclude_none=True).items():
            setattr(subject, key, value)
    return ok(_subject_dict(subject), "Subject updated successfully")


# ✅ [DELETE] 과목 삭제
@router.delete("/{subject_id}")
def delete_subject(
    subject_id: int,
    store: RecordStore = Depends(get_store),
    user: CurrentUser = Depends(require_admin),
):
    subject = _get_or_404(store, subject_id)
    with store.transaction():
        store.delete(subject)
    return ok({"subjectId": subject_id}, "Subject deleted successfully")
