from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse

from database.store import RecordStore, get_store
from dependencies.security import CurrentUser, can_view_student, get_current_user, require_teacher
from schemas.common import ok
from schemas.scores import EnterScoreRequest
from services.report_card import ReportCardService
from services.report_render import ReportRenderer
from services.scores import ScoreService
from utils.errors import NotFoundError

router = APIRouter(prefix="/scores", tags=["scores"])


def get_service(store: RecordStore = Depends(get_store)) -> ScoreService:
    return ScoreService(store)


# ✅ [ENTER] 학생 + 과목 + 학기 + 연도 기준 upsert
@router.post("/enter")
def enter_score(
    body: EnterScoreRequest,
    service: ScoreService = Depends(get_service),
    user: CurrentUser = Depends(require_teacher),
):
    record = service.enter(
        body.studentId, body.subjectId, body.teacherId, body.term, body.year,
        body.score, body.maxScore, body.comments,
    )
    return ok(record, "Score entered successfully")


# ✅ [STUDENT] 한 학기 점수와 요약
@router.get("/student/{student_id}/term/{term}/year/{year}")
def get_student_scores(
    student_id: int,
    term: str,
    year: int,
    service: ScoreService = Depends(get_service),
    user: CurrentUser = Depends(require_teacher),
):
    return ok(service.student_scores(student_id, term, year))


# ✅ [CLASS] 석차 및 학급 통계
@router.get("/class/{class_id}/term/{term}/year/{year}")
def get_class_scores(
    class_id: int,
    term: str,
    year: int,
    service: ScoreService = Depends(get_service),
    user: CurrentUser = Depends(require_teacher),
):
    return ok(service.class_scores(class_id, term, year))


def _authorized_report(store: RecordStore, user: CurrentUser, student_id: int, term: str, year: int) -> dict:
    student = store.get_student(student_id)
    if student is None:
        raise NotFoundError("Student not found", details={"studentId": student_id})
    if not can_view_student(user, student):
        raise HTTPException(status_code=403, detail="Insufficient permissions")
    return ReportCardService(store).generate(student_id, term, year)


# ✅ [REPORT CARD] 교직원, 해당 학생의 학부모, 또는 학생 본인
@router.get("/report/{student_id}/term/{term}/year/{year}")
def generate_report_card(
    student_id: int,
    term: str,
    year: int,
    store: RecordStore = Depends(get_store),
    user: CurrentUser = Depends(get_current_user),
):
    report = _authorized_report(store, user, student_id, term, year)
    return ok(report, "Report card generated successfully")


# ✅ [REPORT CARD / HTML] 같은 성적표의 인쇄용 페이지
@router.get("/report/{student_id}/term/{term}/year/{year}/html", response_class=HTMLResponse)
def render_report_card(
    student_id: int,
    term: str,
    year: int,
    store: RecordStore = Depends(get_store),
    user: CurrentUser = Depends(get_current_user),
):
    report = _authorized_report(store, user, student_id, term, year)
    return HTMLResponse(ReportRenderer().report_card_html(report))
