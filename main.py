import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
# HTTP 클라이언트 디버그 로그 줄이기
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)


# ✅ 미들웨어
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ 라우터
from routers import attendance, classes, scores, students, subjects, users

app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ 응답 지연 헤더 (X-Latency-Ms)
app.add_middleware(TimingMiddleware)

# ✅ 전역 에러 핸들러 (일관된 JSON 에러 응답)
add_error_handlers(app)

# ✅ /v1 prefix 적용
app.include_router(attendance.router, prefix="/v1")
app.include_router(classes.router,    prefix="/v1")
app.include_router(scores.router,     prefix="/v1")
app.include_router(students.router,   prefix="/v1")
app.include_router(subjects.router,   prefix="/v1")
app.include_router(users.router,      prefix="/v1")


# ✅ 헬스 체크
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "API is running"}


@app.get("/")
def root():
    return {"message": settings.APP_TITLE}
