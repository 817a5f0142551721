from sqlalchemy import create_engine               # SQLAlchemy 엔진 생성 도구
from sqlalchemy.orm import declarative_base, sessionmaker

from config.settings import settings               # ✅ 환경변수 설정 파일 불러오기


def _connect_args(url: str) -> dict:
    # SQLite 연결은 FastAPI 동기 라우트의 스레드풀에서 공유됨
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


# ✅ 환경변수에서 DB 연결 URL을 불러와 엔진 생성 (프로세스당 1개)
engine = create_engine(
    settings.DATABASE_URL,
    connect_args=_connect_args(settings.DATABASE_URL),
    pool_pre_ping=True,
)

# ✅ 세션 팩토리: 요청마다 세션 1개
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# ✅ 모델 정의 시 상속할 Base 클래스 (Declarative 방식 사용)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
