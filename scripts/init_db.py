from database.db import Base, engine

# ✅ 모든 모델을 import 해야 Base.metadata 에 테이블이 등록됨
from models import attendance, classes, parents, scores, students, subjects, teachers, users  # noqa: F401


def init_db():
    Base.metadata.create_all(bind=engine)
    print(f"✅ schema created on {engine.url.render_as_string(hide_password=True)}")


if __name__ == "__main__":
    init_db()
