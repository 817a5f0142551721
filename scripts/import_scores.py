import csv
import sys

from database.db import SessionLocal
from database.store import RecordStore
from services.scores import ScoreService
from utils.errors import SchoolError

CSV_PATH = "data/scores.csv"  # ✅ 컬럼: student_id, subject_id, teacher_id, term, year, score, max_score, comments


def import_scores(path: str = CSV_PATH):
    db = SessionLocal()
    service = ScoreService(RecordStore(db))
    imported, failed = 0, 0

    try:
        with open(path, newline="", encoding="utf-8-sig") as csvfile:
            reader = csv.DictReader(csvfile)
            for line, row in enumerate(reader, start=2):
                try:
                    service.enter(
                        student_id=int(row["student_id"]),
                        subject_id=int(row["subject_id"]),
                        teacher_id=int(row["teacher_id"]),
                        term=row["term"],
                        year=int(row["year"]),
                        score=float(row["score"]),
                        max_score=float(row["max_score"]) if row.get("max_score") else None,
                        comments=row.get("comments") or None,
                    )
                    imported += 1
                except (SchoolError, KeyError, ValueError) as exc:
                    failed += 1
                    print(f"❌ line {line}: {exc}")
    finally:
        db.close()

    print(f"✅ scores CSV -> DB: {imported} entered, {failed} skipped")


if __name__ == "__main__":
    import_scores(sys.argv[1] if len(sys.argv) > 1 else CSV_PATH)
