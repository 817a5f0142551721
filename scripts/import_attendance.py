import csv
import sys
from datetime import date

from database.db import SessionLocal
from database.store import RecordStore
from services.attendance import AttendanceService
from utils.errors import SchoolError

CSV_PATH = "data/attendance.csv"  # ✅ 컬럼: student_id, class_id, date, status


def import_attendance(path: str = CSV_PATH):
    db = SessionLocal()
    service = AttendanceService(RecordStore(db))
    imported, failed = 0, 0

    try:
        with open(path, newline="", encoding="utf-8-sig") as csvfile:
            reader = csv.DictReader(csvfile)
            for line, row in enumerate(reader, start=2):
                try:
                    service.mark(
                        student_id=int(row["student_id"]),
                        class_id=int(row["class_id"]),
                        day=date.fromisoformat(row["date"]),
                        status=row["status"].strip().upper(),
                    )
                    imported += 1
                except (SchoolError, KeyError, ValueError) as exc:
                    failed += 1
                    print(f"❌ line {line}: {exc}")
    finally:
        db.close()

    print(f"✅ attendance CSV -> DB: {imported} marked, {failed} skipped")


if __name__ == "__main__":
    import_attendance(sys.argv[1] if len(sys.argv) > 1 else CSV_PATH)
