from types import SimpleNamespace

import pytest

from services.attendance import AttendanceSummary, summarize_marks
from services.scores import summarize_scores


def _marks(*statuses):
    return [SimpleNamespace(status=s) for s in statuses]


def _entry(score, max_score=100):
    return SimpleNamespace(score=score, max_score=max_score)


def test_attendance_late_counts_toward_percentage():
    summary = summarize_marks(_marks(*["PRESENT"] * 7, "LATE", "LATE", "ABSENT"))

    assert summary.total_days == 10
    assert summary.present_days == 7
    assert summary.late_days == 2
    assert summary.absent_days == 1
    assert summary.attendance_percentage == 90.0
    assert summary.to_dict()["attendancePercentage"] == "90.0%"


def test_attendance_with_no_marks_is_zero_percent():
    summary = summarize_marks([])

    assert summary.attendance_percentage == 0
    assert summary.to_dict() == {
        "totalDays": 0,
        "presentDays": 0,
        "absentDays": 0,
        "lateDays": 0,
        "attendancePercentage": "0%",
    }


def test_attendance_percentage_rounds_to_one_decimal():
    summary = AttendanceSummary(total_days=3, present_days=2, absent_days=1)
    assert summary.attendance_percentage == 66.7
    assert summary.to_dict()["attendancePercentage"] == "66.7%"


def test_score_average_is_pooled_over_subjects():
    # 45/50 (90%) 과 55/100 (55%) 는 합계 100/150 = 66.7% (단순 평균 72.5% 아님)
    summary = summarize_scores([_entry(45, 50), _entry(55, 100)])

    assert summary.subject_count == 2
    assert summary.total_score == 100
    assert summary.total_max_score == 150
    assert round(summary.average, 1) == 66.7
    assert summary.overall_grade == "D"
    assert summary.to_dict()["average"] == "66.7%"


def test_score_average_without_entries_is_zero():
    summary = summarize_scores([])

    assert summary.average == 0
    assert summary.overall_grade == "F"
    assert summary.to_dict()["totalSubjects"] == 0
    assert summary.to_dict()["average"] == "0%"


def test_single_subject_average_equals_score():
    for score, letter in ((95, "A"), (82, "B"), (58, "F")):
        summary = summarize_scores([_entry(score)])
        assert summary.average == pytest.approx(score)
        assert summary.overall_grade == letter


def test_score_average_at_a_band_edge():
    # 10.2 / 17 은 정확히 60%
    summary = summarize_scores([_entry(10.2, 17)])

    assert summary.overall_grade == "D"
    assert summary.to_dict()["average"] == "60.0%"
