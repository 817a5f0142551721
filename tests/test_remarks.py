import pytest

from services.report_card import academic_remarks, attendance_remarks, general_remarks


@pytest.mark.parametrize(
    "average, expected",
    [
        (95, "Excellent performance! Keep up the outstanding work."),
        (90, "Excellent performance! Keep up the outstanding work."),
        (89.9, "Very good performance. Continue working hard."),
        (70, "Good performance. There is room for improvement."),
        (60, "Satisfactory performance. More effort needed."),
        (59.9, "Needs significant improvement. Please seek additional support."),
    ],
)
def test_academic_remarks(average, expected):
    assert academic_remarks(average) == expected


@pytest.mark.parametrize(
    "pct, expected",
    [
        (100, "Excellent attendance record."),
        (95, "Excellent attendance record."),
        (94.9, "Good attendance record."),
        (85, "Good attendance record."),
        (75, "Satisfactory attendance. Improvement needed."),
        (74.9, "Poor attendance. This affects academic performance."),
        (0, "Poor attendance. This affects academic performance."),
    ],
)
def test_attendance_remarks(pct, expected):
    assert attendance_remarks(pct) == expected


def test_general_remarks_strong_student():
    assert general_remarks(85, 92) == "Excellent student with strong academic performance and attendance."


def test_general_remarks_good_student():
    # 평균 80 미만이면 첫 번째 구간 제외
    assert general_remarks(75, 85) == "Good student showing consistent effort and attendance."


def test_general_remarks_high_average_but_weaker_attendance():
    # 평균 85%, 출석률 82% 는 첫 번째 구간이 아니라 두 번째 구간
    assert general_remarks(85, 82) == "Good student showing consistent effort and attendance."


@pytest.mark.parametrize("average, pct", [(55, 95), (85, 70)])
def test_general_remarks_needs_support(average, pct):
    assert general_remarks(average, pct) == "Student needs additional support and improved attendance."


def test_general_remarks_steady_progress():
    assert general_remarks(65, 80) == "Student showing steady progress. Continue encouraging effort."
