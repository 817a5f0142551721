from models.attendance import AttendanceMark
from models.scores import ScoreEntry
from models.students import Student
from models.users import User
from scripts.seed_demo import seed_demo


def test_list_students_filters_and_pages(client, school, auth):
    headers = auth(school.teacher_user)

    body = client.get("/v1/students/", params={"limit": 2}, headers=headers).json()["data"]
    assert len(body["students"]) == 2
    assert body["pagination"] == {"total": 4, "page": 1, "limit": 2, "pages": 2}

    body = client.get("/v1/students/", params={"classId": school.other_class.id}, headers=headers).json()["data"]
    assert [s["studentNumber"] for s in body["students"]] == ["STU-099"]

    body = client.get("/v1/students/", params={"search": "eze"}, headers=headers).json()["data"]
    assert [s["name"] for s in body["students"]] == ["Ben Eze"]

    response = client.get("/v1/students/", headers=auth(school.parent_user))
    assert response.status_code == 403


def test_search_student_by_number(client, school, auth):
    headers = auth(school.teacher_user)
    client.post(
        "/v1/attendance/mark",
        json={"studentId": school.students[0].id, "classId": school.klass.id, "date": "2025-09-15", "status": "LATE"},
        headers=headers,
    )

    response = client.get("/v1/students/search/STU-001", headers=headers)
    assert response.status_code == 200
    profile = response.json()["data"]
    assert profile["studentInfo"]["fullName"] == "Ada Bello"
    assert profile["contactInfo"]["parentContact"]["phone"] == "08030000000"
    assert profile["classInfo"]["classTeacher"]["name"] == "Ngozi Okafor"
    assert profile["attendanceSummary"]["attendancePercentage"] == "100.0%"
    assert profile["attendanceSummary"]["recentAttendance"] == [{"date": "2025-09-15", "status": "LATE"}]

    response = client.get("/v1/students/search/STU-404", headers=headers)
    assert response.status_code == 404


def test_update_student(client, school, auth):
    student = school.students[2]
    url = f"/v1/students/{student.id}"

    response = client.put(url, json={"classId": school.other_class.id, "phone": "0809"}, headers=auth(school.admin))
    assert response.status_code == 200
    body = response.json()["data"]
    assert body["classId"] == school.other_class.id
    assert body["className"] == "JSS 1B"

    response = client.put(url, json={"email": "ada@school.test"}, headers=auth(school.admin))
    assert response.status_code == 409

    response = client.put(url, json={"classId": 9999}, headers=auth(school.admin))
    assert response.status_code == 404

    response = client.put(url, json={"year": 2026}, headers=auth(school.teacher_user))
    assert response.status_code == 403


def test_delete_student_removes_marks_and_scores(client, db, school, auth):
    headers = auth(school.teacher_user)
    student = school.students[1]
    client.post(
        "/v1/attendance/mark",
        json={"studentId": student.id, "classId": school.klass.id, "date": "2025-09-15", "status": "PRESENT"},
        headers=headers,
    )
    client.post(
        "/v1/scores/enter",
        json={
            "studentId": student.id,
            "subjectId": school.math.id,
            "teacherId": school.teacher.id,
            "term": "FIRST",
            "year": 2025,
            "score": 70,
        },
        headers=headers,
    )
    student_id, user_id = student.id, student.user_id

    response = client.delete(f"/v1/students/{student_id}", headers=auth(school.admin))
    assert response.status_code == 200

    db.expire_all()
    assert db.get(Student, student_id) is None
    assert db.get(User, user_id) is None
    assert db.query(AttendanceMark).filter(AttendanceMark.student_id == student_id).count() == 0
    assert db.query(ScoreEntry).filter(ScoreEntry.student_id == student_id).count() == 0

    response = client.delete(f"/v1/students/{student_id}", headers=auth(school.admin))
    assert response.status_code == 404


def test_create_users_with_profiles(client, school, auth):
    headers = auth(school.admin)

    response = client.post(
        "/v1/users/",
        json={"email": "Musa@School.test", "firstName": "Musa", "lastName": "Ali", "role": "TEACHER"},
        headers=headers,
    )
    assert response.status_code == 201
    teacher = response.json()["data"]
    assert teacher["email"] == "musa@school.test"
    assert teacher["profile"]["classIds"] == []

    response = client.post(
        "/v1/users/",
        json={"email": "musa@school.test", "firstName": "M", "lastName": "A", "role": "PARENT"},
        headers=headers,
    )
    assert response.status_code == 409

    response = client.post(
        "/v1/users/",
        json={"email": "kid@school.test", "firstName": "K", "lastName": "D", "role": "STUDENT"},
        headers=headers,
    )
    assert response.status_code == 422

    response = client.get(f"/v1/users/{school.parent_user.id}", headers=headers)
    assert response.json()["data"]["profile"]["childIds"] == [school.students[0].id]


def test_list_and_update_users(client, school, auth):
    headers = auth(school.admin)

    body = client.get("/v1/users/", params={"role": "STUDENT"}, headers=headers).json()["data"]
    assert body["pagination"]["total"] == 4

    response = client.put(f"/v1/users/{school.teacher_user.id}", json={"phone": "0700"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["phone"] == "0700"

    response = client.put(
        f"/v1/users/{school.teacher_user.id}", json={"email": "admin@school.test"}, headers=headers
    )
    assert response.status_code == 409

    assert client.get("/v1/users/", headers=auth(school.teacher_user)).status_code == 403


def test_user_stats_overview(client, school, auth):
    stats = client.get("/v1/users/stats/overview", headers=auth(school.admin)).json()["data"]
    assert stats == {"totalUsers": 7, "admins": 1, "teachers": 1, "students": 4, "parents": 1}


def test_delete_user_rules(client, db, school, auth):
    headers = auth(school.admin)

    response = client.delete(f"/v1/users/{school.admin.id}", headers=headers)
    assert response.status_code == 409
    assert response.json()["error"]["message"] == "Cannot delete the last admin user"

    # JSS 1A 담임 교사
    response = client.delete(f"/v1/users/{school.teacher_user.id}", headers=headers)
    assert response.status_code == 409

    child_id = school.students[0].id
    response = client.delete(f"/v1/users/{school.parent_user.id}", headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["deletedUser"]["role"] == "PARENT"

    db.expire_all()
    assert db.get(Student, child_id).parent_id is None


def test_seed_demo_is_idempotent(store, db):
    first = seed_demo(store)
    second = seed_demo(store)

    assert first == second
    assert [s["studentId"] for s in first["students"]] == ["STU001", "STU002", "STU003"]
    assert db.query(Student).count() == 3
    assert db.query(User).count() == 4
