"""
Tests for question bank and test definition endpoints.
"""

QUESTION = {
    "subject": "physics",
    "class_level": "class12th",
    "question_text": "SI unit of force?",
    "options": [{"text": "Joule"}, {"text": "Newton"}, {"text": "Pascal"}],
    "correct_answer_index": 1,
    "explanation": "F = ma, measured in newtons",
}


class TestQuestionBank:
    def test_admin_creates_question(self, client, admin_headers):
        response = client.post("/questions/", json=QUESTION, headers=admin_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["subject"] == "physics"
        assert data["correct_answer_index"] == 1
        assert data["options"][1] == {"text": "Newton", "image": None}

    def test_student_cannot_create_question(self, client, auth_headers):
        response = client.post("/questions/", json=QUESTION, headers=auth_headers)
        assert response.status_code == 403

    def test_correct_index_must_be_in_range(self, client, admin_headers):
        response = client.post(
            "/questions/",
            json={**QUESTION, "correct_answer_index": 3},
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_question_needs_text_or_image(self, client, admin_headers):
        response = client.post(
            "/questions/",
            json={**QUESTION, "question_text": None},
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_list_filters_by_subject(self, client, admin_headers, questions):
        response = client.get(
            "/questions/", params={"subject": "maths"}, headers=admin_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert {q["subject"] for q in data["questions"]} == {"maths"}

    def test_get_unknown_question(self, client, admin_headers):
        response = client.get("/questions/4242", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["code"] == "question_not_found"

    def test_count_questions(self, client, admin_headers, questions):
        total = client.get("/questions/count", headers=admin_headers)
        chemistry = client.get(
            "/questions/count", params={"subject": "chemistry"}, headers=admin_headers
        )

        assert total.status_code == 200
        assert total.json() == {"total": 6}
        assert chemistry.json() == {"total": 2}

    def test_count_requires_admin(self, client, auth_headers):
        response = client.get("/questions/count", headers=auth_headers)
        assert response.status_code == 403

    def test_delete_unused_question(self, client, admin_headers):
        question_id = client.post(
            "/questions/", json=QUESTION, headers=admin_headers
        ).json()["id"]

        response = client.delete(f"/questions/{question_id}", headers=admin_headers)

        assert response.status_code == 204
        assert client.get(f"/questions/{question_id}", headers=admin_headers).status_code == 404
        assert client.get("/questions/count", headers=admin_headers).json() == {"total": 0}

    def test_delete_question_used_by_a_test(
        self, client, admin_headers, chapter_test, questions
    ):
        response = client.delete(f"/questions/{questions[4].id}", headers=admin_headers)

        assert response.status_code == 409
        assert response.json()["code"] == "question_in_use"
        assert client.get(f"/questions/{questions[4].id}", headers=admin_headers).status_code == 200

    def test_delete_unknown_question(self, client, admin_headers):
        response = client.delete("/questions/4242", headers=admin_headers)
        assert response.status_code == 404

    def test_student_cannot_delete_question(self, client, auth_headers, questions):
        response = client.delete(f"/questions/{questions[0].id}", headers=auth_headers)
        assert response.status_code == 403


class TestTestDefinitions:
    def test_full_syllabus_defaults(self, client, admin_headers, clock):
        response = client.post(
            "/tests/full-syllabus", json={"name": "Mock 7"}, headers=admin_headers
        )

        assert response.status_code == 201
        data = response.json()
        assert data["kind"] == "full_syllabus"
        assert data["section_count"] == 2
        assert data["created_at"] == clock.now
        first, second = data["sections"]
        assert (first["name"], first["duration_minutes"], first["marks_per_question"]) == (
            "Physics + Chemistry",
            90,
            1,
        )
        assert first["subjects"] == ["physics", "chemistry"]
        assert (second["name"], second["duration_minutes"], second["marks_per_question"]) == (
            "Maths",
            90,
            2,
        )

    def test_full_syllabus_section_override(self, client, admin_headers):
        response = client.post(
            "/tests/full-syllabus",
            json={"name": "Short mock", "section2": {"duration_minutes": 45}},
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert response.json()["sections"][1]["duration_minutes"] == 45
        assert response.json()["sections"][1]["marks_per_question"] == 2

    def test_chapter_wise_test(self, client, admin_headers, questions):
        ids = [questions[4].id, questions[5].id]
        response = client.post(
            "/tests/chapter-wise",
            json={
                "name": "Integration",
                "duration_minutes": 20,
                "marks_per_question": 4,
                "subjects": ["maths"],
                "question_ids": ids,
            },
            headers=admin_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["kind"] == "chapter_wise"
        assert data["section_count"] == 1
        assert data["sections"][0]["question_ids"] == ids
        assert data["sections"][0]["max_score"] == 8

    def test_duplicate_question_ids_rejected(self, client, admin_headers, questions):
        response = client.post(
            "/tests/chapter-wise",
            json={
                "name": "Dupes",
                "duration_minutes": 20,
                "marks_per_question": 1,
                "question_ids": [questions[0].id, questions[0].id],
            },
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_unknown_question_ids_rejected(self, client, admin_headers, db_session):
        response = client.post(
            "/tests/chapter-wise",
            json={
                "name": "Ghosts",
                "duration_minutes": 20,
                "marks_per_question": 1,
                "question_ids": [991, 992],
            },
            headers=admin_headers,
        )
        assert response.status_code == 404

    def test_assign_questions(self, client, admin_headers, questions):
        test_id = client.post(
            "/tests/full-syllabus", json={"name": "Mock 8"}, headers=admin_headers
        ).json()["id"]

        response = client.put(
            f"/tests/{test_id}/questions",
            json={
                "section1_question_ids": [q.id for q in questions[:4]],
                "section2_question_ids": [q.id for q in questions[4:]],
            },
            headers=admin_headers,
        )

        assert response.status_code == 200
        sections = response.json()["sections"]
        assert sections[0]["question_ids"] == [q.id for q in questions[:4]]
        assert sections[1]["question_ids"] == [q.id for q in questions[4:]]
        assert sections[1]["max_score"] == 4

    def test_questions_locked_once_attempted(
        self, client, admin_headers, auth_headers, chapter_test, questions
    ):
        client.post(f"/tests/{chapter_test.id}/attempts", headers=auth_headers)

        response = client.put(
            f"/tests/{chapter_test.id}/questions",
            json={"section1_question_ids": [questions[0].id]},
            headers=admin_headers,
        )

        assert response.status_code == 409
        assert response.json()["code"] == "test_locked"

    def test_chapter_test_has_no_second_section(
        self, client, admin_headers, chapter_test, questions
    ):
        response = client.put(
            f"/tests/{chapter_test.id}/questions",
            json={
                "section1_question_ids": [questions[4].id],
                "section2_question_ids": [questions[5].id],
            },
            headers=admin_headers,
        )
        assert response.status_code == 409
        assert response.json()["code"] == "invalid_section"

    def test_deactivated_test_cannot_be_started(
        self, client, admin_headers, auth_headers, chapter_test
    ):
        toggled = client.patch(
            f"/tests/{chapter_test.id}/status",
            json={"is_active": False},
            headers=admin_headers,
        )
        assert toggled.status_code == 200
        assert toggled.json()["is_active"] is False

        response = client.post(f"/tests/{chapter_test.id}/attempts", headers=auth_headers)
        assert response.status_code == 409
        assert response.json()["code"] == "test_inactive"

    def test_students_see_only_active_tests(
        self, client, admin_headers, auth_headers, chapter_test, full_syllabus_test
    ):
        client.patch(
            f"/tests/{full_syllabus_test.id}/status",
            json={"is_active": False},
            headers=admin_headers,
        )

        student_view = client.get("/tests/", headers=auth_headers).json()
        admin_view = client.get("/tests/", headers=admin_headers).json()
        chapter_only = client.get(
            "/tests/", params={"kind": "chapter_wise"}, headers=admin_headers
        ).json()

        assert [t["id"] for t in student_view["tests"]] == [chapter_test.id]
        assert admin_view["total"] == 2
        assert [t["kind"] for t in chapter_only["tests"]] == ["chapter_wise"]

    def test_get_test_definition(self, client, auth_headers, full_syllabus_test):
        response = client.get(f"/tests/{full_syllabus_test.id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["name"] == "Full Syllabus Mock 1"

    def test_get_unknown_test_definition(self, client, auth_headers):
        response = client.get("/tests/31337", headers=auth_headers)
        assert response.status_code == 404
