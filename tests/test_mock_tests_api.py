"""API tests for mock test listing and admin management."""

from uuid import uuid4

from tests.helpers.seed import create_attempt, create_mock_test, make_test_payload


class TestListAndGet:
    def test_list_active_tests_without_answers(self, client, db):
        create_mock_test(db, title="Active")
        create_mock_test(db, title="Retired", is_active=False)

        response = client.get("/v1/tests")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        tests = body["data"]["tests"]
        assert [t["title"] for t in tests] == ["Active"]
        assert body["pagination"] == {"page": 1, "page_size": 10, "total": 1, "pages": 1}

        test = tests[0]
        assert test["total_marks"] == 3
        assert test["duration_label"] == "30 minutes"
        assert test["stats"]["section_count"] == 2
        question = test["sections"][0]["questions"][0]
        assert "correct_answer" not in question
        assert "explanation" not in question

    def test_pagination(self, client, db):
        for i in range(3):
            create_mock_test(db, title=f"Test {i}")

        response = client.get("/v1/tests", params={"page": 2, "page_size": 2})

        body = response.json()
        assert len(body["data"]["tests"]) == 1
        assert body["pagination"]["pages"] == 2

    def test_page_size_over_limit(self, client):
        response = client.get("/v1/tests", params={"page_size": 500})

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_get_test(self, client, db):
        test = create_mock_test(db)

        response = client.get(f"/v1/tests/{test.id}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == str(test.id)
        assert [s["title"] for s in data["sections"]] == ["Physics", "Chemistry"]
        # Options are delivered in canonical order outside an attempt
        assert data["sections"][0]["questions"][0]["options"] == ["Newton", "Joule", "Watt", "Pascal"]

    def test_get_unknown_test(self, client):
        response = client.get(f"/v1/tests/{uuid4()}")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error_code"] == "NOT_FOUND"
        assert body["error"] == "Test not found"

    def test_get_inactive_test(self, client, db):
        test = create_mock_test(db, is_active=False)

        response = client.get(f"/v1/tests/{test.id}")

        assert response.status_code == 403
        assert response.json()["error"] == "Test is not available"


class TestAdminManagement:
    def test_create_requires_auth(self, client):
        response = client.post("/v1/tests", json=make_test_payload())

        assert response.status_code == 401

    def test_create_requires_admin(self, client, student_headers):
        response = client.post("/v1/tests", json=make_test_payload(), headers=student_headers)

        assert response.status_code == 403
        assert response.json()["error_code"] == "FORBIDDEN"

    def test_create(self, client, admin_headers):
        response = client.post("/v1/tests", json=make_test_payload(), headers=admin_headers)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["is_active"] is True
        assert data["sections"][1]["questions"][0]["correct_answer"] == 2
        assert data["sections"][1]["time_limit"] == 10

    def test_create_invalid_structure(self, client, admin_headers):
        payload = make_test_payload(duration=0)
        payload["sections"][0]["questions"][0]["options"] = ["Newton"]

        response = client.post("/v1/tests", json=payload, headers=admin_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert "Test duration must be greater than 0" in body["details"]
        assert "Section 1, Question 1: At least 2 options are required" in body["details"]
        assert "Section 1, Question 1: Invalid correct answer index" not in body["details"]

    def test_create_missing_fields_is_rejected(self, client, admin_headers):
        response = client.post("/v1/tests", json={"title": "No sections"}, headers=admin_headers)

        assert response.status_code == 422
        fields = {d["field"] for d in response.json()["details"]}
        assert "body.sections" in fields

    def test_admin_full_view_includes_answers(self, client, db, admin_headers):
        test = create_mock_test(db, is_active=False)

        response = client.get(f"/v1/tests/{test.id}/full", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"]["sections"][0]["questions"][1]["correct_answer"] == 1

    def test_update_fields(self, client, db, admin_headers):
        test = create_mock_test(db)

        response = client.put(
            f"/v1/tests/{test.id}",
            json={"title": "  Renamed  ", "price": 499},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "Renamed"
        assert data["price"] == 499
        assert data["duration"] == 30

    def test_update_replaces_sections(self, client, db, admin_headers):
        test = create_mock_test(db)
        sections = make_test_payload()["sections"][:1]

        response = client.put(f"/v1/tests/{test.id}", json={"sections": sections}, headers=admin_headers)

        assert response.status_code == 200
        assert [s["title"] for s in response.json()["data"]["sections"]] == ["Physics"]

    def test_update_sections_refused_after_attempts(self, client, db, admin_headers):
        test = create_mock_test(db)
        create_attempt(db, test.id, score=2)

        response = client.put(
            f"/v1/tests/{test.id}",
            json={"sections": make_test_payload()["sections"]},
            headers=admin_headers,
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "CONFLICT"

    def test_update_invalid_value(self, client, db, admin_headers):
        test = create_mock_test(db)

        response = client.put(f"/v1/tests/{test.id}", json={"price": -5}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["details"] == ["Test price must be 0 or greater"]

    def test_soft_delete(self, client, db, admin_headers):
        test = create_mock_test(db)
        create_attempt(db, test.id, score=1)

        response = client.delete(f"/v1/tests/{test.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Test deleted successfully"
        assert client.get(f"/v1/tests/{test.id}").status_code == 403
        assert client.get("/v1/tests").json()["data"]["tests"] == []

        # Still there for admins, attempts untouched
        full = client.get(f"/v1/tests/{test.id}/full", headers=admin_headers)
        assert full.json()["data"]["is_active"] is False

    def test_delete_unknown(self, client, admin_headers):
        response = client.delete(f"/v1/tests/{uuid4()}", headers=admin_headers)

        assert response.status_code == 404
