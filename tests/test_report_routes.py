"""
Test: Report API routes — cohort and student endpoints, malformed bodies.
"""
import json
import pytest
from exit_tickets.app import app


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


class TestCohortRoute:
    def test_cohort_report(self, client, cohort_batches):
        resp = client.post("/api/reports/cohort", json={"batches": cohort_batches})
        assert resp.status_code == 200
        data = resp.get_json()
        assert [s["email"] for s in data["top10_students"]] == ["alice@school.org"]
        assert [s["email"] for s in data["bottom_fliers"]] == ["cara@school.org"]
        assert data["top_bottom_teachers"]["Algebra"]["best_teacher"] == "Smith"

    def test_teacher_periods_sorted(self, client, cohort_batches):
        data = client.post("/api/reports/cohort", json={"batches": cohort_batches}).get_json()
        assert [a["teacher_period"] for a in data["teacher_period_averages"]] == [
            "3-Jones", "1-Smith", "2-Smith",
        ]

    def test_single_teacher_worst_is_null(self, client):
        batches = [{
            "form_title": "Ratios 1", "form_order": 0, "strand": "Ratios",
            "responses": [{
                "email": "a@x.com", "student_name": "Ann", "teacher_name": "Smith",
                "period": "1", "score": 4, "possible_score": 5,
            }],
        }]
        data = client.post("/api/reports/cohort", json={"batches": batches}).get_json()
        assert data["top_bottom_teachers"] == {"Ratios": {"best_teacher": "Smith", "worst_teacher": None}}

    def test_missing_batches(self, client):
        resp = client.post("/api/reports/cohort", json={})
        assert resp.status_code == 400
        assert "error" in resp.get_json()

    def test_not_json(self, client):
        resp = client.post("/api/reports/cohort", data="batches", content_type="text/plain")
        assert resp.status_code == 400

    def test_missing_field(self, client, cohort_batches):
        del cohort_batches[0]["responses"][0]["email"]
        resp = client.post("/api/reports/cohort", json={"batches": cohort_batches})
        assert resp.status_code == 400
        assert "email" in resp.get_json()["error"]


class TestStudentRoute:
    def test_student_reports(self, client, cohort_batches):
        resp = client.post("/api/reports/students", json={"batches": cohort_batches})
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["total"] == 5
        eve = next(s for s in data["students"] if s["email"] == "eve@school.org")
        assert [m["form_order"] for m in eve["missing"]] == [2, 3]
        assert eve["class_average"] == 0

    def test_bad_score(self, client, cohort_batches):
        cohort_batches[1]["responses"][0]["score"] = "n/a"
        resp = client.post("/api/reports/students", json={"batches": cohort_batches})
        assert resp.status_code == 400


class TestSettingsRoute:
    def test_thresholds(self, client):
        data = client.get("/api/reports/settings").get_json()
        assert data["completion_threshold"] == 0.5
        assert data["flier_window"] == 3


class TestMalformedInput:
    def _post(self, client, batches, path="/api/reports/cohort"):
        return client.post(path, data=json.dumps({"batches": batches}), content_type="application/json")

    def test_gradable_items_not_objects(self, client, cohort_batches):
        raw = cohort_batches[0]["responses"][0]
        del raw["score"], raw["possible_score"]
        raw["gradable_items"] = [1, 0, 1]
        resp = self._post(client, cohort_batches)
        assert resp.status_code == 400
        assert "gradable item" in resp.get_json()["error"]

    def test_nan_score(self, client, cohort_batches):
        cohort_batches[0]["responses"][0]["score"] = float("nan")
        body = json.dumps({"batches": cohort_batches})
        assert "NaN" in body
        resp = client.post("/api/reports/cohort", data=body, content_type="application/json")
        assert resp.status_code == 400

    def test_negative_form_order(self, client, cohort_batches):
        for batch in cohort_batches:
            batch["form_order"] -= 4
        resp = self._post(client, cohort_batches, "/api/reports/students")
        assert resp.status_code == 400
        assert "form_order" in resp.get_json()["error"]

    def test_mixed_strand_types(self, client, cohort_batches):
        cohort_batches[0]["strand"] = None
        cohort_batches[1]["strand"] = 12
        resp = self._post(client, cohort_batches)
        assert resp.status_code == 200
        teachers = resp.get_json()["top_bottom_teachers"]
        assert set(teachers) == {"", "12", "Algebra", "Geometry"}

    def test_rosters_in_cohort_report(self, client, cohort_batches):
        data = self._post(client, cohort_batches).get_json()
        first = data["form_rosters"][0]["rows"][0]
        assert first["display_email"] == "eve"
        assert first["band"] == "low"
