"""Tests for the admin curation endpoints.

Covers feedback listing/status, promotion, voting suggestion lifecycle and
the statistics summary.
"""

from unittest.mock import AsyncMock, patch

from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError


def _promote(client, admin_headers, feedback_id, **overrides):
    body = {
        "suggestionNumber": 1,
        "title": "Staffing",
        "editedIssueDescription": "Queues are long at peak hours",
        "editedSuggestedImprovement": "Add staff during peak hours",
    }
    body.update(overrides)
    return client.post(f"/api/admin/feedback/{feedback_id}/promote", json=body, headers=admin_headers)


class TestAdminAuthGate:
    def test_admin_routes_require_token(self, client):
        assert client.get("/api/admin/feedback").status_code == 401
        assert client.get("/api/admin/statistics").status_code == 401
        assert client.post("/api/admin/suggestions", json={}).status_code == 401


class TestFeedbackListing:
    def test_pagination_metadata(self, client, admin_headers, make_feedback):
        for i in range(3):
            make_feedback(name=f"Member {i}")

        response = client.get("/api/admin/feedback?limit=2&page=2", headers=admin_headers)
        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 1
        assert body["data"][0]["name"] == "Member 0"
        assert body["pagination"] == {"current": 2, "limit": 2, "total": 3, "pages": 2}

    def test_status_filter(self, client, admin_headers, make_feedback):
        reviewed = make_feedback()
        make_feedback()
        client.put(f"/api/admin/feedback/{reviewed}/status", json={"status": "reviewed"}, headers=admin_headers)

        body = client.get("/api/admin/feedback?status=reviewed", headers=admin_headers).json()
        assert [f["id"] for f in body["data"]] == [reviewed]
        assert body["pagination"]["total"] == 1

    def test_unknown_status_filter_rejected(self, client, admin_headers):
        response = client.get("/api/admin/feedback?status=archived", headers=admin_headers)
        assert response.status_code == 400

    def test_invalid_limit_rejected(self, client, admin_headers):
        response = client.get("/api/admin/feedback?limit=0", headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestFeedbackStatus:
    def test_updates_status(self, client, admin_headers, make_feedback):
        feedback_id = make_feedback()
        response = client.put(
            f"/api/admin/feedback/{feedback_id}/status", json={"status": "approved"}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "approved"

    def test_invalid_status_rejected(self, client, admin_headers, make_feedback):
        feedback_id = make_feedback()
        response = client.put(
            f"/api/admin/feedback/{feedback_id}/status", json={"status": "archived"}, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_unknown_id_not_found(self, client, admin_headers):
        for feedback_id in (str(ObjectId()), "not-an-id"):
            response = client.put(
                f"/api/admin/feedback/{feedback_id}/status", json={"status": "reviewed"}, headers=admin_headers
            )
            assert response.status_code == 404
            assert response.json()["code"] == "NOT_FOUND"


class TestPromote:
    def test_copies_edited_text_into_draft(self, client, admin_headers, make_feedback):
        feedback_id = make_feedback(email="karim@example.com")

        response = _promote(client, admin_headers, feedback_id, priority="high")
        assert response.status_code == 201
        data = response.json()["data"]

        suggestion = data["votingSuggestion"]
        assert suggestion["title"] == "Staffing"
        assert suggestion["issueDescription"] == "Queues are long at peak hours"
        assert suggestion["suggestedImprovement"] == "Add staff during peak hours"
        assert suggestion["submitterName"] == "A. Karim"
        assert suggestion["submitterEmail"] == "karim@example.com"
        assert suggestion["originalFeedbackId"] == feedback_id
        assert suggestion["status"] == "draft"
        assert suggestion["createdBy"] == "admin"
        assert suggestion["priority"] == "high"

        original = data["originalFeedback"]
        assert original["id"] == feedback_id
        assert original["submitter"] == "A. Karim"
        assert original["originalSuggestion"]["issueDescription"] == "Long queues"

    def test_leaves_feedback_unchanged(self, client, admin_headers, make_feedback):
        make_feedback()
        before = client.get("/api/feedback", headers=admin_headers).json()["data"][0]

        _promote(client, admin_headers, before["id"])

        after = client.get("/api/feedback", headers=admin_headers).json()["data"][0]
        assert after == before

    def test_missing_fields_rejected(self, client, admin_headers, make_feedback):
        feedback_id = make_feedback()
        response = _promote(client, admin_headers, feedback_id, title="")
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_zero_suggestion_number_rejected(self, client, admin_headers, make_feedback):
        feedback_id = make_feedback()
        response = _promote(client, admin_headers, feedback_id, suggestionNumber=0)
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_unknown_feedback(self, client, admin_headers):
        response = _promote(client, admin_headers, str(ObjectId()))
        assert response.status_code == 404
        assert response.json()["code"] == "FEEDBACK_NOT_FOUND"

    def test_unknown_suggestion_number(self, client, admin_headers, make_feedback):
        feedback_id = make_feedback()
        response = _promote(client, admin_headers, feedback_id, suggestionNumber=3)
        assert response.status_code == 404
        assert response.json()["code"] == "SUGGESTION_NOT_FOUND"


class TestSuggestionManagement:
    def test_list_includes_original_feedback_summary(self, client, admin_headers, make_feedback, make_suggestion):
        feedback_id = make_feedback(email="karim@example.com")
        _promote(client, admin_headers, feedback_id)
        make_suggestion(title="Direct", activate=False)

        body = client.get("/api/admin/suggestions", headers=admin_headers).json()
        assert body["count"] == 2
        direct, promoted = body["data"]
        assert direct["title"] == "Direct"
        assert direct["originalFeedback"] is None
        assert promoted["originalFeedback"]["id"] == feedback_id
        assert promoted["originalFeedback"]["email"] == "karim@example.com"

    def test_list_status_filter(self, client, admin_headers, make_suggestion):
        active = make_suggestion(title="Active")
        make_suggestion(title="Draft", activate=False)

        body = client.get("/api/admin/suggestions?status=active", headers=admin_headers).json()
        assert [s["id"] for s in body["data"]] == [active]

    def test_create_direct_starts_as_draft(self, client, admin_headers):
        response = client.post(
            "/api/admin/suggestions",
            json={
                "title": "  Parking  ",
                "issueDescription": "Not enough parking",
                "suggestedImprovement": "Open the east lot",
                "submitterName": "Admin",
                "status": "active",
                "createdBy": "someone",
            },
            headers=admin_headers,
        )
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["title"] == "Parking"
        assert data["status"] == "draft"
        assert data["createdBy"] == "admin"
        assert data["originalFeedbackId"] is None

    def test_create_missing_fields_rejected(self, client, admin_headers):
        response = client.post("/api/admin/suggestions", json={"title": "Parking"}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_create_invalid_original_feedback_id_rejected(self, client, admin_headers):
        response = client.post(
            "/api/admin/suggestions",
            json={
                "title": "Parking",
                "issueDescription": "Not enough parking",
                "suggestedImprovement": "Open the east lot",
                "submitterName": "Admin",
                "originalFeedbackId": "nope",
            },
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_create_invalid_submitter_email_rejected(self, client, admin_headers):
        response = client.post(
            "/api/admin/suggestions",
            json={
                "title": "Parking",
                "issueDescription": "Not enough parking",
                "suggestedImprovement": "Open the east lot",
                "submitterName": "Admin",
                "submitterEmail": "not-an-email",
            },
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_EMAIL"

    def test_update_invalid_submitter_email_rejected(self, client, admin_headers, make_suggestion):
        suggestion_id = make_suggestion()
        response = client.put(
            f"/api/admin/suggestions/{suggestion_id}", json={"submitterEmail": "nope@"}, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_EMAIL"

    def test_update_valid_submitter_email(self, client, admin_headers, make_suggestion):
        suggestion_id = make_suggestion()
        response = client.put(
            f"/api/admin/suggestions/{suggestion_id}",
            json={"submitterEmail": " karim@example.com "},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["submitterEmail"] == "karim@example.com"

    def test_update_preserves_provenance(self, client, admin_headers, make_feedback):
        feedback_id = make_feedback()
        suggestion = _promote(client, admin_headers, feedback_id).json()["data"]["votingSuggestion"]

        response = client.put(
            f"/api/admin/suggestions/{suggestion['id']}",
            json={
                "title": "Peak-hour staffing",
                "priority": "high",
                "originalFeedbackId": str(ObjectId()),
                "createdBy": "intruder",
                "status": "draft",
            },
            headers=admin_headers,
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "Peak-hour staffing"
        assert data["priority"] == "high"
        assert data["originalFeedbackId"] == feedback_id
        assert data["createdBy"] == "admin"

    def test_update_does_not_reopen_to_draft(self, client, admin_headers, make_suggestion):
        suggestion_id = make_suggestion()
        response = client.put(
            f"/api/admin/suggestions/{suggestion_id}", json={"status": "draft"}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "active"

    def test_update_invalid_priority_rejected(self, client, admin_headers, make_suggestion):
        suggestion_id = make_suggestion()
        response = client.put(
            f"/api/admin/suggestions/{suggestion_id}", json={"priority": "urgent"}, headers=admin_headers
        )
        assert response.status_code == 400

    def test_update_unknown_suggestion(self, client, admin_headers):
        response = client.put(f"/api/admin/suggestions/{ObjectId()}", json={"title": "x"}, headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_delete(self, client, admin_headers, make_suggestion):
        suggestion_id = make_suggestion(title="Obsolete")

        response = client.delete(f"/api/admin/suggestions/{suggestion_id}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["data"] == {"id": suggestion_id, "title": "Obsolete"}

        again = client.delete(f"/api/admin/suggestions/{suggestion_id}", headers=admin_headers)
        assert again.status_code == 404

    def test_lifecycle_transitions_are_permissive(self, client, admin_headers, make_suggestion):
        suggestion_id = make_suggestion(activate=False)

        closed = client.post(f"/api/admin/suggestions/{suggestion_id}/close", headers=admin_headers)
        assert closed.status_code == 200
        assert closed.json()["data"]["status"] == "closed"

        reopened = client.post(f"/api/admin/suggestions/{suggestion_id}/activate", headers=admin_headers)
        assert reopened.status_code == 200
        assert reopened.json()["data"]["status"] == "active"

    def test_lifecycle_unknown_suggestion(self, client, admin_headers):
        response = client.post(f"/api/admin/suggestions/{ObjectId()}/activate", headers=admin_headers)
        assert response.status_code == 404


class TestStatistics:
    def test_summary(self, client, admin_headers, make_feedback, make_suggestion):
        for _ in range(6):
            make_feedback()
        suggestion_id = make_suggestion()
        make_suggestion(activate=False)
        client.post(f"/api/voting/suggestions/{suggestion_id}/vote", json={"vote": "agree"})
        client.post(
            f"/api/voting/suggestions/{suggestion_id}/vote",
            json={"vote": "disagree"},
            headers={"User-Agent": "OtherBrowser/2.0"},
        )

        response = client.get("/api/admin/statistics", headers=admin_headers)
        assert response.status_code == 200
        data = response.json()["data"]

        assert data["feedback"] == {"pending": 6}
        assert data["suggestions"] == {"active": 1, "draft": 1}
        assert data["voting"] == {"totalVotes": 2, "agreeVotes": 1, "disagreeVotes": 1, "uniqueVoters": 2}
        assert len(data["recent"]["feedback"]) == 5
        assert set(data["recent"]["feedback"][0]) == {"id", "name", "submittedAt", "status", "suggestions"}
        assert len(data["recent"]["votes"]) == 2
        assert set(data["recent"]["votes"][0]) == {"id", "vote", "votedAt", "suggestionId"}

    def test_voting_section_degrades_on_store_fault(self, client, admin_headers, make_feedback):
        make_feedback()
        with patch(
            "council_feedback.crud.votes.get_voting_stats",
            AsyncMock(side_effect=ServerSelectionTimeoutError("store down")),
        ):
            response = client.get("/api/admin/statistics", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["voting"] == {"totalVotes": 0, "agreeVotes": 0, "disagreeVotes": 0, "uniqueVoters": 0}
        assert data["feedback"] == {"pending": 1}
