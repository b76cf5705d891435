import unittest
from datetime import date
from types import SimpleNamespace as Obj
from unittest.mock import MagicMock, patch
from fastapi.testclient import TestClient

from main import app
from core.database import get_db
from core.errors import AssignmentRequired, InvalidTransition, NoActivePostings
from auth.services.auth_service import get_session_client
from authz.deps import get_workflow_state, require_organizer
from application.models import ApplicationStatus
from application.router import get_workflow
from application.schemas import ApplicantView, ApplicationSchema, HireResult, RejectResult
from application.workflow import WorkflowState
from posting.models import PostingStatus
from posting.schemas import JobPostingSchema

ORGANIZER = Obj(id="org-1", role="organizer")


def _posting(**kw) -> JobPostingSchema:
    data = dict(
        id=1, organizer_id="org-1", title="Gala", start_date=date(2025, 7, 4), end_date=date(2025, 7, 4),
        location="Oakland", positions_needed=1, hourly_rate=25, role="Bartender",
        status=PostingStatus.active, hired=0,
    )
    data.update(kw)
    return JobPostingSchema(**data)


def _application(status=ApplicationStatus.pending, **kw) -> ApplicationSchema:
    data = dict(id=5, job_id=1, applicant_id="staff-1", cover_letter="hi", availability="Weekends", status=status)
    data.update(kw)
    return ApplicationSchema(**data)


class ApplicationRouterTests(unittest.TestCase):
    def setUp(self):
        class FakeDB:
            def rollback(self): pass
        def _fake_db():
            yield FakeDB()

        self.workflow = MagicMock()
        self.state = WorkflowState()
        app.dependency_overrides[get_db] = _fake_db
        app.dependency_overrides[require_organizer] = lambda: ORGANIZER
        app.dependency_overrides[get_session_client] = lambda: "client"
        app.dependency_overrides[get_workflow_state] = lambda: self.state
        app.dependency_overrides[get_workflow] = lambda: self.workflow

        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    # --- LIST ---

    @patch("application.router.service.load_applicants")
    @patch("application.router.list_postings")
    def test_list_applicants_hides_rejected(self, mock_postings, mock_load):
        mock_postings.return_value = [_posting()]
        mock_load.return_value = [
            ApplicantView(**_application(id=1).model_dump()),
            ApplicantView(**_application(id=2, status=ApplicationStatus.rejected).model_dump()),
        ]
        resp = self.client.get("/api/applications")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual([a["id"] for a in resp.json()], [1])

    # --- ACCEPT ---

    def test_accept_without_body(self):
        filled = _posting(hired=1, status=PostingStatus.filled)
        self.workflow.accept.return_value = HireResult(
            application=_application(ApplicationStatus.accepted), posting=filled,
        )
        resp = self.client.post("/api/applications/5/accept")
        self.assertEqual(resp.status_code, 200, resp.text)
        body = resp.json()
        self.assertEqual(body["application"]["status"], "accepted")
        self.assertEqual(body["posting"]["hired"], 1)
        self.assertEqual(body["posting"]["status"], "filled")
        self.assertIsNone(body["previous_posting"])
        self.workflow.accept.assert_called_once_with(5, None)

    def test_accept_with_target(self):
        self.workflow.accept.return_value = HireResult(
            application=_application(ApplicationStatus.accepted), posting=_posting(id=3, hired=1),
        )
        resp = self.client.post("/api/applications/5/accept", json={"posting_id": 3})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.workflow.accept.assert_called_once_with(5, 3)

    def test_accept_needs_assignment_409(self):
        self.workflow.accept.side_effect = AssignmentRequired(5, [_posting(id=1), _posting(id=2)])
        resp = self.client.post("/api/applications/5/accept")
        self.assertEqual(resp.status_code, 409)
        detail = resp.json()["detail"]
        self.assertEqual(detail["application_id"], 5)
        self.assertEqual(detail["candidate_posting_ids"], [1, 2])

    def test_accept_no_active_postings_409(self):
        self.workflow.accept.side_effect = NoActivePostings()
        resp = self.client.post("/api/applications/5/accept")
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["detail"], "No active job postings available")

    def test_accept_rejected_422(self):
        self.workflow.accept.side_effect = InvalidTransition("Rejected applications cannot be hired")
        resp = self.client.post("/api/applications/5/accept")
        self.assertEqual(resp.status_code, 422)

    # --- ASSIGN ---

    def test_assign_200(self):
        self.workflow.assign.return_value = HireResult(
            application=_application(ApplicationStatus.accepted), posting=_posting(id=2, hired=1),
        )
        resp = self.client.post("/api/applications/5/assign", json={"posting_id": 2})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["posting"]["id"], 2)
        self.workflow.assign.assert_called_once_with(5, 2)

    def test_assign_requires_posting_id(self):
        resp = self.client.post("/api/applications/5/assign", json={})
        self.assertEqual(resp.status_code, 422)

    # --- REJECT ---

    def test_reject_200(self):
        self.workflow.reject.return_value = RejectResult(
            application=_application(ApplicationStatus.rejected), released_posting=_posting(hired=0),
        )
        resp = self.client.post("/api/applications/5/reject")
        self.assertEqual(resp.status_code, 200, resp.text)
        body = resp.json()
        self.assertEqual(body["application"]["status"], "rejected")
        self.assertEqual(body["released_posting"]["status"], "active")


if __name__ == "__main__":
    unittest.main()
