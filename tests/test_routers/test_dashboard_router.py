import unittest
from types import SimpleNamespace as Obj
from unittest.mock import patch
from fastapi.testclient import TestClient

from main import app
from core.database import get_db
from auth.services.auth_service import get_current_active_user, get_session_client
from authz.deps import get_workflow_state
from application.workflow import WorkflowState
from dashboard.schema import OrganizerDashboard, StaffDashboard
from posting.schemas import DashboardStats


class DashboardRouterTests(unittest.TestCase):
    def setUp(self):
        def _fake_db():
            yield None

        self.state = WorkflowState()
        app.dependency_overrides[get_db] = _fake_db
        app.dependency_overrides[get_session_client] = lambda: "client"
        app.dependency_overrides[get_workflow_state] = lambda: self.state
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    @patch("dashboard.router.service.load_dashboard")
    def test_organizer_dashboard(self, mock_load):
        user = Obj(id="org-1", role="organizer")
        app.dependency_overrides[get_current_active_user] = lambda: user
        mock_load.return_value = OrganizerDashboard(stats=DashboardStats(active_postings=2, total_applicants=3, hired=1))
        resp = self.client.get("/api/dashboard")
        self.assertEqual(resp.status_code, 200, resp.text)
        body = resp.json()
        self.assertEqual(body["view"], "organizer")
        self.assertEqual(body["stats"], {"active_postings": 2, "total_applicants": 3, "hired": 1})
        mock_load.assert_called_once_with("client", user, self.state, "")

    @patch("dashboard.router.service.load_dashboard")
    def test_staff_dashboard_setup_required(self, mock_load):
        app.dependency_overrides[get_current_active_user] = lambda: Obj(id="staff-1", role="staff")
        mock_load.return_value = StaffDashboard(user_location="Oakland", setup_required=True)
        resp = self.client.get("/api/dashboard", params={"q": "gala"})
        self.assertEqual(resp.status_code, 200, resp.text)
        body = resp.json()
        self.assertEqual(body["view"], "staff")
        self.assertTrue(body["setup_required"])
        self.assertEqual(mock_load.call_args.args[3], "gala")


if __name__ == "__main__":
    unittest.main()
