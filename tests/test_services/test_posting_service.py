# tests/test_services/test_posting_service.py
import unittest
from datetime import date, datetime, timezone
from types import SimpleNamespace as Obj

from core.errors import BackendUnavailable, NotFound, ValidationError
from client.sql_client import SqlBackendClient
from posting import service
from posting.models import PostingStatus
from posting.schemas import JobPostingCreatePayload, JobPostingUpdate
from user.models import UserRole
from staffing_fixtures import BackendTestCase


class DeriveStatusTests(unittest.TestCase):
    def test_filled_iff_hired_reaches_positions(self):
        self.assertEqual(service.derive_status(0, 2), PostingStatus.active)
        self.assertEqual(service.derive_status(1, 2), PostingStatus.active)
        self.assertEqual(service.derive_status(2, 2), PostingStatus.filled)
        self.assertEqual(service.derive_status(3, 2), PostingStatus.filled)

    def test_hourly_rate_strips_non_digits(self):
        self.assertEqual(service.parse_hourly_rate("$25/hr"), 25)
        self.assertEqual(service.parse_hourly_rate(30), 30)
        with self.assertRaises(ValidationError):
            service.parse_hourly_rate("free")

    def test_positions_must_be_positive_int(self):
        self.assertEqual(service.parse_positions("3"), 3)
        for bad in ("0", "-1", "two"):
            with self.assertRaises(ValidationError):
                service.parse_positions(bad)

    def test_compute_stats(self):
        postings = [Obj(status=PostingStatus.active), Obj(status=PostingStatus.filled), Obj(status=PostingStatus.active)]
        june = datetime(2025, 6, 3)
        may = datetime(2025, 5, 20)
        apps = [
            Obj(status="accepted", created_at=june),
            Obj(status="accepted", created_at=may),
            Obj(status="pending", created_at=june),
            Obj(status="rejected", created_at=june),
        ]
        stats = service.compute_stats(postings, apps)
        self.assertEqual((stats.active_postings, stats.total_applicants, stats.hired), (2, 4, 2))

        this_month = service.compute_stats(postings, apps, since=datetime(2025, 6, 1, tzinfo=timezone.utc))
        self.assertEqual(this_month.hired, 1)


class PostingServiceTests(BackendTestCase):
    def setUp(self):
        super().setUp()
        self.add_profile("org-1", UserRole.organizer, company="Acme Events")
        self.add_profile("org-2", UserRole.organizer, company="Other Co")

    def _payload(self, **overrides):
        data = dict(
            title="Wedding servers",
            start_date=date(2025, 8, 9),
            location="Napa, CA",
            positions_needed="3",
            hourly_rate="$28",
            role="Server",
        )
        data.update(overrides)
        return JobPostingCreatePayload(**data)

    # ---- create_posting ----
    def test_create_defaults(self):
        posting = service.create_posting(self.client, "org-1", self._payload())
        self.assertEqual(posting.end_date, date(2025, 8, 9))
        self.assertEqual(posting.hourly_rate, 28)
        self.assertEqual(posting.positions_needed, 3)
        self.assertEqual(posting.hired, 0)
        self.assertEqual(posting.status, PostingStatus.active)
        self.assertEqual(posting.organizer_id, "org-1")

    def test_create_keeps_explicit_end_date(self):
        posting = service.create_posting(self.client, "org-1", self._payload(end_date=date(2025, 8, 10)))
        self.assertEqual(posting.end_date, date(2025, 8, 10))

    def test_create_rejects_end_before_start(self):
        with self.assertRaises(ValidationError) as cm:
            service.create_posting(self.client, "org-1", self._payload(end_date=date(2025, 8, 1)))
        self.assertEqual(cm.exception.detail, "End date cannot be before the start date")
        self.assertEqual(service.list_postings(self.client, "org-1"), [])

    def test_create_requires_fields(self):
        for missing in ("title", "location", "role"):
            with self.assertRaises(ValidationError) as cm:
                service.create_posting(self.client, "org-1", self._payload(**{missing: ""}))
            self.assertEqual(cm.exception.detail, "Please fill in all required fields")
        with self.assertRaises(ValidationError):
            service.create_posting(self.client, "org-1", self._payload(start_date=None))
        with self.assertRaises(ValidationError):
            service.create_posting(self.client, "org-1", self._payload(hourly_rate=None))

    # ---- list_postings ----
    def test_list_newest_first_and_scoped(self):
        self.add_posting("org-1", title="Old")
        self.add_posting("org-2", title="Someone else's")
        self.add_posting("org-1", title="New")
        titles = [p.title for p in service.list_postings(self.client, "org-1")]
        self.assertEqual(titles, ["New", "Old"])

    def test_list_missing_table(self):
        client = SqlBackendClient(self.db, tables={})
        with self.assertRaises(BackendUnavailable) as cm:
            service.list_postings(client, "org-1")
        self.assertEqual(cm.exception.status_code, 503)

    # ---- update_posting ----
    def test_update_recomputes_status(self):
        row = self.add_posting("org-1", positions_needed=3, hired=2)
        after = service.update_posting(self.client, "org-1", row.id, JobPostingUpdate(positions_needed=2))
        self.assertEqual(after.status, PostingStatus.filled)
        reopened = service.update_posting(self.client, "org-1", row.id, JobPostingUpdate(positions_needed=4))
        self.assertEqual(reopened.status, PostingStatus.active)

    def test_update_cannot_drop_below_hired(self):
        row = self.add_posting("org-1", positions_needed=3, hired=2)
        with self.assertRaises(ValidationError):
            service.update_posting(self.client, "org-1", row.id, JobPostingUpdate(positions_needed=1))

    def test_update_other_organizers_posting_404(self):
        row = self.add_posting("org-2")
        with self.assertRaises(NotFound) as cm:
            service.update_posting(self.client, "org-1", row.id, JobPostingUpdate(title="Mine now"))
        self.assertEqual(cm.exception.status_code, 404)

    def test_update_rejects_end_before_start(self):
        row = self.add_posting("org-1")
        with self.assertRaises(ValidationError):
            service.update_posting(self.client, "org-1", row.id, JobPostingUpdate(end_date=date(2025, 1, 1)))

    def test_update_normalizes_rate(self):
        row = self.add_posting("org-1")
        after = service.update_posting(self.client, "org-1", row.id, JobPostingUpdate(hourly_rate="$40.00"))
        self.assertEqual(after.hourly_rate, 4000)

    # ---- set_hired ----
    def test_set_hired_floors_at_zero_and_derives(self):
        row = self.add_posting("org-1", positions_needed=1)
        posting = service.get_posting(self.client, row.id)
        filled = service.set_hired(self.client, posting, 1)
        self.assertEqual((filled.hired, filled.status), (1, PostingStatus.filled))
        emptied = service.set_hired(self.client, filled, -5)
        self.assertEqual((emptied.hired, emptied.status), (0, PostingStatus.active))


if __name__ == "__main__":
    unittest.main()
