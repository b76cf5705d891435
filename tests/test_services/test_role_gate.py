# tests/test_services/test_role_gate.py
import unittest
from unittest.mock import MagicMock

from auth.services import role_gate
from auth.utils.auth_utils import decode_access_token
from client.sql_client import SqlBackendClient
from core.errors import (
    AuthError,
    InvalidCredentials,
    ProfileCreationFailed,
    ProfileFetchFailed,
    RoleMismatch,
    ValidationError,
)
from user.models import UserRole
from user.schemas import SignupPayload
from staffing_fixtures import BackendTestCase


def staff_form(**overrides) -> SignupPayload:
    data = dict(
        email="sam@example.com",
        password="abc123",
        confirm_password="abc123",
        full_name="Sam Staff",
        phone="555-0101",
        location="San Francisco, CA",
        role=UserRole.staff,
    )
    data.update(overrides)
    return SignupPayload(**data)


def organizer_form(**overrides) -> SignupPayload:
    data = dict(
        email="olivia@example.com",
        password="abc123",
        confirm_password="abc123",
        full_name="Olivia Organizer",
        phone="555-0102",
        company="Acme Events",
        location="Oakland, CA",
        role=UserRole.organizer,
    )
    data.update(overrides)
    return SignupPayload(**data)


class SignupValidationTests(unittest.TestCase):
    def assertFailsWith(self, payload, role, message):
        client = MagicMock()
        with self.assertRaises(ValidationError) as cm:
            role_gate.signup(client, payload, role)
        self.assertEqual(cm.exception.status_code, 422)
        self.assertEqual(cm.exception.detail, message)
        client.sign_up.assert_not_called()
        client.table.assert_not_called()

    def test_missing_required_field(self):
        self.assertFailsWith(staff_form(phone=""), UserRole.staff, "Please fill in all required fields")

    def test_bad_email_fails_before_backend(self):
        self.assertFailsWith(
            staff_form(email="bad-email"),
            UserRole.staff,
            "Please enter a valid email address (e.g., user@example.com)",
        )

    def test_missing_fields_reported_before_bad_email(self):
        self.assertFailsWith(
            staff_form(email="bad-email", full_name=""),
            UserRole.staff,
            "Please fill in all required fields",
        )

    def test_password_mismatch(self):
        self.assertFailsWith(staff_form(confirm_password="abc124"), UserRole.staff, "Passwords do not match")

    def test_mismatch_reported_before_length(self):
        self.assertFailsWith(
            staff_form(password="abc12", confirm_password="abc"),
            UserRole.staff,
            "Passwords do not match",
        )

    def test_five_char_password_rejected(self):
        self.assertFailsWith(
            staff_form(password="abc12", confirm_password="abc12"),
            UserRole.staff,
            "Password must be at least 6 characters",
        )

    def test_six_char_password_passes_length_and_match(self):
        # no exception from the validation gates
        role_gate.validate_signup(staff_form(password="abc123", confirm_password="abc123"), UserRole.staff)

    def test_organizer_needs_company(self):
        self.assertFailsWith(
            organizer_form(company=""),
            UserRole.organizer,
            "Please enter your company or organization name",
        )

    def test_organizer_needs_location(self):
        self.assertFailsWith(organizer_form(location=None), UserRole.organizer, "Please enter your location")

    def test_staff_needs_location(self):
        self.assertFailsWith(
            staff_form(location=""),
            UserRole.staff,
            "Please enter your location so we can show you nearby jobs",
        )


class SignupTests(BackendTestCase):
    def test_signup_creates_identity_and_profile(self):
        session = role_gate.signup(self.client, organizer_form(email=" Olivia@Example.com "), UserRole.organizer)
        self.assertEqual(session.profile.role, UserRole.organizer)
        self.assertEqual(session.profile.email, "olivia@example.com")
        self.assertEqual(session.profile.company, "Acme Events")

        claims = decode_access_token(session.access_token)
        self.assertEqual(claims["sub"], session.user.id)
        self.assertEqual(claims["role"], "organizer")

    def test_staff_profile_drops_company(self):
        session = role_gate.signup(self.client, staff_form(company="Ignored Inc"), UserRole.staff)
        self.assertIsNone(session.profile.company)
        self.assertEqual(session.profile.location, "San Francisco, CA")

    def test_duplicate_email_translated(self):
        role_gate.signup(self.client, staff_form(), UserRole.staff)
        with self.assertRaises(AuthError) as cm:
            role_gate.signup(SqlBackendClient(self.db), staff_form(), UserRole.staff)
        self.assertEqual(cm.exception.detail, "This email is already registered. Please try logging in instead.")

    def test_profile_failure_leaves_recoverable_identity(self):
        broken = SqlBackendClient(self.db, tables={})
        with self.assertRaises(ProfileCreationFailed):
            role_gate.signup(broken, staff_form(), UserRole.staff)
        self.assertIsNone(broken.get_user())

        # the identity exists; logging in finds no profile
        with self.assertRaises(ProfileFetchFailed):
            role_gate.login(SqlBackendClient(self.db), "sam@example.com", "abc123", UserRole.staff)

        client = SqlBackendClient(self.db)
        client.sign_in_with_password("sam@example.com", "abc123")
        session = role_gate.complete_profile(client, staff_form(email=""), UserRole.staff)
        self.assertEqual(session.profile.email, "sam@example.com")

        again = role_gate.login(SqlBackendClient(self.db), "sam@example.com", "abc123", UserRole.staff)
        self.assertEqual(again.profile.id, session.profile.id)

    def test_complete_profile_requires_signed_in_identity(self):
        with self.assertRaises(AuthError):
            role_gate.complete_profile(self.client, staff_form(), UserRole.staff)


class LoginTests(BackendTestCase):
    def setUp(self):
        super().setUp()
        role_gate.signup(SqlBackendClient(self.db), staff_form(), UserRole.staff)

    def test_login_ok(self):
        session = role_gate.login(self.client, "sam@example.com", "abc123", UserRole.staff)
        self.assertEqual(session.profile.full_name, "Sam Staff")
        self.assertIsNotNone(self.client.get_user())

    def test_blank_credentials(self):
        with self.assertRaises(ValidationError) as cm:
            role_gate.login(self.client, "", "abc123", UserRole.staff)
        self.assertEqual(cm.exception.detail, "Please enter email and password")

    def test_wrong_password(self):
        with self.assertRaises(InvalidCredentials) as cm:
            role_gate.login(self.client, "sam@example.com", "wrong1", UserRole.staff)
        self.assertEqual(cm.exception.status_code, 401)

    def test_role_mismatch_tears_session_down(self):
        with self.assertRaises(RoleMismatch) as cm:
            role_gate.login(self.client, "sam@example.com", "abc123", UserRole.organizer)
        self.assertEqual(cm.exception.registered_role, "staff")
        self.assertIn("registered as Staff", cm.exception.detail)
        self.assertIsNone(self.client.get_user())

    def test_logout(self):
        role_gate.login(self.client, "sam@example.com", "abc123", UserRole.staff)
        role_gate.logout(self.client)
        self.assertIsNone(self.client.get_user())


if __name__ == "__main__":
    unittest.main()
