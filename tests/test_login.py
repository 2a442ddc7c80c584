"""Tests for sessionauth.services.login: end-to-end login outcomes and response codes."""

import re
import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

from sqlalchemy.exc import IntegrityError, OperationalError

from sessionauth.models import UserSession
from sessionauth.services.login import login
from sessionauth.services.sessions import validate_session
from sqlite_support import add_admin, add_consumer, add_retailer, make_session_factory

HEX_64 = re.compile(r"^[0-9a-f]{64}$")


class LoginTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()
        add_consumer(self.db, "alice", "correct")

    def tearDown(self) -> None:
        self.db.close()


class TestLoginSuccess(LoginTestCase):
    def test_consumer_scenario(self) -> None:
        before = datetime.now(timezone.utc)
        result = login(self.db, "consumer", "alice", "correct")
        after = datetime.now(timezone.utc)

        self.assertEqual(result.http_status, 200)
        self.assertEqual(result.status, "success")
        self.assertEqual(result.code, "CONSUMER_LOGIN_SUCCESS")
        body = result.to_body()
        self.assertEqual(body["data"]["user"]["role"], "consumer")
        self.assertEqual(body["data"]["user"]["username"], "alice")
        self.assertNotIn("password_hash", body["data"]["user"])
        self.assertRegex(body["data"]["session"]["session_id"], HEX_64)

        expires_at = result.data.session.expires_at
        self.assertGreaterEqual(expires_at, before + timedelta(hours=24))
        self.assertLessEqual(expires_at, after + timedelta(hours=24))

    def test_expires_exactly_24h_after_creation(self) -> None:
        now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
        result = login(self.db, "consumer", "alice", "correct", now=now)
        self.assertEqual(result.data.session.expires_at, now + timedelta(hours=24))
        row = self.db.query(UserSession).one()
        self.assertEqual(row.user_type, "consumer")

    def test_issued_session_validates(self) -> None:
        result = login(self.db, "consumer", "alice", "correct")
        record = validate_session(self.db, result.data.session.session_id)
        self.assertIsNotNone(record)
        self.assertEqual(record.user_id, result.data.user.id)

    def test_one_session_per_successful_login(self) -> None:
        login(self.db, "consumer", "alice", "correct")
        self.assertEqual(self.db.query(UserSession).count(), 1)
        login(self.db, "consumer", "alice", "correct")
        self.assertEqual(self.db.query(UserSession).count(), 2)

    def test_retailer_and_admin_codes(self) -> None:
        add_retailer(self.db, "shop", "pw")
        add_admin(self.db, "root", "pw")
        retailer = login(self.db, "retailer", "shop", "pw")
        admin = login(self.db, "admin", "root", "pw")
        self.assertEqual(retailer.code, "RETAILER_LOGIN_SUCCESS")
        self.assertEqual(retailer.to_body()["data"]["user"]["role"], "retailer")
        self.assertEqual(admin.code, "ADMIN_LOGIN_SUCCESS")
        self.assertEqual(admin.to_body()["data"]["user"]["admin_type"], "super_admin")

    def test_custom_ttl(self) -> None:
        now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
        result = login(self.db, "consumer", "alice", "correct", ttl_hours=2, now=now)
        self.assertEqual(result.data.session.expires_at, now + timedelta(hours=2))


class TestLoginFailures(LoginTestCase):
    def test_empty_password_makes_no_storage_calls(self) -> None:
        db = MagicMock()
        result = login(db, "consumer", "alice", "")
        self.assertEqual(result.code, "MISSING_CREDENTIALS")
        self.assertEqual(result.http_status, 400)
        self.assertEqual(db.mock_calls, [])

    def test_missing_fields(self) -> None:
        for username, password in [(None, None), ("alice", None), ("  ", "correct")]:
            with self.subTest(username=username, password=password):
                self.assertEqual(login(self.db, "consumer", username, password).code, "MISSING_CREDENTIALS")

    def test_unknown_user_and_wrong_password_same_response(self) -> None:
        unknown = login(self.db, "consumer", "mallory", "correct")
        wrong = login(self.db, "consumer", "alice", "incorrect")
        self.assertEqual(unknown.to_body(), wrong.to_body())
        self.assertEqual(unknown.code, "INVALID_CREDENTIALS")
        self.assertEqual(unknown.http_status, wrong.http_status)
        self.assertEqual(unknown.http_status, 401)
        self.assertEqual(self.db.query(UserSession).count(), 0)

    def test_login_in_wrong_category_fails(self) -> None:
        self.assertEqual(login(self.db, "retailer", "alice", "correct").code, "INVALID_CREDENTIALS")

    def test_session_write_failure(self) -> None:
        with patch.object(
            self.db,
            "commit",
            side_effect=IntegrityError("INSERT", {}, Exception("duplicate key value")),
        ):
            result = login(self.db, "consumer", "alice", "correct")
        self.assertEqual(result.code, "SESSION_CREATION_FAILED")
        self.assertEqual(result.http_status, 500)
        self.assertNotIn("duplicate", result.message)
        self.assertNotIn("data", result.to_body())

    def test_database_unreachable(self) -> None:
        db = MagicMock()
        db.query.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
        result = login(db, "consumer", "alice", "correct")
        self.assertEqual(result.code, "DB_CONNECTION_ERROR")
        self.assertEqual(result.http_status, 500)
        self.assertNotIn("refused", result.message)

    def test_unexpected_error_is_server_error(self) -> None:
        with patch(
            "sessionauth.services.login.verify_credentials",
            side_effect=RuntimeError("boom"),
        ):
            result = login(self.db, "consumer", "alice", "correct")
        self.assertEqual(result.code, "SERVER_ERROR")
        self.assertEqual(result.http_status, 500)
        self.assertEqual(result.message, "Internal server error")


if __name__ == "__main__":
    unittest.main()
