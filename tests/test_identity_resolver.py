"""Tests for sessionauth.services.identity: session -> normalized identity per category."""

import unittest
from datetime import date, datetime, timedelta, timezone

from sessionauth.models import UserSession
from sessionauth.schemas.auth import AdminIdentity, ConsumerIdentity, RetailerIdentity
from sessionauth.services.identity import resolve_identity
from sessionauth.services.sessions import create_session
from sqlite_support import add_admin, add_consumer, add_retailer, make_session_factory

T0 = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
LATER = T0 + timedelta(hours=1)

CONSUMER_ONLY = {"gender", "birthdate", "age"}
ADMIN_ONLY = {"admin_type"}


class ResolverTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()

    def tearDown(self) -> None:
        self.db.close()


class TestResolveByCategory(ResolverTestCase):
    def test_consumer(self) -> None:
        row = add_consumer(self.db, "alice")
        record = create_session(self.db, row.id, "consumer", now=T0)
        identity, session = resolve_identity(self.db, record.session_id, now=LATER)
        self.assertIsInstance(identity, ConsumerIdentity)
        self.assertEqual(session.session_id, record.session_id)
        self.assertEqual(identity.username, "alice")
        self.assertEqual(identity.email, "alice@example.com")
        self.assertEqual(identity.gender, "female")
        self.assertEqual(identity.birthdate, date(1990, 5, 17))
        self.assertEqual(identity.age, 35)
        self.assertEqual(identity.location_id, 7)
        self.assertIsNotNone(identity.created_at)
        dumped = identity.model_dump()
        self.assertFalse(ADMIN_ONLY & dumped.keys())

    def test_retailer_has_no_consumer_or_admin_fields(self) -> None:
        row = add_retailer(self.db, "shop")
        record = create_session(self.db, row.id, "retailer", now=T0)
        identity, _ = resolve_identity(self.db, record.session_id, now=LATER)
        self.assertIsInstance(identity, RetailerIdentity)
        self.assertEqual(identity.role, "retailer")
        self.assertEqual(identity.location_id, 3)
        dumped = identity.model_dump()
        self.assertFalse(CONSUMER_ONLY & dumped.keys())
        self.assertFalse(ADMIN_ONLY & dumped.keys())

    def test_admin_has_empty_email_and_no_location(self) -> None:
        row = add_admin(self.db, "root")
        record = create_session(self.db, row.admin_id, "admin", now=T0)
        identity, _ = resolve_identity(self.db, record.session_id, now=LATER)
        self.assertIsInstance(identity, AdminIdentity)
        self.assertEqual(identity.id, row.admin_id)
        self.assertEqual(identity.email, "")
        self.assertEqual(identity.admin_type, "super_admin")
        self.assertIsNone(identity.created_at)
        dumped = identity.model_dump()
        self.assertFalse(CONSUMER_ONLY & dumped.keys())
        self.assertNotIn("location_id", dumped)

    def test_null_middle_name_becomes_empty(self) -> None:
        row = add_consumer(self.db, "bob", middle_name=None)
        record = create_session(self.db, row.id, "consumer", now=T0)
        identity, _ = resolve_identity(self.db, record.session_id, now=LATER)
        self.assertEqual(identity.middle_name, "")


class TestCrossCategoryIsolation(ResolverTestCase):
    """Same numeric id in several tables: the session's category decides the owner."""

    def test_category_tag_selects_table(self) -> None:
        consumer = add_consumer(self.db, "alice")
        retailer = add_retailer(self.db, "shop")
        admin = add_admin(self.db, "root")
        self.assertEqual(consumer.id, retailer.id)
        self.assertEqual(consumer.id, admin.admin_id)

        for category, expected_cls, expected_name in [
            ("consumer", ConsumerIdentity, "alice"),
            ("retailer", RetailerIdentity, "shop"),
            ("admin", AdminIdentity, "root"),
        ]:
            with self.subTest(category=category):
                record = create_session(self.db, 1, category, now=T0)
                identity, _ = resolve_identity(self.db, record.session_id, now=LATER)
                self.assertIsInstance(identity, expected_cls)
                self.assertEqual(identity.username, expected_name)
                self.assertEqual(identity.role, category)


class TestResolveFailures(ResolverTestCase):
    def test_unknown_token(self) -> None:
        self.assertIsNone(resolve_identity(self.db, "ef" * 32, now=LATER))

    def test_expired_session(self) -> None:
        row = add_consumer(self.db, "alice")
        record = create_session(self.db, row.id, "consumer", ttl_hours=1, now=T0)
        self.assertIsNone(
            resolve_identity(self.db, record.session_id, now=T0 + timedelta(hours=1, seconds=1))
        )

    def test_deleted_account_looks_like_invalid_session(self) -> None:
        row = add_consumer(self.db, "alice")
        record = create_session(self.db, row.id, "consumer", now=T0)
        self.db.delete(row)
        self.db.commit()
        self.assertIsNone(resolve_identity(self.db, record.session_id, now=LATER))

    def test_wrong_category_for_id(self) -> None:
        row = add_consumer(self.db, "alice")
        record = create_session(self.db, row.id, "retailer", now=T0)
        self.assertIsNone(resolve_identity(self.db, record.session_id, now=LATER))

    def test_unknown_category_tag_in_storage(self) -> None:
        add_consumer(self.db, "alice")
        token = "0a" * 32
        self.db.add(
            UserSession(
                session_id=token,
                user_id=1,
                user_type="supplier",
                expires_at=T0 + timedelta(hours=24),
                created_at=T0,
            )
        )
        self.db.commit()
        self.assertIsNone(resolve_identity(self.db, token, now=LATER))


if __name__ == "__main__":
    unittest.main()
