"""Unit tests for travel_api.services.sessions and the user repository behind it."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import jwt

from travel_api.core.database import Database
from travel_api.core.errors import (
    EmailInUseError,
    InvalidCredentialsError,
    InvalidTokenError,
    NoTokenError,
    UserNotFoundError,
)
from travel_api.core.security import TokenCodec, hash_password
from travel_api.models import Base, User
from travel_api.schemas.auth import Role, TokenPayload
from travel_api.services.sessions import SessionManager
from travel_api.services.users import UserRepository

SECRET = "session-test-secret-with-at-least-32-bytes"


def _expires_at(token: str) -> datetime:
    claims = jwt.decode(token, SECRET, algorithms=["HS256"], options={"verify_exp": False, "verify_iat": False})
    return datetime.fromtimestamp(claims["exp"], tz=UTC)


class SessionManagerTestCase(unittest.TestCase):
    """Fresh in-memory database and manager per test."""

    def setUp(self) -> None:
        self.database = Database("sqlite://")
        Base.metadata.create_all(self.database.engine)
        self.db = self.database.session()
        self.users = UserRepository(self.db)
        self.codec = TokenCodec(SECRET)
        self.manager = SessionManager(self.users, self.codec, bcrypt_rounds=4)

    def tearDown(self) -> None:
        self.db.close()
        self.database.dispose()


class TestRegister(SessionManagerTestCase):
    def test_creates_user_with_user_role(self) -> None:
        result = self.manager.register("A", "a@x.com", "secret1")
        self.assertEqual(result.user.email, "a@x.com")
        self.assertEqual(result.user.name, "A")
        self.assertIs(result.user.role, Role.USER)
        stored = self.users.get_by_email("a@x.com")
        self.assertIsNotNone(stored)
        self.assertNotEqual(stored.password_hash, "secret1")

    def test_password_hashed_with_configured_cost(self) -> None:
        self.manager.register("A", "a@x.com", "secret1")
        stored = self.users.get_by_email("a@x.com")
        self.assertEqual(stored.password_hash.split("$")[2], "04")

    def test_tokens_carry_new_user_id(self) -> None:
        result = self.manager.register("A", "a@x.com", "secret1")
        payload = self.codec.verify(result.access_token)
        self.assertEqual(payload, TokenPayload(user_id=result.user.id, role=Role.USER))
        self.assertEqual(self.codec.verify(result.refresh_token).user_id, result.user.id)

    def test_duplicate_email_rejected(self) -> None:
        self.manager.register("A", "a@x.com", "secret1")
        with self.assertRaises(EmailInUseError):
            self.manager.register("B", "a@x.com", "other-secret")
        self.assertEqual(len(self.users.list_all()), 1)

    def test_email_match_is_case_sensitive(self) -> None:
        self.manager.register("A", "a@x.com", "secret1")
        result = self.manager.register("B", "A@x.com", "secret1")
        self.assertEqual(result.user.email, "A@x.com")

    def test_remember_me_extends_access_token(self) -> None:
        short = self.manager.register("A", "a@x.com", "secret1", remember_me=False)
        long = self.manager.register("B", "b@x.com", "secret1", remember_me=True)
        self.assertGreater(
            _expires_at(long.access_token),
            _expires_at(short.access_token) + timedelta(days=28),
        )


class TestRepositoryCreateRace(SessionManagerTestCase):
    """A unique-constraint violation on insert surfaces as EmailInUseError."""

    def test_integrity_error_mapped(self) -> None:
        self.users.create(name="A", email="a@x.com", password_hash="h")
        with self.assertRaises(EmailInUseError):
            self.users.create(name="B", email="a@x.com", password_hash="h")
        # Session is usable again after the rollback.
        self.assertIsNotNone(self.users.get_by_email("a@x.com"))


class TestLogin(SessionManagerTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.registered = self.manager.register("A", "a@x.com", "secret1")

    def test_correct_credentials(self) -> None:
        result = self.manager.login("a@x.com", "secret1")
        self.assertEqual(result.user.id, self.registered.user.id)
        self.assertEqual(self.codec.verify(result.access_token).user_id, self.registered.user.id)

    def test_wrong_password_and_unknown_email_are_indistinguishable(self) -> None:
        with self.assertRaises(InvalidCredentialsError) as wrong_password:
            self.manager.login("a@x.com", "wrong-password")
        with self.assertRaises(InvalidCredentialsError) as unknown_email:
            self.manager.login("nobody@x.com", "secret1")
        self.assertEqual(wrong_password.exception.message, unknown_email.exception.message)
        self.assertEqual(wrong_password.exception.code, unknown_email.exception.code)

    def test_repeated_failures_do_not_lock_out(self) -> None:
        for _ in range(5):
            with self.assertRaises(InvalidCredentialsError):
                self.manager.login("a@x.com", "wrong-password")
        self.assertEqual(self.manager.login("a@x.com", "secret1").user.email, "a@x.com")


class TestRefresh(SessionManagerTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.registered = self.manager.register("A", "a@x.com", "secret1")

    def test_missing_token(self) -> None:
        for missing in (None, ""):
            with self.subTest(token=missing):
                with self.assertRaises(NoTokenError):
                    self.manager.refresh(missing)

    def test_invalid_token(self) -> None:
        with self.assertRaises(InvalidTokenError):
            self.manager.refresh("not-a-token")

    def test_expired_token(self) -> None:
        past = datetime.now(UTC) - timedelta(days=31)
        stale = TokenCodec(SECRET, clock=lambda: past).issue(
            TokenPayload(user_id=self.registered.user.id, role=Role.USER),
            timedelta(days=30),
        )
        with self.assertRaises(InvalidTokenError):
            self.manager.refresh(stale)

    def test_rotation_issues_new_pair(self) -> None:
        result = self.manager.refresh(self.registered.refresh_token)
        self.assertNotEqual(result.access_token, self.registered.access_token)
        self.assertNotEqual(result.refresh_token, self.registered.refresh_token)
        self.assertEqual(self.codec.verify(result.refresh_token).user_id, self.registered.user.id)
        self.assertEqual(result.user, self.registered.user)

    def test_remember_me_applies_to_new_access_token(self) -> None:
        result = self.manager.refresh(self.registered.refresh_token, remember_me=True)
        remaining = _expires_at(result.access_token) - datetime.now(UTC)
        self.assertGreater(remaining, timedelta(days=29))

    def test_deleted_user(self) -> None:
        self.db.delete(self.db.get(User, self.registered.user.id))
        self.db.commit()
        with self.assertRaises(UserNotFoundError):
            self.manager.refresh(self.registered.refresh_token)

    def test_role_read_from_store(self) -> None:
        user = self.db.get(User, self.registered.user.id)
        user.role = Role.ADMIN.value
        self.db.commit()
        result = self.manager.refresh(self.registered.refresh_token)
        self.assertIs(result.user.role, Role.ADMIN)
        self.assertIs(self.codec.verify(result.access_token).role, Role.ADMIN)


class TestRefreshDoesNotTouchStoreOnBadToken(unittest.TestCase):
    """Token verification happens before any store lookup."""

    def test_invalid_token_skips_lookup(self) -> None:
        users = MagicMock(spec=UserRepository)
        manager = SessionManager(users, TokenCodec(SECRET), bcrypt_rounds=4)
        with self.assertRaises(InvalidTokenError):
            manager.refresh("garbage")
        users.get_by_id.assert_not_called()

    def test_missing_token_skips_lookup(self) -> None:
        users = MagicMock(spec=UserRepository)
        manager = SessionManager(users, TokenCodec(SECRET), bcrypt_rounds=4)
        with self.assertRaises(NoTokenError):
            manager.refresh(None)
        users.get_by_id.assert_not_called()


class TestLoginWithMockStore(unittest.TestCase):
    def test_unknown_email_rejected_after_single_lookup(self) -> None:
        users = MagicMock(spec=UserRepository)
        users.get_by_email.return_value = None
        manager = SessionManager(users, TokenCodec(SECRET), bcrypt_rounds=4)
        with self.assertRaises(InvalidCredentialsError):
            manager.login("nobody@x.com", "secret1")
        users.get_by_email.assert_called_once_with("nobody@x.com")

    def test_admin_login_carries_admin_role(self) -> None:
        users = MagicMock(spec=UserRepository)
        users.get_by_email.return_value = User(
            id=5,
            email="admin@x.com",
            name="Admin",
            password_hash=hash_password("secret1", rounds=4),
            role="admin",
        )
        codec = TokenCodec(SECRET)
        manager = SessionManager(users, codec, bcrypt_rounds=4)
        result = manager.login("admin@x.com", "secret1")
        self.assertIs(result.user.role, Role.ADMIN)
        self.assertEqual(codec.verify(result.access_token), TokenPayload(user_id=5, role=Role.ADMIN))


class TestLogout(unittest.TestCase):
    def test_logout_never_fails(self) -> None:
        manager = SessionManager(MagicMock(spec=UserRepository), TokenCodec(SECRET), bcrypt_rounds=4)
        with self.assertLogs("travel_api.auth", level="INFO") as logs:
            manager.logout(None)
            manager.logout(12)
        self.assertIn("user_id=12", logs.output[1])


if __name__ == "__main__":
    unittest.main()
