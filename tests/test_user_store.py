import sys
import tempfile
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from interview_coach.users import SqliteUserRepository, UserExistsError  # noqa: E402
from interview_coach.users.sqlite_store import hash_password, verify_password  # noqa: E402


class PasswordHashTests(unittest.TestCase):
    def test_hash_is_salted_and_verifiable(self):
        first = hash_password("hunter2")
        second = hash_password("hunter2")
        self.assertNotEqual(first, second)
        self.assertTrue(first.startswith("pbkdf2_sha256$"))
        self.assertTrue(verify_password("hunter2", first))
        self.assertFalse(verify_password("hunter3", first))

    def test_malformed_hash_never_verifies(self):
        self.assertFalse(verify_password("x", ""))
        self.assertFalse(verify_password("x", "plaintext"))


class SqliteUserRepositoryTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.repo = SqliteUserRepository(str(Path(self._tmp.name) / "nested" / "users.db"))
        self.repo.init()

    def tearDown(self):
        self._tmp.cleanup()

    def test_create_and_find(self):
        created = self.repo.create(name="Ada", email="ada@example.com", password="pw")
        by_email = self.repo.find_by_email("ada@example.com")
        by_id = self.repo.find_by_id(created["id"])
        self.assertEqual(by_email["id"], created["id"])
        self.assertIn("password_hash", by_email)
        self.assertNotIn("password_hash", by_id)
        self.assertIsNone(self.repo.find_by_email("nobody@example.com"))
        self.assertIsNone(self.repo.find_by_id(created["id"] + 1))

    def test_duplicate_email_raises(self):
        self.repo.create(name="Ada", email="ada@example.com", password="pw")
        with self.assertRaises(UserExistsError):
            self.repo.create(name="Other", email="ada@example.com", password="pw2")

    def test_sessions_are_kept_in_insertion_order(self):
        user = self.repo.create(name="Ada", email="ada@example.com", password="pw")
        self.repo.append_session(user["id"], {"field": "Chef", "date": "overridden"})
        self.repo.append_session(user["id"], {"field": "Data Analyst"})
        sessions = self.repo.list_sessions(user["id"])
        self.assertEqual([session["field"] for session in sessions], ["Chef", "Data Analyst"])
        self.assertNotEqual(sessions[0]["date"], "overridden")
        self.assertEqual(len(self.repo.find_by_id(user["id"])["sessions"]), 2)

    def test_clear(self):
        self.repo.create(name="Ada", email="ada@example.com", password="pw")
        self.repo.clear()
        self.assertIsNone(self.repo.find_by_email("ada@example.com"))


if __name__ == "__main__":
    unittest.main()
