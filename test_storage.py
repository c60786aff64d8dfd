# test_storage.py
import json
import unittest

from storage import TOKEN_KEY, USER_KEY, SessionStore


class TestSessionStore(unittest.TestCase):
    def setUp(self):
        self.state = {}
        self.store = SessionStore(self.state)

    def test_save_and_load(self):
        self.store.save("tok", {"email": "a@b.com", "roles": ["ROLE_USER"]})
        token, user = self.store.load()
        self.assertEqual(token, "tok")
        self.assertEqual(user["email"], "a@b.com")
        self.assertIsInstance(self.state[USER_KEY], str)

    def test_load_empty(self):
        self.assertIsNone(self.store.load())

    def test_token_without_user_is_torn_down(self):
        self.state[TOKEN_KEY] = "tok"
        self.assertIsNone(self.store.load())
        self.assertEqual(self.state, {})

    def test_user_without_token_is_torn_down(self):
        self.state[USER_KEY] = json.dumps({"email": "a@b.com"})
        self.assertIsNone(self.store.load())
        self.assertEqual(self.state, {})

    def test_corrupt_user_is_torn_down(self):
        self.state[TOKEN_KEY] = "tok"
        self.state[USER_KEY] = "{not json"
        self.assertIsNone(self.store.load())
        self.assertEqual(self.state, {})

    def test_non_object_user_is_torn_down(self):
        self.state[TOKEN_KEY] = "tok"
        self.state[USER_KEY] = json.dumps(["a@b.com"])
        self.assertIsNone(self.store.load())
        self.assertEqual(self.state, {})

    def test_save_requires_token(self):
        with self.assertRaises(ValueError):
            self.store.save("", {"email": "a@b.com"})
        self.assertEqual(self.state, {})

    def test_save_user_keeps_token(self):
        self.store.save("tok", {"email": "a@b.com"})
        self.store.save_user({"email": "a@b.com", "currency": "EUR"})
        token, user = self.store.load()
        self.assertEqual(token, "tok")
        self.assertEqual(user["currency"], "EUR")

    def test_save_user_without_token_does_nothing(self):
        self.store.save_user({"email": "a@b.com"})
        self.assertEqual(self.state, {})

    def test_clear_twice_is_harmless(self):
        self.store.save("tok", {"email": "a@b.com"})
        self.store.clear()
        self.store.clear()
        self.assertEqual(self.state, {})

    def test_clear_removes_both_keys(self):
        self.store.save("tok", {"email": "a@b.com"})
        self.state["other"] = 1
        self.store.clear()
        self.assertEqual(self.state, {"other": 1})
        self.assertIsNone(self.store.token)


if __name__ == "__main__":
    unittest.main()
