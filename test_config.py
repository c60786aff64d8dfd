# test_config.py
import os
import unittest
from unittest import mock

from config import DEFAULT_API_URL, Settings, log_level


class TestSettings(unittest.TestCase):
    def load(self, **env):
        with mock.patch.dict(os.environ, env, clear=True), mock.patch("config.load_dotenv"):
            return Settings.load()

    def test_defaults(self):
        settings = self.load()
        self.assertEqual(settings.api_url, DEFAULT_API_URL)
        self.assertEqual(settings.timeout, 10.0)
        self.assertEqual(settings.page_size, 10)
        self.assertEqual(settings.oauth_url, f"{DEFAULT_API_URL}/oauth2/authorization/google")

    def test_environment_overrides(self):
        settings = self.load(
            EXPENSIA_API_URL="https://api.example.com/expensia/",
            EXPENSIA_API_TIMEOUT="3.5",
            EXPENSIA_PAGE_SIZE="25",
        )
        self.assertEqual(settings.api_url, "https://api.example.com/expensia")
        self.assertEqual(settings.timeout, 3.5)
        self.assertEqual(settings.page_size, 25)
        self.assertEqual(settings.oauth_url, "https://api.example.com/expensia/oauth2/authorization/google")

    def test_bad_number(self):
        with self.assertRaises(ValueError) as ctx:
            self.load(EXPENSIA_PAGE_SIZE="ten")
        self.assertIn("EXPENSIA_PAGE_SIZE", str(ctx.exception))

    def test_log_level(self):
        with mock.patch.dict(os.environ, {"EXPENSIA_LOG_LEVEL": "debug"}, clear=True):
            self.assertEqual(log_level(), "DEBUG")
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(log_level(), "INFO")


if __name__ == "__main__":
    unittest.main()
