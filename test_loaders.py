# test_loaders.py
import threading
import unittest
from unittest import mock

import requests

from api_client import ApiClient, ApiError, UnauthorizedError
from loaders import Result, fetch_all
from storage import SessionStore
from test_api_client import make_response


class RacingState(dict):
    """Session state whose deletes all line up before any of them runs."""

    def __init__(self, parties):
        super().__init__()
        self.barrier = threading.Barrier(parties, timeout=5)

    def __delitem__(self, key):
        self.barrier.wait()
        super().__delitem__(key)


class TestFetchAll(unittest.TestCase):
    def test_empty(self):
        self.assertEqual(fetch_all(), {})

    def test_failures_are_isolated(self):
        def failing():
            raise ApiError(500, "boom")

        with self.assertLogs("loaders", level="DEBUG") as logs:
            results = fetch_all(
                income=lambda: {"response": 100},
                expense=failing,
                count=lambda: {"response": 4},
            )

        self.assertTrue(results["income"].ok)
        self.assertEqual(results["income"].value, {"response": 100})
        self.assertFalse(results["expense"].ok)
        self.assertEqual(results["expense"].error.message, "boom")
        self.assertEqual(results["count"].value, {"response": 4})
        self.assertEqual(logs.output, ["DEBUG:loaders:fetch_all: 1 of 3 calls failed: expense"])

    def test_calls_run_concurrently(self):
        barrier = threading.Barrier(3, timeout=5)

        def meet():
            # Deadlocks unless all three calls are in flight together
            barrier.wait()
            return "ok"

        results = fetch_all(a=meet, b=meet, c=meet)
        self.assertEqual({name: r.value for name, r in results.items()}, {"a": "ok", "b": "ok", "c": "ok"})

    def test_unexpected_exceptions_propagate(self):
        def bug():
            raise KeyError("id")

        with self.assertRaises(KeyError):
            fetch_all(a=bug)

    def test_concurrent_401s_all_clear_the_session(self):
        state = RacingState(6)
        store = SessionStore(state)
        store.save("expired", {"email": "ana@example.com"})
        http = mock.Mock(spec=requests.Session)
        http.headers = {}
        http.request.side_effect = lambda *args, **kwargs: make_response(401, {"message": "Token expired"})
        hook = mock.Mock()
        client = ApiClient("http://backend", store, session=http, on_unauthorized=hook)

        results = fetch_all(**{f"call_{n}": client.get_all_categories for n in range(6)})

        self.assertEqual(len(results), 6)
        for result in results.values():
            self.assertIsInstance(result.error, UnauthorizedError)
        self.assertEqual(dict(state), {})
        self.assertEqual(hook.call_count, 6)

    def test_result_defaults(self):
        self.assertTrue(Result(value=[]).ok)
        self.assertFalse(Result(error=ApiError(404)).ok)


if __name__ == "__main__":
    unittest.main()
