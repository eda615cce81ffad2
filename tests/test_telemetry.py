import unittest

from textlab import telemetry
from textlab.models import Suggestion
from textlab.telemetry import redact_text


class TelemetryRedactionTests(unittest.TestCase):
    def test_redacts_assignment_style_secrets(self):
        sample = "token=abc123 password:letmein SECRET = topsecret api-key=mykey api_key=other"
        redacted = redact_text(sample)

        self.assertNotIn("abc123", redacted)
        self.assertNotIn("letmein", redacted)
        self.assertNotIn("topsecret", redacted)
        self.assertNotIn("mykey", redacted)
        self.assertNotIn("other", redacted)
        self.assertGreaterEqual(redacted.count("[REDACTED]"), 5)

    def test_redacts_bearer_tokens_and_api_key_headers(self):
        redacted = redact_text("Authorization: Bearer abc.DEF_123-xyz x-api-key: ctl_live_42")

        self.assertNotIn("abc.DEF_123-xyz", redacted)
        self.assertNotIn("ctl_live_42", redacted)

    def test_truncates_long_text(self):
        redacted = redact_text("x" * 50, max_chars=10)
        self.assertEqual(redacted, "x" * 10 + "...[TRUNCATED]")

    def test_leaves_non_secret_text_intact(self):
        sample = "normal text with no credentials"
        self.assertEqual(redact_text(sample), sample)


class TelemetryRecordingTests(unittest.TestCase):
    def setUp(self):
        telemetry.reset()
        self.addCleanup(telemetry.reset)

    def test_history_is_newest_first_and_sanitized(self):
        telemetry.record_call("suggest", "POST", "/suggest", {"text": "a" * 1000}, {"ok": True})
        telemetry.record_call("run", "POST", "/run", {"input": "hi", "api_key": "secret"}, {"ok": True})

        history = telemetry.get_call_history()
        self.assertEqual(history["total"], 2)
        self.assertEqual([item["name"] for item in history["items"]], ["run", "suggest"])
        self.assertEqual(history["items"][0]["request"]["api_key"], "[REDACTED]")
        self.assertTrue(history["items"][1]["request"]["text"].endswith("...[TRUNCATED]"))

    def test_history_paging_is_clamped(self):
        for i in range(5):
            telemetry.record_call(f"call{i}", "GET", "/health", None, {"ok": True})
        page = telemetry.get_call_history(offset=-3, limit=500)
        self.assertEqual(page["offset"], 0)
        self.assertEqual(page["limit"], 100)
        self.assertEqual(len(page["items"]), 5)

    def test_error_counters_use_error_code(self):
        failure = {"ok": False, "error": {"code": "missing_api_key", "message": "x"}}
        telemetry.record_call("run", "POST", "/run", {}, failure)
        telemetry.record_call("run", "POST", "/run", {}, failure)
        telemetry.record_call("run", "POST", "/run", {}, {"ok": False, "error": "boom"})
        self.assertEqual(telemetry.get_error_counters(), {"missing_api_key": 2, "boom": 1})

    def test_suggestion_counters(self):
        s = Suggestion(id="json-formatter", label="JSON Formatter", reason="Looks like JSON", confidence=0.95)
        telemetry.record_suggestions([s])
        telemetry.record_suggestions([s])
        self.assertEqual(telemetry.get_suggestion_counters(), {"json-formatter": 2})


if __name__ == '__main__':
    unittest.main()
