"""Tests for Sentry initialization and event scrubbing."""

from farmreg.core import sentry
from farmreg.core.config import Settings


class TestInitSentry:
    def test_disabled_without_dsn(self):
        assert sentry.init_sentry(Settings(sentry_dsn=None)) is False

    def test_disabled_with_placeholder_dsn(self):
        assert sentry.init_sentry(Settings(sentry_dsn="xxx")) is False


class TestFilterSensitiveData:
    def test_redacts_phone_and_text_in_request_data(self):
        event = {
            "request": {
                "data": {"sessionId": "ATUid_1", "phoneNumber": "+254712345678", "text": "1*Jane"}
            }
        }

        filtered = sentry._filter_sensitive_data(event, {})

        data = filtered["request"]["data"]
        assert data["sessionId"] == "ATUid_1"
        assert data["phoneNumber"] == sentry.REDACTED
        assert data["text"] == sentry.REDACTED

    def test_redacts_nested_extra_and_breadcrumbs(self):
        event = {
            "extra": {"session": {"end_user_id": "+254712345678", "stage": "ENTER_NAME"}},
            "breadcrumbs": {"values": [{"message": "ussd.request", "data": {"phone_number": "+2547"}}]},
        }

        filtered = sentry._filter_sensitive_data(event, {})

        assert filtered["extra"]["session"]["end_user_id"] == sentry.REDACTED
        assert filtered["extra"]["session"]["stage"] == "ENTER_NAME"
        crumb = filtered["breadcrumbs"]["values"][0]
        assert crumb["data"]["phone_number"] == sentry.REDACTED
        assert crumb["message"] == "ussd.request"

    def test_events_without_payload_pass_through(self):
        event = {"message": "boom"}

        assert sentry._filter_sensitive_data(event, {}) == {"message": "boom"}
