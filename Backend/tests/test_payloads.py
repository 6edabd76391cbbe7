"""
Tests for Apple Shortcut payload normalization.
"""
from datetime import date, datetime, timezone

import pytest

from quest_api.apple_health.payloads import decode_webhook_body, parse_webhook_payload
from quest_api.core.exceptions import ValidationError
from quest_api.journey.constants import MAX_DAILY_STEPS

NOW = datetime(2024, 3, 15, 1, 30, tzinfo=timezone.utc)
YESTERDAY = date(2024, 3, 14)


class TestPayloadShapes:
    """Each accepted shape maps to the same (step_count, recorded_date) pair."""

    def test_bare_number(self):
        parsed = parse_webhook_payload(8500, now=NOW)
        assert parsed.step_count == 8500
        assert parsed.recorded_date == YESTERDAY
        assert parsed.shape == "number"

    def test_integral_float_is_accepted(self):
        assert parse_webhook_payload(8500.0, now=NOW).step_count == 8500

    def test_steps_object(self):
        parsed = parse_webhook_payload({"steps": 1234}, now=NOW)
        assert parsed.step_count == 1234
        assert parsed.recorded_date == YESTERDAY

    def test_step_count_object_with_date(self):
        parsed = parse_webhook_payload({"step_count": 9000, "recorded_date": "2024-03-10"}, now=NOW)
        assert parsed.step_count == 9000
        assert parsed.recorded_date == date(2024, 3, 10)

    def test_nested_step_object(self):
        payload = {"step": {"step_count": 4321, "recorded_date": "2024-03-01"}}
        parsed = parse_webhook_payload(payload, now=NOW)
        assert parsed.step_count == 4321
        assert parsed.recorded_date == date(2024, 3, 1)
        assert parsed.shape == "step"

    def test_plain_text_number(self):
        parsed = parse_webhook_payload("  7777\n", now=NOW)
        assert parsed.step_count == 7777
        assert parsed.shape == "text"

    def test_first_matching_shape_wins(self):
        parsed = parse_webhook_payload({"steps": 100, "step_count": 200}, now=NOW)
        assert parsed.step_count == 100


class TestRecordedDateFallback:
    def test_invalid_date_falls_back_to_yesterday(self):
        parsed = parse_webhook_payload({"step_count": 10, "recorded_date": "2024-02-30"}, now=NOW)
        assert parsed.recorded_date == YESTERDAY

    def test_wrong_format_falls_back_to_yesterday(self):
        parsed = parse_webhook_payload({"step_count": 10, "recorded_date": "03/10/2024"}, now=NOW)
        assert parsed.recorded_date == YESTERDAY

    def test_yesterday_is_computed_in_utc(self):
        late_evening_elsewhere = datetime(2024, 3, 15, 23, 59, tzinfo=timezone.utc)
        assert parse_webhook_payload(5, now=late_evening_elsewhere).recorded_date == YESTERDAY


class TestRejectedPayloads:
    @pytest.mark.parametrize("payload", [None, {}, [], {"foo": 1}, "walked a lot", True])
    def test_unrecognized_body(self, payload):
        with pytest.raises(ValidationError) as exc:
            parse_webhook_payload(payload, now=NOW)
        assert exc.value.status_code == 400
        assert "hint" in exc.value.extra

    @pytest.mark.parametrize("payload", [
        0, -5, 12.5, {"steps": 0}, {"step": {"step_count": "100"}}, "0",
        MAX_DAILY_STEPS + 1, {"steps": 10**30}, str(10**30), float("inf"),
    ])
    def test_out_of_range_or_fractional_count(self, payload):
        with pytest.raises(ValidationError):
            parse_webhook_payload(payload, now=NOW)

    @pytest.mark.parametrize("text", ["1_000", "+77", "-5", "12.0", "\u0663\u0664", "7 7"])
    def test_text_must_be_plain_digits(self, text):
        with pytest.raises(ValidationError) as exc:
            parse_webhook_payload(text, now=NOW)
        assert exc.value.detail == "Invalid request body"

    def test_daily_maximum_is_accepted(self):
        assert parse_webhook_payload({"steps": MAX_DAILY_STEPS}, now=NOW).step_count == MAX_DAILY_STEPS


class TestDecodeBody:
    def test_empty_body(self):
        assert decode_webhook_body(b"", "application/json") is None

    def test_json_body(self):
        assert decode_webhook_body(b'{"steps": 12}', "application/json") == {"steps": 12}

    def test_malformed_json_with_json_content_type(self):
        with pytest.raises(ValidationError):
            decode_webhook_body(b"{steps:", "application/json")

    def test_text_body_stays_text(self):
        assert decode_webhook_body(b"abc", "text/plain") == "abc"

    def test_numeric_text_body(self):
        assert decode_webhook_body(b"1500", "text/plain") == 1500
