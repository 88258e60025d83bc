"""Unit tests for the scrape wire models."""

from __future__ import annotations

import re
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from parcelscope.models.scrape import (
    ErrorResponse,
    HealthResponse,
    ScrapeOptions,
    ScrapeRequest,
    ScrapeResponse,
    utc_timestamp,
)

_ISO_MS_Z = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


class TestTimestamp:
    def test_fixed_datetime(self) -> None:
        ts = utc_timestamp(datetime(2024, 5, 1, 12, 30, 15, 123456, tzinfo=timezone.utc))
        assert ts == "2024-05-01T12:30:15.123Z"

    def test_now_has_millisecond_z_format(self) -> None:
        assert _ISO_MS_Z.match(utc_timestamp())


class TestScrapeRequest:
    def test_camel_case_fields(self) -> None:
        req = ScrapeRequest.model_validate(
            {"trackingNumber": "LB123456789CN", "options": {"timeoutMs": 5000, "headless": False}}
        )
        assert req.tracking_number == "LB123456789CN"
        assert req.options is not None
        assert req.options.timeout_ms == 5000
        assert req.options.headless is False

    def test_tracking_number_optional_at_schema_level(self) -> None:
        req = ScrapeRequest.model_validate({})
        assert req.tracking_number is None
        assert req.options is None

    def test_non_string_tracking_number_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ScrapeRequest.model_validate({"trackingNumber": 12345})

    def test_negative_timeout_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ScrapeOptions.model_validate({"timeoutMs": -1})

    def test_zero_timeout_allowed(self) -> None:
        assert ScrapeOptions(timeout_ms=0).timeout_ms == 0

    @pytest.mark.parametrize("mode", ["new", "shell"])
    def test_headless_mode_names_accepted(self, mode) -> None:
        assert ScrapeOptions.model_validate({"headless": mode}).headless == mode

    def test_unknown_headless_mode_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ScrapeOptions.model_validate({"headless": "sometimes"})


class TestEnvelopes:
    def test_scrape_response_dumps_camel_case(self) -> None:
        resp = ScrapeResponse(tracking_number="X1", data={"states": []})
        dumped = resp.model_dump(by_alias=True)
        assert dumped["success"] is True
        assert dumped["trackingNumber"] == "X1"
        assert dumped["data"] == {"states": []}
        assert _ISO_MS_Z.match(dumped["timestamp"])

    def test_error_response(self) -> None:
        dumped = ErrorResponse(error="boom").model_dump()
        assert dumped["success"] is False
        assert dumped["error"] == "boom"
        assert "timestamp" in dumped

    def test_health_response(self) -> None:
        assert HealthResponse().status == "ok"
