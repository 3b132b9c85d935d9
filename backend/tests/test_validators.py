"""
Unit tests for cath.utils.validators and cath.utils.helpers.
"""

import uuid
from datetime import date, datetime

import pytest

from cath.utils.helpers import (
    camel_to_title,
    content_disposition,
    format_date,
    format_date_range,
    format_short_date,
    format_timestamp,
    title_case_action,
)
from cath.utils.validators import (
    contains_html,
    is_valid_uuid,
    parse_date,
    parse_date_input,
    validate_artefact_id,
    validate_date_input,
    validate_email,
    validate_user_id,
)


class TestValidateEmail:
    def test_should_accept_plain_address(self):
        assert validate_email("someone@example.com") is True

    @pytest.mark.parametrize("value", ["", "no-at-sign", "two@@example.com", "spaces in@example.com"])
    def test_should_reject_malformed_address(self, value):
        assert validate_email(value) is False

    def test_should_reject_address_longer_than_254_characters(self):
        assert validate_email("a" * 250 + "@b.com") is False


class TestValidateUserId:
    def test_should_accept_alphanumerics_and_dashes(self):
        assert validate_user_id("abc-123") is True

    def test_should_reject_underscores(self):
        assert validate_user_id("abc_123") is False

    def test_should_reject_more_than_50_characters(self):
        assert validate_user_id("a" * 51) is False


class TestDates:
    def test_should_parse_leap_day(self):
        assert parse_date("29", "02", "2024") == date(2024, 2, 29)

    def test_should_reject_date_not_on_calendar(self):
        assert parse_date("31", "02", "2024") is None

    def test_should_reject_non_numeric_parts(self):
        assert parse_date("aa", "02", "2024") is None

    def test_should_require_two_digit_day_and_month(self):
        assert parse_date_input({"day": "1", "month": "02", "year": "2024"}) is None
        assert parse_date_input({"day": "01", "month": "02", "year": "2024"}) == date(2024, 2, 1)

    def test_should_report_missing_date_as_required(self):
        error = validate_date_input({"day": "", "month": "", "year": ""}, "displayFrom", "required", "invalid")
        assert error == {"text": "required", "href": "#displayFrom"}

    def test_should_report_impossible_date_as_invalid(self):
        error = validate_date_input({"day": "30", "month": "02", "year": "2025"}, "displayTo", "required", "invalid")
        assert error == {"text": "invalid", "href": "#displayTo"}

    def test_should_accept_valid_date_input(self):
        assert validate_date_input({"day": "15", "month": "01", "year": "2025"}, "x", "r", "i") is None


class TestArtefactIds:
    def test_should_accept_uuid(self):
        validate_artefact_id(str(uuid.uuid4()))

    @pytest.mark.parametrize("value", ["", "  ", None, 123])
    def test_should_reject_empty_or_non_string(self, value):
        with pytest.raises(ValueError):
            validate_artefact_id(value)

    def test_should_reject_path_traversal(self):
        with pytest.raises(ValueError, match="invalid characters"):
            validate_artefact_id("../etc/passwd")

    def test_should_reject_non_uuid(self):
        with pytest.raises(ValueError, match="UUID"):
            validate_artefact_id("not-a-uuid")

    def test_should_detect_uuid_shape(self):
        assert is_valid_uuid(str(uuid.uuid4())) is True
        assert is_valid_uuid("1234") is False
        assert is_valid_uuid(None) is False


class TestContainsHtml:
    def test_should_detect_tags(self):
        assert contains_html("<script>alert(1)</script>") is True

    def test_should_allow_angle_bracket_comparisons(self):
        assert contains_html("a < b") is False

    def test_should_treat_empty_as_clean(self):
        assert contains_html("") is False


class TestFormatting:
    def test_should_format_english_date(self):
        assert format_date(date(2024, 1, 15)) == "15 January 2024"

    def test_should_format_welsh_date(self):
        assert format_date(date(2025, 4, 23), "cy") == "23 Ebrill 2025"

    def test_should_format_missing_date_as_empty(self):
        assert format_date(None) == ""

    def test_should_join_range_in_each_language(self):
        start, end = date(2025, 1, 6), date(2025, 1, 10)
        assert format_date_range(start, end) == "6 January 2025 to 10 January 2025"
        assert format_date_range(start, end, "cy") == "6 Ionawr 2025 i 10 Ionawr 2025"

    def test_should_format_timestamps(self):
        value = datetime(2024, 1, 5, 9, 3, 7)
        assert format_timestamp(value) == "05/01/2024 09:03:07"
        assert format_short_date(value) == "05/01/2024"

    def test_should_title_case_actions(self):
        assert title_case_action("ADD_JURISDICTION") == "Add Jurisdiction"

    def test_should_split_camel_case(self):
        assert camel_to_title("locationId") == "Location Id"


class TestContentDisposition:
    def test_should_include_ascii_fallback_and_utf8_name(self):
        header = content_disposition("inline", "Café list.pdf")
        assert header == "inline; filename=\"Caf list.pdf\"; filename*=UTF-8''Caf%C3%A9%20list.pdf"

    def test_should_strip_quotes_from_fallback(self):
        header = content_disposition("attachment", 'a"b.json')
        assert header.startswith('attachment; filename="ab.json"')
