"""
Tests for the manual / non-strategic upload form validation.
"""

import json

import pytest

from cath.core.config import settings
from cath.locales.en import en
from cath.services.upload_validation import validate_upload_form

MESSAGES = en["manualUpload"]["errorMessages"]


def _form(**overrides):
    form = {
        "locationId": "9",
        "locationName": "",
        "listType": "9",
        "hearingStartDate": {"day": "06", "month": "01", "year": "2025"},
        "sensitivity": "PUBLIC",
        "language": "ENGLISH",
        "displayFrom": {"day": "06", "month": "01", "year": "2025"},
        "displayTo": {"day": "10", "month": "01", "year": "2025"},
    }
    form.update(overrides)
    return form


def _texts(errors):
    return [e["text"] for e in errors]


class TestManualUploadValidation:
    def test_should_accept_complete_form(self, reference_data):
        assert validate_upload_form(reference_data, _form(), "list.pdf", b"%PDF-1.4", MESSAGES) == []

    def test_should_require_file(self, reference_data):
        errors = validate_upload_form(reference_data, _form(), None, None, MESSAGES)
        assert errors[0] == {"text": MESSAGES["fileRequired"], "href": "#file"}

    def test_should_reject_unsupported_extension(self, reference_data):
        errors = validate_upload_form(reference_data, _form(), "list.exe", b"x", MESSAGES)
        assert _texts(errors) == [MESSAGES["fileType"]]

    def test_should_reject_file_over_size_limit(self, reference_data):
        data = b"x" * (settings.MAX_UPLOAD_SIZE + 1)
        errors = validate_upload_form(reference_data, _form(), "list.pdf", data, MESSAGES)
        assert _texts(errors) == [MESSAGES["fileSize"]]

    def test_should_reject_unparseable_json(self, reference_data):
        errors = validate_upload_form(reference_data, _form(), "list.json", b"{not json", MESSAGES)
        assert errors[0]["text"].startswith("Invalid JSON file format")

    def test_should_validate_json_against_list_type_schema(self, reference_data):
        payload = json.dumps([{"date": "02/01/2025"}]).encode()
        errors = validate_upload_form(reference_data, _form(), "list.json", payload, MESSAGES)
        assert len(errors) == 1
        assert errors[0]["text"].startswith("Invalid JSON file format. Hearing 1:")

    def test_should_ask_for_longer_court_name(self, reference_data):
        errors = validate_upload_form(
            reference_data, _form(locationId="", locationName="Ox"), "list.pdf", b"x", MESSAGES
        )
        assert errors == [{"text": MESSAGES["courtTooShort"], "href": "#court"}]

    def test_should_reject_unknown_court(self, reference_data):
        errors = validate_upload_form(reference_data, _form(locationId="999"), "list.pdf", b"x", MESSAGES)
        assert errors == [{"text": MESSAGES["courtRequired"], "href": "#court"}]

    def test_should_report_every_missing_field_in_page_order(self, reference_data):
        form = {"locationId": "9"}
        errors = validate_upload_form(reference_data, form, "list.pdf", b"x", MESSAGES)
        assert [e["href"] for e in errors] == [
            "#listType", "#hearingStartDate", "#sensitivity", "#language", "#displayFrom", "#displayTo",
        ]

    def test_should_reject_display_to_before_display_from(self, reference_data):
        form = _form(displayTo={"day": "01", "month": "01", "year": "2025"})
        errors = validate_upload_form(reference_data, form, "list.pdf", b"x", MESSAGES)
        assert errors == [{"text": MESSAGES["displayToBeforeFrom"], "href": "#displayTo"}]

    def test_should_accept_same_day_display_window(self, reference_data):
        form = _form(displayTo={"day": "06", "month": "01", "year": "2025"})
        assert validate_upload_form(reference_data, form, "list.pdf", b"x", MESSAGES) == []

    @pytest.mark.parametrize("field", ["hearingStartDate", "displayFrom"])
    def test_should_reject_impossible_dates(self, reference_data, field):
        form = _form(**{field: {"day": "31", "month": "02", "year": "2025"}})
        errors = validate_upload_form(reference_data, form, "list.pdf", b"x", MESSAGES)
        assert [e["href"] for e in errors] == [f"#{field}"]


class TestNonStrategicUploadValidation:
    def test_should_only_accept_xlsx(self, reference_data):
        errors = validate_upload_form(
            reference_data, _form(), "list.pdf", b"x", MESSAGES, non_strategic=True
        )
        assert _texts(errors) == [MESSAGES["fileType"]]

    def test_should_accept_xlsx(self, reference_data):
        assert validate_upload_form(reference_data, _form(), "LIST.XLSX", b"x", MESSAGES, non_strategic=True) == []
