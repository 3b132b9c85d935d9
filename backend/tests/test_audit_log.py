"""
Tests for the audit log middleware helpers and the audit log queries.
"""

import uuid
from datetime import date, datetime, timedelta

from cath.db.models import AuditLog
from cath.middleware.audit_log import (
    determine_redirect_outcome,
    extract_entity_info,
    generate_action_name,
    generate_details,
)
from cath.services.audit_service import (
    create_audit_log,
    get_audit_log_by_id,
    get_audit_logs,
    get_available_actions,
)

ADMIN = {"id": "admin-1", "email": "admin@example.com", "role": "SYSTEM_ADMIN", "provenance": "SSO"}


def _log(db, action, email="admin@example.com", user_id="admin-1", timestamp=None):
    entry = AuditLog(
        user_id=user_id,
        user_email=email,
        user_role="SYSTEM_ADMIN",
        user_provenance="SSO",
        action=action,
        timestamp=timestamp or datetime.utcnow(),
    )
    db.add(entry)
    db.commit()
    return entry


class TestRedirectOutcome:
    def test_should_detect_validation_errors_in_session(self):
        session = {"uploadErrors": [{"text": "Select a file"}]}
        assert determine_redirect_outcome("/manual-upload", "/manual-upload", session) == "validation_error"

    def test_should_ignore_empty_error_lists(self):
        assert determine_redirect_outcome("/add-region-success", "/add-region", {"regionErrors": []}) == "other"

    def test_should_treat_intermediate_steps_as_other(self):
        assert determine_redirect_outcome("/manual-upload-summary?uploadId=1", "/manual-upload", {}) == "other"
        assert determine_redirect_outcome("/remove-list-confirmation", "/remove-list-search-results", {}) == "other"

    def test_should_treat_dashboard_and_same_page_as_cancelled(self):
        assert determine_redirect_outcome("/system-admin-dashboard", "/add-region", {}) == "cancelled"
        assert determine_redirect_outcome("/add-region?x=1", "/add-region", None) == "cancelled"


class TestActionName:
    def test_should_normalise_explicit_action(self):
        assert generate_action_name("POST", "/whatever", {"action": "manual upload-v2"}) == "MANUAL_UPLOAD_V2"

    def test_should_derive_from_path(self):
        assert generate_action_name("POST", "/add-jurisdiction", {}) == "ADD_JURISDICTION"
        assert generate_action_name("DELETE", "/api/thing", {}) == "DELETE_API_THING"


class TestDetails:
    def test_should_prefer_explicit_entity_info(self):
        assert extract_entity_info({"entityInfo": "Location: 9"}, {"name": "x"}, {}, {}) == "Location: 9"

    def test_should_collect_form_fields_and_session_objects(self):
        info = extract_entity_info(
            {"action": "x", "listType": "CST"},
            {"name": " North ", "locationId": "9", "email": "a@example.com"},
            {},
            {"user": {"name": "ignored"}, "uploadForm": {"locationId": "3", "fileName": "a.pdf"}},
        )
        # session location overrides the form's, keeping its position
        assert info == "listType: CST, Name: North, Location ID: 3, Email: a@example.com, Upload Form File: a.pdf"

    def test_should_return_none_without_entities(self):
        assert extract_entity_info({}, {}, {}, {}) is None

    def test_should_describe_success_with_upload(self):
        details = generate_details("success", "Name: North", [{"name": "a.csv", "size": 12}])
        assert details == "Name: North; Status: Completed successfully; File uploaded: a.csv (12 bytes)"

    def test_should_list_validation_errors(self):
        details = generate_details(
            "validation_error", None, [], render_errors=["Enter a name"],
            session={"regionErrors": [{"text": "Enter Welsh"}]},
        )
        assert details == "Status: Validation failed; Errors: Enter a name; Errors: Enter Welsh"

    def test_should_describe_cancellation(self):
        assert generate_details("cancelled", None, []) == "Status: Action cancelled by user"
        assert generate_details("other", None, []) is None


class TestAuditService:
    def test_should_record_session_user(self, db):
        entry = create_audit_log(db, ADMIN, "ADD_REGION", "Name: North")
        assert entry.user_email == "admin@example.com"
        assert entry.user_provenance == "SSO"

    def test_should_default_missing_user_fields(self, db):
        entry = create_audit_log(db, {}, "ADD_REGION")
        assert (entry.user_id, entry.user_email, entry.user_role) == ("unknown", "unknown", "SYSTEM_ADMIN")

    def test_should_list_newest_first_with_pagination(self, db):
        now = datetime.utcnow()
        for n in range(3):
            _log(db, f"ACTION_{n}", timestamp=now - timedelta(minutes=n))

        result = get_audit_logs(db, page=2, page_size=2)

        assert result["totalCount"] == 3
        assert result["totalPages"] == 2
        assert [log["action"] for log in result["logs"]] == ["Action 2"]

    def test_should_filter_by_email_and_user_id_ignoring_case(self, db):
        _log(db, "ADD_REGION", email="Alice@Example.com", user_id="user-a")
        _log(db, "ADD_REGION", email="bob@example.com", user_id="user-b")

        assert get_audit_logs(db, {"email": "alice"})["totalCount"] == 1
        assert get_audit_logs(db, {"userId": "USER-B"})["totalCount"] == 1

    def test_should_filter_by_day_and_actions(self, db):
        _log(db, "ADD_REGION", timestamp=datetime(2025, 1, 6, 23, 59))
        _log(db, "ADD_REGION", timestamp=datetime(2025, 1, 7, 0, 0))
        _log(db, "MANUAL_UPLOAD", timestamp=datetime(2025, 1, 6, 9, 0))

        assert get_audit_logs(db, {"date": date(2025, 1, 6)})["totalCount"] == 2
        assert get_audit_logs(db, {"date": date(2025, 1, 6), "actions": ["ADD_REGION"]})["totalCount"] == 1

    def test_should_format_detail(self, db):
        entry = _log(db, "MANUAL_UPLOAD", timestamp=datetime(2025, 1, 6, 9, 5, 3))
        detail = get_audit_log_by_id(db, str(entry.id))
        assert detail["action"] == "Manual Upload"
        assert detail["timestamp"] == "06/01/2025 09:05:03"

    def test_should_return_none_for_unknown_or_bad_id(self, db):
        assert get_audit_log_by_id(db, "nope") is None
        assert get_audit_log_by_id(db, str(uuid.uuid4())) is None

    def test_should_offer_distinct_actions(self, db):
        _log(db, "MANUAL_UPLOAD")
        _log(db, "ADD_REGION")
        _log(db, "ADD_REGION")
        assert get_available_actions(db) == [
            {"value": "ADD_REGION", "text": "Add Region"},
            {"value": "MANUAL_UPLOAD", "text": "Manual Upload"},
        ]
