"""
Tests for the reference data forms, the locations CSV parser and the
locations import and court deletion.
"""

from datetime import datetime
from pathlib import Path

import pytest

from cath.db.models import Jurisdiction, Location, User, UserProvenance, UserRole
from cath.services.csv_parser import parse_csv
from cath.services.location_service import (
    create_jurisdiction,
    create_region,
    create_sub_jurisdiction,
    find_location_by_name,
    get_location_by_id,
    get_location_details,
    search_locations,
    soft_delete_location,
)
from cath.services.reference_data_service import enrich_location_data, upsert_locations
from cath.services.reference_data_validation import (
    validate_jurisdiction_data,
    validate_location_data,
    validate_region_data,
    validate_sub_jurisdiction_data,
)
from cath.services.subscription_service import create_subscription
from helpers import build_csv, make_artefact
from jobs.reference_data_import_job import main, run_reference_data_import

NEW_COURT = "10,Leeds Combined Court,Llys Cyfun Leeds,leeds@example.com,0113 000,Civil Court;Family Court,Midlands"


def _texts(errors):
    return [e["text"] for e in errors]


class TestLocationLookups:
    def test_should_find_by_either_language_ignoring_case(self, reference_data):
        assert find_location_by_name(reference_data, "care standards tribunal").location_id == 9
        assert find_location_by_name(reference_data, "TRIBIWNLYS SAFONAU GOFAL").location_id == 9
        assert find_location_by_name(reference_data, "Care") is None

    def test_should_search_partial_names(self, reference_data):
        names = [loc.name for loc in search_locations(reference_data, "court")]
        assert "Oxford Combined Court Centre" in names
        assert search_locations(reference_data, "  ") == []

    def test_should_allocate_next_id(self, reference_data):
        jurisdiction = create_jurisdiction(reference_data, " Employment ", "Cyflogaeth")
        assert jurisdiction.jurisdiction_id == 5
        assert jurisdiction.name == "Employment"
        assert create_region(reference_data, "North", "Gogledd").region_id == 4
        sub_jurisdiction = create_sub_jurisdiction(reference_data, 5, "Employment Tribunal", "Tribiwnlys Cyflogaeth")
        assert sub_jurisdiction.sub_jurisdiction_id == 6


class TestReferenceDataForms:
    def test_should_require_both_names(self, reference_data):
        errors = validate_jurisdiction_data(reference_data, {"name": "", "welshName": " "})
        assert _texts(errors) == ["Enter jurisdiction name in English", "Enter jurisdiction name in Welsh"]

    def test_should_reject_html(self, reference_data):
        errors = validate_region_data(reference_data, {"name": "<b>North</b>", "welshName": "Gogledd"})
        assert _texts(errors) == ["Region name (English) contains HTML tags which are not allowed"]

    def test_should_reject_duplicates_ignoring_case(self, reference_data):
        errors = validate_jurisdiction_data(reference_data, {"name": "civil", "welshName": "TEULU"})
        assert errors == [
            {"text": "Jurisdiction 'civil' already exists in the database", "href": "#name"},
            {"text": "Welsh jurisdiction name 'TEULU' already exists in the database", "href": "#welshName"},
        ]

    def test_should_accept_new_region(self, reference_data):
        assert validate_region_data(reference_data, {"name": "North", "welshName": "Gogledd"}) == []

    def test_should_require_known_jurisdiction_for_sub_jurisdiction(self, reference_data):
        errors = validate_sub_jurisdiction_data(
            reference_data, {"jurisdictionId": "99", "name": "X", "welshName": "Y"}
        )
        assert _texts(errors) == ["Invalid jurisdiction selection"]

    def test_should_scope_sub_jurisdiction_duplicates_to_jurisdiction(self, reference_data):
        duplicate = {"jurisdictionId": "1", "name": "civil court", "welshName": "Newydd"}
        assert _texts(validate_sub_jurisdiction_data(reference_data, duplicate)) == [
            "Sub-jurisdiction 'civil court' already exists in the selected jurisdiction"
        ]
        elsewhere = {"jurisdictionId": "2", "name": "Civil Court", "welshName": "Llys Sifil Newydd"}
        assert validate_sub_jurisdiction_data(reference_data, elsewhere) == []


class TestCsvParser:
    def test_should_parse_rows_and_split_multi_values(self):
        result = parse_csv(build_csv(NEW_COURT))
        assert result.success
        assert result.data == [{
            "locationId": 10,
            "locationName": "Leeds Combined Court",
            "welshLocationName": "Llys Cyfun Leeds",
            "email": "leeds@example.com",
            "contactNo": "0113 000",
            "subJurisdictionNames": ["Civil Court", "Family Court"],
            "regionNames": ["Midlands"],
        }]

    def test_should_handle_byte_order_mark_and_blank_lines(self):
        result = parse_csv(b"\xef\xbb\xbf" + build_csv("", NEW_COURT, ""))
        assert result.success
        assert len(result.data) == 1

    def test_should_reject_empty_file(self):
        assert parse_csv(b"  \n").errors == ["CSV file is empty"]

    def test_should_name_missing_columns(self):
        result = parse_csv(b"LOCATION_ID,LOCATION_NAME\n1,A")
        assert not result.success
        assert result.errors[0].startswith("Missing required columns: WELSH_LOCATION_NAME")

    def test_should_number_bad_rows_from_one(self):
        result = parse_csv(build_csv(NEW_COURT, "abc,X,Y,,,Civil Court,London"))
        assert result.errors == ["Row 2: LOCATION_ID must be a valid integer"]


class TestLocationDataValidation:
    def test_should_accept_new_location(self, reference_data):
        rows = parse_csv(build_csv(NEW_COURT)).data
        assert validate_location_data(reference_data, rows) == []

    def test_should_require_names_and_links(self, reference_data):
        rows = parse_csv(build_csv("10,,Llys,,,,")).data
        assert _texts(validate_location_data(reference_data, rows)) == [
            "Row 1: LOCATION_NAME is required",
            "Row 1: SUB_JURISDICTION_NAME is required",
            "Row 1: REGION_NAME is required",
        ]

    def test_should_report_duplicates_within_file(self, reference_data):
        second = NEW_COURT.replace("10,", "11,", 1).replace("Llys Cyfun Leeds", "Llys Arall")
        rows = parse_csv(build_csv(NEW_COURT, second)).data
        errors = _texts(validate_location_data(reference_data, rows))
        assert errors == ['Location name "Leeds Combined Court" appears more than once in the file (rows 1 and 2)']

    def test_should_report_name_taken_by_another_location(self, reference_data):
        row = "10,Care Standards Tribunal,Newydd,,,Civil Court,London"
        errors = _texts(validate_location_data(reference_data, parse_csv(build_csv(row)).data))
        assert errors == [
            'Row 1: Location name "Care Standards Tribunal" already exists in the database with a different location ID'
        ]

    def test_should_allow_renaming_same_location(self, reference_data):
        row = "9,Care Standards Tribunal,Tribiwnlys Safonau Gofal,cst@example.com,,Care Standards Tribunal,London"
        assert validate_location_data(reference_data, parse_csv(build_csv(row)).data) == []

    def test_should_report_unknown_sub_jurisdictions_and_regions(self, reference_data):
        row = "10,Leeds,Leeds Cy,,,Space Court,Mars"
        assert _texts(validate_location_data(reference_data, parse_csv(build_csv(row)).data)) == [
            'Sub-jurisdiction "Space Court" not found in reference data (rows: 1)',
            'Region "Mars" not found in reference data (rows: 1)',
        ]


class TestUpsertLocations:
    def test_should_create_and_link_new_location(self, reference_data):
        rows = parse_csv(build_csv(NEW_COURT)).data
        assert upsert_locations(reference_data, rows) == {"created": 1, "updated": 0}

        location = reference_data.query(Location).filter(Location.location_id == 10).one()
        assert sorted(sj.name for sj in location.sub_jurisdictions) == ["Civil Court", "Family Court"]
        assert [r.name for r in location.regions] == ["Midlands"]

    def test_should_update_existing_location_and_replace_links(self, reference_data):
        row = "1,Oxford Court,Llys Rhydychen,oxford@example.com,,crown court,london"
        assert upsert_locations(reference_data, parse_csv(build_csv(row)).data) == {"created": 0, "updated": 1}

        location = reference_data.query(Location).filter(Location.location_id == 1).one()
        assert location.name == "Oxford Court"
        assert [sj.name for sj in location.sub_jurisdictions] == ["Crown Court"]
        assert [r.name for r in location.regions] == ["London"]

    def test_should_derive_jurisdictions_for_preview(self, reference_data):
        [row] = enrich_location_data(reference_data, parse_csv(build_csv(NEW_COURT)).data)
        assert row["jurisdictionNames"] == ["Civil", "Family"]


class TestReferenceDataImportJob:
    def test_should_import_valid_file(self, reference_data, tmp_path):
        path = Path(tmp_path) / "locations.csv"
        path.write_bytes(build_csv(NEW_COURT))

        summary = run_reference_data_import(path)

        assert summary == {"success": True, "errors": [], "rows": 1, "created": 1, "updated": 0}
        assert reference_data.query(Location).count() == 5

    def test_should_not_write_on_dry_run(self, reference_data, tmp_path):
        path = Path(tmp_path) / "locations.csv"
        path.write_bytes(build_csv(NEW_COURT))

        assert run_reference_data_import(path, dry_run=True)["success"] is True
        assert reference_data.query(Location).count() == 4

    def test_should_exit_non_zero_on_invalid_file(self, reference_data, tmp_path, capsys):
        path = Path(tmp_path) / "locations.csv"
        path.write_bytes(build_csv("10,Leeds,Leeds Cy,,,Space Court,Mars"))

        assert main([str(path)]) == 1
        assert "Space Court" in capsys.readouterr().err
        assert reference_data.query(Jurisdiction).count() == 4


class TestDeleteLocation:
    def test_should_describe_court_for_confirmation(self, reference_data):
        details = get_location_details(reference_data, "1")
        assert details["welshName"] == "Canolfan Llysoedd Cyfun Rhydychen"
        assert sorted(details["jurisdictions"].split(", ")) == ["Civil", "Crime", "Family"]
        assert details["regions"] == "Midlands"
        assert get_location_details(reference_data, 999) is None

    def test_should_hide_deleted_court_from_lookups(self, reference_data):
        soft_delete_location(reference_data, 2)
        location = reference_data.get(Location, 2)
        assert location.deleted_at is not None
        assert get_location_by_id(reference_data, 2) is None
        assert search_locations(reference_data, "Cardiff") == []

    def test_should_refuse_court_with_subscribers(self, reference_data):
        user = User(
            email="verified@example.com",
            user_provenance=UserProvenance.B2C_IDAM,
            user_provenance_id="verified-1",
            role=UserRole.VERIFIED,
            created_date=datetime.utcnow(),
        )
        reference_data.add(user)
        reference_data.commit()
        create_subscription(reference_data, user.id, 3)
        with pytest.raises(ValueError, match="active subscriptions"):
            soft_delete_location(reference_data, 3)

    def test_should_refuse_court_with_publications_still_displayed(self, reference_data):
        make_artefact(reference_data, location_id="3")
        with pytest.raises(ValueError, match="active artefacts"):
            soft_delete_location(reference_data, 3)

    def test_should_ignore_expired_publications(self, reference_data):
        make_artefact(reference_data, location_id="3", live=False)
        assert soft_delete_location(reference_data, 3).deleted_at is not None

    def test_should_reject_unknown_court(self, reference_data):
        with pytest.raises(ValueError, match="Location not found"):
            soft_delete_location(reference_data, 999)

    def test_should_restore_deleted_court_on_reference_data_upload(self, reference_data):
        soft_delete_location(reference_data, 1)
        row = "1,Oxford Court,Llys Rhydychen,oxford@example.com,,crown court,london"
        assert upsert_locations(reference_data, parse_csv(build_csv(row)).data) == {"created": 0, "updated": 1}
        assert get_location_by_id(reference_data, 1).name == "Oxford Court"
