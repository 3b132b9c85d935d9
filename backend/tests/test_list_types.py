"""
Tests for the list type registry, the generic Excel converter and the
Care Standards Tribunal and Single Justice Procedure list types.
"""

from datetime import datetime

import pytest

from cath.list_types import care_standards_tribunal as cst
from cath.list_types import sjp
from cath.list_types.registry import (
    convert_excel_for_list_type,
    friendly_name,
    get_list_type,
    get_list_type_by_name,
    get_list_type_name,
    get_renderer,
    get_summary_builder,
    has_converter_for_list_type,
    non_strategic_list_types,
    validate_list_json,
)
from helpers import CST_HEADERS, CST_ROW, build_xlsx, cst_workbook, sjp_hearing, sjp_payload

CST_ID = 9


class TestRegistry:
    def test_should_look_up_by_id_string(self):
        assert get_list_type("9").name == cst.LIST_TYPE_NAME

    def test_should_return_none_for_unknown_or_bad_id(self):
        assert get_list_type(999) is None
        assert get_list_type("abc") is None

    def test_should_fall_back_to_unknown_name(self):
        assert get_list_type_name(999) == "Unknown"
        assert get_list_type_name(4) == "Magistrates Public List"

    def test_should_pick_friendly_name_by_locale(self):
        list_type = get_list_type_by_name(cst.LIST_TYPE_NAME)
        assert friendly_name(list_type) == "Care Standards Tribunal Weekly Hearing List"
        assert friendly_name(list_type, "cy") == "Rhestr Gwrandawiadau Wythnosol y Tribiwnlys Safonau Gofal"

    def test_should_list_only_non_strategic_types(self):
        assert [lt.id for lt in non_strategic_list_types()] == [CST_ID]

    def test_should_register_care_standards_hooks_on_import(self):
        assert has_converter_for_list_type(CST_ID)
        assert get_summary_builder(CST_ID) is cst.build_summary
        assert get_renderer(CST_ID) is cst.render

    def test_should_refuse_conversion_without_converter(self):
        with pytest.raises(ValueError, match="No converter registered"):
            convert_excel_for_list_type(1, b"")

    def test_should_accept_any_json_for_list_type_without_schema(self):
        assert validate_list_json(1, {"anything": True}) == []


class TestExcelConversion:
    def test_should_convert_rows_to_dicts(self):
        hearings = convert_excel_for_list_type(CST_ID, cst_workbook())
        assert hearings == [{
            "date": "02/01/2025",
            "caseName": "A Vs B",
            "hearingLength": "1 day",
            "hearingType": "Substantive hearing",
            "venue": "Remote - Teams",
            "additionalInformation": "Open to the public",
        }]

    def test_should_match_headers_case_insensitively_and_skip_blank_rows(self):
        headers = [h.upper() for h in CST_HEADERS]
        hearings = cst.convert_excel(build_xlsx([headers, CST_ROW, [None] * 6, CST_ROW]))
        assert len(hearings) == 2

    def test_should_format_date_cells(self):
        row = [datetime(2025, 1, 2)] + CST_ROW[1:]
        assert cst.convert_excel(cst_workbook(row))[0]["date"] == "02/01/2025"

    def test_should_reject_file_that_is_not_excel(self):
        with pytest.raises(ValueError, match="Invalid Excel file format"):
            cst.convert_excel(b"not a spreadsheet")

    def test_should_require_at_least_one_hearing(self):
        with pytest.raises(ValueError, match="at least one hearing"):
            cst.convert_excel(build_xlsx([CST_HEADERS]))

    def test_should_name_missing_columns(self):
        headers = CST_HEADERS[:-1]
        with pytest.raises(ValueError, match="Missing: Additional information"):
            cst.convert_excel(build_xlsx([headers, CST_ROW[:-1]]))

    def test_should_reject_missing_required_value(self):
        row = CST_ROW[:-1] + [None]
        with pytest.raises(ValueError, match="Missing required field 'Additional information' in row 2"):
            cst.convert_excel(cst_workbook(row))

    def test_should_reject_html(self):
        row = [CST_ROW[0], "<b>A</b> Vs B"] + CST_ROW[2:]
        with pytest.raises(ValueError, match="HTML tags are not allowed"):
            cst.convert_excel(cst_workbook(row))

    def test_should_reject_wrong_date_format(self):
        row = ["2025-01-02"] + CST_ROW[1:]
        with pytest.raises(ValueError, match="Invalid date format '2025-01-02' in row 2"):
            cst.convert_excel(cst_workbook(row))

    def test_should_reject_date_not_on_calendar(self):
        row = ["31/02/2025"] + CST_ROW[1:]
        with pytest.raises(ValueError, match="does not exist in calendar"):
            cst.convert_excel(cst_workbook(row))


class TestCareStandardsSchema:
    def _hearing(self, **overrides):
        hearing = dict(zip(
            ["date", "caseName", "hearingLength", "hearingType", "venue", "additionalInformation"],
            CST_ROW,
        ))
        hearing.update(overrides)
        return hearing

    def test_should_accept_valid_payload(self):
        assert cst.validate_json([self._hearing()]) == []

    def test_should_require_an_array(self):
        assert cst.validate_json({"hearings": []}) == ["Hearing list must be an array of hearings"]

    def test_should_report_missing_field_with_hearing_number(self):
        hearing = self._hearing()
        del hearing["venue"]
        errors = cst.validate_json([self._hearing(), hearing])
        assert len(errors) == 1
        assert errors[0].startswith("Hearing 2: venue")

    def test_should_reject_unknown_fields(self):
        assert cst.validate_json([self._hearing(judge="Someone")])

    def test_should_reject_html_and_bad_dates(self):
        errors = cst.validate_json([self._hearing(venue="<i>x</i>", date="2025-01-02")])
        assert len(errors) == 2


class TestCareStandardsSummaryAndRender:
    def test_should_summarise_each_hearing(self):
        summary = cst.build_summary([{"date": "02/01/2025", "caseName": "A Vs B", "venue": "Leeds"}] * 2)
        assert summary.count("Case name - A Vs B") == 2
        assert "\n\n---\n\n" in summary

    def test_should_say_when_there_are_no_cases(self):
        assert cst.build_summary([]) == "No cases scheduled."

    def test_should_build_page_context(self):
        view = cst.render(
            [{"date": "02/01/2025", "caseName": "A Vs B"}],
            {
                "locale": "en",
                "courtName": "Care Standards Tribunal",
                "displayFrom": datetime(2025, 1, 6),
                "lastReceivedDate": datetime(2025, 1, 6, 14, 30),
                "listTitle": "Care Standards Tribunal Weekly Hearing List",
            },
        )
        assert view["template"] == "list_types/care_standards_tribunal.html"
        assert view["header"]["weekCommencingDate"] == "6 January 2025"
        assert view["header"]["lastUpdatedTime"] == "2:30pm"
        assert view["hearings"][0]["date"] == "2 January 2025"

    def test_should_render_welsh_dates_and_whole_hours(self):
        view = cst.render(
            [{"date": "02/01/2025"}],
            {"locale": "cy", "displayFrom": datetime(2025, 1, 6), "lastReceivedDate": datetime(2025, 1, 6, 9, 0)},
        )
        assert view["hearings"][0]["date"] == "2 Ionawr 2025"
        assert view["header"]["lastUpdatedTime"] == "9am"


class TestSjpParsing:
    def test_should_accept_valid_payload(self):
        assert sjp.validate_json(sjp_payload()) == []

    def test_should_name_missing_sections(self):
        errors = sjp.validate_json({"courtLists": []})
        assert any(error.startswith("document") for error in errors)

    @pytest.mark.parametrize(
        "postcode, expected",
        [("BS8 1AB", "BS8"), ("SW1A", "SW1A"), (" EC1A 1BB ", "EC1A"), ("12345", None), (None, None)],
    )
    def test_should_take_outward_code(self, postcode, expected):
        assert sjp.postcode_outward_code(postcode) == expected

    def test_should_flatten_hearings_into_cases(self):
        hearing = sjp_hearing(date_of_birth="1990-05-15")
        [case] = sjp.extract_cases(sjp_payload(hearing), today=datetime(2025, 5, 14).date())
        assert case["name"] == "John Smith"
        assert case["postcode"] == "SW1A"
        assert case["prosecutor"] == "TV Licensing"
        assert case["reference"] == "TVL1234"
        assert case["age"] == 34
        assert case["address"] == "1 High Street, SW1A 1AA"

    def test_should_name_organisations_and_missing_accused(self):
        assert sjp.accused_name({"organisationDetails": {"name": "Acme Ltd"}}) == "Acme Ltd"
        assert sjp.accused_name(None) == "Unknown"

    def test_should_detect_press_list_from_first_accused(self):
        assert sjp.determine_list_type(sjp_payload()) == "press"
        bare = {"party": [{"partyRole": "ACCUSED", "individualDetails": {"forename": "A", "surname": "B"}}]}
        assert sjp.determine_list_type(sjp_payload(bare)) == "public"
        assert sjp.determine_list_type({"courtLists": []}) == "public"

    def test_should_extract_case_search_entries(self):
        payload = sjp_payload(sjp_hearing(), sjp_hearing(forename="Jane", urn="TVL5678"))
        assert sjp.extract_search_entries(payload) == [("TVL1234", "John Smith"), ("TVL5678", "Jane Smith")]


class TestSjpFiltering:
    @pytest.fixture()
    def cases(self):
        return sjp.extract_cases(sjp_payload(
            sjp_hearing(),
            sjp_hearing(forename="Jane", urn="DVL1", postcode="BS8 1AB", prosecutor="DVLA"),
            sjp_hearing(forename="Ann", surname="Jones", urn="TVL9", postcode="EC1A 1BB"),
        ))

    def test_should_recognise_london_postcodes(self):
        assert sjp.is_london_postcode("SW1A")
        assert sjp.is_london_postcode("ec1a")
        assert not sjp.is_london_postcode("BS8")
        assert not sjp.is_london_postcode(None)

    def test_should_search_names_and_references(self, cases):
        assert [c["name"] for c in sjp.apply_filters(cases, search="jones")] == ["Ann Jones"]
        assert [c["name"] for c in sjp.apply_filters(cases, search="dvl")] == ["Jane Smith"]

    def test_should_filter_by_postcode_prefix_and_london(self, cases):
        assert [c["postcode"] for c in sjp.apply_filters(cases, postcodes=["bs8"])] == ["BS8"]
        london = sjp.apply_filters(cases, postcodes=[sjp.LONDON_POSTCODE_FILTER])
        assert sorted(c["postcode"] for c in london) == ["EC1A", "SW1A"]

    def test_should_filter_by_prosecutor(self, cases):
        assert [c["name"] for c in sjp.apply_filters(cases, prosecutors=["DVLA"])] == ["Jane Smith"]

    def test_should_offer_unique_prosecutors_and_postcodes(self, cases):
        assert sjp.unique_prosecutors(cases) == ["DVLA", "TV Licensing"]
        postcodes = sjp.unique_postcodes(cases)
        assert postcodes["londonPostcodes"] == ["EC1A", "SW1A"]
        assert postcodes["hasLondonPostcodes"]

    def test_should_sort_and_fall_back_to_name(self, cases):
        assert [c["name"] for c in sjp.sort_cases(cases, "unknown")] == ["Ann Jones", "Jane Smith", "John Smith"]
        assert [c["postcode"] for c in sjp.sort_cases(cases, "postcode", "desc")] == ["SW1A", "EC1A", "BS8"]

    def test_should_paginate_and_clamp_page(self):
        rows = [{"name": str(i)} for i in range(sjp.CASES_PER_PAGE * 2 + 20)]
        page, info = sjp.paginate(rows, 99)
        assert len(page) == 20
        assert info == {"currentPage": 3, "totalPages": 3, "totalCases": len(rows)}
        assert sjp.paginate([], 0)[1]["currentPage"] == 1


class TestSjpRender:
    def test_should_build_press_page_context(self):
        view = sjp.render(sjp_payload(), {
            "locale": "en",
            "listTypeName": sjp.PRESS_LIST_NAME,
            "listTitle": "Single Justice Procedure Press List",
            "query": {"sortBy": "postcode", "sortOrder": "desc"},
        })
        assert view["template"] == "list_types/sjp.html"
        assert view["isPressList"]
        assert view["header"]["publishedDate"] == "6 January 2025"
        assert view["sortOrder"] == "desc"
        assert view["pagination"]["totalCases"] == 1

    def test_should_summarise_each_case(self):
        summary = sjp.build_summary(sjp_payload())
        assert "Name - John Smith" in summary
        assert "Prosecutor - TV Licensing" in summary
        assert sjp.build_summary({"courtLists": []}) == "No cases scheduled."
