"""
Tests for the case name / case reference search index.
"""

import pytest

from cath.services.case_search_service import (
    get_case_numbers_and_names,
    get_search_entry,
    index_artefact,
    search_by_case_name,
    search_by_case_reference,
)
from helpers import make_artefact, sjp_hearing, sjp_payload

SJP_PUBLIC_ID = 11


@pytest.fixture()
def indexed(db):
    artefact_id = make_artefact(db, list_type_id=SJP_PUBLIC_ID)
    payload = sjp_payload(sjp_hearing(), sjp_hearing(forename="Jane", surname="Doe", urn="DVL42"))
    index_artefact(db, artefact_id, SJP_PUBLIC_ID, payload)
    return artefact_id


class TestIndexArtefact:
    def test_should_index_each_hearing(self, db, indexed):
        numbers, names = get_case_numbers_and_names(db, indexed)
        assert numbers == {"TVL1234", "DVL42"}
        assert names == {"John Smith", "Jane Doe"}

    def test_should_replace_rows_when_reindexed(self, db, indexed):
        assert index_artefact(db, indexed, SJP_PUBLIC_ID, sjp_payload(sjp_hearing(urn="NEW1"))) == 1
        numbers, _ = get_case_numbers_and_names(db, indexed)
        assert numbers == {"NEW1"}

    def test_should_index_case_names_without_numbers(self, db):
        artefact_id = make_artefact(db)
        assert index_artefact(db, artefact_id, 9, [{"caseName": "A Vs B"}, {"venue": "Leeds"}]) == 1
        assert get_case_numbers_and_names(db, artefact_id) == (set(), {"A Vs B"})

    def test_should_write_nothing_for_list_types_without_extractor(self, db):
        artefact_id = make_artefact(db, list_type_id=4)
        assert index_artefact(db, artefact_id, 4, {"anything": True}) == 0

    def test_should_skip_payloads_the_extractor_cannot_read(self, db):
        artefact_id = make_artefact(db, list_type_id=SJP_PUBLIC_ID)
        assert index_artefact(db, artefact_id, SJP_PUBLIC_ID, {"courtLists": "broken"}) == 0


class TestSearch:
    def test_should_match_partial_case_names_ignoring_case(self, db, indexed):
        [row] = search_by_case_name(db, "  jane ")
        assert row["caseName"] == "Jane Doe"
        assert row["caseNumber"] == "DVL42"
        assert row["artefactId"] == indexed

    def test_should_match_case_reference_exactly(self, db, indexed):
        assert [row["caseName"] for row in search_by_case_reference(db, "TVL1234")] == ["John Smith"]
        assert search_by_case_reference(db, "TVL") == []

    @pytest.mark.parametrize("search", [search_by_case_name, search_by_case_reference])
    def test_should_require_a_value(self, db, search):
        with pytest.raises(ValueError):
            search(db, "   ")

    def test_should_look_up_entry_by_id(self, db, indexed):
        [row] = search_by_case_reference(db, "DVL42")
        assert get_search_entry(db, row["id"]).case_name == "Jane Doe"
        assert get_search_entry(db, "not-a-uuid") is None
