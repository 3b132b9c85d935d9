"""
Tests for the email subscription service.
"""

import uuid
from datetime import datetime

import pytest

from cath.db.models import ListTypeLanguage, SearchType, Subscription, User, UserProvenance, UserRole
from cath.services import subscription_service
from cath.services.subscription_service import (
    create_case_subscription,
    create_list_type_subscriptions,
    create_subscription,
    delete_list_type_subscription,
    delete_subscriptions_by_ids,
    find_active_subscriptions_by_location,
    find_list_type_subscriptions,
    get_all_subscriptions_by_user_id,
    get_case_subscriptions_by_user_id,
    get_court_subscriptions_by_user_id,
    get_list_type_subscriptions_by_user_id,
    get_subscription_details_for_confirmation,
    remove_subscription,
    replace_user_subscriptions,
)


def _user(db, sub="verified-1", email="verified@example.com"):
    user = User(
        email=email,
        user_provenance=UserProvenance.B2C_IDAM,
        user_provenance_id=sub,
        role=UserRole.VERIFIED,
        created_date=datetime.utcnow(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture()
def user(reference_data):
    return _user(reference_data)


class TestCreateSubscription:
    def test_should_subscribe_to_known_court(self, reference_data, user):
        subscription = create_subscription(reference_data, user.id, "9")
        assert subscription.search_type == SearchType.LOCATION_ID
        assert subscription.location_id == 9

    def test_should_reject_unknown_court(self, reference_data, user):
        with pytest.raises(ValueError, match="Invalid location ID"):
            create_subscription(reference_data, user.id, "999")

    def test_should_reject_duplicate(self, reference_data, user):
        create_subscription(reference_data, user.id, 9)
        with pytest.raises(ValueError, match="already subscribed"):
            create_subscription(reference_data, user.id, "9")

    def test_should_enforce_subscription_limit(self, reference_data, user, monkeypatch):
        monkeypatch.setattr(subscription_service, "MAX_SUBSCRIPTIONS", 1)
        create_subscription(reference_data, user.id, 1)
        with pytest.raises(ValueError, match="Maximum 1 subscriptions allowed"):
            create_subscription(reference_data, user.id, 2)

    def test_should_subscribe_to_case(self, reference_data, user):
        create_case_subscription(
            reference_data, user.id, SearchType.CASE_NUMBER, " 12345 ", case_name="A v B", case_number="12345"
        )
        [case] = get_case_subscriptions_by_user_id(reference_data, user.id)
        assert case["caseNumber"] == "12345"
        assert case["searchType"] == "CASE_NUMBER"
        assert get_court_subscriptions_by_user_id(reference_data, user.id) == []

    def test_should_refuse_location_search_type_for_case(self, reference_data, user):
        with pytest.raises(ValueError):
            create_case_subscription(reference_data, user.id, SearchType.LOCATION_ID, "9")


class TestReplaceUserSubscriptions:
    def test_should_add_and_remove_to_match_selection(self, reference_data, user):
        create_subscription(reference_data, user.id, 1)
        create_subscription(reference_data, user.id, 2)

        result = replace_user_subscriptions(reference_data, user.id, ["2", "3", "3"])

        assert result == {"added": 1, "removed": 1}
        ids = sorted(s["locationId"] for s in get_court_subscriptions_by_user_id(reference_data, user.id))
        assert ids == [2, 3]

    def test_should_change_nothing_when_a_location_is_invalid(self, reference_data, user):
        create_subscription(reference_data, user.id, 1)
        with pytest.raises(ValueError, match="Invalid location ID: 999"):
            replace_user_subscriptions(reference_data, user.id, ["2", "999"])
        ids = [s["locationId"] for s in get_court_subscriptions_by_user_id(reference_data, user.id)]
        assert ids == [1]

    def test_should_reject_non_numeric_ids(self, reference_data, user):
        with pytest.raises(ValueError, match="Invalid location ID: abc"):
            replace_user_subscriptions(reference_data, user.id, ["abc"])


class TestReadAndDelete:
    def test_should_use_welsh_court_names(self, reference_data, user):
        create_subscription(reference_data, user.id, 9)
        [court] = get_court_subscriptions_by_user_id(reference_data, user.id, "cy")
        assert court["courtOrTribunalName"] == "Tribiwnlys Safonau Gofal"

    def test_should_find_subscribers_for_location(self, reference_data, user):
        other = _user(reference_data, sub="verified-2", email="other@example.com")
        create_subscription(reference_data, user.id, 9)
        create_subscription(reference_data, other.id, 9)
        create_subscription(reference_data, other.id, 1)
        assert len(find_active_subscriptions_by_location(reference_data, 9)) == 2

    def test_should_only_remove_own_subscription(self, reference_data, user):
        other = _user(reference_data, sub="verified-2", email="other@example.com")
        subscription = create_subscription(reference_data, user.id, 9)
        with pytest.raises(ValueError, match="Subscription not found"):
            remove_subscription(reference_data, subscription.subscription_id, other.id)
        assert remove_subscription(reference_data, subscription.subscription_id, user.id) == 1

    def test_should_show_details_for_confirmation(self, reference_data, user):
        court = create_subscription(reference_data, user.id, 9)
        case = create_case_subscription(reference_data, user.id, SearchType.CASE_NAME, "A v B", case_name="A v B")
        details = get_subscription_details_for_confirmation(
            reference_data, [str(court.subscription_id), str(case.subscription_id), "junk"], user.id
        )
        assert [d["type"] for d in details] == ["court", "case"]

    def test_should_bulk_delete_own_subscriptions(self, reference_data, user):
        ids = [str(create_subscription(reference_data, user.id, loc).subscription_id) for loc in (1, 2)]
        assert delete_subscriptions_by_ids(reference_data, ids, user.id) == 2
        assert reference_data.query(Subscription).count() == 0

    def test_should_delete_nothing_if_any_id_belongs_to_someone_else(self, reference_data, user):
        other = _user(reference_data, sub="verified-2", email="other@example.com")
        mine = str(create_subscription(reference_data, user.id, 1).subscription_id)
        theirs = str(create_subscription(reference_data, other.id, 1).subscription_id)

        with pytest.raises(ValueError, match="does not own all selected subscriptions"):
            delete_subscriptions_by_ids(reference_data, [mine, theirs], user.id)
        assert reference_data.query(Subscription).count() == 2

    def test_should_require_ids_for_bulk_delete(self, reference_data, user):
        with pytest.raises(ValueError, match="No subscriptions provided"):
            delete_subscriptions_by_ids(reference_data, [], user.id)

    def test_should_count_unknown_ids_as_not_owned(self, reference_data, user):
        mine = str(create_subscription(reference_data, user.id, 1).subscription_id)
        with pytest.raises(ValueError):
            delete_subscriptions_by_ids(reference_data, [mine, str(uuid.uuid4())], user.id)

    def test_should_list_court_subscriptions_for_user(self, reference_data, user):
        create_subscription(reference_data, user.id, 9)
        create_case_subscription(reference_data, user.id, SearchType.CASE_NAME, "A v B", case_name="A v B")
        [court] = get_all_subscriptions_by_user_id(reference_data, str(user.id))
        assert court["type"] == "court"
        assert court["courtOrTribunalName"] == "Care Standards Tribunal"
        assert court["locationId"] == 9


class TestListTypeSubscriptions:
    def test_should_subscribe_once_per_list_type(self, reference_data, user):
        created = create_list_type_subscriptions(reference_data, user.id, ["9", 9, 10], ListTypeLanguage.ENGLISH)
        assert sorted(sub.list_type_id for sub in created) == [9, 10]

    def test_should_write_nothing_when_a_list_type_is_unknown(self, reference_data, user):
        with pytest.raises(ValueError, match="Invalid list type: 999"):
            create_list_type_subscriptions(reference_data, user.id, [9, 999], ListTypeLanguage.ENGLISH)
        assert get_list_type_subscriptions_by_user_id(reference_data, user.id) == []

    def test_should_reject_same_list_type_and_language_twice(self, reference_data, user):
        create_list_type_subscriptions(reference_data, user.id, [9], ListTypeLanguage.ENGLISH)
        with pytest.raises(ValueError, match="Already subscribed"):
            create_list_type_subscriptions(reference_data, user.id, [9], "ENGLISH")
        create_list_type_subscriptions(reference_data, user.id, [9], ListTypeLanguage.WELSH)

    def test_should_enforce_subscription_limit(self, reference_data, user, monkeypatch):
        monkeypatch.setattr(subscription_service, "MAX_SUBSCRIPTIONS", 1)
        with pytest.raises(ValueError, match="Maximum 1 list type subscriptions allowed"):
            create_list_type_subscriptions(reference_data, user.id, [9, 10], ListTypeLanguage.BOTH)

    def test_should_list_with_welsh_names(self, reference_data, user):
        create_list_type_subscriptions(reference_data, user.id, [9], ListTypeLanguage.BOTH)
        [dto] = get_list_type_subscriptions_by_user_id(reference_data, str(user.id), "cy")
        assert dto["listTypeName"] == "Rhestr Gwrandawiadau Wythnosol y Tribiwnlys Safonau Gofal"
        assert dto["language"] == "BOTH"

    def test_should_only_delete_own_subscription(self, reference_data, user):
        [sub] = create_list_type_subscriptions(reference_data, user.id, [9], ListTypeLanguage.ENGLISH)
        other = _user(reference_data, sub="verified-2", email="other@example.com")
        with pytest.raises(ValueError, match="Subscription not found"):
            delete_list_type_subscription(reference_data, sub.subscription_id, other.id)
        delete_list_type_subscription(reference_data, sub.subscription_id, user.id)
        assert get_list_type_subscriptions_by_user_id(reference_data, user.id) == []

    def test_should_match_subscribers_on_language(self, reference_data, user):
        other = _user(reference_data, sub="verified-2", email="other@example.com")
        create_list_type_subscriptions(reference_data, user.id, [9], ListTypeLanguage.ENGLISH)
        create_list_type_subscriptions(reference_data, other.id, [9], ListTypeLanguage.BOTH)

        assert {s.user_id for s in find_list_type_subscriptions(reference_data, 9, "WELSH")} == {other.id}
        assert len(find_list_type_subscriptions(reference_data, 9, "ENGLISH")) == 2
        assert len(find_list_type_subscriptions(reference_data, 9, "BILINGUAL")) == 2
        assert find_list_type_subscriptions(reference_data, 10, "ENGLISH") == []
