from datetime import date

import pytest

from farm_assistant.common.local_store import LocalStore
from farm_assistant.common.records import IdentificationRecord, error_record
from farm_assistant.components.pest_tracker import ALL_LOCATIONS, PestTracker, parse_lenient_date


@pytest.fixture
def tracker(store):
    tracker = PestTracker(store)
    tracker.add("Aphids", "March 10th, 2024", "North Field", "Kale, Cabbage", "Neem oil weekly")
    tracker.add("Fall Armyworm", "2024-03-12", "South Field", "Maize", "Spray Duduthrin", notes="Heavy")
    tracker.add("Whitefly", "03/12/2024", "Greenhouse", "Tomatoes", "Yellow sticky traps")
    return tracker


def test_entries_are_newest_first(tracker):
    assert [e.name for e in tracker.entries()] == ["Whitefly", "Fall Armyworm", "Aphids"]


def test_search_matches_name_or_plants(tracker):
    assert [e.name for e in tracker.filter(search="aphid")] == ["Aphids"]
    assert [e.name for e in tracker.filter(search="MAIZE")] == ["Fall Armyworm"]


def test_date_filter_compares_calendar_days(tracker):
    assert [e.name for e in tracker.filter(date="March 12, 2024")] == ["Whitefly", "Fall Armyworm"]
    assert [e.name for e in tracker.filter(date="2024-03-10")] == ["Aphids"]


def test_unreadable_date_filter_matches_nothing(tracker):
    assert tracker.filter(date="sometime last week") == []


def test_location_filter(tracker):
    assert [e.name for e in tracker.filter(location="Greenhouse")] == ["Whitefly"]
    assert len(tracker.filter(location=ALL_LOCATIONS)) == 3


def test_combined_filters(tracker):
    assert tracker.filter(search="whitefly", location="South Field") == []


def test_unique_locations_start_with_all(tracker):
    assert tracker.unique_locations() == [ALL_LOCATIONS, "Greenhouse", "South Field", "North Field"]


def test_name_is_required(store):
    with pytest.raises(ValueError):
        PestTracker(store).add("  ", "2024-03-12", "Field", "Maize", "None")


def test_entries_survive_reload(tmp_path):
    path = tmp_path / "state.json"
    PestTracker(LocalStore(str(path))).add("Thrips", "2024-01-02", "Plot 4", "Onion", "Spinosad", notes="Check again")

    reloaded = PestTracker(LocalStore(str(path))).entries()
    assert len(reloaded) == 1
    assert reloaded[0].notes == "Check again"
    assert reloaded[0].to_dict()["affected_plants"] == "Onion"


def test_record_from_identification(store, identified_record):
    tracker = PestTracker(store)
    entry = tracker.record_from_identification(identified_record, when=date(2024, 5, 1))
    assert entry.name == "Fall Armyworm"
    assert entry.date == "2024-05-01"
    assert entry.location == "Not specified"
    assert entry.affected_plants == "Maize, Sorghum"
    assert entry.treatment_plan == "See analysis for recommendations"


@pytest.mark.parametrize("record", [
    IdentificationRecord(status="healthy", message="fine"),
    error_record("bad image"),
])
def test_only_identified_records_are_tracked(store, record):
    with pytest.raises(ValueError):
        PestTracker(store).record_from_identification(record)


@pytest.mark.parametrize("text, expected", [
    ("March 10th, 2024", date(2024, 3, 10)),
    ("Mar 1st 2024", date(2024, 3, 1)),
    ("10 March 2024", date(2024, 3, 10)),
    ("2024-03-10T08:30:00", date(2024, 3, 10)),
    ("2024/03/10", date(2024, 3, 10)),
    ("soon", None),
    ("", None),
])
def test_parse_lenient_date(text, expected):
    assert parse_lenient_date(text) == expected
