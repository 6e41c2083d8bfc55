import pytest

from farm_assistant.common.local_store import LocalStore
from farm_assistant.common.records import IdentificationRecord, error_record
from farm_assistant.components.identification_history import HISTORY_KEY, IdentificationHistory
from farm_assistant.components.settings import UserSettings


def test_add_keeps_newest_first(history, identified_record):
    first = history.add(identified_record.to_json())
    second = history.add(IdentificationRecord(status="healthy", message="ok").to_json())

    ids = [e["id"] for e in history.entries()]
    assert ids == [second, first]
    assert history.entries()[1]["record"]["identification"]["name"] == "Fall Armyworm"


@pytest.mark.parametrize("text", [error_record("bad").to_json(), "not json", ""])
def test_errors_and_unreadable_records_are_skipped(history, text):
    assert history.add(text) is None
    assert history.entries() == []


def test_limit_drops_oldest(store, identified_record):
    history = IdentificationHistory(store, limit=2)
    for _ in range(3):
        history.add(identified_record.to_json())
    assert len(history.entries()) == 2
    assert len(store.read(HISTORY_KEY)) == 2


def test_notes_go_to_latest_entry(history, identified_record):
    assert history.attach_notes("too early") is False

    history.add(identified_record.to_json())
    latest = history.add(identified_record.to_json())
    assert history.attach_notes("Sprayed on Monday") is True

    notes = {e["id"]: e.get("notes") for e in history.entries()}
    assert notes[latest] == "Sprayed on Monday"
    assert list(notes.values()).count(None) == 1


def test_entries_are_copies(history, identified_record):
    history.add(identified_record.to_json())
    history.entries()[0]["record"]["status"] = "tampered"
    assert history.entries()[0]["record"]["status"] == "identified"


def test_history_persists(tmp_path, identified_record):
    path = str(tmp_path / "state.json")
    IdentificationHistory(LocalStore(path)).add(identified_record.to_json())
    assert len(IdentificationHistory(LocalStore(path)).entries()) == 1


def test_country_defaults_until_location_is_set(store):
    settings = UserSettings(store, default_country="Kenya")
    assert settings.country() == "Kenya"

    settings.update(location="Uganda, Gulu", farm_name="Acholi Farm")
    assert settings.country() == "Uganda"
    assert UserSettings(store).to_dict() == {
        "location": "Uganda, Gulu",
        "farm_name": "Acholi Farm",
        "units": "metric",
        "country": "Uganda",
    }


def test_settings_reject_unknown_keys_and_units(store):
    settings = UserSettings(store)
    with pytest.raises(ValueError):
        settings.update(colour="green")
    with pytest.raises(ValueError):
        settings.update(units="cubits")
    assert settings.update(units="imperial").units == "imperial"
