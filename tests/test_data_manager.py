import pytest
import sys
from pathlib import Path
from datetime import date
import tempfile
import json

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from w2w.config import LANGUAGE_SLOT, STATE_SLOT
from w2w.data_manager import (
    Agent,
    DataManager,
    DataSaveError,
    DataValidationError,
    ScheduleEntry,
    ShiftAssignment,
    ShiftAvailability,
    ShiftRequirement,
    Team,
)
from w2w.storage import FileStorage


@pytest.fixture
def storage():
    """Fixture for an isolated FileStorage in a fresh temporary directory."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield FileStorage(temp_dir)


@pytest.fixture
def data_manager(storage):
    return DataManager(storage)


@pytest.fixture
def seeded_manager(data_manager):
    """DataManager with one team and two agents."""
    data_manager.add_team("Support")
    data_manager.add_agent("Ana", "Support", days_off=(0,))
    data_manager.add_agent("Luis", "Sales")
    return data_manager


def test_empty_storage_starts_with_empty_collections(data_manager):
    state = data_manager.get_state()
    assert state.agents == ()
    assert state.teams == ()
    assert state.schedule == ()
    assert data_manager.get_language() == "en"


def test_persist_and_reload_gives_equal_snapshot(seeded_manager):
    """Reloading the store without any modification must yield the same snapshot."""
    agent = seeded_manager.get_agents()[0]
    seeded_manager.add_agent_note(agent.id, "2024-01-10", "Vacation")
    seeded_manager.replace_schedule([
        ScheduleEntry(agent.id, agent.name, agent.team, {"2024-01-07": ShiftAssignment("off")})
    ])

    reloaded = DataManager(seeded_manager.storage)
    assert reloaded.get_state() == seeded_manager.get_state()


def test_persisted_json_uses_camel_case_keys(seeded_manager):
    raw = json.loads(seeded_manager.storage.get_item(STATE_SLOT))
    assert set(raw) == {"agents", "teams", "schedule", "language"}
    assert "daysOff" in raw["agents"][0]
    assert raw["teams"][0]["requiredAgents"]["0"] == {"morning": 0, "afternoon": 0, "night": 0}
    assert raw["language"]["current"] == "en"
    assert "es" in raw["language"]["translations"]


def test_malformed_state_falls_back_to_empty(storage):
    storage.set_item(STATE_SLOT, "{not json")
    storage.backup_path_for(STATE_SLOT).unlink(missing_ok=True)

    dm = DataManager(storage)
    assert dm.get_agents() == []
    assert dm.get_teams() == []


def test_malformed_state_recovers_from_backup(data_manager):
    data_manager.add_agent("Ana")
    data_manager.add_agent("Luis")
    # The backup now holds the snapshot with only Ana
    data_manager.storage.path_for(STATE_SLOT).write_text("[1, 2", encoding="utf-8")

    reloaded = DataManager(data_manager.storage)
    assert [agent.name for agent in reloaded.get_agents()] == ["Ana"]


def test_missing_state_recovers_from_backup(data_manager):
    """An interrupted write can leave only the backup behind."""
    data_manager.add_agent("Ana")
    data_manager.add_agent("Luis")
    storage = data_manager.storage
    storage.path_for(STATE_SLOT).replace(storage.backup_path_for(STATE_SLOT))

    reloaded = DataManager(storage)
    assert [agent.name for agent in reloaded.get_agents()] == ["Ana", "Luis"]


def test_null_note_is_ignored_on_load(storage):
    state = {
        "agents": [{"id": "1", "name": "Ana", "team": "", "daysOff": [],
                    "notes": {"2024-01-10": None, "2024-01-11": "Doctor"},
                    "availability": {"morning": True, "afternoon": True, "night": True}}],
        "teams": [],
        "schedule": [],
    }
    storage.set_item(STATE_SLOT, json.dumps(state))

    assert DataManager(storage).get_agent("1").notes == {"2024-01-11": "Doctor"}


def test_state_with_invalid_shift_is_treated_as_malformed(storage):
    bad_state = {
        "agents": [],
        "teams": [],
        "schedule": [{"agentId": "1", "agentName": "A", "team": "", "shifts": {"2024-01-07": {"shift": "evening"}}}],
    }
    storage.set_item(STATE_SLOT, json.dumps(bad_state))
    storage.backup_path_for(STATE_SLOT).unlink(missing_ok=True)

    assert DataManager(storage).get_schedule() == []


def test_language_slot_overrides_snapshot(storage):
    storage.set_item(LANGUAGE_SLOT, "es")
    dm = DataManager(storage)
    assert dm.get_language() == "es"
    assert dm.translator.t("nav.agents") == "Agentes"


def test_set_language_persists_both_slots(data_manager):
    data_manager.set_language("es")

    assert data_manager.storage.get_item(LANGUAGE_SLOT) == "es"
    raw = json.loads(data_manager.storage.get_item(STATE_SLOT))
    assert raw["language"]["current"] == "es"
    assert DataManager(data_manager.storage).get_language() == "es"


def test_set_language_rejects_unknown_tag(data_manager):
    with pytest.raises(DataValidationError):
        data_manager.set_language("fr")
    assert data_manager.get_language() == "en"


def test_add_agent_assigns_unique_ids(data_manager):
    first = data_manager.add_agent("Ana")
    second = data_manager.add_agent("Ana")
    assert first.id != second.id
    assert first.availability == ShiftAvailability(True, True, True)
    assert first.days_off == ()


def test_update_agent_replaces_by_id(seeded_manager):
    ana = seeded_manager.get_agents()[0]
    updated = Agent(id=ana.id, name="Ana Maria", team="Support", days_off=(0, 6))

    assert seeded_manager.update_agent(updated) is True
    assert seeded_manager.get_agent(ana.id).name == "Ana Maria"
    assert [agent.name for agent in seeded_manager.get_agents()] == ["Ana Maria", "Luis"]


def test_update_unknown_agent_returns_false(seeded_manager):
    before = seeded_manager.get_state()
    assert seeded_manager.update_agent(Agent(id="missing", name="Ghost")) is False
    assert seeded_manager.get_state() == before


def test_delete_agent(seeded_manager):
    ana = seeded_manager.get_agents()[0]
    assert seeded_manager.delete_agent(ana.id) is True
    assert seeded_manager.get_agent(ana.id) is None
    assert seeded_manager.delete_agent(ana.id) is False


def test_agent_validation():
    with pytest.raises(DataValidationError):
        Agent(id="1", name="Ana", days_off=(7,))
    with pytest.raises(DataValidationError):
        Agent(id="1", name="Ana", notes={"2024-02-30": "Bad date"})

    agent = Agent(id="1", name="Ana", days_off=(1, 1, 3))
    assert agent.days_off == (1, 3)


def test_add_and_remove_agent_note(seeded_manager):
    ana = seeded_manager.get_agents()[0]

    assert seeded_manager.add_agent_note(ana.id, date(2024, 1, 10), "Doctor") is True
    assert seeded_manager.add_agent_note(ana.id, "2024-01-10", "Vacation") is True
    assert seeded_manager.get_agent(ana.id).notes == {"2024-01-10": "Vacation"}

    assert seeded_manager.remove_agent_note(ana.id, "2024-01-10") is True
    assert seeded_manager.get_agent(ana.id).notes == {}
    assert seeded_manager.remove_agent_note(ana.id, "2024-01-10") is False


def test_note_for_unknown_agent_returns_false(data_manager):
    assert data_manager.add_agent_note("missing", "2024-01-10", "Vacation") is False


def test_add_note_with_invalid_date_raises(seeded_manager):
    ana = seeded_manager.get_agents()[0]
    with pytest.raises(DataValidationError):
        seeded_manager.add_agent_note(ana.id, "10/01/2024", "Vacation")


def test_remove_note_with_invalid_date_returns_false(seeded_manager):
    ana = seeded_manager.get_agents()[0]
    seeded_manager.add_agent_note(ana.id, "2024-01-10", "Vacation")
    before = seeded_manager.get_state()

    assert seeded_manager.remove_agent_note(ana.id, "not-a-date") is False
    assert seeded_manager.get_state() == before


def test_add_team_defaults_to_zero_requirements(data_manager):
    team = data_manager.add_team("Support")
    assert sorted(team.required_agents) == list(range(7))
    assert all(req == ShiftRequirement(0, 0, 0) for req in team.required_agents.values())


def test_update_and_delete_team(seeded_manager):
    team = seeded_manager.get_teams()[0]
    requirements = {day: ShiftRequirement(morning=2) for day in range(7)}

    assert seeded_manager.update_team(Team(id=team.id, name="Support", required_agents=requirements)) is True
    assert seeded_manager.get_team(team.id).requirement_for(3).morning == 2

    assert seeded_manager.delete_team(team.id) is True
    assert seeded_manager.get_teams() == []
    assert seeded_manager.delete_team(team.id) is False
    assert seeded_manager.update_team(team) is False


def test_negative_requirement_is_rejected():
    with pytest.raises(DataValidationError):
        ShiftRequirement(morning=-1)


def test_search_agents_by_name_or_team(seeded_manager):
    assert [a.name for a in seeded_manager.search_agents("ana")] == ["Ana"]
    assert [a.name for a in seeded_manager.search_agents("SALES")] == ["Luis"]
    assert len(seeded_manager.search_agents("")) == 2


def test_team_names_and_schedule_filter(seeded_manager):
    ana, luis = seeded_manager.get_agents()
    seeded_manager.replace_schedule([
        ScheduleEntry(ana.id, ana.name, ana.team, {}),
        ScheduleEntry(luis.id, luis.name, luis.team, {}),
    ])

    assert seeded_manager.get_team_names() == ["Support", "Sales"]
    assert [e.agent_name for e in seeded_manager.filter_schedule("Sales")] == ["Luis"]
    assert len(seeded_manager.filter_schedule("all")) == 2
    assert len(seeded_manager.filter_schedule(None)) == 2


def test_save_failure_raises_data_save_error(data_manager, monkeypatch):
    def failing_set_item(key, value):
        raise OSError("disk full")

    monkeypatch.setattr(data_manager.storage, "set_item", failing_set_item)
    with pytest.raises(DataSaveError):
        data_manager.add_agent("Ana")


def test_storage_keeps_backup_and_leaves_no_temp_file(storage):
    storage.set_item(STATE_SLOT, "first")
    storage.set_item(STATE_SLOT, "second")

    assert storage.get_item(STATE_SLOT) == "second"
    assert storage.get_backup(STATE_SLOT) == "first"
    assert not list(storage.base_dir.glob("*.tmp"))
    assert storage.get_item(LANGUAGE_SLOT) is None
