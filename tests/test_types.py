"""Tests for fsmengine.types."""

import pytest

from fsmengine.errors import ConfigError, MalformedStateError
from fsmengine.types import (
    Configuration,
    HistoryEntry,
    HistoryMarker,
    StateDefinition,
)


def _wire_config() -> dict:
    return {
        "initial": "idle",
        "states": {
            "idle": {"transitions": {"start": "running"}},
            "running": {"transitions": {"stop": "idle"}},
        },
    }


# ── StateDefinition ────────────────────────────────────────────────────────────

class TestStateDefinition:
    def test_defaults_to_empty_transitions(self):
        d = StateDefinition(name="idle")
        assert dict(d.transitions) == {}

    def test_transitions_copied_from_input(self):
        table = {"start": "running"}
        d = StateDefinition(name="idle", transitions=table)
        table["stop"] = "done"
        assert "stop" not in d.transitions

    def test_transitions_read_only(self):
        d = StateDefinition(name="idle", transitions={"start": "running"})
        with pytest.raises(TypeError):
            d.transitions["stop"] = "idle"

    def test_non_mapping_transitions_raises(self):
        with pytest.raises(MalformedStateError, match="idle") as exc:
            StateDefinition(name="idle", transitions=["start"])
        assert exc.value.state == "idle"

    def test_none_transitions_raises(self):
        with pytest.raises(MalformedStateError):
            StateDefinition(name="idle", transitions=None)

    def test_target_and_handles(self):
        d = StateDefinition(name="idle", transitions={"start": "running"})
        assert d.target("start") == "running"
        assert d.target("stop") is None
        assert d.handles("start") is True
        assert d.handles("stop") is False


# ── Configuration ──────────────────────────────────────────────────────────────

class TestConfiguration:
    def test_from_dict_builds_definitions(self):
        c = Configuration.from_dict(_wire_config())
        assert c.initial == "idle"
        assert isinstance(c.states["idle"], StateDefinition)
        assert c.states["idle"].name == "idle"
        assert c.states["running"].target("stop") == "idle"

    def test_from_dict_does_not_mutate_input(self):
        data = _wire_config()
        Configuration.from_dict(data)
        assert data == _wire_config()
        assert "name" not in data["states"]["idle"]

    def test_from_dict_preserves_order(self):
        data = {
            "initial": "c",
            "states": {
                "c": {"transitions": {}},
                "a": {"transitions": {}},
                "b": {"transitions": {}},
            },
        }
        assert Configuration.from_dict(data).state_names() == ["c", "a", "b"]

    def test_from_dict_missing_fields_raises(self):
        with pytest.raises(ConfigError, match="initial"):
            Configuration.from_dict({"states": {}})
        with pytest.raises(ConfigError, match="states"):
            Configuration.from_dict({"initial": "idle"})

    def test_from_dict_non_mapping_raises(self):
        with pytest.raises(ConfigError):
            Configuration.from_dict(["idle"])

    def test_from_dict_non_mapping_states_raises(self):
        with pytest.raises(ConfigError, match="states"):
            Configuration.from_dict({"initial": "idle", "states": ["idle"]})

    def test_from_dict_state_without_transitions_raises(self):
        data = {"initial": "idle", "states": {"idle": {}}}
        with pytest.raises(MalformedStateError) as exc:
            Configuration.from_dict(data)
        assert exc.value.state == "idle"

    def test_from_dict_accepts_state_definitions(self):
        data = {"initial": "idle", "states": {"idle": StateDefinition(name="idle")}}
        assert Configuration.from_dict(data).state_names() == ["idle"]

    def test_mismatched_name_raises(self):
        with pytest.raises(ConfigError, match="does not match"):
            Configuration(initial="a", states={"a": StateDefinition(name="b")})

    def test_non_definition_value_raises(self):
        with pytest.raises(MalformedStateError):
            Configuration(initial="a", states={"a": {"transitions": {}}})

    def test_states_copied(self):
        states = {"a": StateDefinition(name="a")}
        c = Configuration(initial="a", states=states)
        states["b"] = StateDefinition(name="b")
        assert c.state_names() == ["a"]

    def test_transition_count(self):
        c = Configuration.from_dict(_wire_config())
        assert c.transition_count == 2

    def test_to_dict_matches_wire_format(self):
        assert Configuration.from_dict(_wire_config()).to_dict() == _wire_config()


class TestConfigurationValidate:
    def test_valid_config_passes(self):
        Configuration.from_dict(_wire_config()).validate()  # should not raise

    def test_unknown_initial_raises(self):
        data = _wire_config()
        data["initial"] = "missing"
        with pytest.raises(ConfigError, match="Initial state"):
            Configuration.from_dict(data).validate()

    def test_unknown_target_raises(self):
        data = _wire_config()
        data["states"]["idle"]["transitions"]["explode"] = "crater"
        with pytest.raises(ConfigError, match="crater"):
            Configuration.from_dict(data).validate()


# ── HistoryEntry ───────────────────────────────────────────────────────────────

class TestHistoryEntry:
    def test_direct_entry_not_triggered(self):
        e = HistoryEntry(state="running")
        assert e.event is None
        assert e.triggered is False

    def test_event_entry_triggered(self):
        e = HistoryEntry(state="running", event="start")
        assert e.triggered is True

    def test_timestamp_defaults_to_now(self):
        e = HistoryEntry(state="running")
        assert e.timestamp > 0

    def test_to_dict_keys(self):
        e = HistoryEntry(state="running", event="start", timestamp=1.5)
        assert e.to_dict() == {"state": "running", "event": "start", "timestamp": 1.5}


class TestHistoryMarker:
    def test_initial_is_not_a_state_name(self):
        assert HistoryMarker.INITIAL != "initial"
