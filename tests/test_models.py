"""Tests for scriptgraph.models — Pydantic data models."""
import pytest
from pydantic import ValidationError
from scriptgraph.models import (
    ScriptElement,
    Character,
    Location,
    Prop,
    SceneEvent,
    ContinuityError,
    KnowledgeGraph,
    ContinuityRules,
)


class TestScriptElement:
    def test_construction(self):
        el = ScriptElement(id="1", type="scene_heading", content="INT. KITCHEN - DAY")
        assert el.type == "scene_heading"
        assert el.content == "INT. KITCHEN - DAY"

    def test_rejects_unknown_type(self):
        with pytest.raises(ValidationError):
            ScriptElement(id="1", type="montage", content="...")


class TestCharacter:
    def test_defaults(self):
        c = Character(name="JOHN", first_appearance=3)
        assert c.actions == []
        assert c.dialogues == []
        assert c.relationships == {}
        assert c.current_location is None
        assert c.last_action is None

    def test_lists_not_shared(self):
        a = Character(name="A", first_appearance=0)
        b = Character(name="B", first_appearance=1)
        a.dialogues.append("Hi")
        assert b.dialogues == []


class TestLocation:
    def test_kind_validated(self):
        loc = Location(name="KITCHEN", kind="INT/EXT")
        assert loc.kind == "INT/EXT"
        assert loc.scenes == []
        with pytest.raises(ValidationError):
            Location(name="KITCHEN", kind="INSIDE")


class TestProp:
    def test_minimal(self):
        p = Prop(name="knife", first_mention=2, last_seen=2)
        assert p.associated_characters == []


class TestContinuityError:
    def test_severity_validated(self):
        err = ContinuityError(kind="location_impossible", element_index=4, message="m", severity="warning")
        assert err.severity == "warning"
        with pytest.raises(ValidationError):
            ContinuityError(kind="location_impossible", element_index=4, message="m", severity="fatal")


class TestKnowledgeGraph:
    def _graph(self):
        events = [
            SceneEvent(element_index=i, kind="dialogue", character="JOHN", description=f"line {i}")
            for i in range(8)
        ]
        return KnowledgeGraph(
            characters={"JOHN": Character(name="JOHN", first_appearance=0)},
            timeline=events,
            current_scene=Location(name="KITCHEN", kind="INT", scenes=[0]),
        )

    def test_empty(self):
        graph = KnowledgeGraph()
        assert graph.characters == {}
        assert graph.timeline == []
        assert graph.get_current_scene() is None
        assert graph.get_recent_events() == []

    def test_get_character_info(self):
        graph = self._graph()
        assert graph.get_character_info("JOHN").first_appearance == 0
        assert graph.get_character_info("MARY") is None

    def test_recent_events_default_five(self):
        graph = self._graph()
        recent = graph.get_recent_events()
        assert [e.element_index for e in recent] == [3, 4, 5, 6, 7]

    def test_recent_events_restartable(self):
        graph = self._graph()
        first = graph.get_recent_events(2)
        first.clear()
        assert [e.element_index for e in graph.get_recent_events(2)] == [6, 7]
        assert len(graph.timeline) == 8

    def test_recent_events_non_positive(self):
        graph = self._graph()
        assert graph.get_recent_events(0) == []
        assert graph.get_recent_events(-3) == []

    def test_recent_events_more_than_available(self):
        graph = self._graph()
        assert len(graph.get_recent_events(100)) == 8


class TestContinuityRules:
    def test_defaults(self):
        rules = ContinuityRules()
        assert rules.transition_cues == ["exits", "leaves"]
        assert "picks up" in rules.prop_action_verbs
        assert rules.prop_possession_words == ["with", "holding", "carrying"]
