from typing import Optional, List, Sequence, Union, Mapping, Any
from scriptgraph.models import (
    ScriptElement,
    Character,
    Location,
    SceneEvent,
    KnowledgeGraph,
    ParseResult,
    ContinuityRules,
)
from scriptgraph.parser.headings import parse_scene_heading, canonical_character_name
from scriptgraph.parser.props import build_prop_patterns, extract_prop_names, find_character_mentions
from scriptgraph.parser.registry import CharacterRegistry, LocationRegistry, PropRegistry, Timeline
from scriptgraph.lint.continuity import check_continuity
from scriptgraph.logging_config import get_logger

logger = get_logger("parser")

ElementLike = Union[ScriptElement, Mapping[str, Any]]


class GraphBuilder:
    """Single forward pass over the elements, holding the cursor state."""

    def __init__(self, rules: ContinuityRules):
        self.characters = CharacterRegistry()
        self.locations = LocationRegistry()
        self.props = PropRegistry()
        self.timeline = Timeline()
        self.prop_patterns = build_prop_patterns(rules)

        self.current_character: Optional[str] = None
        self.current_scene: Optional[Location] = None

    @property
    def scene_name(self) -> Optional[str]:
        return self.current_scene.name if self.current_scene else None

    def feed(self, element: ScriptElement, index: int) -> None:
        handler = {
            "scene_heading": self.on_scene_heading,
            "character": self.on_character,
            "dialogue": self.on_dialogue,
            "action": self.on_action,
            "parenthetical": self.on_parenthetical,
        }.get(element.type)

        if handler is not None:
            handler(element.content, index)

    def on_scene_heading(self, content: str, index: int) -> None:
        parsed = parse_scene_heading(content)
        if parsed is None:
            logger.debug("Ignoring unrecognised heading at %d: %r", index, content)
            return

        kind, name, time_of_day = parsed
        self.current_scene = self.locations.visit(name, kind, time_of_day, index)

    def on_character(self, content: str, index: int) -> None:
        name = canonical_character_name(content)
        if not name:
            # A bare extension like "(V.O.)" names nobody; later dialogue is dropped.
            self.current_character = None
            return

        character = self.characters.register(name, index)
        character.current_location = self.scene_name
        self.current_character = name

    def on_dialogue(self, content: str, index: int) -> None:
        character = self._active_character()
        if character is None:
            return

        character.dialogues.append(content)
        self.timeline.append(SceneEvent(
            element_index=index,
            kind="dialogue",
            character=character.name,
            location=self.scene_name,
            description=content,
        ))

    def on_action(self, content: str, index: int) -> None:
        for name in find_character_mentions(content, self.characters.names()):
            character = self.characters.get(name)
            character.actions.append(content)
            character.last_action = content
            character.current_location = self.scene_name

            self.timeline.append(SceneEvent(
                element_index=index,
                kind="action",
                character=name,
                location=self.scene_name,
                description=content,
            ))

        for prop_name in extract_prop_names(content, self.prop_patterns):
            self.props.mention(prop_name, index)

    def on_parenthetical(self, content: str, index: int) -> None:
        character = self._active_character()
        if character is not None:
            character.actions.append(f"({content})")

    def _active_character(self) -> Optional[Character]:
        if self.current_character is None:
            return None
        return self.characters.get(self.current_character)

    def graph(self) -> KnowledgeGraph:
        return KnowledgeGraph(
            characters=self.characters.records,
            locations=self.locations.records,
            props=self.props.records,
            timeline=self.timeline.events,
            current_scene=self.current_scene,
        )


class ScreenplayParser:
    """Builds a knowledge graph from screenplay elements and checks continuity."""

    def __init__(self, rules: Optional[ContinuityRules] = None):
        self.rules = rules or ContinuityRules()
        self.knowledge_graph = KnowledgeGraph()
        self.errors = []

    def parse_screenplay(self, elements: Sequence[ElementLike]) -> ParseResult:
        """Run one ingestion pass and one analysis pass over `elements`.

        Every call starts from an empty graph. Malformed elements are
        skipped rather than raised.
        """
        builder = GraphBuilder(self.rules)

        for index, element in enumerate(elements):
            element = _coerce_element(element, index)
            if element is not None:
                builder.feed(element, index)

        self.knowledge_graph = builder.graph()
        self.errors = check_continuity(self.knowledge_graph, self.rules)

        logger.debug(
            "Parsed %d elements: %d characters, %d locations, %d props, %d events, %d findings",
            len(elements),
            len(self.knowledge_graph.characters),
            len(self.knowledge_graph.locations),
            len(self.knowledge_graph.props),
            len(self.knowledge_graph.timeline),
            len(self.errors),
        )

        return ParseResult(knowledge_graph=self.knowledge_graph, errors=self.errors)

    def get_character_info(self, name: str) -> Optional[Character]:
        return self.knowledge_graph.get_character_info(name)

    def get_current_scene(self) -> Optional[Location]:
        return self.knowledge_graph.get_current_scene()

    def get_recent_events(self, count: int = 5) -> List[SceneEvent]:
        return self.knowledge_graph.get_recent_events(count)


def _coerce_element(element: ElementLike, index: int) -> Optional[ScriptElement]:
    if isinstance(element, ScriptElement):
        return element
    if not isinstance(element, Mapping):
        logger.debug("Skipping non-element at %d: %r", index, element)
        return None

    # Unknown types stay inert, so build without validating the type tag.
    return ScriptElement.model_construct(
        id=str(element.get("id", index)),
        type=str(element.get("type", "")),
        content=str(element.get("content") or ""),
    )


def parse_screenplay(
    elements: Sequence[ElementLike],
    rules: Optional[ContinuityRules] = None,
) -> ParseResult:
    """Convenience wrapper around ScreenplayParser.parse_screenplay."""
    return ScreenplayParser(rules).parse_screenplay(elements)
