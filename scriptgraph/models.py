from typing import Optional, List, Dict, Literal
from pydantic import BaseModel, Field


ElementType = Literal[
    "scene_heading", "action", "character", "dialogue", "parenthetical", "transition", "shot"
]
LocationKind = Literal["INT", "EXT", "INT/EXT"]
EventKind = Literal["action", "dialogue", "movement"]
ErrorKind = Literal[
    "character_inconsistency", "timeline_conflict", "location_impossible", "prop_inconsistency"
]
Severity = Literal["warning", "error"]


class ScriptElement(BaseModel):
    """One tagged unit of screenplay text."""
    id: str
    type: ElementType
    content: str = ""


class Character(BaseModel):
    """A speaking character, keyed by canonical cue name."""
    name: str
    first_appearance: int
    actions: List[str] = Field(default_factory=list)
    dialogues: List[str] = Field(default_factory=list)
    relationships: Dict[str, str] = Field(default_factory=dict)
    current_location: Optional[str] = None
    last_action: Optional[str] = None


class Location(BaseModel):
    """A place named by one or more scene headings."""
    name: str
    kind: LocationKind
    time_of_day: Optional[str] = None
    scenes: List[int] = Field(default_factory=list)


class Prop(BaseModel):
    name: str
    first_mention: int
    last_seen: int
    associated_characters: List[str] = Field(default_factory=list)


class SceneEvent(BaseModel):
    """A timeline entry tied to an element position."""
    element_index: int
    kind: EventKind
    character: Optional[str] = None
    location: Optional[str] = None
    description: str = ""


class ContinuityError(BaseModel):
    """An advisory continuity finding."""
    kind: ErrorKind
    element_index: int
    message: str
    severity: Severity


class KnowledgeGraph(BaseModel):
    """Entities and timeline built from one screenplay pass."""
    characters: Dict[str, Character] = Field(default_factory=dict)
    locations: Dict[str, Location] = Field(default_factory=dict)
    props: Dict[str, Prop] = Field(default_factory=dict)
    timeline: List[SceneEvent] = Field(default_factory=list)
    current_scene: Optional[Location] = None

    def get_character_info(self, name: str) -> Optional[Character]:
        return self.characters.get(name)

    def get_current_scene(self) -> Optional[Location]:
        return self.current_scene

    def get_recent_events(self, count: int = 5) -> List[SceneEvent]:
        """Return the last `count` timeline events, oldest first."""
        if count <= 0:
            return []
        return list(self.timeline[-count:])


class ParseResult(BaseModel):
    knowledge_graph: KnowledgeGraph
    errors: List[ContinuityError] = Field(default_factory=list)


class ContinuityRules(BaseModel):
    """Vocabulary used by the action-line heuristics."""
    transition_cues: List[str] = Field(default_factory=lambda: ["exits", "leaves"])
    prop_action_verbs: List[str] = Field(
        default_factory=lambda: [
            "picks up", "holds", "grabs", "takes", "drops", "throws", "uses", "opens", "closes",
        ]
    )
    prop_possession_words: List[str] = Field(
        default_factory=lambda: ["with", "holding", "carrying"]
    )
