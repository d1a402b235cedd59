import re
from typing import List, Optional
from scriptgraph.models import ContinuityError, ContinuityRules, KnowledgeGraph, SceneEvent
from scriptgraph.parser.registry import Timeline
from scriptgraph.logging_config import get_logger

logger = get_logger("continuity")

TRANSPORT_RE = re.compile(
    r'(\w+)\s+(enters|exits|gets\s+in|gets\s+out\s+of|boards|leaves)\s+(?:the\s+)?(\w+)',
    re.IGNORECASE,
)
ENTER_VERB_RE = re.compile(r'enters|gets\s+in|boards', re.IGNORECASE)
ENTER_RE = re.compile(r'(?:enters|gets\s+in|boards)\s+(?:the\s+)?(\w+)', re.IGNORECASE)
EXIT_VERBS = {"exits", "gets out of", "leaves"}


def _has_transition_cue(events: List[SceneEvent], cues: List[str]) -> bool:
    return any(
        event.kind == "action" and any(cue in event.description for cue in cues)
        for event in events
    )


def check_location_continuity(
    graph: KnowledgeGraph,
    rules: Optional[ContinuityRules] = None,
) -> List[ContinuityError]:
    """Flag characters who change location with no exit cue in between."""
    rules = rules or ContinuityRules()
    timeline = Timeline(graph.timeline)
    errors = []

    for name in graph.characters:
        last_location = None
        last_index = -1

        for event in timeline:
            if event.character != name or not event.location:
                continue

            if last_location and last_location != event.location:
                between = timeline.between(last_index, event.element_index)
                if not _has_transition_cue(between, rules.transition_cues):
                    errors.append(
                        ContinuityError(
                            kind="location_impossible",
                            element_index=event.element_index,
                            message=f"{name} appears in {event.location} without leaving {last_location}",
                            severity="warning",
                        )
                    )

            last_location = event.location
            last_index = event.element_index

    return errors


def find_previous_vehicle(timeline: Timeline, character: str, before_index: int) -> Optional[str]:
    """Vehicle named by the character's nearest earlier enter/board action."""
    for event in reversed(timeline.before(before_index)):
        if event.kind != "action" or event.character != character:
            continue
        if not ENTER_VERB_RE.search(event.description):
            continue
        # The nearest enter line ends the search even when it names no vehicle.
        match = ENTER_RE.search(event.description)
        return match.group(1) if match else None
    return None


def check_transport_continuity(graph: KnowledgeGraph) -> List[ContinuityError]:
    """Flag characters leaving a vehicle other than the one they last entered."""
    timeline = Timeline(graph.timeline)
    errors = []

    for event in timeline:
        if event.kind != "action" or not event.character:
            continue

        for match in TRANSPORT_RE.finditer(event.description):
            actor, verb, vehicle = match.groups()
            if actor != event.character:
                continue
            if " ".join(verb.lower().split()) not in EXIT_VERBS:
                continue

            previous = find_previous_vehicle(timeline, event.character, event.element_index)
            if previous and previous != vehicle:
                errors.append(
                    ContinuityError(
                        kind="character_inconsistency",
                        element_index=event.element_index,
                        message=f"{event.character} exits {vehicle} but previously entered {previous}",
                        severity="error",
                    )
                )

    return errors


def check_continuity(
    graph: KnowledgeGraph,
    rules: Optional[ContinuityRules] = None,
) -> List[ContinuityError]:
    """Run all continuity checks."""
    errors = []
    errors.extend(check_location_continuity(graph, rules))
    errors.extend(check_transport_continuity(graph))

    if errors:
        logger.info("Continuity analysis produced %d finding(s)", len(errors))
    return errors
