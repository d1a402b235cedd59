from typing import Optional, List
from scriptgraph.models import ParseResult, ScriptElement, ContinuityError, KnowledgeGraph, SceneEvent


class StoryContextBuilder:
    """Assembles story context with clearly delineated sections."""

    def __init__(self):
        self.sections = {}

    def add_screenplay(self, elements: List[ScriptElement]) -> "StoryContextBuilder":
        """Add the raw screenplay, one tagged line per element."""
        lines = [f"[{el.type.upper()}] {el.content}" for el in elements]
        self.sections["SCREENPLAY"] = "\n".join(lines) if lines else "(Empty screenplay)"
        return self

    def add_continuity_issues(self, errors: List[ContinuityError]) -> "StoryContextBuilder":
        if not errors:
            self.sections["CONTINUITY_ISSUES"] = "None detected"
        else:
            self.sections["CONTINUITY_ISSUES"] = "\n".join(
                f"- {err.message} ({err.severity})" for err in errors
            )
        return self

    def add_story_knowledge(self, graph: KnowledgeGraph) -> "StoryContextBuilder":
        """Add character, location and current-scene summary."""
        characters = ", ".join(graph.characters) or "None yet"
        locations = ", ".join(graph.locations) or "None yet"
        scene = graph.current_scene.name if graph.current_scene else "Not in a scene"

        text = f"- Characters: {characters}\n"
        text += f"- Locations: {locations}\n"
        text += f"- Current scene: {scene}"
        self.sections["STORY_KNOWLEDGE"] = text
        return self

    def add_recent_events(self, events: List[SceneEvent]) -> "StoryContextBuilder":
        if not events:
            self.sections["RECENT_EVENTS"] = "(No events yet)"
            return self

        text = ""
        for event in events:
            who = event.character or "?"
            where = f" @ {event.location}" if event.location else ""
            text += f"- [{event.element_index}] {event.kind} {who}{where}: {event.description}\n"
        self.sections["RECENT_EVENTS"] = text.rstrip("\n")
        return self

    def build(self) -> str:
        """Assemble final context text."""
        text = ""
        order = [
            "SCREENPLAY",
            "CONTINUITY_ISSUES",
            "STORY_KNOWLEDGE",
            "RECENT_EVENTS",
        ]

        for key in order:
            if key in self.sections:
                text += f"\n## {key}\n\n{self.sections[key]}\n"

        return text


def build_story_context(
    result: ParseResult,
    elements: Optional[List[ScriptElement]] = None,
    recent: int = 5,
) -> str:
    """Render a parse result as context for a writing assistant."""
    builder = StoryContextBuilder()
    if elements is not None:
        builder.add_screenplay(elements)
    builder.add_continuity_issues(result.errors)
    builder.add_story_knowledge(result.knowledge_graph)
    builder.add_recent_events(result.knowledge_graph.get_recent_events(recent))
    return builder.build()
