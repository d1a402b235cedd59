from bisect import bisect_left, bisect_right
from typing import Dict, List, Optional
from scriptgraph.models import Character, Location, Prop, SceneEvent, LocationKind


class CharacterRegistry:
    """Characters keyed by canonical cue name."""

    def __init__(self):
        self.records: Dict[str, Character] = {}

    def __contains__(self, name: str) -> bool:
        return name in self.records

    def register(self, name: str, index: int) -> Character:
        """Return the record for `name`, creating it on first sight."""
        if name not in self.records:
            self.records[name] = Character(name=name, first_appearance=index)
        return self.records[name]

    def get(self, name: str) -> Optional[Character]:
        return self.records.get(name)

    def names(self) -> List[str]:
        return list(self.records)


class LocationRegistry:
    """Locations keyed by trimmed heading name."""

    def __init__(self):
        self.records: Dict[str, Location] = {}

    def visit(
        self,
        name: str,
        kind: LocationKind,
        time_of_day: Optional[str],
        index: int,
    ) -> Location:
        """Record an occurrence; the first heading's time of day is kept."""
        location = self.records.get(name)
        if location is None:
            location = Location(name=name, kind=kind, time_of_day=time_of_day)
            self.records[name] = location
        location.scenes.append(index)
        return location


class PropRegistry:
    def __init__(self):
        self.records: Dict[str, Prop] = {}

    def mention(self, name: str, index: int) -> Prop:
        prop = self.records.get(name)
        if prop is None:
            prop = Prop(name=name, first_mention=index, last_seen=index)
            self.records[name] = prop
        else:
            prop.last_seen = index
        return prop


class Timeline:
    """Append-only event log ordered by element index."""

    def __init__(self, events: Optional[List[SceneEvent]] = None):
        self.events: List[SceneEvent] = list(events or [])
        self._indices: List[int] = [e.element_index for e in self.events]

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self):
        return iter(self.events)

    def append(self, event: SceneEvent) -> None:
        if self._indices and event.element_index < self._indices[-1]:
            raise ValueError(
                f"Event at {event.element_index} precedes last event at {self._indices[-1]}"
            )
        self.events.append(event)
        self._indices.append(event.element_index)

    def between(self, start: int, end: int) -> List[SceneEvent]:
        """Events with start < element_index < end."""
        lo = bisect_right(self._indices, start)
        hi = bisect_left(self._indices, end)
        return self.events[lo:hi]

    def before(self, index: int) -> List[SceneEvent]:
        """Events strictly before `index`, in chronological order."""
        return self.events[:bisect_left(self._indices, index)]
