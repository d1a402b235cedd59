import re
from typing import Optional, Tuple


SCENE_HEADING_RE = re.compile(r'^(INT\.|EXT\.|INT/EXT\.)\s+(.+?)(?:\s+-\s+(.+))?$')
CUE_EXTENSION_RE = re.compile(r'\s*\(.*\)$')


def parse_scene_heading(content: str) -> Optional[Tuple[str, str, Optional[str]]]:
    """Split a heading into (kind, location, time of day).

    Returns None when the heading does not start with INT., EXT. or INT/EXT.
    """
    match = SCENE_HEADING_RE.match(content.strip())
    if not match:
        return None

    prefix, location_name, time_of_day = match.groups()
    location_name = location_name.strip()
    if not location_name:
        return None

    if time_of_day is not None:
        time_of_day = time_of_day.strip() or None

    return prefix.rstrip('.'), location_name, time_of_day


def canonical_character_name(content: str) -> str:
    """Strip a trailing extension like (V.O.) or (CONT'D) from a cue."""
    return CUE_EXTENSION_RE.sub('', content.strip()).strip()
