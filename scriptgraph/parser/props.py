import re
from typing import List, Iterable
from scriptgraph.models import ContinuityRules


CAPITALIZED_TOKEN_RE = re.compile(r'\b[A-Z][A-Za-z]*\b')


def _alternation(words: Iterable[str]) -> str:
    # Longest first so "picks up" wins over a shorter prefix.
    cleaned = {" ".join(w.split()) for w in words if w and w.strip()}
    ordered = sorted(cleaned, key=len, reverse=True)
    return "|".join(r'\s+'.join(re.escape(part) for part in w.split()) for w in ordered)


def build_prop_patterns(rules: ContinuityRules) -> List[re.Pattern]:
    """Compile the verb-object and possession templates."""
    patterns = []

    verbs = _alternation(rules.prop_action_verbs)
    if verbs:
        patterns.append(re.compile(
            rf'\b(?:{verbs})\s+(?:the\s+)?(\w+)',
            re.IGNORECASE,
        ))

    possession = _alternation(rules.prop_possession_words)
    if possession:
        patterns.append(re.compile(
            rf'\b(?:{possession})\s+(?:(?:a|an|the)\s+)?(\w+)',
            re.IGNORECASE,
        ))

    return patterns


def extract_prop_names(text: str, patterns: List[re.Pattern]) -> List[str]:
    """Lowercased prop names in match order, one entry per match."""
    names = []
    for pattern in patterns:
        for match in pattern.finditer(text):
            names.append(match.group(1).lower())
    return names


def find_character_mentions(text: str, known_names: Iterable[str]) -> List[str]:
    """Registered names appearing as capitalized tokens, first mention order."""
    known = set(known_names)
    mentions = []
    for token in CAPITALIZED_TOKEN_RE.findall(text):
        if token in known and token not in mentions:
            mentions.append(token)
    return mentions
