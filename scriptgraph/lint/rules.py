import yaml
from pathlib import Path
from scriptgraph.models import ContinuityRules


def load_continuity_rules(path: Path) -> ContinuityRules:
    """Load heuristic vocabulary from YAML file."""
    if not path.exists():
        return ContinuityRules()

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Rules file {path} must contain a mapping")

    defaults = ContinuityRules()
    return ContinuityRules(
        transition_cues=data.get("transition_cues", defaults.transition_cues),
        prop_action_verbs=data.get("prop_action_verbs", defaults.prop_action_verbs),
        prop_possession_words=data.get("prop_possession_words", defaults.prop_possession_words),
    )
