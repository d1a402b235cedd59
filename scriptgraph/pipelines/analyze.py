from pathlib import Path
from typing import List, Optional
import yaml
from pydantic import ValidationError

from scriptgraph.models import ScriptElement
from scriptgraph.parser.dispatcher import ScreenplayParser
from scriptgraph.lint.rules import load_continuity_rules
from scriptgraph.logging_config import get_logger

logger = get_logger("pipelines")


def load_elements(path: Path) -> List[ScriptElement]:
    """Load screenplay elements from a YAML or JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Element file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or []

    if isinstance(data, dict):
        data = data.get("elements", [])

    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of elements")

    elements = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise ValueError(f"{path}: element {index} is not a mapping")
        item = dict(item)
        item.setdefault("id", str(index))
        item["id"] = str(item["id"])
        if item.get("content") is None:
            item["content"] = ""
        item["content"] = str(item["content"])
        try:
            elements.append(ScriptElement(**item))
        except ValidationError as e:
            raise ValueError(f"{path}: invalid element {index}: {e}") from e

    logger.debug("Loaded %d elements from %s", len(elements), path)
    return elements


def analyze_screenplay(path: Path, rules_path: Optional[Path] = None) -> dict:
    """Load a screenplay file, build its graph and run continuity checks."""
    elements = load_elements(path)
    rules = load_continuity_rules(rules_path) if rules_path else None

    parser = ScreenplayParser(rules)
    result = parser.parse_screenplay(elements)

    return {
        "elements": elements,
        "result": result,
    }
