import json
import re


def _load_object(text: str) -> dict | None:
    try:
        value = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None
    return value if isinstance(value, dict) else None


def extract_json(text: str) -> dict:
    """
    Extract the first JSON object from LLM output.
    Returns {} when no object can be parsed (arrays and scalars included).
    """
    if not text or not isinstance(text, str):
        return {}

    direct = _load_object(text)
    if direct is not None:
        return direct

    # Model wrapped the object in prose
    match = re.search(r"\{.*\}", text, re.DOTALL)
    if not match:
        return {}

    return _load_object(match.group(0)) or {}
