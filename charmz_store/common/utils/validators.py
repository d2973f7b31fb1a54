import json
import re
from typing import Any, Dict, Iterable, List, Optional

from ..errors import ValidationError


EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
TRUE_VALUES = {"true", "1", "yes", "on"}


def ensure_min_int(value: Any, field: str, minimum: int = 0) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field} must be an integer") from exc
    if number < minimum:
        raise ValidationError(f"{field} must be >= {minimum}")
    return number


def parse_bool(value: Any) -> Optional[bool]:
    """Form fields arrive as strings; JSON bodies as real booleans."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES


def parse_json_list(value: Any, field: str) -> Optional[List]:
    if value is None or value == "":
        return None
    if isinstance(value, list):
        return value
    try:
        parsed = json.loads(value)
    except (TypeError, json.JSONDecodeError) as exc:
        raise ValidationError(f"{field} must be a JSON array") from exc
    if not isinstance(parsed, list):
        raise ValidationError(f"{field} must be a JSON array")
    return parsed


def require_fields(payload: Dict, names: Iterable[str]) -> List[str]:
    errors = []
    for name in names:
        value = payload.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            errors.append(f"{name} is required")
    return errors


def require_choice(payload: Dict, name: str, choices: Iterable[str], default: str) -> List[str]:
    value = payload.get(name)
    if value is None or value == "":
        payload[name] = default
        return []
    if value not in choices:
        return [f"{name} must be one of: {', '.join(choices)}"]
    return []


def is_email(value: Any) -> bool:
    return isinstance(value, str) and bool(EMAIL_RE.match(value.strip()))
