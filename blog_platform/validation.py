"""Request validation as data.

Each schema maps a field name to an ordered list of (predicate, message)
rules. `validate()` walks every field, stops at the first failing rule of
that field, and returns one `{"field", "msg"}` entry per failing field.
Nothing here knows about HTTP or the stores, so the API calls it before any
store access.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple

from email_validator import EmailNotValidError, validate_email

from blog_platform.errors import ValidationError
from blog_platform.util.ids import is_valid_id


Predicate = Callable[[Any], bool]
Rule = Tuple[Predicate, str]
Schema = Dict[str, Sequence[Rule]]

HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

MAX_TAGS = 20
MAX_TAG_LEN = 30


# Marker rule: when the value is missing (None), skip the field's remaining rules.
OPTIONAL: Rule = (lambda v: True, "")


# -----------------------------
# Predicates
# -----------------------------


def _text(v: Any) -> str:
    return v.strip() if isinstance(v, str) else ""


def is_string(v: Any) -> bool:
    return isinstance(v, str)


def not_blank(v: Any) -> bool:
    return bool(_text(v))


def max_len(n: int) -> Predicate:
    return lambda v: not isinstance(v, str) or len(v.strip()) <= n


def min_len(n: int) -> Predicate:
    return lambda v: isinstance(v, str) and len(v) >= n


def matches(pattern: "re.Pattern[str]") -> Predicate:
    return lambda v: isinstance(v, str) and pattern.match(v.strip()) is not None


def email_address(v: Any) -> bool:
    if not isinstance(v, str):
        return False
    try:
        validate_email(v.strip(), check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def well_formed_id(v: Any) -> bool:
    return is_valid_id(_text(v))


def string_list(v: Any) -> bool:
    return isinstance(v, list) and all(isinstance(x, str) for x in v)


def list_max(n: int) -> Predicate:
    return lambda v: not isinstance(v, list) or len(v) <= n


def items_max_len(n: int) -> Predicate:
    return lambda v: not isinstance(v, list) or all(len(str(x).strip()) <= n for x in v)


# -----------------------------
# Schemas
# -----------------------------

REGISTER: Schema = {
    "name": [
        (not_blank, "Name is required"),
        (max_len(100), "Name cannot exceed 100 characters"),
    ],
    "email": [
        (email_address, "Please provide a valid email"),
    ],
    "password": [
        (min_len(6), "Password must be at least 6 characters"),
    ],
}

LOGIN: Schema = {
    "email": [
        (email_address, "Please provide a valid email"),
    ],
    "password": [
        (not_blank, "Password is required"),
    ],
}

PROFILE: Schema = {
    "name": [
        OPTIONAL,
        (is_string, "Name must be a string"),
        (max_len(100), "Name cannot exceed 100 characters"),
    ],
    "bio": [
        OPTIONAL,
        (is_string, "Bio must be a string"),
        (max_len(500), "Bio cannot exceed 500 characters"),
    ],
    "avatar": [
        OPTIONAL,
        (is_string, "Avatar must be a string"),
    ],
}

POST: Schema = {
    "title": [
        (not_blank, "Title is required"),
        (max_len(100), "Title cannot exceed 100 characters"),
    ],
    "content": [
        (not_blank, "Content is required"),
    ],
    "categoryId": [
        (not_blank, "Category is required"),
        (well_formed_id, "Invalid category ID"),
    ],
    "excerpt": [
        OPTIONAL,
        (is_string, "Excerpt must be a string"),
        (max_len(200), "Excerpt cannot exceed 200 characters"),
    ],
    "tags": [
        OPTIONAL,
        (string_list, "Tags must be a list of strings"),
        (list_max(MAX_TAGS), f"A post cannot have more than {MAX_TAGS} tags"),
        (items_max_len(MAX_TAG_LEN), f"Tags cannot exceed {MAX_TAG_LEN} characters"),
    ],
    "featuredImage": [
        OPTIONAL,
        (is_string, "Featured image must be a string"),
    ],
}

CATEGORY: Schema = {
    "name": [
        (not_blank, "Category name is required"),
        (max_len(50), "Name cannot exceed 50 characters"),
    ],
    "description": [
        OPTIONAL,
        (is_string, "Description must be a string"),
        (max_len(200), "Description cannot exceed 200 characters"),
    ],
    "color": [
        OPTIONAL,
        (matches(HEX_COLOR_RE), "Color must be a hex value like #007bff"),
    ],
}


def validate(data: Mapping[str, Any] | None, schema: Schema) -> List[Dict[str, str]]:
    errors: List[Dict[str, str]] = []
    data = data or {}
    for name, rules in schema.items():
        value = data.get(name)
        for rule in rules:
            if rule is OPTIONAL:
                if value is None:
                    break
                continue
            predicate, msg = rule
            if not predicate(value):
                errors.append({"field": name, "msg": msg})
                break
    return errors


def ensure_valid(data: Mapping[str, Any] | None, schema: Schema) -> None:
    """Raise ValidationError with every failing field."""
    errors = validate(data, schema)
    if errors:
        raise ValidationError(errors)
