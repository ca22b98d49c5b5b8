"""Allow-list validation and escaping for account payloads.

``ACCOUNT_RULES`` is walked in order. For each field the checks run as
presence, format, pattern, enum, length and range; string values are then
trimmed and escaped twice (generic escape followed by HTML entities). The
first failure aborts the whole payload.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from email_validator import EmailNotValidError, validate_email

from ..core.errors import (
    InvalidFormatError,
    InvalidValueError,
    MissingFieldError,
)
from ..models import Team


@dataclass(frozen=True)
class FieldRule:
    required: bool = False
    max_length: Optional[int] = None
    pattern: Optional[re.Pattern[str]] = None
    choices: Optional[Tuple[str, ...]] = None
    minimum: Optional[int] = None
    maximum: Optional[int] = None
    kind: str = "string"  # string | email | date | integer


ACCOUNT_RULES: Dict[str, FieldRule] = {
    "username": FieldRule(
        required=True, max_length=50, pattern=re.compile(r"^[a-zA-Z0-9_-]+$")
    ),
    "email": FieldRule(required=True, max_length=100, kind="email"),
    "team": FieldRule(required=True, choices=tuple(team.value for team in Team)),
    "country": FieldRule(max_length=50, pattern=re.compile(r"^[a-zA-Z\s-]+$")),
    "birthday": FieldRule(kind="date"),
    "level": FieldRule(kind="integer", minimum=1, maximum=50),
}

_GENERIC_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        '"': "&quot;",
        "'": "&#x27;",
        "<": "&lt;",
        ">": "&gt;",
        "/": "&#x2F;",
        "\\": "&#x5C;",
        "`": "&#96;",
    }
)


def escape_text(value: str) -> str:
    """Trim and double-escape a string value."""

    return html.escape(value.strip().translate(_GENERIC_ESCAPES), quote=True)


def _is_absent(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_string(field: str, value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidFormatError(f"{field} must be a string", field)
    return value


def _check_email(field: str, value: Any) -> str:
    text = _check_string(field, value)
    try:
        validate_email(text.strip(), check_deliverability=False)
    except EmailNotValidError as exc:
        raise InvalidFormatError(f"{field} must be a valid email address", field) from exc
    return text


def _check_date(field: str, value: Any) -> str:
    text = _check_string(field, value)
    candidate = text.strip()
    try:
        date.fromisoformat(candidate)
    except ValueError:
        try:
            datetime.fromisoformat(candidate)
        except ValueError as exc:
            raise InvalidFormatError(f"{field} must be a valid date", field) from exc
    return text


def _check_integer(field: str, value: Any) -> int:
    # bool is an int subclass; JSON true/false is not a level.
    if isinstance(value, bool):
        raise InvalidFormatError(f"{field} must be a number", field)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise InvalidFormatError(f"{field} must be a whole number", field)
    if isinstance(value, str) and re.fullmatch(r"[+-]?[0-9]+", value.strip()):
        try:
            return int(value.strip())
        except ValueError as exc:
            # int() refuses strings past sys.get_int_max_str_digits().
            raise InvalidFormatError(f"{field} must be a number", field) from exc
    raise InvalidFormatError(f"{field} must be a number", field)


_FORMAT_CHECKS: Dict[str, Callable[[str, Any], Any]] = {
    "string": _check_string,
    "email": _check_email,
    "date": _check_date,
    "integer": _check_integer,
}


def _check_rule(field: str, rule: FieldRule, value: Any) -> None:
    if rule.pattern is not None and not rule.pattern.fullmatch(value):
        raise InvalidValueError(f"{field} contains invalid characters", field)
    if rule.choices is not None and value not in rule.choices:
        raise InvalidValueError(
            f"{field} must be one of: {', '.join(rule.choices)}", field
        )
    if rule.max_length is not None and len(value) > rule.max_length:
        raise InvalidValueError(
            f"{field} must be at most {rule.max_length} characters", field
        )
    if rule.minimum is not None and value < rule.minimum:
        raise InvalidValueError(f"{field} must be at least {rule.minimum}", field)
    if rule.maximum is not None and value > rule.maximum:
        raise InvalidValueError(f"{field} must be at most {rule.maximum}", field)


def sanitize_account(payload: Any) -> Dict[str, Any]:
    """Validate ``payload`` against ``ACCOUNT_RULES`` and return clean fields.

    Keys outside the rule table are dropped. Optional fields that are missing,
    null or blank are omitted from the result.
    """

    if not isinstance(payload, Mapping):
        raise InvalidFormatError("Invalid account data")

    sanitized: Dict[str, Any] = {}
    for field, rule in ACCOUNT_RULES.items():
        value = payload.get(field)
        if _is_absent(value):
            if rule.required:
                raise MissingFieldError(field)
            continue

        checked = _FORMAT_CHECKS[rule.kind](field, value)
        _check_rule(field, rule, checked)

        if isinstance(checked, str):
            checked = escape_text(checked)
        sanitized[field] = checked

    return sanitized


__all__ = ["ACCOUNT_RULES", "FieldRule", "escape_text", "sanitize_account"]
