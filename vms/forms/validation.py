"""Field rules and schemas for volunteer forms.

A rule is a plain callable taking the raw field value and returning either
``None`` (passes) or the message to show next to the field. A schema maps a
field name to an ordered list of rules; the first rule that fails decides
the field's message. Nothing here touches Flask so the same checks run in
views, the JSON API and tests.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Iterable, Mapping

from email_validator import EmailNotValidError, validate_email

from vms.models import SKILL_OPTIONS, Availability

Rule = Callable[[Any], "str | None"]
Schema = Mapping[str, "list[Rule]"]

FORM_ERROR_SUMMARY = "Please fix the errors in the form."

# ASCII digits only; other scripts' numerals are not accepted.
PHONE_PATTERN = re.compile(r"^[\d\s\-+()]+$", re.ASCII)
DIGIT_PATTERN = re.compile(r"\d", re.ASCII)

AVAILABILITY_VALUES = tuple(a.value for a in Availability)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) == 0
    return False


def min_length(limit: int, message: str, *, trim: bool = True) -> Rule:
    def rule(value: Any) -> str | None:
        text = _text(value)
        if trim:
            text = text.strip()
        return message if len(text) < limit else None

    return rule


def max_length(limit: int, message: str, *, trim: bool = True) -> Rule:
    def rule(value: Any) -> str | None:
        text = _text(value)
        if trim:
            text = text.strip()
        return message if len(text) > limit else None

    return rule


def matches(pattern: re.Pattern[str] | str, message: str, *, search: bool = False, trim: bool = True) -> Rule:
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern

    def rule(value: Any) -> str | None:
        text = _text(value)
        if trim:
            text = text.strip()
        found = compiled.search(text) if search else compiled.match(text)
        return None if found else message

    return rule


def email_address(message: str) -> Rule:
    """Syntax check only; deliverability is left to the identity provider."""

    def rule(value: Any) -> str | None:
        try:
            validate_email(_text(value).strip(), check_deliverability=False)
        except EmailNotValidError:
            return message
        return None

    return rule


def required(message: str) -> Rule:
    def rule(value: Any) -> str | None:
        return message if _is_blank(value) else None

    return rule


def one_of(choices: Iterable[str], message: str) -> Rule:
    allowed = frozenset(choices)

    def rule(value: Any) -> str | None:
        return None if value in allowed else message

    return rule


def non_empty(message: str) -> Rule:
    def rule(value: Any) -> str | None:
        return message if not value else None

    return rule


def subset_of(choices: Iterable[str], message: str) -> Rule:
    allowed = frozenset(choices)

    def rule(value: Any) -> str | None:
        items = value or ()
        if isinstance(items, str):
            items = (items,)
        return None if all(item in allowed for item in items) else message

    return rule


def must_be_true(message: str) -> Rule:
    def rule(value: Any) -> str | None:
        return None if value is True else message

    return rule


def optional(*rules: Rule) -> Rule:
    """Run ``rules`` only when the value is not blank."""

    def rule(value: Any) -> str | None:
        if _is_blank(value):
            return None
        for inner in rules:
            message = inner(value)
            if message:
                return message
        return None

    return rule


def validate(record: Mapping[str, Any], schema: Schema) -> dict[str, str]:
    """Return ``{field: message}`` for every field that breaks a rule."""
    errors: dict[str, str] = {}
    for name, rules in schema.items():
        value = record.get(name)
        for rule in rules:
            message = rule(value)
            if message:
                errors[name] = message
                break
    return errors


NAME_RULES = [
    min_length(2, "Name must be at least 2 characters"),
    max_length(100, "Name is too long"),
]

PHONE_RULES = [
    min_length(10, "Phone number must be at least 10 digits"),
    max_length(20, "Phone number is too long"),
    matches(PHONE_PATTERN, "Invalid phone number format"),
]

BIO_RULES = [
    optional(max_length(500, "Bio must be less than 500 characters")),
]

REGISTRATION_SCHEMA: Schema = {
    "full_name": NAME_RULES,
    "email": [
        email_address("Invalid email address"),
        max_length(255, "Email is too long"),
    ],
    "phone": PHONE_RULES,
    "city": [
        min_length(2, "City is required"),
        max_length(100, "City name is too long"),
    ],
    "password": [
        min_length(8, "Password must be at least 8 characters", trim=False),
        matches(r"[A-Za-z]", "Password must contain at least one letter", search=True, trim=False),
        matches(DIGIT_PATTERN, "Password must contain at least one number", search=True, trim=False),
    ],
    "availability": [
        one_of(AVAILABILITY_VALUES, "Please select your availability"),
    ],
    "skills": [
        non_empty("Please select at least one skill"),
        subset_of(SKILL_OPTIONS, "Please choose skills from the list"),
    ],
    "bio": BIO_RULES,
    "agree_to_terms": [
        must_be_true("You must agree to the terms"),
    ],
}

PROFILE_SCHEMA: Schema = {
    "full_name": NAME_RULES,
    "phone": PHONE_RULES,
    "city": [optional(max_length(100, "City name is too long"))],
    "availability": [optional(one_of(AVAILABILITY_VALUES, "Please select your availability"))],
    "skills": [subset_of(SKILL_OPTIONS, "Please choose skills from the list")],
    "bio": BIO_RULES,
}

LOGIN_SCHEMA: Schema = {
    "email": [email_address("Invalid email address")],
    "password": [required("Password is required")],
}


def validate_registration(record: Mapping[str, Any]) -> dict[str, str]:
    errors = validate(record, REGISTRATION_SCHEMA)
    if errors:
        return errors
    if record.get("password") != record.get("confirm_password"):
        return {"confirm_password": "Passwords do not match"}
    return {}


def validate_profile(record: Mapping[str, Any]) -> dict[str, str]:
    return validate(record, PROFILE_SCHEMA)


def validate_login(record: Mapping[str, Any]) -> dict[str, str]:
    return validate(record, LOGIN_SCHEMA)


__all__ = [
    "FORM_ERROR_SUMMARY",
    "LOGIN_SCHEMA",
    "PROFILE_SCHEMA",
    "REGISTRATION_SCHEMA",
    "email_address",
    "matches",
    "max_length",
    "min_length",
    "must_be_true",
    "non_empty",
    "one_of",
    "optional",
    "required",
    "subset_of",
    "validate",
    "validate_login",
    "validate_profile",
    "validate_registration",
]
