"""
LocalLibrary — Form Validation Chain
=====================================

What:  Ordered, per-field sanitize/validate rules for submitted HTML forms.
How:   A `Validator` holds one `FieldRules` per field. Each `FieldRules` runs
       its rule objects in order against the raw form value. A rule either
       returns the transformed value or raises `RuleFailure`. A failing check
       records a `FieldError` and leaves the value as it was, so the sanitizers
       later in the chain (Escape) still run before the form is re-rendered.
Who:   Each catalog service declares its validator at module level.
When:  Synchronously, on every create/update POST, before any storage call.

Example:
    validator = Validator(
        FieldRules("title", Trim(), MinLength(1), Escape(),
                   message="Title must not be empty."),
        FieldRules("genre", ToList(), Escape()),
    )
    result = validator.validate({"title": "  Dune ", "genre": "g1"})
    result.values   # {"title": "Dune", "genre": ["g1"]}
    result.ok       # True
"""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from locallibrary.exceptions import ValidationError

FormValue = Union[str, List[str], None]


class RuleFailure(Exception):
    """Raised by a rule; carries the rule's own message, if it has one."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "")
        self.message = message


@dataclass(frozen=True)
class FieldError:
    """One failed field: name, user-facing message and the sanitized value."""

    field: str
    message: str
    value: Any = None


@dataclass
class ValidationResult:
    """Sanitized values for every declared field plus ordered failures."""

    values: Dict[str, Any] = field(default_factory=dict)
    errors: List[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def messages(self) -> List[str]:
        return [error.message for error in self.errors]

    def raise_for_errors(self) -> None:
        """Raise ValidationError carrying the failures, if there are any."""
        if self.errors:
            raise ValidationError(errors=self.errors, message="; ".join(self.messages))


# ══════════════════════════════════════════════════════════════════════════
# Rules
# ══════════════════════════════════════════════════════════════════════════

class Rule:
    """
    Base rule. `apply()` returns the (possibly transformed) value or raises
    RuleFailure. `message` overrides the field's default message.
    """

    def __init__(self, message: Optional[str] = None):
        self.message = message

    def apply(self, value: Any) -> Any:
        return value

    def fail(self) -> None:
        raise RuleFailure(self.message)


class Trim(Rule):
    def apply(self, value: Any) -> Any:
        return value.strip()


class MinLength(Rule):
    def __init__(self, length: int, message: Optional[str] = None):
        super().__init__(message)
        self.length = length

    def apply(self, value: Any) -> Any:
        if len(value) < self.length:
            self.fail()
        return value


class MaxLength(Rule):
    def __init__(self, length: int, message: Optional[str] = None):
        super().__init__(message)
        self.length = length

    def apply(self, value: Any) -> Any:
        if len(value) > self.length:
            self.fail()
        return value


class IsAlphanumeric(Rule):
    """ASCII letters and digits only (an empty value fails)."""

    _pattern = re.compile(r"^[A-Za-z0-9]+$")

    def apply(self, value: Any) -> Any:
        if not self._pattern.match(value):
            self.fail()
        return value


# & " ' < > / \ ` → HTML entities. markupsafe.escape leaves / \ ` as they are
# and writes &#39; and &#34;, so it cannot produce these stored forms.
_HTML_ESCAPES = str.maketrans({
    "&": "&amp;",
    '"': "&quot;",
    "'": "&#x27;",
    "<": "&lt;",
    ">": "&gt;",
    "/": "&#x2F;",
    "\\": "&#x5C;",
    "`": "&#96;",
})


def escape_html(value: str) -> str:
    """Replace HTML-significant characters with entities."""
    return value.translate(_HTML_ESCAPES)


class Escape(Rule):
    def apply(self, value: Any) -> Any:
        return escape_html(value)


class OneOf(Rule):
    def __init__(self, choices: Iterable[str], message: Optional[str] = None):
        super().__init__(message)
        self.choices = list(choices)

    def apply(self, value: Any) -> Any:
        if value not in self.choices:
            self.fail()
        return value


class SkipIfEmpty(Rule):
    """
    Marks a field optional: an absent or empty value ends the chain with None.

    Handled by `FieldRules.run`; `apply` is never reached for empty values.
    """


class ToDate(Rule):
    """ISO-8601 date (`YYYY-MM-DD`, optionally followed by a time part) → date."""

    _pattern = re.compile(r"^\d{4}-\d{2}-\d{2}(?:[T ][0-9:.+\-Z]*)?$")

    def apply(self, value: Any) -> Any:
        if not self._pattern.match(value):
            self.fail()
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            raise RuleFailure(self.message)


class ToList(Rule):
    """
    Multi-value normalization: absent → [], scalar → [scalar], list unchanged.

    Rules after ToList run element-wise. Handled by `FieldRules.run`.
    """


# ══════════════════════════════════════════════════════════════════════════
# Chains
# ══════════════════════════════════════════════════════════════════════════

class FieldRules:
    """Ordered rules for one form field, with a default failure message."""

    def __init__(self, name: str, *rules: Rule, message: str = "Invalid value"):
        self.name = name
        self.rules = list(rules)
        self.message = message

    def run(self, raw: FormValue) -> Tuple[Any, List[FieldError]]:
        """Return (sanitized value, failures in rule order)."""
        many = any(isinstance(rule, ToList) for rule in self.rules)
        if many:
            value: Any = _as_list(raw)
        else:
            value = _as_scalar(raw)

        errors: List[FieldError] = []
        for rule in self.rules:
            if isinstance(rule, ToList):
                continue
            if isinstance(rule, SkipIfEmpty):
                if not value:
                    return None, errors
                continue
            try:
                if many:
                    value = [rule.apply(item) for item in value]
                else:
                    value = rule.apply(value)
            except RuleFailure as failure:
                message = failure.message or self.message
                if all(error.message != message for error in errors):
                    errors.append(FieldError(field=self.name, message=message, value=value))
        return value, errors


def _as_list(raw: FormValue) -> List[str]:
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        return [str(item) for item in raw]
    return [str(raw)]


def _as_scalar(raw: FormValue) -> str:
    if raw is None:
        return ""
    if isinstance(raw, (list, tuple)):
        return str(raw[-1]) if raw else ""
    return str(raw)


class Validator:
    """An ordered list of `FieldRules` evaluated against one form submission."""

    def __init__(self, *fields: FieldRules):
        self.fields = list(fields)

    def validate(self, form: Mapping[str, FormValue]) -> ValidationResult:
        result = ValidationResult()
        for rules in self.fields:
            value, errors = rules.run(form.get(rules.name))
            result.values[rules.name] = value
            result.errors.extend(errors)
        return result
