"""Rule evaluation against field values.

Every check is a pure function of the rule, the value and the field name. A
failing check returns a ValidationError instead of raising it, so the caller
can keep going and collect every violation.
"""

import re
from collections.abc import Callable

from tagval.errors import Cause, ValidationError
from tagval.rules.parser import RuleDescriptor, RuleKind

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

OPTION_SEPARATOR = ","

_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")


def parse_int(text: str) -> int | None:
    """Parse a base-10 signed 64-bit integer, or return None.

    Unlike ``int()`` this rejects surrounding whitespace, underscores and
    non-ASCII digits.
    """
    if not _DECIMAL_RE.fullmatch(text):
        return None
    number = int(text)
    if not INT64_MIN <= number <= INT64_MAX:
        return None
    return number


def _str_len(value: str) -> int:
    """String length in UTF-8 bytes."""
    return len(value.encode("utf-8"))


def _shape(value: object) -> str | None:
    """Name of the supported shape of value: "str", "int" or None."""
    if isinstance(value, str):
        return "str"
    # bool is an int subclass but is not an integer field
    if isinstance(value, int) and not isinstance(value, bool) and INT64_MIN <= value <= INT64_MAX:
        return "int"
    return None


def _type_mismatch(kind: RuleKind, expected: str, value: object, field: str) -> ValidationError:
    return ValidationError(
        field,
        Cause.TYPE_MISMATCH,
        f"{kind.value} requires {expected}, got {type(value).__name__}",
    )


def _check_len(param: str, value: object, field: str) -> ValidationError | None:
    if _shape(value) != "str":
        return _type_mismatch(RuleKind.LEN, "str", value, field)

    length = parse_int(param)
    if length is None or length < 0:
        return ValidationError(field, Cause.INVALID_SYNTAX)

    if _str_len(value) != length:
        return ValidationError(field, Cause.LEN_FAILED)
    return None


def _check_in(param: str, value: object, field: str) -> ValidationError | None:
    if param == "":
        return ValidationError(field, Cause.INVALID_SYNTAX)

    options = [option.strip() for option in param.split(OPTION_SEPARATOR)]
    shape = _shape(value)

    if shape == "str":
        if value in options:
            return None
        return ValidationError(field, Cause.IN_FAILED)

    if shape == "int":
        # options that are not integers can never match an int field
        for option in options:
            if parse_int(option) == value:
                return None
        return ValidationError(field, Cause.IN_FAILED)

    return _type_mismatch(RuleKind.IN, "str or int", value, field)


def _bound_subject(kind: RuleKind, value: object, field: str) -> int | ValidationError:
    """The number compared against min/max: string length or the int itself."""
    shape = _shape(value)
    if shape == "str":
        return _str_len(value)
    if shape == "int":
        return value
    return _type_mismatch(kind, "str or int", value, field)


def _check_min(param: str, value: object, field: str) -> ValidationError | None:
    bound = parse_int(param)
    if bound is None:
        return ValidationError(field, Cause.INVALID_SYNTAX)

    subject = _bound_subject(RuleKind.MIN, value, field)
    if isinstance(subject, ValidationError):
        return subject
    if subject < bound:
        return ValidationError(field, Cause.MIN_FAILED)
    return None


def _check_max(param: str, value: object, field: str) -> ValidationError | None:
    bound = parse_int(param)
    if bound is None:
        return ValidationError(field, Cause.INVALID_SYNTAX)

    subject = _bound_subject(RuleKind.MAX, value, field)
    if isinstance(subject, ValidationError):
        return subject
    if subject > bound:
        return ValidationError(field, Cause.MAX_FAILED)
    return None


CHECKS: dict[RuleKind, Callable[[str, object, str], ValidationError | None]] = {
    RuleKind.LEN: _check_len,
    RuleKind.IN: _check_in,
    RuleKind.MIN: _check_min,
    RuleKind.MAX: _check_max,
}


def evaluate(rule: RuleDescriptor, value: object, field: str) -> ValidationError | None:
    """Apply one rule to a field value.

    Args:
        rule: Parsed rule clause
        value: Runtime value of the field
        field: Field name used for error attribution

    Returns:
        None when the rule passes, otherwise the violation
    """
    kind = rule.rule_kind
    if kind is None:
        return ValidationError(field, Cause.INVALID_SYNTAX)
    return CHECKS[kind](rule.param, value, field)
