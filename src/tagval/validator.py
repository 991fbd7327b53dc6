"""Validation driver.

Walks the fields of a record, parses each field's rule string and evaluates
every clause, collecting all violations instead of stopping at the first.
"""

import logging
from dataclasses import dataclass, field

from tagval.config import TagvalConfig
from tagval.errors import Cause, RuleSyntaxError, ValidationError, ValidationErrors
from tagval.introspection import FieldDescriptor, describe_fields
from tagval.rules import evaluate, parse_rules

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Violations found in one pass, in the order they were found."""
    errors: list[ValidationError] = field(default_factory=list)
    counters: dict[str, int] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def exit_code(self) -> int:
        """Exit code for CI: 0 = no violations, 1 = violations."""
        return 0 if self.ok else 1

    def add_error(self, error: ValidationError) -> None:
        self.errors.append(error)

    def increment_counter(self, name: str, value: int = 1) -> None:
        """Increment a counter."""
        self.counters[name] = self.counters.get(name, 0) + value

    def raise_for_errors(self) -> None:
        """Raise ValidationErrors if any violation was recorded."""
        if self.errors:
            raise ValidationErrors(self.errors)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "ok": self.ok,
            "exit_code": self.exit_code,
            "counters": self.counters,
            "errors": [error.to_dict() for error in self.errors],
        }


class Validator:
    """Validates records whose fields carry rule strings."""

    def __init__(self, config: TagvalConfig | None = None):
        self.config = config or TagvalConfig()

    def check(self, record: object) -> ValidationResult:
        """Validate a record and return every violation found.

        Args:
            record: Dataclass instance, pydantic model instance or MappingRecord

        Returns:
            ValidationResult, empty when the record is valid

        Raises:
            NotAStructError: If record is not a supported record instance
        """
        fields = describe_fields(record, self.config.tag_key)
        result = ValidationResult()

        logger.debug(f"Validating {type(record).__name__} with {len(fields)} fields")

        for descriptor in fields:
            self._check_field(descriptor, result)

        logger.info(
            f"Validated {type(record).__name__}: {result.counters.get('fields_checked', 0)} fields checked, "
            f"{len(result.errors)} violations"
        )
        return result

    def validate(self, record: object) -> None:
        """Validate a record, raising if any field is invalid.

        Raises:
            NotAStructError: If record is not a supported record instance
            ValidationErrors: If at least one violation was found
        """
        self.check(record).raise_for_errors()

    def _check_field(self, descriptor: FieldDescriptor, result: ValidationResult) -> None:
        name = descriptor.name

        if not descriptor.rules:
            result.increment_counter("fields_skipped")
            return

        result.increment_counter("fields_checked")

        if not descriptor.exported:
            logger.debug(f"Field {name} is not exported but has rules {descriptor.rules!r}")
            result.add_error(ValidationError(name, Cause.UNEXPORTED_FIELD))
            return

        if descriptor.malformed:
            logger.debug(f"Field {name} has a non-string rule value {descriptor.rules}")
            result.add_error(ValidationError(name, Cause.INVALID_SYNTAX))
            return

        try:
            rules = parse_rules(descriptor.rules, name)
        except RuleSyntaxError as e:
            logger.debug(f"Rule syntax error: {e}")
            result.add_error(ValidationError(name, Cause.INVALID_SYNTAX))
            return

        for rule in rules:
            result.increment_counter("rules_evaluated")
            error = evaluate(rule, descriptor.value, name)
            if error is not None:
                logger.debug(f"Rule {rule} failed on field {name}: {error.cause.name}")
                result.add_error(error)


_default_validator = Validator()


def check(record: object) -> ValidationResult:
    """Validate a record with the default configuration and return the result."""
    return _default_validator.check(record)


def validate(record: object) -> None:
    """Validate a record with the default configuration.

    Returns None when every field passes.

    Raises:
        NotAStructError: If record is not a supported record instance
        ValidationErrors: If at least one violation was found
    """
    _default_validator.validate(record)
