"""tagval - declarative field validation driven by rule strings.

Fields carry compact rule strings such as ``"min:3;max:20"``; tagval checks
every rule on every field and reports all violations at once.
"""

__version__ = "0.1.0"
__description__ = "Declarative field validation driven by rule strings"

from tagval.config import TagvalConfig
from tagval.errors import (
    Cause,
    NotAStructError,
    RuleSyntaxError,
    TagvalError,
    ValidationError,
    ValidationErrors,
)
from tagval.introspection import FieldDescriptor, MappingRecord, describe_fields
from tagval.validator import ValidationResult, Validator, check, validate

__all__ = [
    "__version__",
    "__description__",
    "Cause",
    "FieldDescriptor",
    "MappingRecord",
    "NotAStructError",
    "RuleSyntaxError",
    "TagvalConfig",
    "TagvalError",
    "ValidationError",
    "ValidationErrors",
    "ValidationResult",
    "Validator",
    "check",
    "describe_fields",
    "validate",
]
