"""Rule mini-language: parsing of rule strings and evaluation of single clauses."""

from .evaluator import evaluate, parse_int
from .parser import RuleDescriptor, RuleKind, parse_rules

__all__ = [
    "RuleDescriptor",
    "RuleKind",
    "parse_rules",
    "evaluate",
    "parse_int",
]
